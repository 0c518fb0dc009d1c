"""Pearson correlation between numeric columns."""

import logging
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from tabular_tlbx.data.table import Column, Table
from tabular_tlbx.errors import DegenerateInputError, InsufficientDataError

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationResult:
    """Correlation between two columns.

    Attributes:
        r: Pearson correlation coefficient in ``[-1, 1]``.
        n_obs: Number of rows where both columns hold Numbers.
        x: First column.
        y: Second column.
    """

    r: float
    n_obs: int
    x: Column
    y: Column


def pearson_r(xs: np.ndarray, ys: np.ndarray) -> float:
    r"""Pearson :math:`r = S_{xy} / \sqrt{S_{xx} S_{yy}}`, clipped to ``[-1, 1]``.

    Both inputs are divided by their largest magnitude first; :math:`r` is invariant under
    that scaling and the sums then stay within float range for very large or very small data.

    Raises:
        InsufficientDataError: If fewer than two pairs are given.
        DegenerateInputError: If either input has zero variance.
    """
    if xs.size < 2:
        raise InsufficientDataError(f"Correlation needs at least 2 paired values, found {xs.size}")
    dx = _deviations(xs)
    dy = _deviations(ys)
    sxx = float(np.sum(dx * dx))
    syy = float(np.sum(dy * dy))
    if sxx == 0 or syy == 0:
        raise DegenerateInputError("Correlation is undefined for a column with zero variance")
    r = float(np.sum(dx * dy)) / (float(np.sqrt(sxx)) * float(np.sqrt(syy)))
    if not np.isfinite(r):
        raise DegenerateInputError("Correlation is not representable for these values")
    return float(np.clip(r, -1.0, 1.0))


def _deviations(values: np.ndarray) -> np.ndarray:
    scale = float(np.max(np.abs(values)))
    scaled = values / scale if scale > 0 else values
    return scaled - scaled.mean()


class CorrelationAnalyzer(BaseAnalyser):
    """Analyzer for the Pearson correlation of two columns.

    Pairs are formed from rows where both cells are Numbers, the same rule the regression
    uses. See [Wikipedia :: Pearson Correlation](https://en.wikipedia.org/wiki/Pearson_correlation_coefficient)
    for the underlying theory.

    Example:
        >>> from tabular_tlbx.data import Table
        >>> table = Table.from_values(["a", "b"], [[1, 5], [2, 4], [3, 3]])
        >>> CorrelationAnalyzer(table, "a", "b").fit().result().r
        -1.0
    """

    def __init__(self, table: Table, x: str | int, y: str | int) -> None:
        """Initialize the correlation analyzer with a table snapshot and two columns."""
        self._table = table
        self._x = table.column(x)
        self._y = table.column(y)
        self._result: CorrelationResult | None = None

    def fit(self) -> Self:
        indices, xs, ys = self._table.paired_numeric(self._x.position, self._y.position)
        try:
            r = pearson_r(xs, ys)
        except DegenerateInputError as exc:
            raise DegenerateInputError(
                f"Correlation of '{self._x.label}' and '{self._y.label}' is undefined: zero variance",
            ) from exc
        logger.info("corr(%s, %s) = %.4f over %d rows", self._x.label, self._y.label, r, len(indices))
        self._result = CorrelationResult(r=r, n_obs=len(indices), x=self._x, y=self._y)
        return self

    def result(self) -> CorrelationResult:
        return self._require_fitted(self._result)


def correlation_matrix(table: Table) -> pd.DataFrame:
    """Pairwise-complete Pearson correlation matrix of all numeric columns.

    Computed via :meth:`pandas.DataFrame.corr` on the numeric frame (non-Number cells are NaN
    and dropped pairwise); undefined entries are NaN.
    """
    numeric = table.numeric_columns
    frame = table.numeric_frame().iloc[:, [column.position for column in numeric]]
    return frame.corr(method="pearson")


__all__ = ["CorrelationAnalyzer", "CorrelationResult", "correlation_matrix", "pearson_r"]
