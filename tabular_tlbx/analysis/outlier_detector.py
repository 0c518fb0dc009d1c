"""Outlier filtering following the analyzer pattern."""

import logging
from dataclasses import dataclass
from typing import Self

from tabular_tlbx.data.cells import Number
from tabular_tlbx.data.table import Column, Table
from tabular_tlbx.errors import InsufficientDataError, InvalidParameterError

from .base_analyser import BaseAnalyser
from .descriptive import percentile


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlierDetectionResult:
    """Container for outlier detection results.

    Attributes:
        table: Rows whose value lies inside ``[lower_fence, upper_fence]``.
        column: The inspected column.
        q1: 25th percentile (nearest rank).
        q3: 75th percentile (nearest rank).
        iqr: ``q3 - q1``.
        lower_fence: ``q1 - threshold * iqr``.
        upper_fence: ``q3 + threshold * iqr``.
        outlier_rows: Zero-based data rows whose value lies outside the fences.
        unscored_rows: Zero-based data rows without a Number in ``column``; they take no
            part in the fence computation and are dropped from ``table``.
    """

    table: Table
    column: Column
    q1: float
    q3: float
    iqr: float
    lower_fence: float
    upper_fence: float
    outlier_rows: tuple[int, ...]
    unscored_rows: tuple[int, ...]

    @property
    def n_outliers(self) -> int:
        return len(self.outlier_rows)


class IQROutlierDetector(BaseAnalyser):
    r"""Detect outliers via the interquartile range rule.

    Points outside :math:`[Q_1 - k\cdot IQR,\, Q_3 + k\cdot IQR]` are considered outliers. :math:`IQR=Q_3-Q_1`

    Theory and Assumptions:
        - Does not assume any specific data distribution (non-parametric)
        - Robust to skewed data with heavy tails
        - Best suited for *univariate* data, hence one designated column
        See [Wikipedia :: Interquartile range](https://en.wikipedia.org/wiki/Interquartile_range)
        for additional background.

    Attributes:
        threshold: Multiplier ``k`` applied to the IQR when computing the fences.
            Default is 1.5 according to Tukey's rule.
    """

    def __init__(self, table: Table, column: str | int | None = None, threshold: float = 1.5) -> None:
        """Initialize IQR outlier detector.

        Args:
            table: Table snapshot to filter
            column: Column label or 1-based index (default: last column)
            threshold: IQR multiplier for fence calculation (default: 1.5)
        """
        if threshold < 0:
            raise InvalidParameterError(f"IQR threshold must be non-negative, got {threshold}")
        self._table = table
        self._column = table.column(table.n_columns if column is None else column)
        self.threshold = threshold
        self._result: OutlierDetectionResult | None = None

    def fit(self) -> Self:
        """Compute the fences and filter the rows.

        Returns:
            Self for method chaining.
        """
        position = self._column.position
        values = self._table.numeric_values(position)
        if values.size == 0:
            raise InsufficientDataError(f"Column '{self._column.label}' contains no numeric values")

        q1 = percentile(values, 25)
        q3 = percentile(values, 75)
        iqr = q3 - q1
        lower = q1 - self.threshold * iqr
        upper = q3 + self.threshold * iqr

        kept: list[int] = []
        outliers: list[int] = []
        unscored: list[int] = []
        for index, cell in enumerate(self._table.cells(position)):
            if not isinstance(cell, Number):
                unscored.append(index)
            elif lower <= cell.value <= upper:
                kept.append(index)
            else:
                outliers.append(index)

        logger.info(
            "Column '%s': fences [%g, %g], %d outliers, %d rows without a number",
            self._column.label,
            lower,
            upper,
            len(outliers),
            len(unscored),
        )
        self._result = OutlierDetectionResult(
            table=self._table.take(kept),
            column=self._column,
            q1=q1,
            q3=q3,
            iqr=iqr,
            lower_fence=lower,
            upper_fence=upper,
            outlier_rows=tuple(outliers),
            unscored_rows=tuple(unscored),
        )
        return self

    def result(self) -> OutlierDetectionResult:
        """Return outlier detection results.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        return self._require_fitted(self._result)


__all__ = ["IQROutlierDetector", "OutlierDetectionResult"]
