r"""Simple ordinary least squares (OLS) regression between two numeric columns.

With :math:`S_{xy} = \sum_i (x_i - \bar{x})(y_i - \bar{y})` and :math:`S_{xx} = \sum_i (x_i - \bar{x})^2`
the fitted line :math:`\hat{y} = \beta_0 + \beta_1 x` has

- :math:`\beta_1 = S_{xy} / S_{xx}`
- :math:`\beta_0 = \bar{y} - \beta_1 \bar{x}`
- :math:`R^2 = S_{xy}^2 / (S_{xx} S_{yy})`

so the line always passes through :math:`(\bar{x}, \bar{y})`. Only rows where both cells are
Numbers take part.
"""

import logging
from dataclasses import dataclass
from typing import Self

import numpy as np

from tabular_tlbx.data.table import Column, Table
from tabular_tlbx.errors import DegenerateInputError, InsufficientDataError

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionResult:
    """Fitted line plus the rows it was fitted on.

    Attributes:
        slope: :math:`\\beta_1`.
        intercept: :math:`\\beta_0`.
        r_squared: Coefficient of determination (1.0 when all ``y`` are equal).
        n_obs: Number of rows used.
        x: Predictor column.
        y: Response column.
        rows: Subset of the input table where both columns hold Numbers.
        row_indices: Zero-based positions of ``rows`` in the input table.
    """

    slope: float
    intercept: float
    r_squared: float
    n_obs: int
    x: Column
    y: Column
    rows: Table
    row_indices: tuple[int, ...]

    def predict(self, x: float | np.ndarray) -> float | np.ndarray:
        """Evaluate the fitted line at ``x``."""
        return self.intercept + self.slope * x

    def __repr__(self) -> str:
        return (
            f"RegressionResult(y={self.slope:.4g}*x + {self.intercept:.4g}, "
            f"r2={self.r_squared:.3f}, n={self.n_obs}, x='{self.x.label}', y='{self.y.label}')"
        )


def _scale(values: np.ndarray) -> float:
    scale = float(np.max(np.abs(values)))
    return scale if scale > 0 else 1.0


class LinearRegressionAnalyzer(BaseAnalyser):
    """Fit ``y = slope * x + intercept`` by OLS.

    Example:
        >>> from tabular_tlbx.data import Table
        >>> table = Table.from_values(["x", "y"], [[1, 2], [2, 4], [3, 6]])
        >>> res = LinearRegressionAnalyzer(table, "x", "y").fit().result()
        >>> res.slope, res.intercept
        (2.0, 0.0)
    """

    def __init__(self, table: Table, x: str | int, y: str | int) -> None:
        """Initialize the analyzer.

        Args:
            table: Table snapshot.
            x: Predictor column label or 1-based index.
            y: Response column label or 1-based index.
        """
        self._table = table
        self._x = table.column(x)
        self._y = table.column(y)
        self._result: RegressionResult | None = None

    def fit(self) -> Self:
        indices, xs, ys = self._table.paired_numeric(self._x.position, self._y.position)
        if len(indices) < 2:
            raise InsufficientDataError(
                f"Regression of '{self._y.label}' on '{self._x.label}' needs at least 2 rows "
                f"with numbers in both columns, found {len(indices)}",
            )

        # Work on values divided by their largest magnitude so the sums neither overflow nor
        # underflow; the slope is scaled back afterwards.
        x_scale, y_scale = _scale(xs), _scale(ys)
        xu, yu = xs / x_scale, ys / y_scale
        dx = xu - xu.mean()
        dy = yu - yu.mean()
        sxx = float(np.sum(dx * dx))
        sxy = float(np.sum(dx * dy))
        syy = float(np.sum(dy * dy))
        if sxx == 0:
            raise DegenerateInputError(f"Column '{self._x.label}' is constant; the slope is undefined")

        slope = sxy / sxx * (y_scale / x_scale)
        intercept = y_scale * float(yu.mean()) - slope * (x_scale * float(xu.mean()))
        r_squared = 1.0 if syy == 0 else (sxy / sxx) * (sxy / syy)
        if not (np.isfinite(slope) and np.isfinite(intercept)):
            raise DegenerateInputError(
                f"Regression of '{self._y.label}' on '{self._x.label}' has no finite coefficients",
            )

        logger.info(
            "Fitted %s ~ %s on %d rows: slope=%g intercept=%g",
            self._y.label,
            self._x.label,
            len(indices),
            slope,
            intercept,
        )
        self._result = RegressionResult(
            slope=slope,
            intercept=intercept,
            r_squared=r_squared,
            n_obs=len(indices),
            x=self._x,
            y=self._y,
            rows=self._table.take(indices),
            row_indices=indices,
        )
        return self

    def result(self) -> RegressionResult:
        return self._require_fitted(self._result)


__all__ = ["LinearRegressionAnalyzer", "RegressionResult"]
