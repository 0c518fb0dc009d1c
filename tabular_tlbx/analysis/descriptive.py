r"""Descriptive statistics for numeric table columns.

Only Number cells enter the computation; Text and Missing cells of a numeric column are
excluded rather than coerced. A column counts as numeric if it holds at least one Number
below the header.

Conventions:
    - Variance is the *population* variance :math:`\sigma^2 = \frac{1}{n}\sum_i (x_i - \bar{x})^2`.
    - Skewness is the third standardized moment :math:`\frac{1}{n}\sum_i ((x_i - \bar{x})/\sigma)^3`.
    - Kurtosis is the *excess* kurtosis :math:`\frac{1}{n}\sum_i ((x_i - \bar{x})/\sigma)^4 - 3`.
    - Percentiles use nearest rank: ``sorted[floor(p/100 * n)]`` clamped to ``[0, n-1]``.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Self

import numpy as np
import pandas as pd

from tabular_tlbx.data.table import Column, Table
from tabular_tlbx.errors import InsufficientDataError, InvalidParameterError

from .base_analyser import BaseAnalyser


def _as_array(values: Iterable[float]) -> np.ndarray:
    data = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=float)
    if data.size == 0:
        raise InsufficientDataError("At least one numeric value is required")
    return data


def median(values: Iterable[float]) -> float:
    """Middle value of the numerically sorted data (mean of the two middle values for even n)."""
    return float(np.median(_as_array(values)))


def mode(values: Iterable[float]) -> tuple[float, ...]:
    """All values sharing the maximum frequency, ascending."""
    counts = pd.Series(_as_array(values)).value_counts()
    return tuple(sorted(float(v) for v in counts[counts == counts.max()].index))


def percentile(values: Iterable[float], p: float) -> float:
    """Nearest-rank percentile: ``sorted[floor(p/100 * n)]`` with the index clamped to ``[0, n-1]``."""
    if not 0 <= p <= 100:
        raise InvalidParameterError(f"Percentile must lie in [0, 100], got {p}")
    data = np.sort(_as_array(values))
    index = min(max(int(np.floor(p / 100 * data.size)), 0), data.size - 1)
    return float(data[index])


def population_variance(values: Iterable[float]) -> float:
    """Variance with divisor ``n``; exactly 0.0 when all values are equal."""
    data = _as_array(values)
    if np.ptp(data) == 0:
        return 0.0
    return float(np.var(data, ddof=0))


def standardized_moments(values: Iterable[float]) -> tuple[float | None, float | None]:
    """Skewness and excess kurtosis, or ``(None, None)`` when the spread is zero.

    Deviations are re-centered once more after subtracting the mean, so nearly constant data
    (differences near the last digit of the values) still gives finite moments.
    """
    data = _as_array(values)
    if np.ptp(data) == 0:
        return None, None
    dev = data - data.mean()
    dev -= dev.mean()
    sd = float(np.sqrt(np.mean(dev * dev)))
    if sd == 0 or not np.isfinite(sd):
        return None, None
    z = dev / sd
    skewness = float(np.mean(z**3))
    kurtosis = float(np.mean(z**4) - 3.0)
    if not (np.isfinite(skewness) and np.isfinite(kurtosis)):
        return None, None
    return skewness, kurtosis


@dataclass(frozen=True)
class StatsRecord:
    """Summary statistics of one numeric column.

    ``skewness`` and ``kurtosis`` are ``None`` when the values have no spread, since the
    standardized moments are undefined there.
    """

    count: int
    minimum: float
    maximum: float
    mean: float
    median: float
    mode: tuple[float, ...]
    range: float
    variance: float
    std_dev: float
    iqr: float
    skewness: float | None
    kurtosis: float | None
    p25: float
    p50: float
    p75: float

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


def describe_values(values: Iterable[float]) -> StatsRecord:
    """Compute a :class:`StatsRecord` for a non-empty sequence of floats."""
    data = _as_array(values)
    variance = population_variance(data)
    std_dev = float(np.sqrt(variance))
    skewness, kurtosis = standardized_moments(data)
    p25, p50, p75 = (percentile(data, p) for p in (25, 50, 75))
    return StatsRecord(
        count=int(data.size),
        minimum=float(data.min()),
        maximum=float(data.max()),
        mean=float(data.mean()),
        median=median(data),
        mode=mode(data),
        range=float(data.max() - data.min()),
        variance=variance,
        std_dev=std_dev,
        iqr=p75 - p25,
        skewness=skewness,
        kurtosis=kurtosis,
        p25=p25,
        p50=p50,
        p75=p75,
    )


@dataclass(frozen=True)
class DescriptiveStatsResult:
    """Per-column statistics.

    Attributes:
        records: Mapping from column label to its :class:`StatsRecord`, in header order.
        skipped_columns: Labels of columns left out because they hold no Number cells.
    """

    records: dict[str, StatsRecord]
    skipped_columns: tuple[str, ...] = ()

    def __getitem__(self, label: str) -> StatsRecord:
        return self.records[label]

    def to_frame(self) -> pd.DataFrame:
        """Statistics as a DataFrame (one column per table column, one row per statistic)."""
        return pd.DataFrame({label: record.as_dict() for label, record in self.records.items()})


class DescriptiveStatsAnalyzer(BaseAnalyser):
    """Central tendency, dispersion, shape and quantiles for numeric columns.

    Example:
        >>> from tabular_tlbx.data import parse_table
        >>> table = parse_table("a,b\\n1,2\\n3,4\\n5,6")
        >>> res = DescriptiveStatsAnalyzer(table).fit().result()
        >>> res["a"].mean, res["a"].median, res["a"].range
        (3.0, 3.0, 4.0)
    """

    def __init__(self, table: Table, columns: list[str | int] | None = None) -> None:
        """Initialize the analyzer.

        Args:
            table: Table snapshot to describe.
            columns: Column labels or 1-based indices. ``None`` or an empty list means every numeric column;
                explicitly requested columns without Number cells raise instead of being skipped.
        """
        self._table = table
        self._requested = self._resolve_columns(table, columns) or None
        self._result: DescriptiveStatsResult | None = None

    def fit(self) -> Self:
        table = self._table
        records: dict[str, StatsRecord] = {}
        skipped: list[str] = []

        columns = self._requested
        if columns is None:
            columns = [Column(label, pos) for pos, label in enumerate(table.header)]
        for column in columns:
            values = table.numeric_values(column.position)
            if values.size == 0:
                if self._requested is not None:
                    raise InsufficientDataError(f"Column '{column.label}' contains no numeric values")
                skipped.append(column.label)
                continue
            records[column.label] = describe_values(values)

        if not records:
            raise InsufficientDataError("Table has no numeric columns to describe")

        self._result = DescriptiveStatsResult(records=records, skipped_columns=tuple(skipped))
        return self

    def result(self) -> DescriptiveStatsResult:
        return self._require_fitted(self._result)


__all__ = [
    "DescriptiveStatsAnalyzer",
    "DescriptiveStatsResult",
    "StatsRecord",
    "describe_values",
    "median",
    "mode",
    "percentile",
    "population_variance",
    "standardized_moments",
]
