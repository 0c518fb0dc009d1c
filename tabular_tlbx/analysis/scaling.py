"""Column rescaling (min-max) and monotonic transforms (log, sqrt)."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Self

import numpy as np

from tabular_tlbx.data.cells import Cell, Number
from tabular_tlbx.data.table import Column, Table
from tabular_tlbx.errors import DegenerateColumnError, DomainError, InsufficientDataError, InvalidParameterError

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnBounds:
    """Observed ``[minimum, maximum]`` of a column before rescaling."""

    minimum: float
    maximum: float


@dataclass(frozen=True)
class NormalizationResult:
    """Min-max normalized table plus the bounds used per column."""

    table: Table
    bounds: dict[str, ColumnBounds]


class MinMaxNormalizer(BaseAnalyser):
    r"""Rescale numeric columns to ``[0, 1]`` via :math:`(x - x_{min}) / (x_{max} - x_{min})`.

    Text and Missing cells are carried over unchanged. The column minimum maps to exactly
    0 and the maximum to exactly 1. A column whose minimum equals its maximum raises
    :class:`~tabular_tlbx.errors.DegenerateColumnError` instead of dividing by zero.
    """

    def __init__(self, table: Table, columns: list[str | int] | None = None) -> None:
        """Initialize the normalizer.

        Args:
            table: Table snapshot to rescale.
            columns: Column labels or 1-based indices; defaults to all numeric columns.
        """
        self._table = table
        self._columns = self._resolve_columns(table, columns)
        self._result: NormalizationResult | None = None

    def fit(self) -> Self:
        table = self._table
        columns = self._columns if self._columns is not None else table.numeric_columns
        if not columns:
            raise InsufficientDataError("Table has no numeric columns to normalize")

        bounds: dict[str, ColumnBounds] = {}
        for column in columns:
            values = table.numeric_values(column.position)
            if values.size == 0:
                raise InsufficientDataError(f"Column '{column.label}' contains no numeric values")
            lo, hi = float(values.min()), float(values.max())
            if lo == hi:
                raise DegenerateColumnError(column.label)
            bounds[column.label] = ColumnBounds(lo, hi)
            # Halve everything when hi - lo overflows; the ratio is unchanged.
            factor = 1.0 if np.isfinite(hi - lo) else 0.5
            offset, span = lo * factor, hi * factor - lo * factor
            table = table.replace_column(
                column.position,
                [
                    Number((c.value * factor - offset) / span) if isinstance(c, Number) else c
                    for c in table.cells(column.position)
                ],
            )

        logger.info("Min-max normalized %d columns", len(bounds))
        self._result = NormalizationResult(table=table, bounds=bounds)
        return self

    def result(self) -> NormalizationResult:
        return self._require_fitted(self._result)


class TransformKind(StrEnum):
    """Supported unary transforms."""

    LOG = "log"
    """Natural logarithm; defined for values > 0."""
    SQRT = "sqrt"
    """Square root; defined for values >= 0."""

    @classmethod
    def parse(cls, value: "str | TransformKind") -> "TransformKind":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidParameterError(
                f"Unknown transform {value!r}; choose one of {', '.join(k.value for k in cls)}",
            ) from None

    def in_domain(self, value: float) -> bool:
        return value > 0 if self is TransformKind.LOG else value >= 0

    def apply(self, value: float) -> float:
        return float(np.log(value) if self is TransformKind.LOG else np.sqrt(value))


@dataclass(frozen=True)
class TransformResult:
    """Table with one column transformed."""

    table: Table
    column: Column
    kind: TransformKind


class ColumnTransformer(BaseAnalyser):
    """Apply a :class:`TransformKind` to every Number cell of one column.

    Values outside the transform's domain raise :class:`~tabular_tlbx.errors.DomainError`
    naming the offending row; nothing is silently turned into NaN.
    """

    def __init__(self, table: Table, column: str | int, kind: TransformKind | str) -> None:
        self._table = table
        self._column = table.column(column)
        self.kind = TransformKind.parse(kind)
        self._result: TransformResult | None = None

    def fit(self) -> Self:
        position = self._column.position
        if not self._table.is_numeric(position):
            raise InsufficientDataError(f"Column '{self._column.label}' contains no numeric values")

        transformed: list[Cell] = []
        for row_number, cell in enumerate(self._table.cells(position), start=1):
            if isinstance(cell, Number):
                if not self.kind.in_domain(cell.value):
                    raise DomainError(self._column.label, row_number, cell.value, self.kind.value)
                cell = Number(self.kind.apply(cell.value))
            transformed.append(cell)

        logger.info("Applied %s to column '%s'", self.kind.value, self._column.label)
        self._result = TransformResult(
            table=self._table.replace_column(position, transformed),
            column=self._column,
            kind=self.kind,
        )
        return self

    def result(self) -> TransformResult:
        return self._require_fitted(self._result)


__all__ = [
    "ColumnBounds",
    "ColumnTransformer",
    "MinMaxNormalizer",
    "NormalizationResult",
    "TransformKind",
    "TransformResult",
]
