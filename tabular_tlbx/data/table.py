"""Immutable typed table and the column resolver used by every operation."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd

from ..errors import InvalidParameterError, MalformedInputError, UnknownColumnError
from .cells import Cell, Missing, Number, cell_value, to_cell


@dataclass(frozen=True)
class Column:
    """A header label plus its zero-based position."""

    label: str
    position: int


class ColumnResolver:
    """Map a caller-supplied identifier to a validated :class:`Column`.

    Resolution order:
        1. exact match against a header label (first match wins for duplicate labels)
        2. an integer in ``[1, n_columns]`` given as ``int`` or ASCII digit string -> position ``identifier - 1``
        3. otherwise :class:`~tabular_tlbx.errors.UnknownColumnError`
    """

    def __init__(self, header: Sequence[str]) -> None:
        self._header = tuple(header)

    def resolve(self, identifier: str | int) -> Column:
        if isinstance(identifier, str):
            if identifier in self._header:
                position = self._header.index(identifier)
                return Column(label=identifier, position=position)
            candidate = identifier.strip()
            index = int(candidate) if candidate.isascii() and candidate.isdigit() else None
        elif isinstance(identifier, int) and not isinstance(identifier, bool):
            index = identifier
        else:
            index = None

        if index is None or not 1 <= index <= len(self._header):
            raise UnknownColumnError(identifier, self._header)
        return Column(label=self._header[index - 1], position=index - 1)


@dataclass(frozen=True)
class Table:
    """Immutable snapshot of header labels and typed rows.

    Attributes:
        header: Column labels; ``len(header)`` fixes the width of every row.
        rows: Data rows (header excluded) as tuples of cells.
    """

    header: tuple[str, ...]
    rows: tuple[tuple[Cell, ...], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "header", tuple(self.header))
        object.__setattr__(self, "rows", tuple(tuple(row) for row in self.rows))
        width = len(self.header)
        for index, row in enumerate(self.rows, start=1):
            if len(row) != width:
                raise MalformedInputError(f"Row {index} has {len(row)} cells, expected {width} (header width)")

    @classmethod
    def from_values(cls, header: Iterable[str], rows: Iterable[Iterable[object]]) -> Self:
        """Build a table from plain Python values (``None``, numbers, strings)."""
        return cls(header=tuple(header), rows=tuple(tuple(to_cell(v) for v in row) for row in rows))

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_columns(self) -> int:
        return len(self.header)

    @property
    def resolver(self) -> ColumnResolver:
        return ColumnResolver(self.header)

    def column(self, identifier: str | int) -> Column:
        """Resolve a label or 1-based index to a :class:`Column`."""
        return self.resolver.resolve(identifier)

    def cells(self, position: int) -> tuple[Cell, ...]:
        """Return the cells of one column, top to bottom."""
        return tuple(row[position] for row in self.rows)

    def numeric_mask(self, position: int) -> np.ndarray:
        """Boolean mask of rows holding a Number in ``position``."""
        return np.fromiter((isinstance(row[position], Number) for row in self.rows), dtype=bool, count=self.n_rows)

    def numeric_values(self, position: int) -> np.ndarray:
        """Number cells of one column as floats; Text and Missing are excluded, not coerced."""
        return np.array([cell.value for cell in self.cells(position) if isinstance(cell, Number)], dtype=float)

    def paired_numeric(self, x_position: int, y_position: int) -> tuple[tuple[int, ...], np.ndarray, np.ndarray]:
        """Rows where both columns hold Numbers, as ``(row indices, x values, y values)``."""
        mask = self.numeric_mask(x_position) & self.numeric_mask(y_position)
        indices = tuple(int(i) for i in np.flatnonzero(mask))
        xs = np.array([self.rows[i][x_position].value for i in indices], dtype=float)
        ys = np.array([self.rows[i][y_position].value for i in indices], dtype=float)
        return indices, xs, ys

    def is_numeric(self, position: int) -> bool:
        """A column is numeric if it holds at least one Number below the header."""
        return any(isinstance(row[position], Number) for row in self.rows)

    @property
    def numeric_columns(self) -> list[Column]:
        return [Column(label, pos) for pos, label in enumerate(self.header) if self.is_numeric(pos)]

    def has_missing(self, position: int) -> bool:
        return any(isinstance(row[position], Missing) for row in self.rows)

    def head(self, n: int | None) -> Self:
        """Return the first ``n`` data rows (header kept); ``None`` keeps all rows.

        A zero, negative or non-integer limit raises instead of silently falling back to all rows.

        Raises:
            InvalidParameterError: If ``n`` is not a positive integer.
        """
        if n is None:
            return self
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise InvalidParameterError(f"Row limit must be a positive integer, got {n!r}")
        return self.with_rows(self.rows[:n])

    def with_rows(self, rows: Iterable[Sequence[Cell]]) -> Self:
        """Return a new table with the same header and the given rows."""
        return type(self)(header=self.header, rows=tuple(tuple(row) for row in rows))

    def take(self, indices: Iterable[int]) -> Self:
        """Return a new table keeping the rows at ``indices`` in the given order."""
        return self.with_rows(self.rows[i] for i in indices)

    def replace_column(self, position: int, cells: Sequence[Cell]) -> Self:
        """Return a new table with one column swapped for ``cells``."""
        if len(cells) != self.n_rows:
            raise MalformedInputError(f"Replacement column has {len(cells)} cells, expected {self.n_rows}")
        return self.with_rows(
            (*row[:position], new_cell, *row[position + 1 :]) for row, new_cell in zip(self.rows, cells, strict=True)
        )

    def to_frame(self) -> pd.DataFrame:
        """Render the table as a DataFrame of plain values (floats, strings, ``None``)."""
        return pd.DataFrame(
            [[cell_value(cell) for cell in row] for row in self.rows],
            columns=list(self.header),
            dtype=object,
        )

    def numeric_frame(self) -> pd.DataFrame:
        """Float DataFrame with NaN for every non-Number cell."""
        return pd.DataFrame(
            [[cell.value if isinstance(cell, Number) else np.nan for cell in row] for row in self.rows],
            columns=list(self.header),
            dtype=float,
        )


__all__ = ["Column", "ColumnResolver", "Table"]
