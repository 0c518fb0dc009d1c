"""Missing-value handling under an explicit, caller-chosen policy."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from sklearn.impute import SimpleImputer

from tabular_tlbx.data.cells import Missing, Number
from tabular_tlbx.data.table import Table
from tabular_tlbx.errors import InvalidParameterError

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


class CleaningPolicy(StrEnum):
    """How rows with Missing cells are handled."""

    REMOVE = "remove"
    """Keep only rows without any Missing cell."""
    REPLACE = "replace"
    """Substitute each Missing cell with the median of its column's Number cells."""

    @classmethod
    def parse(cls, value: "str | CleaningPolicy") -> "CleaningPolicy":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidParameterError(
                f"Unknown cleaning policy {value!r}; choose one of {', '.join(p.value for p in cls)}",
            ) from None


@dataclass(frozen=True)
class CleaningResult:
    """Outcome of a cleaning pass.

    Attributes:
        table: The cleaned table (a new object; the input is never mutated).
        policy: Policy that was applied.
        removed_rows: Zero-based data rows dropped by the ``remove`` policy.
        imputed: Column label -> median substituted for its Missing cells (``replace`` policy).
        n_imputed_cells: Number of Missing cells that were filled.
        skipped_columns: Columns with Missing cells but no Number cells; left untouched.
    """

    table: Table
    policy: CleaningPolicy
    removed_rows: tuple[int, ...] = ()
    imputed: dict[str, float] = field(default_factory=dict)
    n_imputed_cells: int = 0
    skipped_columns: tuple[str, ...] = ()


class DataCleaner(BaseAnalyser):
    """Remove or impute rows with Missing cells.

    The policy has no default: callers must decide between ``remove`` and ``replace``.

    Example:
        >>> from tabular_tlbx.data import parse_table
        >>> table = parse_table("a,b\\n1,\\n3,4\\n,6")
        >>> DataCleaner(table, "remove").fit().result().table.n_rows
        1
    """

    def __init__(self, table: Table, policy: CleaningPolicy | str) -> None:
        self._table = table
        self.policy = CleaningPolicy.parse(policy)
        self._result: CleaningResult | None = None

    def fit(self) -> Self:
        if self.policy is CleaningPolicy.REMOVE:
            self._result = self._remove()
        else:
            self._result = self._replace()
        return self

    def result(self) -> CleaningResult:
        return self._require_fitted(self._result)

    def _remove(self) -> CleaningResult:
        keep = [i for i, row in enumerate(self._table.rows) if not any(isinstance(cell, Missing) for cell in row)]
        removed = tuple(sorted(set(range(self._table.n_rows)) - set(keep)))
        logger.info("Removed %d of %d rows with missing values", len(removed), self._table.n_rows)
        return CleaningResult(table=self._table.take(keep), policy=self.policy, removed_rows=removed)

    def _replace(self) -> CleaningResult:
        table = self._table
        targets = [pos for pos in range(table.n_columns) if table.has_missing(pos)]
        numeric_targets = [pos for pos in targets if table.is_numeric(pos)]
        skipped = tuple(table.header[pos] for pos in targets if pos not in numeric_targets)
        for label in skipped:
            logger.warning("Column '%s' has no numeric values; missing cells were left in place", label)

        imputed: dict[str, float] = {}
        n_cells = 0
        if numeric_targets:
            # Median over Number cells only; Text and Missing are NaN here and ignored.
            frame = table.numeric_frame().iloc[:, numeric_targets].to_numpy()
            medians = SimpleImputer(strategy="median").fit(frame).statistics_
            for pos, med in zip(numeric_targets, medians, strict=True):
                fill = Number(float(med))
                cells = table.cells(pos)
                n_cells += sum(isinstance(cell, Missing) for cell in cells)
                table = table.replace_column(pos, [fill if isinstance(cell, Missing) else cell for cell in cells])
                imputed[table.header[pos]] = float(med)

        logger.info("Replaced %d missing cells across %d columns", n_cells, len(imputed))
        return CleaningResult(
            table=table,
            policy=self.policy,
            imputed=imputed,
            n_imputed_cells=n_cells,
            skipped_columns=skipped,
        )


__all__ = ["CleaningPolicy", "CleaningResult", "DataCleaner"]
