"""Explicit holder of the currently loaded table."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .config import DEFAULT_ENGINE_CFG, EngineConfig
from .data.dataset import TabularDataset
from .data.table import Table


if TYPE_CHECKING:
    from .operations import OperationOutcome


logger = logging.getLogger(__name__)


class AnalysisSession:
    """Owns the current table and replaces it wholesale on load or when a result is kept.

    Operations receive a snapshot (a :class:`TabularDataset` over the immutable table), so a
    failing or cancelled operation can never leave the session half-modified.
    """

    def __init__(self, config: EngineConfig = DEFAULT_ENGINE_CFG) -> None:
        self.config = config
        self._dataset: TabularDataset | None = None

    @property
    def is_loaded(self) -> bool:
        return self._dataset is not None

    @property
    def dataset(self) -> TabularDataset:
        """Get the loaded dataset.

        Raises:
            ValueError: If nothing has been loaded yet.
        """
        if self._dataset is None:
            raise ValueError("No table loaded. Use load_text() or load_csv() first.")
        return self._dataset

    @property
    def table(self) -> Table:
        return self.dataset.table

    def load_text(self, text: str) -> Table:
        """Parse ``text`` and make it the current table."""
        self._dataset = TabularDataset.from_text(text, self.config)
        logger.info("Loaded table with %d rows and %d columns", self.table.n_rows, self.table.n_columns)
        return self.table

    def load_csv(self, path: str | Path) -> Table:
        """Read a delimited file and make it the current table."""
        self._dataset = TabularDataset.from_csv(path, self.config)
        return self.table

    def replace(self, table: Table) -> None:
        """Make ``table`` the current table (e.g. after a kept cleaning pass)."""
        self._dataset = TabularDataset(table, self.config)
        logger.info("Replaced current table (%d rows)", table.n_rows)

    def snapshot(self, row_limit: int | None = None) -> TabularDataset:
        """Dataset over the first ``row_limit`` data rows of the current table."""
        return self.dataset.head(row_limit)

    def keep(self, outcome: "OperationOutcome") -> bool:
        """Replace the current table with the table an operation produced, if any.

        Returns:
            True if the session table was replaced.
        """
        if outcome.table is None:
            return False
        self.replace(outcome.table)
        return True


__all__ = ["AnalysisSession"]
