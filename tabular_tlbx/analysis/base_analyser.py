"""Base analyzer class for all analysis components in the engine."""

from abc import ABC, abstractmethod
from typing import Any

from tabular_tlbx.data.table import Column, Table


class BaseAnalyser(ABC):
    """Abstract base class for table analysis components.

    All analyzers must:
    1. Accept a :class:`~tabular_tlbx.data.table.Table` snapshot in their constructor
    2. Implement fit() to perform the analysis and return self for chaining
    3. Implement result() to return a frozen dataclass with results

    Analyzers never mutate the table they were given; table-producing analyzers return a
    new :class:`Table` inside their result.

    ### Adding a New Analyzer

    ```python
    @dataclass(frozen=True)
    class MyAnalysisResult:
        '''Results package for MyAnalyzer.'''
        value: float

    class MyAnalyzer(BaseAnalyser):
        def __init__(self, table: Table, column: str | int):
            self._table = table
            self._column = table.column(column)
            self._result: MyAnalysisResult | None = None

        def fit(self) -> "MyAnalyzer":
            self._result = MyAnalysisResult(...)
            return self

        def result(self) -> MyAnalysisResult:
            return self._require_fitted(self._result)
    ```

    Then add a ``make_my_analyzer`` factory to :class:`~tabular_tlbx.data.dataset.TabularDataset`.
    """

    @abstractmethod
    def fit(self) -> "BaseAnalyser":
        """Fit the analyzer to the data.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return analysis results as a frozen dataclass instance.

        Returns:
            A frozen @dataclass containing all analysis results.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...

    @staticmethod
    def _require_fitted(value: Any) -> Any:
        if value is None:
            raise ValueError("Must call fit() before result()")
        return value

    @staticmethod
    def _resolve_columns(table: Table, columns: list[str | int] | None) -> list[Column] | None:
        if columns is None:
            return None
        return [table.column(identifier) for identifier in columns]
