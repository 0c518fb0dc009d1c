"""Dataset wrapper that owns a table and builds configured analyzers."""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Self

from ..config import DEFAULT_ENGINE_CFG, EngineConfig
from .parser import parse_table, read_table, to_delimited_text
from .table import Table


if TYPE_CHECKING:
    import numpy as np

    from tabular_tlbx.analysis.cleaner import CleaningPolicy, DataCleaner
    from tabular_tlbx.analysis.correlation_analyzer import CorrelationAnalyzer
    from tabular_tlbx.analysis.descriptive import DescriptiveStatsAnalyzer
    from tabular_tlbx.analysis.kmeans import KMeansClusterer
    from tabular_tlbx.analysis.outlier_detector import IQROutlierDetector
    from tabular_tlbx.analysis.regression import LinearRegressionAnalyzer
    from tabular_tlbx.analysis.scaling import ColumnTransformer, MinMaxNormalizer, TransformKind


class TabularDataset:
    """A loaded table plus the engine configuration, with factories for every analyzer.

    **Example workflow**:
    >>> ds = TabularDataset.from_text("a,b\\n1,2\\n3,4\\n5,6")
    >>> stats = ds.make_descriptive_analyzer().fit().result()
    >>> reg = ds.make_regression_analyzer("a", "b").fit().result()
    >>> clusters = ds.make_kmeans_clusterer(k=2, random_state=0).fit().result()
    >>> stats["a"].mean, reg.slope, len(clusters.assignments)
    (3.0, 1.0, 3)
    """

    def __init__(self, table: Table, config: EngineConfig = DEFAULT_ENGINE_CFG) -> None:
        """Initialize the dataset.

        Args:
            table: Parsed table.
            config: Engine defaults (delimiter, IQR threshold, k-means limits).
        """
        self._table = table
        self.config = config

    @classmethod
    def from_text(cls, text: str, config: EngineConfig = DEFAULT_ENGINE_CFG) -> Self:
        """Parse delimited text using the delimiter and header convention of ``config``."""
        return cls(parse_table(text, delimiter=config.delimiter, has_header=config.has_header), config)

    @classmethod
    def from_csv(cls, csv_path: str | Path, config: EngineConfig = DEFAULT_ENGINE_CFG) -> Self:
        """Load a delimited text file."""
        return cls(read_table(csv_path, delimiter=config.delimiter, has_header=config.has_header), config)

    @property
    def table(self) -> Table:
        return self._table

    @property
    def header(self) -> tuple[str, ...]:
        return self._table.header

    def with_table(self, table: Table) -> Self:
        """Return a new dataset over ``table`` sharing this configuration."""
        return type(self)(table, self.config)

    def head(self, row_limit: int | None) -> Self:
        """Restrict to the first ``row_limit`` data rows (``None`` keeps every row)."""
        return self.with_table(self._table.head(row_limit))

    def to_text(self) -> str:
        """Export the table with the configured delimiter."""
        return to_delimited_text(self._table, delimiter=self.config.delimiter)

    def make_descriptive_analyzer(self, columns: Iterable[str | int] | None = None) -> "DescriptiveStatsAnalyzer":
        """Instantiate a descriptive statistics analyzer."""
        from tabular_tlbx.analysis.descriptive import DescriptiveStatsAnalyzer

        return DescriptiveStatsAnalyzer(self._table, columns=None if columns is None else list(columns))

    def make_cleaner(self, policy: "CleaningPolicy | str") -> "DataCleaner":
        """Instantiate a cleaner; the policy must be chosen by the caller."""
        from tabular_tlbx.analysis.cleaner import DataCleaner

        return DataCleaner(self._table, policy)

    def make_normalizer(self, columns: Iterable[str | int] | None = None) -> "MinMaxNormalizer":
        """Instantiate a min-max normalizer (defaults to all numeric columns)."""
        from tabular_tlbx.analysis.scaling import MinMaxNormalizer

        return MinMaxNormalizer(self._table, columns=None if columns is None else list(columns))

    def make_transformer(self, column: str | int, kind: "TransformKind | str") -> "ColumnTransformer":
        """Instantiate a log / sqrt transformer for one column."""
        from tabular_tlbx.analysis.scaling import ColumnTransformer

        return ColumnTransformer(self._table, column, kind)

    def make_iqr_outlier_detector(
        self,
        column: str | int | None = None,
        threshold: float | None = None,
    ) -> "IQROutlierDetector":
        """Instantiate an IQR outlier detector configured for this dataset.

        Args:
            column: Column to inspect (defaults to the last column)
            threshold: IQR multiplier for fence calculation (defaults to ``config.iqr_threshold``)

        Returns:
            IQROutlierDetector instance
        """
        from tabular_tlbx.analysis.outlier_detector import IQROutlierDetector

        return IQROutlierDetector(
            self._table,
            column=column,
            threshold=self.config.iqr_threshold if threshold is None else threshold,
        )

    def make_regression_analyzer(self, x: str | int, y: str | int) -> "LinearRegressionAnalyzer":
        """Instantiate an OLS regression of ``y`` on ``x``."""
        from tabular_tlbx.analysis.regression import LinearRegressionAnalyzer

        return LinearRegressionAnalyzer(self._table, x, y)

    def make_correlation_analyzer(self, x: str | int, y: str | int) -> "CorrelationAnalyzer":
        """Instantiate a Pearson correlation analyzer."""
        from tabular_tlbx.analysis.correlation_analyzer import CorrelationAnalyzer

        return CorrelationAnalyzer(self._table, x, y)

    def make_kmeans_clusterer(
        self,
        k: int,
        columns: Iterable[str | int] | None = None,
        *,
        random_state: "int | np.random.Generator | None" = None,
        init_rows: Sequence[int] | None = None,
    ) -> "KMeansClusterer":
        """Instantiate a k-means clusterer using the configured iteration cap and tolerance.

        Args:
            k: Number of clusters
            columns: Feature columns (defaults to all numeric columns)
            random_state: Seed or generator for centroid sampling (defaults to ``config.random_state``)
            init_rows: Explicit initial centroid rows

        Returns:
            KMeansClusterer instance
        """
        from tabular_tlbx.analysis.kmeans import KMeansClusterer

        return KMeansClusterer(
            self._table,
            k,
            columns=None if columns is None else list(columns),
            random_state=self.config.random_state if random_state is None else random_state,
            init_rows=init_rows,
            max_iter=self.config.kmeans_max_iter,
            tol=self.config.kmeans_tol,
        )


__all__ = ["TabularDataset"]
