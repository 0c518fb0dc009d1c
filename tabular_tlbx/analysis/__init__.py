"""Analysis modules for table statistics and machine-learning methods."""

from .cleaner import CleaningPolicy, CleaningResult, DataCleaner
from .correlation_analyzer import CorrelationAnalyzer, CorrelationResult, correlation_matrix, pearson_r
from .descriptive import (
    DescriptiveStatsAnalyzer,
    DescriptiveStatsResult,
    StatsRecord,
    describe_values,
    median,
    mode,
    percentile,
    population_variance,
)
from .kmeans import ClusteringResult, KMeansClusterer, assign_to_centroids
from .outlier_detector import IQROutlierDetector, OutlierDetectionResult
from .regression import LinearRegressionAnalyzer, RegressionResult
from .scaling import (
    ColumnBounds,
    ColumnTransformer,
    MinMaxNormalizer,
    NormalizationResult,
    TransformKind,
    TransformResult,
)


__all__ = [
    "CleaningPolicy",
    "CleaningResult",
    "ClusteringResult",
    "ColumnBounds",
    "ColumnTransformer",
    "CorrelationAnalyzer",
    "CorrelationResult",
    "DataCleaner",
    "DescriptiveStatsAnalyzer",
    "DescriptiveStatsResult",
    "IQROutlierDetector",
    "KMeansClusterer",
    "LinearRegressionAnalyzer",
    "MinMaxNormalizer",
    "NormalizationResult",
    "OutlierDetectionResult",
    "RegressionResult",
    "StatsRecord",
    "TransformKind",
    "TransformResult",
    "assign_to_centroids",
    "correlation_matrix",
    "describe_values",
    "median",
    "mode",
    "pearson_r",
    "percentile",
    "population_variance",
]
