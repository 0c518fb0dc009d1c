"""Centroid-based clustering (k-means / Lloyd's algorithm) over numeric columns."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self

import numpy as np
import pandas as pd
from scipy.spatial.distance import cdist

from tabular_tlbx.data.cells import Number
from tabular_tlbx.data.table import Column, Table
from tabular_tlbx.errors import InsufficientDataError, InvalidParameterError

from .base_analyser import BaseAnalyser


logger = logging.getLogger(__name__)


def assign_to_centroids(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid (Euclidean) for every point; ties go to the lowest index."""
    return cdist(points, centroids, metric="euclidean").argmin(axis=1)


@dataclass(frozen=True)
class ClusteringResult:
    """Row-to-cluster assignments of a k-means run.

    Attributes:
        assignments: ``(row, cluster)`` pairs, one per clustered row; ``row`` is the zero-based
            data row of the input table.
        k: Number of clusters requested.
        columns: Feature columns used for the distances.
        n_iter: Assign/update rounds performed.
        converged: False if the iteration cap was reached with centroids still moving.
        stale_clusters: Clusters that received no rows in some round and kept their centroid.
        dropped_rows: Rows left out because a feature cell is not a Number.
    """

    assignments: tuple[tuple[int, int], ...]
    k: int
    columns: tuple[Column, ...]
    n_iter: int
    converged: bool
    stale_clusters: tuple[int, ...] = ()
    dropped_rows: tuple[int, ...] = ()

    @property
    def labels(self) -> pd.Series:
        """Cluster index per row, indexed by row."""
        return pd.Series(dict(self.assignments), name="cluster", dtype=int)

    @property
    def clusters(self) -> dict[int, tuple[int, ...]]:
        """Rows grouped by cluster index (empty clusters included)."""
        groups: dict[int, list[int]] = {cluster: [] for cluster in range(self.k)}
        for row, cluster in self.assignments:
            groups[cluster].append(row)
        return {cluster: tuple(rows) for cluster, rows in groups.items()}


class KMeansClusterer(BaseAnalyser):
    r"""Partition rows into ``k`` clusters by iterative centroid assignment.

    Runs the cycle Init -> Assign -> Update -> (Converged | Iterate):

    - **Init:** sample ``k`` rows *with replacement* via a seedable
      :class:`numpy.random.Generator`, or take ``init_rows`` verbatim.
    - **Assign:** each row goes to the nearest centroid by Euclidean distance
      :math:`\lVert x - c_j \rVert_2` over all feature columns; ties go to the lowest index.
    - **Update:** each centroid becomes the coordinate-wise mean of its rows. A centroid that
      received no rows keeps its coordinates and the cluster is reported as stale.
    - **Converged:** every centroid moved by at most ``tol`` per coordinate (``tol=0`` means
      exact equality), or ``max_iter`` rounds were run.

    Only the assignments are returned; centroids are discarded after the run.

    Example:
        >>> from tabular_tlbx.data import Table
        >>> table = Table.from_values(["x", "y"], [[0, 0], [0, 1], [10, 10], [10, 11]])
        >>> res = KMeansClusterer(table, k=2, init_rows=[0, 2]).fit().result()
        >>> res.clusters
        {0: (0, 1), 1: (2, 3)}
    """

    def __init__(
        self,
        table: Table,
        k: int,
        columns: list[str | int] | None = None,
        *,
        random_state: int | np.random.Generator | None = None,
        init_rows: Sequence[int] | None = None,
        max_iter: int = 10,
        tol: float = 0.0,
    ) -> None:
        """Initialize the clusterer.

        Args:
            table: Table snapshot to cluster.
            k: Number of clusters, ``1 <= k <= usable rows``.
            columns: Feature columns (labels or 1-based indices); defaults to all numeric columns.
            random_state: Seed or generator used to sample the initial centroids.
            init_rows: Zero-based data rows to use as initial centroids (overrides sampling).
            max_iter: Iteration cap (default: 10).
            tol: Per-coordinate movement below which a centroid counts as unchanged (default: 0.0).
        """
        if isinstance(k, bool) or not isinstance(k, int | np.integer) or k <= 0:
            raise InvalidParameterError(f"k must be a positive integer, got {k!r}")
        if max_iter <= 0:
            raise InvalidParameterError(f"max_iter must be positive, got {max_iter}")
        if tol < 0:
            raise InvalidParameterError(f"tol must be non-negative, got {tol}")
        self._table = table
        self.k = int(k)
        self._columns = self._resolve_columns(table, columns)
        self.random_state = random_state
        self.init_rows = None if init_rows is None else tuple(init_rows)
        self.max_iter = max_iter
        self.tol = tol
        self._result: ClusteringResult | None = None

    def _feature_matrix(self) -> tuple[list[Column], np.ndarray, list[int], list[int]]:
        columns = self._columns if self._columns is not None else self._table.numeric_columns
        if not columns:
            raise InsufficientDataError("Table has no numeric columns to cluster on")
        positions = [column.position for column in columns]

        usable: list[int] = []
        dropped: list[int] = []
        for index, row in enumerate(self._table.rows):
            (usable if all(isinstance(row[pos], Number) for pos in positions) else dropped).append(index)
        points = np.array([[self._table.rows[i][pos].value for pos in positions] for i in usable], dtype=float)
        return columns, points.reshape(len(usable), len(positions)), usable, dropped

    def _initial_centroids(self, points: np.ndarray, usable: list[int]) -> np.ndarray:
        if self.init_rows is None:
            rng = np.random.default_rng(self.random_state)
            picks = rng.integers(0, len(usable), size=self.k)
        else:
            if len(self.init_rows) != self.k:
                raise InvalidParameterError(f"init_rows must name exactly k={self.k} rows, got {len(self.init_rows)}")
            position_by_row = {row: i for i, row in enumerate(usable)}
            missing = [row for row in self.init_rows if row not in position_by_row]
            if missing:
                raise InvalidParameterError(f"init_rows {missing} are not rows with numeric features")
            picks = np.array([position_by_row[row] for row in self.init_rows])
        logger.debug("Initial centroids from rows %s", [usable[i] for i in picks])
        return points[picks].copy()

    def fit(self) -> Self:
        """Run k-means until convergence or the iteration cap.

        Returns:
            Self for method chaining.
        """
        columns, points, usable, dropped = self._feature_matrix()
        if self.k > len(usable):
            raise InvalidParameterError(f"k={self.k} exceeds the number of clusterable rows ({len(usable)})")

        centroids = self._initial_centroids(points, usable)
        stale: set[int] = set()
        converged = False
        n_iter = 0
        labels = np.zeros(len(usable), dtype=int)

        while n_iter < self.max_iter:
            n_iter += 1
            labels = assign_to_centroids(points, centroids)
            updated = centroids.copy()
            for cluster in range(self.k):
                members = points[labels == cluster]
                if members.size == 0:
                    stale.add(cluster)
                    continue
                updated[cluster] = members.mean(axis=0)

            shift = float(np.max(np.abs(updated - centroids)))
            logger.debug("k-means round %d: max centroid shift %g", n_iter, shift)
            centroids = updated
            if shift <= self.tol:
                converged = True
                break

        if stale:
            logger.warning("Clusters %s received no rows in some round and kept their centroid", sorted(stale))
        logger.info("k-means with k=%d finished after %d rounds (converged=%s)", self.k, n_iter, converged)

        self._result = ClusteringResult(
            assignments=tuple((row, int(label)) for row, label in zip(usable, labels, strict=True)),
            k=self.k,
            columns=tuple(columns),
            n_iter=n_iter,
            converged=converged,
            stale_clusters=tuple(sorted(stale)),
            dropped_rows=tuple(dropped),
        )
        return self

    def result(self) -> ClusteringResult:
        return self._require_fitted(self._result)


__all__ = ["ClusteringResult", "KMeansClusterer", "assign_to_centroids"]
