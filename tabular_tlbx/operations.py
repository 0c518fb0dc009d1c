"""The operation menu: run one analysis against a session snapshot.

Each operation awaits the decisions it needs from a
:class:`~tabular_tlbx.decisions.DecisionProvider`, runs the matching analyzer on a
(possibly row-limited) snapshot and returns an :class:`OperationOutcome`. The session table
is never modified here; callers decide whether to :meth:`AnalysisSession.keep` a produced
table.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from .analysis.cleaner import CleaningPolicy
from .analysis.scaling import TransformKind
from .data.dataset import TabularDataset
from .data.table import Table
from .decisions import DecisionKind, DecisionProvider, DecisionRequest
from .errors import InvalidParameterError
from .session import AnalysisSession


logger = logging.getLogger(__name__)


class Operation(StrEnum):
    """Analyses a caller can select."""

    CLEANING = "cleaning"
    DESCRIPTIVE = "descriptive"
    REGRESSION = "regression"
    CORRELATION = "correlation"
    NORMALIZE = "normalize"
    TRANSFORM = "transform"
    OUTLIER = "outlier"
    CLUSTERING = "clustering"

    @classmethod
    def parse(cls, value: "str | Operation") -> "Operation":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidParameterError(
                f"Unknown operation {value!r}; choose one of {', '.join(op.value for op in cls)}",
            ) from None


@dataclass(frozen=True)
class OperationOutcome:
    """Result of one operation.

    Attributes:
        operation: The operation that ran.
        result: Typed result dataclass of the underlying analyzer.
        table: Table produced by cleaning, normalize, transform and outlier; ``None`` otherwise.
    """

    operation: Operation
    result: object
    table: Table | None = None


Handler = Callable[[TabularDataset, DecisionProvider], Awaitable[OperationOutcome]]


async def _ask(provider: DecisionProvider, kind: DecisionKind, prompt: str, options: tuple[str, ...] = ()) -> str:
    answer = await provider.request_decision(DecisionRequest(kind=kind, prompt=prompt, options=options))
    return answer.strip()


async def _ask_xy(ds: TabularDataset, provider: DecisionProvider, verb: str) -> tuple[str, str]:
    x = await _ask(provider, DecisionKind.X_COLUMN, f"Column (label or 1-based index) for x to {verb}:", ds.header)
    y = await _ask(provider, DecisionKind.Y_COLUMN, f"Column (label or 1-based index) for y to {verb}:", ds.header)
    return x, y


async def _cleaning(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    policy = await _ask(
        provider,
        DecisionKind.CLEANING_POLICY,
        "Remove rows with missing values or replace missing values with the column median?",
        tuple(p.value for p in CleaningPolicy),
    )
    res = ds.make_cleaner(policy).fit().result()
    return OperationOutcome(Operation.CLEANING, res, res.table)


async def _descriptive(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    return OperationOutcome(Operation.DESCRIPTIVE, ds.make_descriptive_analyzer().fit().result())


async def _regression(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    x, y = await _ask_xy(ds, provider, "regress")
    return OperationOutcome(Operation.REGRESSION, ds.make_regression_analyzer(x, y).fit().result())


async def _correlation(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    x, y = await _ask_xy(ds, provider, "correlate")
    return OperationOutcome(Operation.CORRELATION, ds.make_correlation_analyzer(x, y).fit().result())


async def _normalize(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    res = ds.make_normalizer().fit().result()
    return OperationOutcome(Operation.NORMALIZE, res, res.table)


async def _transform(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    column = await _ask(provider, DecisionKind.COLUMN, "Column (label or 1-based index) to transform:", ds.header)
    kind = await _ask(
        provider,
        DecisionKind.TRANSFORM_KIND,
        "Transform to apply:",
        tuple(k.value for k in TransformKind),
    )
    res = ds.make_transformer(column, kind).fit().result()
    return OperationOutcome(Operation.TRANSFORM, res, res.table)


async def _outlier(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    column = await _ask(
        provider,
        DecisionKind.COLUMN,
        "Column (label or 1-based index) to screen for outliers (empty for the last column):",
        ds.header,
    )
    res = ds.make_iqr_outlier_detector(column=column or None).fit().result()
    return OperationOutcome(Operation.OUTLIER, res, res.table)


async def _clustering(ds: TabularDataset, provider: DecisionProvider) -> OperationOutcome:
    answer = await _ask(provider, DecisionKind.CLUSTER_COUNT, "Number of clusters k:")
    try:
        k = int(answer)
    except ValueError:
        raise InvalidParameterError(f"k must be an integer, got {answer!r}") from None
    return OperationOutcome(Operation.CLUSTERING, ds.make_kmeans_clusterer(k).fit().result())


_HANDLERS: dict[Operation, Handler] = {
    Operation.CLEANING: _cleaning,
    Operation.DESCRIPTIVE: _descriptive,
    Operation.REGRESSION: _regression,
    Operation.CORRELATION: _correlation,
    Operation.NORMALIZE: _normalize,
    Operation.TRANSFORM: _transform,
    Operation.OUTLIER: _outlier,
    Operation.CLUSTERING: _clustering,
}


async def run_operation(
    session: AnalysisSession,
    operation: Operation | str,
    provider: DecisionProvider,
    *,
    row_limit: int | None = None,
) -> OperationOutcome:
    """Run one operation against a snapshot of the session table.

    Args:
        session: Session holding the loaded table.
        operation: Operation to run.
        provider: Answers the decisions the operation needs.
        row_limit: Use only the first ``row_limit`` data rows (``None`` for all).

    Returns:
        OperationOutcome with the typed result and, for table-producing operations, the new table.

    Raises:
        TabularError: For invalid input or parameters; the session is left untouched.
        DecisionCancelledError: If the provider cancels a decision; the session is left untouched.
    """
    operation = Operation.parse(operation)
    snapshot = session.snapshot(row_limit)
    logger.debug("Running %s on %d rows", operation.value, snapshot.table.n_rows)
    outcome = await _HANDLERS[operation](snapshot, provider)
    logger.info("Operation %s completed", operation.value)
    return outcome


__all__ = ["Operation", "OperationOutcome", "run_operation"]
