"""Command-line host for the analytics engine.

Loads a delimited file, runs one operation and prints the result as plain text. Decisions
(cleaning policy, columns, k, transform) come from flags; anything not given on the command
line is asked for on the terminal unless ``--no-prompt`` is set.

Example:
    tabular-tlbx data.csv regression --x 1 --y 2
    tabular-tlbx data.csv cleaning --policy replace --export cleaned.csv
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

import pandas as pd

from .analysis.cleaner import CleaningResult
from .analysis.correlation_analyzer import CorrelationResult
from .analysis.descriptive import DescriptiveStatsResult
from .analysis.kmeans import ClusteringResult
from .analysis.outlier_detector import OutlierDetectionResult
from .analysis.regression import RegressionResult
from .analysis.scaling import NormalizationResult, TransformResult
from .config import DEFAULT_ENGINE_CFG
from .data.parser import write_table
from .data.table import Table
from .decisions import DecisionKind, DecisionRequest, StaticDecisionProvider
from .errors import DecisionCancelledError, TabularError
from .operations import Operation, OperationOutcome, run_operation
from .session import AnalysisSession


logger = logging.getLogger(__name__)


class PromptDecisionProvider:
    """Ask decisions on the terminal; end-of-input cancels the request."""

    async def request_decision(self, request: DecisionRequest) -> str:
        options = f" [{'/'.join(request.options)}]" if request.options else ""
        try:
            return await asyncio.to_thread(input, f"{request.prompt}{options} ")
        except (EOFError, KeyboardInterrupt):
            raise DecisionCancelledError(request.kind) from None


def _format_table(table: Table) -> str:
    if table.n_rows == 0:
        return f"<empty table: {', '.join(table.header)}>"
    return table.to_frame().to_string(index=False, na_rep="")


def render(outcome: OperationOutcome) -> str:
    """Plain-text rendering of an operation outcome."""
    res = outcome.result
    match res:
        case DescriptiveStatsResult():
            lines = ["Descriptive Statistics:", res.to_frame().to_string(float_format=lambda v: f"{v:.2f}")]
            if res.skipped_columns:
                lines.append(f"Skipped non-numeric columns: {', '.join(res.skipped_columns)}")
            return "\n".join(lines)
        case RegressionResult():
            return (
                f"Linear Regression ({res.y.label} on {res.x.label}, n={res.n_obs}):\n"
                f"Equation: y = {res.slope:.2f}x + {res.intercept:.2f}  (R^2 = {res.r_squared:.2f})"
            )
        case CorrelationResult():
            return f"Correlation ({res.x.label}, {res.y.label}, n={res.n_obs}): {res.r:.2f}"
        case CleaningResult():
            lines = [f"Data cleaned successfully ({res.policy.value})."]
            if res.removed_rows:
                lines.append(f"Removed {len(res.removed_rows)} rows with missing values.")
            if res.imputed:
                medians = ", ".join(f"{label}={value:.2f}" for label, value in res.imputed.items())
                lines.append(f"Replaced {res.n_imputed_cells} missing cells with medians: {medians}")
            if res.skipped_columns:
                lines.append(f"Skipped non-numeric columns: {', '.join(res.skipped_columns)}")
            lines.append(_format_table(res.table))
            return "\n".join(lines)
        case NormalizationResult() | TransformResult():
            return _format_table(res.table)
        case OutlierDetectionResult():
            return (
                f"IQR fences for '{res.column.label}': [{res.lower_fence:.2f}, {res.upper_fence:.2f}] "
                f"(Q1={res.q1:.2f}, Q3={res.q3:.2f}); removed {res.n_outliers} outliers\n"
                f"{_format_table(res.table)}"
            )
        case ClusteringResult():
            frame = pd.DataFrame(res.assignments, columns=["row", "cluster"])
            status = "converged" if res.converged else "stopped at iteration cap"
            return f"k-means (k={res.k}, {res.n_iter} iterations, {status}):\n{frame.to_string(index=False)}"
    return repr(res)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tabular-tlbx", description="Run a numeric analysis on a delimited file.")
    parser.add_argument("path", help="Delimited text file (UTF-8)")
    parser.add_argument("operation", choices=[op.value for op in Operation])
    parser.add_argument("--row-limit", type=int, default=None, help="Use only the first N data rows")
    parser.add_argument("--delimiter", default=DEFAULT_ENGINE_CFG.delimiter)
    parser.add_argument("--no-header", action="store_true", help="Treat the first line as data")
    parser.add_argument("--policy", help="Cleaning policy: remove or replace")
    parser.add_argument("--x", help="x column (label or 1-based index)")
    parser.add_argument("--y", help="y column (label or 1-based index)")
    parser.add_argument("--column", help="Column for transform / outlier")
    parser.add_argument("--kind", help="Transform kind: log or sqrt")
    parser.add_argument("--k", help="Number of clusters")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for k-means initialization")
    parser.add_argument("--iqr-threshold", type=float, default=None)
    parser.add_argument("--export", help="Write the resulting table to this path")
    parser.add_argument("--no-prompt", action="store_true", help="Treat unanswered decisions as cancelled")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s: %(message)s")

    answers = {
        DecisionKind.CLEANING_POLICY: args.policy,
        DecisionKind.X_COLUMN: args.x,
        DecisionKind.Y_COLUMN: args.y,
        DecisionKind.COLUMN: args.column,
        DecisionKind.TRANSFORM_KIND: args.kind,
        DecisionKind.CLUSTER_COUNT: args.k,
    }
    provider = StaticDecisionProvider(
        {kind: value for kind, value in answers.items() if value is not None},
        fallback=None if args.no_prompt else PromptDecisionProvider(),
    )

    try:
        config = DEFAULT_ENGINE_CFG.with_overrides(
            delimiter=args.delimiter,
            has_header=not args.no_header,
            iqr_threshold=args.iqr_threshold,
            random_state=args.seed,
        )
        session = AnalysisSession(config)
        session.load_csv(args.path)
        outcome = asyncio.run(run_operation(session, args.operation, provider, row_limit=args.row_limit))
    except DecisionCancelledError as exc:
        logger.warning("Operation aborted: %s", exc)
        return 2
    except (TabularError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    print(render(outcome))
    session.keep(outcome)
    if args.export:
        write_table(args.export, session.table, delimiter=config.delimiter)
    return 0


if __name__ == "__main__":
    sys.exit(main())
