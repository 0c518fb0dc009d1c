"""Tests for the session and the async operation menu."""

import asyncio

import pytest

from tabular_tlbx import AnalysisSession, EngineConfig
from tabular_tlbx.analysis import ClusteringResult, DescriptiveStatsResult, RegressionResult
from tabular_tlbx.data import Number
from tabular_tlbx.decisions import DecisionKind, DecisionProvider, DecisionRequest, StaticDecisionProvider
from tabular_tlbx.errors import DecisionCancelledError, InvalidParameterError, UnknownColumnError
from tabular_tlbx.operations import Operation, run_operation


@pytest.fixture
def session(mixed_text: str) -> AnalysisSession:
    s = AnalysisSession()
    s.load_text(mixed_text)
    return s


@pytest.fixture
def simple_session() -> AnalysisSession:
    s = AnalysisSession()
    s.load_text("a,b\n1,2\n3,4\n5,6")
    return s


def _run(session: AnalysisSession, operation: str, answers: dict | None = None, **kwargs):
    provider = StaticDecisionProvider(answers)
    return asyncio.run(run_operation(session, operation, provider, **kwargs)), provider


class TestAnalysisSession:
    """Test loading and replacing the current table."""

    def test_not_loaded(self) -> None:
        s = AnalysisSession()
        assert not s.is_loaded
        with pytest.raises(ValueError, match="No table loaded"):
            _ = s.table

    def test_load_csv(self, tmp_path, mixed_text: str) -> None:
        path = tmp_path / "data.csv"
        path.write_text(mixed_text, encoding="utf-8")

        s = AnalysisSession()
        table = s.load_csv(path)

        assert s.is_loaded
        assert table.header == ("name", "height", "weight", "score")
        assert table.n_rows == 5

    def test_config_is_applied(self) -> None:
        s = AnalysisSession(EngineConfig(delimiter=";", has_header=False))
        table = s.load_text("1;2\n3;4")
        assert table.header == ("Column 1", "Column 2")
        assert table.n_rows == 2

    def test_snapshot_row_limit(self, session: AnalysisSession) -> None:
        assert session.snapshot(2).table.n_rows == 2
        assert session.snapshot(None).table is session.table
        assert session.snapshot(100).table.n_rows == 5


class TestRunOperation:
    """Test the operation menu against a session."""

    def test_cleaning_requests_policy(self, session: AnalysisSession) -> None:
        before = session.table
        outcome, provider = _run(session, "cleaning", {DecisionKind.CLEANING_POLICY: "remove"})

        assert outcome.operation is Operation.CLEANING
        assert outcome.table is not None
        assert outcome.table.n_rows == 2
        assert session.table is before

        (request,) = provider.requests
        assert request.kind is DecisionKind.CLEANING_POLICY
        assert request.options == ("remove", "replace")

    def test_keep_replaces_table(self, session: AnalysisSession) -> None:
        outcome, _ = _run(session, "cleaning", {DecisionKind.CLEANING_POLICY: "replace"})

        assert session.keep(outcome)
        assert session.table is outcome.table
        assert session.table.rows[1][2] == Number(65.0)

    def test_keep_ignores_results_without_table(self, session: AnalysisSession) -> None:
        before = session.table
        outcome, _ = _run(session, "descriptive")

        assert outcome.table is None
        assert not session.keep(outcome)
        assert session.table is before

    def test_cancelled_decision_leaves_session_untouched(self, session: AnalysisSession) -> None:
        before = session.table
        with pytest.raises(DecisionCancelledError):
            _run(session, "cleaning")
        assert session.table is before

    def test_row_limit_applies_to_data_rows(self, session: AnalysisSession) -> None:
        outcome, _ = _run(session, Operation.DESCRIPTIVE, row_limit=2)

        assert isinstance(outcome.result, DescriptiveStatsResult)
        assert outcome.result["height"].count == 2
        assert outcome.result["height"].mean == pytest.approx(1.70)
        assert outcome.result.skipped_columns == ("name",)

    @pytest.mark.parametrize("row_limit", [0, -3])
    def test_invalid_row_limit(self, session: AnalysisSession, row_limit: int) -> None:
        with pytest.raises(InvalidParameterError):
            _run(session, "descriptive", row_limit=row_limit)

    def test_regression_by_index(self, simple_session: AnalysisSession) -> None:
        outcome, provider = _run(simple_session, "regression", {"x_column": "1", "y_column": " 2 "})

        assert isinstance(outcome.result, RegressionResult)
        assert outcome.result.slope == pytest.approx(1.0)
        assert outcome.result.intercept == pytest.approx(1.0)
        assert [r.kind for r in provider.requests] == [DecisionKind.X_COLUMN, DecisionKind.Y_COLUMN]
        assert provider.requests[0].options == ("a", "b")

    def test_unknown_column(self, simple_session: AnalysisSession) -> None:
        before = simple_session.table
        with pytest.raises(UnknownColumnError, match="valid labels: a, b"):
            _run(simple_session, "correlation", {"x_column": "a", "y_column": "c"})
        assert simple_session.table is before

    def test_correlation(self, simple_session: AnalysisSession) -> None:
        outcome, _ = _run(simple_session, "correlation", {"x_column": "a", "y_column": "b"})
        assert outcome.result.r == pytest.approx(1.0)

    def test_normalize(self, simple_session: AnalysisSession) -> None:
        outcome, provider = _run(simple_session, "normalize")

        assert provider.requests == []
        assert [row[0] for row in outcome.table.rows] == [Number(0.0), Number(0.5), Number(1.0)]

    def test_transform(self, simple_session: AnalysisSession) -> None:
        outcome, provider = _run(simple_session, "transform", {"column": "b", "transform_kind": "sqrt"})

        assert [r.kind for r in provider.requests] == [DecisionKind.COLUMN, DecisionKind.TRANSFORM_KIND]
        assert outcome.table.rows[1][1] == Number(2.0)
        assert outcome.table.rows[1][0] == Number(3.0)

    def test_outlier_defaults_to_last_column(self, simple_session: AnalysisSession) -> None:
        outcome, _ = _run(simple_session, "outlier", {"column": ""})

        assert outcome.result.column.label == "b"
        assert outcome.table.n_rows == 3

    def test_clustering(self, simple_session: AnalysisSession) -> None:
        outcome, _ = _run(simple_session, "clustering", {"cluster_count": "1"})

        assert isinstance(outcome.result, ClusteringResult)
        assert outcome.result.clusters == {0: (0, 1, 2)}
        assert outcome.table is None

    def test_clustering_rejects_non_integer_k(self, simple_session: AnalysisSession) -> None:
        with pytest.raises(InvalidParameterError, match="integer"):
            _run(simple_session, "clustering", {"cluster_count": "two"})

    def test_unknown_operation(self, simple_session: AnalysisSession) -> None:
        with pytest.raises(InvalidParameterError, match="Unknown operation"):
            _run(simple_session, "forecast")

    def test_operation_parse_is_lenient(self) -> None:
        assert Operation.parse(" Regression ") is Operation.REGRESSION


class TestStaticDecisionProvider:
    """Test the mapping-backed provider."""

    def test_is_a_decision_provider(self) -> None:
        assert isinstance(StaticDecisionProvider(), DecisionProvider)

    def test_fallback(self) -> None:
        fallback = StaticDecisionProvider({DecisionKind.COLUMN: "b"})
        provider = StaticDecisionProvider({DecisionKind.CLUSTER_COUNT: 3}, fallback=fallback)

        answer_k = asyncio.run(provider.request_decision(DecisionRequest(DecisionKind.CLUSTER_COUNT, "k?")))
        answer_col = asyncio.run(provider.request_decision(DecisionRequest(DecisionKind.COLUMN, "column?")))

        assert (answer_k, answer_col) == ("3", "b")
        assert len(provider.requests) == 2
        assert len(fallback.requests) == 1

    def test_unanswered_request_is_cancelled(self) -> None:
        with pytest.raises(DecisionCancelledError, match="transform_kind") as exc_info:
            asyncio.run(StaticDecisionProvider().request_decision(DecisionRequest(DecisionKind.TRANSFORM_KIND, "?")))
        assert exc_info.value.kind is DecisionKind.TRANSFORM_KIND
