"""Tests for Table and ColumnResolver."""

import numpy as np
import pytest

from tabular_tlbx.data import MISSING, Column, ColumnResolver, Number, Table, Text
from tabular_tlbx.errors import InvalidParameterError, MalformedInputError, UnknownColumnError


class TestColumnResolver:
    """Label-first, then 1-based index resolution."""

    @pytest.fixture
    def resolver(self) -> ColumnResolver:
        return ColumnResolver(["x", "y", "2"])

    def test_label_match(self, resolver: ColumnResolver) -> None:
        assert resolver.resolve("y") == Column("y", 1)

    def test_label_wins_over_index(self, resolver: ColumnResolver) -> None:
        # "2" is a label at position 2, not the 1-based index of "y"
        assert resolver.resolve("2") == Column("2", 2)

    @pytest.mark.parametrize(("identifier", "position"), [("1", 0), (" 3 ", 2), (1, 0), (3, 2)])
    def test_index_match(self, resolver: ColumnResolver, identifier: str | int, position: int) -> None:
        assert resolver.resolve(identifier).position == position

    @pytest.mark.parametrize("identifier", ["0", "4", "-1", "z", "1.0", "", "²", "１", 0, 4, True])
    def test_unknown_identifier(self, resolver: ColumnResolver, identifier: object) -> None:
        with pytest.raises(UnknownColumnError, match="valid labels: x, y, 2") as excinfo:
            resolver.resolve(identifier)  # type: ignore[arg-type]
        assert excinfo.value.identifier == identifier
        assert excinfo.value.valid_labels == ("x", "y", "2")


class TestTable:
    """Test Table functionality."""

    def test_rows_must_match_header_width(self) -> None:
        with pytest.raises(MalformedInputError):
            Table(header=("a", "b"), rows=((Number(1.0),),))

    def test_table_is_frozen(self, simple_table: Table) -> None:
        with pytest.raises(AttributeError):
            simple_table.rows = ()  # type: ignore[misc]

    def test_numeric_values_exclude_text_and_missing(self, mixed_table: Table) -> None:
        score = mixed_table.column("score").position
        np.testing.assert_array_equal(mixed_table.numeric_values(score), [10.0, 12.0, 14.0])

    def test_numeric_columns(self, mixed_table: Table) -> None:
        assert [c.label for c in mixed_table.numeric_columns] == ["height", "weight", "score"]

    def test_head(self, simple_table: Table) -> None:
        assert simple_table.head(2).n_rows == 2
        assert simple_table.head(10).n_rows == 3
        assert simple_table.head(None) is simple_table

    @pytest.mark.parametrize("limit", [0, -1, 2.5, True])
    def test_head_rejects_invalid_limit(self, simple_table: Table, limit: object) -> None:
        with pytest.raises(InvalidParameterError):
            simple_table.head(limit)  # type: ignore[arg-type]

    def test_replace_column_returns_new_table(self, simple_table: Table) -> None:
        replaced = simple_table.replace_column(0, [MISSING, Text("t"), Number(9.0)])
        assert replaced.cells(0) == (MISSING, Text("t"), Number(9.0))
        assert simple_table.cells(0) == (Number(1.0), Number(3.0), Number(5.0))

    def test_paired_numeric(self, mixed_table: Table) -> None:
        indices, xs, ys = mixed_table.paired_numeric(1, 2)
        assert indices == (0, 3, 4)
        np.testing.assert_array_equal(xs, [1.6, 1.75, 1.65])
        np.testing.assert_array_equal(ys, [55.0, 80.0, 60.0])

    def test_frames(self, mixed_table: Table) -> None:
        frame = mixed_table.to_frame()
        assert list(frame.columns) == list(mixed_table.header)
        assert frame.iloc[2, 3] == "n/a"
        assert frame.iloc[1, 2] is None

        numeric = mixed_table.numeric_frame()
        assert numeric["score"].isna().tolist() == [False, False, True, False, True]
        assert numeric["name"].isna().all()
