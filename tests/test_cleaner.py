"""Tests for DataCleaner."""

import pytest

from tabular_tlbx.analysis.cleaner import CleaningPolicy, CleaningResult, DataCleaner
from tabular_tlbx.data import MISSING, Number, Table, Text, parse_table
from tabular_tlbx.errors import InvalidParameterError


class TestDataCleaner:
    """Test both cleaning policies."""

    def test_remove_keeps_complete_rows(self, mixed_table: Table) -> None:
        res = DataCleaner(mixed_table, "remove").fit().result()

        assert isinstance(res, CleaningResult)
        assert res.policy is CleaningPolicy.REMOVE
        assert [row[0] for row in res.table.rows] == [Text("ann"), Text("dan")]
        assert res.removed_rows == (1, 2, 4)

    def test_replace_uses_numeric_median(self, mixed_table: Table) -> None:
        res = DataCleaner(mixed_table, CleaningPolicy.REPLACE).fit().result()

        # height: median(1.60, 1.80, 1.75, 1.65) = 1.70
        assert res.table.rows[2][1] == Number(pytest.approx(1.70))
        # weight: median(55, 70, 80, 60) = 65
        assert res.table.rows[1][2] == Number(65.0)
        # score: "n/a" stays Text, the missing cell gets median(10, 12, 14)
        assert res.table.rows[2][3] == Text("n/a")
        assert res.table.rows[4][3] == Number(12.0)
        assert res.n_imputed_cells == 3
        assert set(res.imputed) == {"height", "weight", "score"}
        assert res.skipped_columns == ()

    def test_replace_skips_text_only_columns(self) -> None:
        table = parse_table("label,value\nx,1\n,2\ny,")
        res = DataCleaner(table, "replace").fit().result()

        assert res.skipped_columns == ("label",)
        assert res.table.rows[1][0] is MISSING
        assert res.table.rows[2][1] == Number(1.5)

    def test_input_table_is_not_mutated(self, mixed_table: Table) -> None:
        before = mixed_table.rows
        DataCleaner(mixed_table, "replace").fit()
        DataCleaner(mixed_table, "remove").fit()
        assert mixed_table.rows == before

    @pytest.mark.parametrize("policy", ["", "drop", None])
    def test_unknown_policy_raises(self, mixed_table: Table, policy: object) -> None:
        with pytest.raises(InvalidParameterError, match="cleaning policy"):
            DataCleaner(mixed_table, policy)  # type: ignore[arg-type]
