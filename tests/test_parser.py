"""Tests for text parsing, cell typing and export."""

import pytest

from tabular_tlbx.data import (
    MISSING,
    Number,
    Table,
    Text,
    parse_cell,
    parse_table,
    read_table,
    to_delimited_text,
    write_table,
)
from tabular_tlbx.errors import MalformedInputError


class TestParseCell:
    """Token classification into Number / Text / Missing."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("1", Number(1.0)),
            ("-2.5", Number(-2.5)),
            (".5", Number(0.5)),
            ("1e3", Number(1000.0)),
            (" 7 ", Number(7.0)),
        ],
    )
    def test_numbers(self, token: str, expected: Number) -> None:
        assert parse_cell(token) == expected

    @pytest.mark.parametrize("token", ["abc", "nan", "inf", "-Infinity", "1e999", "1_000", "0x10", "1,5"])
    def test_text(self, token: str) -> None:
        assert isinstance(parse_cell(token), Text)

    @pytest.mark.parametrize("token", ["", "   "])
    def test_missing(self, token: str) -> None:
        assert parse_cell(token) is MISSING


class TestParseTable:
    """Test parse_table functionality."""

    def test_header_and_typed_rows(self, mixed_table: Table) -> None:
        assert mixed_table.header == ("name", "height", "weight", "score")
        assert mixed_table.n_rows == 5
        assert mixed_table.rows[0] == (Text("ann"), Number(1.6), Number(55.0), Number(10.0))
        assert mixed_table.rows[1][2] is MISSING
        assert mixed_table.rows[2][3] == Text("n/a")

    def test_ragged_row_raises(self) -> None:
        with pytest.raises(MalformedInputError, match=r"Line 3 has 3 fields, expected 2"):
            parse_table("a,b\n1,2\n3,4,5")

    def test_empty_input_raises(self) -> None:
        with pytest.raises(MalformedInputError, match="no rows"):
            parse_table("  \n\n ")

    def test_crlf_and_blank_lines(self) -> None:
        table = parse_table("a,b\r\n1,2\r\n\r\n3,4\r\n")
        assert table.n_rows == 2

    def test_headerless(self) -> None:
        table = parse_table("1,2\n3,4", has_header=False)
        assert table.header == ("Column 1", "Column 2")
        assert table.n_rows == 2
        assert table.rows[0] == (Number(1.0), Number(2.0))

    def test_custom_delimiter(self) -> None:
        table = parse_table("a;b\n1;x", delimiter=";")
        assert table.rows[0] == (Number(1.0), Text("x"))


class TestExport:
    """Round-tripping tables through delimited text."""

    def test_to_delimited_text(self, mixed_text: str, mixed_table: Table) -> None:
        text = to_delimited_text(mixed_table)
        assert text.splitlines()[0] == "name,height,weight,score"
        assert text.splitlines()[2] == "bob,1.8,,12"
        assert parse_table(text) == mixed_table

    def test_write_and_read(self, tmp_path, simple_table: Table) -> None:
        path = write_table(tmp_path / "out.csv", simple_table, delimiter=";")
        assert path.read_text(encoding="utf-8") == "a;b\n1;2\n3;4\n5;6\n"
        assert read_table(path, delimiter=";") == simple_table

    def test_read_rejects_invalid_utf8(self, tmp_path) -> None:
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"a,b\n1,\xff\n")
        with pytest.raises(MalformedInputError, match="not valid UTF-8"):
            read_table(path)
