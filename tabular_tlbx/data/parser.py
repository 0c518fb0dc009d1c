"""Delimited text <-> :class:`Table` conversion.

Fields are split on a single delimiter character. Quoting and escaping are not supported:
a field containing the delimiter is split like any other.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import DEFAULT_ENGINE_CFG
from ..errors import MalformedInputError
from .cells import Cell, parse_cell
from .table import Table


logger = logging.getLogger(__name__)


def parse_table(
    text: str,
    *,
    delimiter: str = DEFAULT_ENGINE_CFG.delimiter,
    has_header: bool = DEFAULT_ENGINE_CFG.has_header,
) -> Table:
    """Parse raw delimited text into a typed table.

    Args:
        text: Raw file content. Lines are split on ``\\n`` / ``\\r\\n``, trimmed, and blank
            lines are skipped.
        delimiter: Single field separator character.
        has_header: If True the first line holds the column labels. Otherwise labels are
            synthesized as ``Column 1 .. Column n`` and the first line is data.

    Returns:
        Table with one :class:`~tabular_tlbx.data.cells.Cell` per field.

    Raises:
        MalformedInputError: If the input is empty or a row's field count differs from the header.
    """
    lines = [(number, line.strip()) for number, line in enumerate(text.strip().splitlines(), start=1)]
    lines = [(number, line) for number, line in lines if line]
    if not lines:
        raise MalformedInputError("Input contains no rows")

    first_line = lines[0][1].split(delimiter)
    if has_header:
        header = tuple(label.strip() for label in first_line)
        body = lines[1:]
    else:
        header = tuple(f"Column {i}" for i in range(1, len(first_line) + 1))
        body = lines

    rows: list[tuple[Cell, ...]] = []
    for number, line in body:
        tokens = line.split(delimiter)
        if len(tokens) != len(header):
            raise MalformedInputError(
                f"Line {number} has {len(tokens)} fields, expected {len(header)} (header width)",
            )
        rows.append(tuple(parse_cell(token) for token in tokens))

    logger.debug("Parsed table with %d columns and %d data rows", len(header), len(rows))
    return Table(header=header, rows=tuple(rows))


def read_table(
    path: str | Path,
    *,
    delimiter: str = DEFAULT_ENGINE_CFG.delimiter,
    has_header: bool = DEFAULT_ENGINE_CFG.has_header,
) -> Table:
    """Read a UTF-8 file and parse it with :func:`parse_table`."""
    path = Path(path)
    logger.info("Loading table from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(f"{path} is not valid UTF-8 text: {exc.reason} at byte {exc.start}") from exc
    return parse_table(text, delimiter=delimiter, has_header=has_header)


def to_delimited_text(table: Table, *, delimiter: str = DEFAULT_ENGINE_CFG.delimiter) -> str:
    """Serialize a table back to delimited text (header line first, no validation)."""
    lines = [delimiter.join(table.header)]
    lines.extend(delimiter.join(str(cell) for cell in row) for row in table.rows)
    return "\n".join(lines)


def write_table(path: str | Path, table: Table, *, delimiter: str = DEFAULT_ENGINE_CFG.delimiter) -> Path:
    """Export a table to ``path`` as UTF-8 delimited text."""
    path = Path(path)
    path.write_text(to_delimited_text(table, delimiter=delimiter) + "\n", encoding="utf-8")
    logger.info("Exported %d rows to %s", table.n_rows, path)
    return path


__all__ = ["parse_table", "read_table", "to_delimited_text", "write_table"]
