"""Data module: typed cells, tables, parsing and the dataset wrapper."""

from .cells import MISSING, Cell, Missing, Number, Text, parse_cell
from .dataset import TabularDataset
from .parser import parse_table, read_table, to_delimited_text, write_table
from .table import Column, ColumnResolver, Table


__all__ = [
    "MISSING",
    "Cell",
    "Column",
    "ColumnResolver",
    "Missing",
    "Number",
    "TabularDataset",
    "Table",
    "Text",
    "parse_cell",
    "parse_table",
    "read_table",
    "to_delimited_text",
    "write_table",
]
