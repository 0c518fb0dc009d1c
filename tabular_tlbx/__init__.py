"""Tabular analytics engine: typed tables plus statistics and ML operations on them."""

from .config import DEFAULT_ENGINE_CFG, EngineConfig
from .data import Column, ColumnResolver, TabularDataset, Table, parse_table, read_table, to_delimited_text
from .decisions import DecisionKind, DecisionProvider, DecisionRequest, StaticDecisionProvider
from .errors import (
    DecisionCancelledError,
    DegenerateColumnError,
    DegenerateInputError,
    DomainError,
    InsufficientDataError,
    InvalidParameterError,
    MalformedInputError,
    TabularError,
    UnknownColumnError,
)
from .operations import Operation, OperationOutcome, run_operation
from .session import AnalysisSession


__all__ = [
    "DEFAULT_ENGINE_CFG",
    "AnalysisSession",
    "Column",
    "ColumnResolver",
    "DecisionCancelledError",
    "DecisionKind",
    "DecisionProvider",
    "DecisionRequest",
    "DegenerateColumnError",
    "DegenerateInputError",
    "DomainError",
    "EngineConfig",
    "InsufficientDataError",
    "InvalidParameterError",
    "MalformedInputError",
    "Operation",
    "OperationOutcome",
    "StaticDecisionProvider",
    "TabularDataset",
    "TabularError",
    "Table",
    "UnknownColumnError",
    "parse_table",
    "read_table",
    "run_operation",
    "to_delimited_text",
]
