"""Structured failures raised by the tabular analytics engine.

Every data or parameter problem derives from :class:`TabularError`, which itself is a
``ValueError`` so callers that only catch ``ValueError`` keep working.
"""

from collections.abc import Sequence


class TabularError(ValueError):
    """Base class for all engine errors."""


class MalformedInputError(TabularError):
    """Raised when raw text cannot be turned into a rectangular table."""


class UnknownColumnError(TabularError):
    """Raised when a column identifier matches neither a label nor a 1-based index.

    Attributes:
        identifier: The identifier supplied by the caller.
        valid_labels: Header labels that would have been accepted.
    """

    def __init__(self, identifier: object, valid_labels: Sequence[str]) -> None:
        self.identifier = identifier
        self.valid_labels = tuple(valid_labels)
        super().__init__(
            f"Unknown column {identifier!r}. Use a label or a 1-based index; "
            f"valid labels: {', '.join(self.valid_labels) or '<none>'}",
        )


class InsufficientDataError(TabularError):
    """Raised when too few numeric values remain for the requested statistic."""


class DegenerateInputError(TabularError):
    """Raised when a ratio would divide by zero variance."""


class DegenerateColumnError(DegenerateInputError):
    """Raised when a column has zero range where a rescaling needs one.

    Attributes:
        column: Label of the offending column.
    """

    def __init__(self, column: str, message: str | None = None) -> None:
        self.column = column
        super().__init__(message or f"Column '{column}' has zero range (min == max)")


class DomainError(TabularError):
    """Raised when a transform is applied outside its mathematical domain.

    Attributes:
        column: Label of the transformed column.
        row: 1-based data row holding the offending value.
        value: The offending value.
    """

    def __init__(self, column: str, row: int, value: float, transform: str) -> None:
        self.column = column
        self.row = row
        self.value = value
        self.transform = transform
        super().__init__(f"Cannot apply {transform} to {value!r} in column '{column}' (row {row})")


class InvalidParameterError(TabularError):
    """Raised for out-of-range parameters such as ``k`` or the row limit."""


class DecisionCancelledError(Exception):
    """Raised by a decision provider when the user dismisses a request.

    This aborts the single operation that asked; the loaded table is left untouched.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Decision '{kind}' was cancelled")


__all__ = [
    "DecisionCancelledError",
    "DegenerateColumnError",
    "DegenerateInputError",
    "DomainError",
    "InsufficientDataError",
    "InvalidParameterError",
    "MalformedInputError",
    "TabularError",
    "UnknownColumnError",
]
