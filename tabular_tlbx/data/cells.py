"""Typed table cells: every value is exactly one of Number, Text or Missing."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TypeAlias


# Decimal float literal: optional sign, digits with optional fraction, optional exponent.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True, slots=True)
class Number:
    """A finite IEEE-754 double."""

    value: float

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True, slots=True)
class Text:
    """A non-empty token that is not a number."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Missing:
    """An empty token."""

    def __str__(self) -> str:
        return ""


MISSING = Missing()

Cell: TypeAlias = Number | Text | Missing


def format_number(value: float) -> str:
    """Render a float without a trailing ``.0`` for integral values."""
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def parse_cell(token: str) -> Cell:
    """Classify a raw token.

    The token is trimmed first. An empty token is :data:`MISSING`; a decimal literal that
    parses to a finite double is a :class:`Number`; everything else (including ``nan``,
    ``inf`` and overflowing literals such as ``1e999``) is :class:`Text`.
    """
    stripped = token.strip()
    if not stripped:
        return MISSING
    if _NUMBER_RE.fullmatch(stripped):
        value = float(stripped)
        if math.isfinite(value):
            return Number(value)
    return Text(stripped)


def to_cell(value: object) -> Cell:
    """Wrap a plain Python value (``None``, number or string) as a cell."""
    match value:
        case Number() | Text() | Missing():
            return value
        case None:
            return MISSING
        case bool():
            raise TypeError(f"Cannot convert boolean {value!r} to a cell")
        case int() | float():
            number = float(value)
            if not math.isfinite(number):
                raise TypeError(f"Cannot store non-finite number {value!r} in a cell")
            return Number(number)
        case str():
            return parse_cell(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a cell")


def cell_value(cell: Cell) -> float | str | None:
    """Unwrap a cell into a plain Python value (``None`` for missing)."""
    match cell:
        case Number(value=value):
            return value
        case Text(value=value):
            return value
    return None


__all__ = ["MISSING", "Cell", "Missing", "Number", "Text", "cell_value", "format_number", "parse_cell", "to_cell"]
