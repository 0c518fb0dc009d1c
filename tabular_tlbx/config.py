"""Shared engine configuration (delimiter, fences, k-means limits)."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import InvalidParameterError


@dataclass(frozen=True)
class EngineConfig:
    """Reusable defaults applied across parsing and analyzers."""

    delimiter: str = ","
    has_header: bool = True
    iqr_threshold: float = 1.5
    kmeans_max_iter: int = 10
    kmeans_tol: float = 0.0
    random_state: int | None = None

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise InvalidParameterError(f"delimiter must be a single character, got {self.delimiter!r}")

    def with_overrides(self, **kwargs: object) -> EngineConfig:
        """Return a copy with the given fields replaced (``None`` values are ignored)."""
        return replace(self, **{key: value for key, value in kwargs.items() if value is not None})


# Default configuration used across the engine
DEFAULT_ENGINE_CFG = EngineConfig()


__all__ = ["DEFAULT_ENGINE_CFG", "EngineConfig"]
