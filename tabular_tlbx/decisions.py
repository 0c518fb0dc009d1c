"""Awaitable user decisions requested by operations (policy, columns, k, transform).

The engine never prompts by itself. Operations describe what they need as a
:class:`DecisionRequest` and await a :class:`DecisionProvider` supplied by the host
application. A provider signals that the user dismissed the request by raising
:class:`~tabular_tlbx.errors.DecisionCancelledError`.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, runtime_checkable

from .errors import DecisionCancelledError


class DecisionKind(StrEnum):
    """What an operation is asking the user for."""

    CLEANING_POLICY = "cleaning_policy"
    X_COLUMN = "x_column"
    Y_COLUMN = "y_column"
    COLUMN = "column"
    TRANSFORM_KIND = "transform_kind"
    CLUSTER_COUNT = "cluster_count"


@dataclass(frozen=True)
class DecisionRequest:
    """A single question for the host.

    Attributes:
        kind: Category of the decision.
        prompt: Human-readable question.
        options: Suggested answers (e.g. policies or column labels); empty for free input.
    """

    kind: DecisionKind
    prompt: str
    options: tuple[str, ...] = ()


@runtime_checkable
class DecisionProvider(Protocol):
    """Capability that answers decision requests, possibly after waiting on a human."""

    async def request_decision(self, request: DecisionRequest) -> str:
        """Return the raw answer or raise ``DecisionCancelledError``."""
        ...


class StaticDecisionProvider:
    """Answer requests from a fixed mapping, falling back to another provider.

    Unanswered requests without a fallback are treated as cancelled. Every request is recorded
    in :attr:`requests`, which makes the provider convenient in tests.
    """

    def __init__(
        self,
        answers: Mapping[DecisionKind | str, object] | None = None,
        fallback: DecisionProvider | None = None,
    ) -> None:
        self._answers = {DecisionKind(kind): value for kind, value in (answers or {}).items()}
        self._fallback = fallback
        self.requests: list[DecisionRequest] = []

    async def request_decision(self, request: DecisionRequest) -> str:
        self.requests.append(request)
        if request.kind in self._answers:
            return str(self._answers[request.kind])
        if self._fallback is not None:
            return await self._fallback.request_decision(request)
        raise DecisionCancelledError(request.kind)


__all__ = ["DecisionKind", "DecisionProvider", "DecisionRequest", "StaticDecisionProvider"]
