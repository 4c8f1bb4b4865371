"""
Span Records

Immutable finished-span records and the closed set of span operations
and statuses used across the Ryzanstein runtime.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class OperationKind(str, Enum):
    """Well-known span operations, plus an open custom variant."""

    MODEL_LOAD = "model.load"
    INFERENCE = "inference"
    TOKEN_GENERATION = "token.generation"
    KV_CACHE_OP = "kv_cache.op"
    SPECULATIVE_DRAFT = "speculative.draft"
    SPECULATIVE_VERIFY = "speculative.verify"
    EMBEDDING_ENCODE = "embedding.encode"
    AGENT_EXECUTE = "agent.execute"
    VAULT_STORE = "vault.store"
    VAULT_RETRIEVE = "vault.retrieve"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SpanOperation:
    """
    Operation kind of a span.

    Well-known operations are available as class attributes
    (``SpanOperation.INFERENCE``); anything else is built with
    ``SpanOperation.custom("label")`` and renders as ``custom.<label>``.
    """

    kind: OperationKind
    label: Optional[str] = None

    def __post_init__(self):
        if self.kind is OperationKind.CUSTOM:
            if self.label is None:
                raise ValueError("custom operations require a label")
        elif self.label is not None:
            raise ValueError(f"operation {self.kind.value!r} does not take a label")

    @classmethod
    def custom(cls, label: str) -> "SpanOperation":
        return cls(OperationKind.CUSTOM, label)

    def __str__(self) -> str:
        if self.kind is OperationKind.CUSTOM:
            return f"custom.{self.label}"
        return self.kind.value


SpanOperation.MODEL_LOAD = SpanOperation(OperationKind.MODEL_LOAD)
SpanOperation.INFERENCE = SpanOperation(OperationKind.INFERENCE)
SpanOperation.TOKEN_GENERATION = SpanOperation(OperationKind.TOKEN_GENERATION)
SpanOperation.KV_CACHE_OP = SpanOperation(OperationKind.KV_CACHE_OP)
SpanOperation.SPECULATIVE_DRAFT = SpanOperation(OperationKind.SPECULATIVE_DRAFT)
SpanOperation.SPECULATIVE_VERIFY = SpanOperation(OperationKind.SPECULATIVE_VERIFY)
SpanOperation.EMBEDDING_ENCODE = SpanOperation(OperationKind.EMBEDDING_ENCODE)
SpanOperation.AGENT_EXECUTE = SpanOperation(OperationKind.AGENT_EXECUTE)
SpanOperation.VAULT_STORE = SpanOperation(OperationKind.VAULT_STORE)
SpanOperation.VAULT_RETRIEVE = SpanOperation(OperationKind.VAULT_RETRIEVE)


class StatusKind(str, Enum):
    """Terminal status of a span."""

    OK = "ok"
    UNSET = "unset"
    ERROR = "error"


@dataclass(frozen=True)
class SpanStatus:
    """Span status; errors carry a message."""

    kind: StatusKind
    message: str = ""

    @classmethod
    def error(cls, message: str) -> "SpanStatus":
        return cls(StatusKind.ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.kind is StatusKind.ERROR

    def __str__(self) -> str:
        if self.kind is StatusKind.ERROR:
            return f"error: {self.message}"
        return self.kind.value


SpanStatus.OK = SpanStatus(StatusKind.OK)
SpanStatus.UNSET = SpanStatus(StatusKind.UNSET)


@dataclass(frozen=True)
class SpanRecord:
    """Recorded span information."""

    name: str
    service: str
    operation: SpanOperation
    start_time: float  # Unix timestamp (seconds)
    duration: Optional[float] = None  # Seconds, None until finished
    attributes: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    status: SpanStatus = SpanStatus.UNSET

    @property
    def duration_ms(self) -> Optional[float]:
        """Duration in milliseconds, or None if the span has no duration."""
        if self.duration is None:
            return None
        return self.duration * 1000.0
