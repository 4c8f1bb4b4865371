"""
Span Templates

Pre-defined operations and attributes for common Ryzanstein spans.
Each helper returns ``(SpanOperation, [(key, value), ...])`` for use with
``TelemetryCore.start_span_from_template``.
"""

from typing import List, Tuple

from .spans import SpanOperation


Attributes = List[Tuple[str, str]]


def inference(model: str, max_tokens: int) -> Tuple[SpanOperation, Attributes]:
    """Inference request span with model and token attributes."""
    return SpanOperation.INFERENCE, [
        ("model.name", model),
        ("model.max_tokens", str(max_tokens)),
    ]


def model_load(model: str, size_mb: float) -> Tuple[SpanOperation, Attributes]:
    """Model loading span."""
    return SpanOperation.MODEL_LOAD, [
        ("model.name", model),
        ("model.size_mb", f"{size_mb:.1f}"),
    ]


def kv_cache(operation: str, layer: int) -> Tuple[SpanOperation, Attributes]:
    """KV cache operation span."""
    return SpanOperation.KV_CACHE_OP, [
        ("kv.operation", operation),
        ("kv.layer", str(layer)),
    ]


def speculative_draft(draft_tokens: int) -> Tuple[SpanOperation, Attributes]:
    """Speculative decoding draft span."""
    return SpanOperation.SPECULATIVE_DRAFT, [
        ("speculative.draft_tokens", str(draft_tokens)),
    ]


def speculative_verify(accepted: int, total: int) -> Tuple[SpanOperation, Attributes]:
    """
    Speculative decoding verification span.

    The acceptance rate is rendered with two decimals; a zero total
    yields "0.00".
    """
    rate = accepted / total if total else 0.0
    return SpanOperation.SPECULATIVE_VERIFY, [
        ("speculative.accepted", str(accepted)),
        ("speculative.total", str(total)),
        ("speculative.acceptance_rate", f"{rate:.2f}"),
    ]


def agent_execute(agent_id: str, capability: str) -> Tuple[SpanOperation, Attributes]:
    """Agent execution span."""
    return SpanOperation.AGENT_EXECUTE, [
        ("agent.id", agent_id),
        ("agent.capability", capability),
    ]
