"""
Metric Names

Well-known metric names for Ryzanstein observability.
All names follow the ``ryzanstein.<category>.<detail>`` convention.
"""


class MetricNames:
    """Standard metric names."""

    # Inference metrics
    INFERENCE_REQUESTS = "ryzanstein.inference.requests"
    INFERENCE_TOKENS = "ryzanstein.inference.tokens"
    INFERENCE_LATENCY_MS = "ryzanstein.inference.latency_ms"
    INFERENCE_ERRORS = "ryzanstein.inference.errors"

    # Model metrics
    MODEL_LOAD_TIME_MS = "ryzanstein.model.load_time_ms"
    MODEL_MEMORY_MB = "ryzanstein.model.memory_mb"

    # KV cache metrics
    KV_CACHE_HIT_RATE = "ryzanstein.kv_cache.hit_rate"
    KV_CACHE_SIZE_MB = "ryzanstein.kv_cache.size_mb"
    KV_CACHE_EVICTIONS = "ryzanstein.kv_cache.evictions"

    # Speculative decoding metrics
    SPEC_ACCEPTANCE_RATE = "ryzanstein.speculative.acceptance_rate"
    SPEC_DRAFT_TOKENS = "ryzanstein.speculative.draft_tokens"

    # Agent metrics
    AGENT_EXECUTIONS = "ryzanstein.agent.executions"
    AGENT_LATENCY_MS = "ryzanstein.agent.latency_ms"

    # System metrics
    GPU_UTILIZATION = "ryzanstein.system.gpu_utilization"
    MEMORY_USAGE_MB = "ryzanstein.system.memory_usage_mb"
    THROUGHPUT_TPS = "ryzanstein.system.throughput_tps"

    # Span bookkeeping
    SPANS_TOTAL = "spans.total"
    SPANS_ERRORS = "spans.errors"

    @classmethod
    def all(cls) -> list:
        """All ``ryzanstein.*`` metric names declared on this class."""
        return [
            value
            for key, value in vars(cls).items()
            if key.isupper() and value.startswith("ryzanstein.")
        ]

    @staticmethod
    def span_duration(operation: object) -> str:
        """Histogram name for a span operation's duration in milliseconds."""
        return f"span.{operation}.duration_ms"
