"""Observabilidade: correlation_id e métricas via logs estruturados."""

from fcm_push.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from fcm_push.observability.metrics import (
    record_batch_result,
    record_latency,
    record_send_attempt,
    record_token_refresh,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "record_batch_result",
    "record_latency",
    "record_send_attempt",
    "record_token_refresh",
    "reset_correlation_id",
    "set_correlation_id",
]
