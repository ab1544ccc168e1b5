"""Métricas do cliente FCM via structured logging.

As métricas saem como logs estruturados (`metric_type` no extra) e podem
ser agregadas depois por BigQuery, Cloud Logging, etc.

Métricas suportadas:
- Latência de tentativas HTTP e trocas de token
- Resultado de cada tentativa de envio (status, retry)
- Renovações de token (motivo, sucesso)
- Resultado agregado de lotes
"""

from __future__ import annotations

import logging

from fcm_push.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "fcm_http_client", "token_cache")
        operation: Nome da operação (ex: "send_attempt", "token_exchange")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (padrão: o do contexto)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_send_attempt(
    attempt: int,
    status_code: int | None,
    outcome: str,
) -> None:
    """Registra uma tentativa HTTP de envio.

    Args:
        attempt: Número da tentativa (1-based)
        status_code: Status HTTP ou None em falha de rede/timeout
        outcome: succeeded | retry | refresh_token | failed
    """
    logger.info(
        "metric_send_attempt",
        extra={
            "metric_type": "send_attempt",
            "attempt": attempt,
            "status_code": status_code,
            "outcome": outcome,
            "correlation_id": get_correlation_id(),
        },
    )


def record_token_refresh(reason: str, success: bool) -> None:
    """Registra uma troca de token no token endpoint.

    Args:
        reason: absent | expiring | forced
        success: True se um token novo foi obtido
    """
    logger.info(
        "metric_token_refresh",
        extra={
            "metric_type": "token_refresh",
            "reason": reason,
            "success": success,
            "correlation_id": get_correlation_id(),
        },
    )


def record_batch_result(total: int, succeeded: int, failed: int) -> None:
    """Registra o resultado agregado de um lote."""
    logger.info(
        "metric_batch_result",
        extra={
            "metric_type": "batch_result",
            "total": total,
            "succeeded": succeeded,
            "failed": failed,
            "correlation_id": get_correlation_id(),
        },
    )
