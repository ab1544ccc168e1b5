"""Helpers de logging para a API FCM (sem PII, sem tokens)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fcm_push.domain.outcome import SendFailure

logger = logging.getLogger(__name__)


def log_send_failure(failure: SendFailure, attempt: int, reason: str) -> None:
    """Loga falha final de envio sem expor o destino."""
    logger.warning(
        "fcm_send_failed",
        extra={
            "attempt": attempt,
            "reason": reason,
            "error_code": failure.code,
            "error_kind": failure.kind.value,
            "status_code": failure.status_code,
        },
    )


def log_retry_scheduled(attempt: int, status_code: int | None, delay_seconds: float) -> None:
    """Loga a espera antes da próxima tentativa."""
    logger.info(
        "fcm_send_retry_scheduled",
        extra={
            "attempt": attempt,
            "status_code": status_code,
            "delay_seconds": round(delay_seconds, 3),
        },
    )


def log_attempt_timeout(attempt: int, timeout_seconds: float) -> None:
    """Timeout de uma tentativa; conta como falha transitória."""
    logger.warning(
        "fcm_send_attempt_timeout",
        extra={"attempt": attempt, "timeout_seconds": timeout_seconds},
    )


def log_success(attempt: int, status_code: int) -> None:
    logger.debug(
        "fcm_send_succeeded",
        extra={"attempt": attempt, "status_code": status_code},
    )
