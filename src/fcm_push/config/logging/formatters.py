"""Formatter JSON dos logs do cliente FCM.

Todo record sai com os campos de REQUIRED_LOG_FIELDS, na ordem declarada,
mais os campos passados via `extra`.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem fixa para saída estável entre execuções
REQUIRED_LOG_FIELDS: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-19 10:30:00,123",
            "level": "WARNING",
            "logger": "fcm_push.connectors.fcm_http_client",
            "message": "fcm_send_retry_scheduled",
            "correlation_id": "abc-123",
            "service": "fcm_push",
            "attempt": 2,
            "delay_seconds": 2.0
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
