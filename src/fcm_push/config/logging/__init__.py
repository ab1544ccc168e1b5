"""Logging estruturado JSON do cliente FCM.

Uso:
    from fcm_push.config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="minha_api")
    logger = get_logger(__name__)

Campos obrigatórios em todo log: correlation_id, service, level, logger,
message, asctime. Bearer tokens e chaves privadas são removidos.
"""

from fcm_push.config.logging.config import configure_logging, get_logger
from fcm_push.config.logging.filters import (
    CorrelationIdFilter,
    SecretRedactionFilter,
    redact_secrets,
)
from fcm_push.config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    # Filters
    "CorrelationIdFilter",
    "SecretRedactionFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
    "redact_secrets",
]
