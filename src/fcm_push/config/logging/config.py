"""Configuração centralizada de logging.

Uso:
    from fcm_push.config.logging import configure_logging, get_logger

    # Na inicialização da aplicação que usa o cliente
    configure_logging(level="INFO", service_name="minha_api")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("fcm_send_succeeded", extra={"attempts": 1})

A biblioteca em si nunca chama configure_logging: apenas emite records.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fcm_push.config.logging.filters import CorrelationIdFilter, SecretRedactionFilter
from fcm_push.config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "fcm_push"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado no root logger.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função opcional que retorna o correlation_id
            do contexto atual. Padrão: fcm_push.observability.get_correlation_id.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    if correlation_id_getter is None:
        from fcm_push.observability.correlation import get_correlation_id

        correlation_id_getter = get_correlation_id

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(SecretRedactionFilter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado (geralmente __name__)."""
    return logging.getLogger(name)
