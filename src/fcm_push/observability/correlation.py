"""correlation_id por contexto async.

Cada envio roda sob um correlation_id (o do chamador, se houver; senão um
novo), de modo que todas as tentativas e a renovação de token de um mesmo
envio aparecem agrupadas nos logs.

Uso:
    token = set_correlation_id(request_id)
    try:
        await client.send(message)
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("fcm_correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ou string vazia."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


@contextmanager
def correlation_scope() -> Iterator[str]:
    """Garante um correlation_id durante o bloco, reaproveitando o existente."""
    current = get_correlation_id()
    if current:
        yield current
        return
    token = set_correlation_id()
    try:
        yield get_correlation_id()
    finally:
        reset_correlation_id(token)
