"""Codificação de Message no corpo JSON do endpoint messages:send.

A ordem dos builders define a ordem dos campos no JSON; com separadores
fixos, a mesma Message produz sempre os mesmos bytes.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from fcm_push.payload_builders.notification import (
    DataPayloadBuilder,
    NotificationPayloadBuilder,
)
from fcm_push.payload_builders.platforms import (
    AndroidPayloadBuilder,
    ApnsPayloadBuilder,
    FcmOptionsPayloadBuilder,
    WebpushPayloadBuilder,
)
from fcm_push.payload_builders.target import TargetPayloadBuilder
from fcm_push.utils.errors import PayloadTooLargeError

if TYPE_CHECKING:
    from fcm_push.domain.message import Message
    from fcm_push.payload_builders.base import PayloadBuilder

_BUILDERS: tuple[PayloadBuilder, ...] = (
    TargetPayloadBuilder(),
    NotificationPayloadBuilder(),
    DataPayloadBuilder(),
    AndroidPayloadBuilder(),
    ApnsPayloadBuilder(),
    WebpushPayloadBuilder(),
    FcmOptionsPayloadBuilder(),
)


def build_message_payload(message: Message) -> dict[str, Any]:
    """Constrói o corpo semântico da requisição.

    Args:
        message: Mensagem do chamador

    Returns:
        {"message": {...}} e, em dry-run, "validate_only": true

    Raises:
        EncodeError: Se a mensagem viola o contrato da API
    """
    body: dict[str, Any] = {}
    for builder in _BUILDERS:
        body.update(builder.build(message))

    payload: dict[str, Any] = {"message": body}
    if message.dry_run:
        payload["validate_only"] = True
    return payload


class MessageEncoder:
    """Converte Message em bytes prontos para o POST.

    Args:
        max_body_bytes: Limite local do corpo; None desativa a checagem.
    """

    def __init__(self, max_body_bytes: int | None = None) -> None:
        self._max_body_bytes = max_body_bytes

    def encode(self, message: Message) -> bytes:
        """Codifica a mensagem de forma determinística.

        Raises:
            EncodeError: Destino ambíguo, chave duplicada, campo inválido
            PayloadTooLargeError: Se o corpo exceder max_body_bytes
        """
        payload = build_message_payload(message)
        body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        if self._max_body_bytes and len(body) > self._max_body_bytes:
            raise PayloadTooLargeError(len(body), self._max_body_bytes)
        return body


def encode(message: Message) -> bytes:
    """Atalho para MessageEncoder().encode(message)."""
    return MessageEncoder().encode(message)
