"""Protocolo de codificação de mensagens."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from fcm_push.domain.message import Message


class MessageEncoderProtocol(Protocol):
    """Contrato mínimo para converter Message em corpo HTTP."""

    def encode(self, message: Message) -> bytes: ...
