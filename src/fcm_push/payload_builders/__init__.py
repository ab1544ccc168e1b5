"""Builders de payload para a API FCM HTTP v1.

Um builder por seção do objeto `message`; encoder.py compõe todos na
ordem fixa do corpo da requisição.
"""

from fcm_push.payload_builders.base import PayloadBuilder
from fcm_push.payload_builders.encoder import (
    MessageEncoder,
    build_message_payload,
    encode,
)

__all__ = [
    "MessageEncoder",
    "PayloadBuilder",
    "build_message_payload",
    "encode",
]
