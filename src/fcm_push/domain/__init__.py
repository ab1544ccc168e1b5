"""Modelos de domínio: mensagens e resultados de envio."""

from fcm_push.domain.message import (
    AndroidConfig,
    AndroidNotification,
    AndroidPriority,
    ApnsConfig,
    FcmOptions,
    Message,
    MulticastMessage,
    Notification,
    WebpushConfig,
    WebpushUrgency,
)
from fcm_push.domain.outcome import BatchOutcome, FailureKind, SendFailure, SendOutcome

__all__ = [
    "AndroidConfig",
    "AndroidNotification",
    "AndroidPriority",
    "ApnsConfig",
    "BatchOutcome",
    "FailureKind",
    "FcmOptions",
    "Message",
    "MulticastMessage",
    "Notification",
    "SendFailure",
    "SendOutcome",
    "WebpushConfig",
    "WebpushUrgency",
]
