"""fcm_push - cliente assíncrono de push notifications via FCM HTTP v1."""

from fcm_push.auth import Credentials, TokenCache, load_credentials_from_env
from fcm_push.client import FcmClient, create_fcm_client
from fcm_push.domain import (
    AndroidConfig,
    AndroidNotification,
    AndroidPriority,
    ApnsConfig,
    BatchOutcome,
    FailureKind,
    FcmOptions,
    Message,
    MulticastMessage,
    Notification,
    SendFailure,
    SendOutcome,
    WebpushConfig,
    WebpushUrgency,
)
from fcm_push.utils.errors import (
    AuthError,
    EncodeError,
    FcmPushError,
    TransportError,
)

__all__ = [
    "AndroidConfig",
    "AndroidNotification",
    "AndroidPriority",
    "ApnsConfig",
    "AuthError",
    "BatchOutcome",
    "Credentials",
    "EncodeError",
    "FailureKind",
    "FcmClient",
    "FcmOptions",
    "FcmPushError",
    "Message",
    "MulticastMessage",
    "Notification",
    "SendFailure",
    "SendOutcome",
    "TokenCache",
    "TransportError",
    "WebpushConfig",
    "WebpushUrgency",
    "create_fcm_client",
    "load_credentials_from_env",
]
