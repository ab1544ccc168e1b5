"""Exceções compartilhadas do cliente FCM."""

from .exceptions import (
    AmbiguousTargetError,
    AuthError,
    AuthNetworkError,
    ClockSkewError,
    CredentialInvalidError,
    DuplicateKeyError,
    EncodeError,
    FcmPushError,
    InvalidFieldError,
    InvalidRequestError,
    MalformedResponseError,
    PayloadTooLargeError,
    RetryExhaustedError,
    TransportError,
    UnauthorizedError,
)

__all__ = [
    "AmbiguousTargetError",
    "AuthError",
    "AuthNetworkError",
    "ClockSkewError",
    "CredentialInvalidError",
    "DuplicateKeyError",
    "EncodeError",
    "FcmPushError",
    "InvalidFieldError",
    "InvalidRequestError",
    "MalformedResponseError",
    "PayloadTooLargeError",
    "RetryExhaustedError",
    "TransportError",
    "UnauthorizedError",
]
