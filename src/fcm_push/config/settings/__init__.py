"""Agregador de settings do fcm_push."""

from __future__ import annotations

from fcm_push.config.settings.fcm import (
    FCM_API_BASE_URL,
    FCM_API_VERSION,
    FIREBASE_MESSAGING_SCOPE,
    GOOGLE_TOKEN_URI,
    FcmSettings,
    get_fcm_settings,
)

__all__ = [
    # Constants
    "FCM_API_BASE_URL",
    "FCM_API_VERSION",
    "FIREBASE_MESSAGING_SCOPE",
    "GOOGLE_TOKEN_URI",
    # Settings
    "FcmSettings",
    "get_fcm_settings",
]
