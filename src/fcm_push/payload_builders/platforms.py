"""Builders das sobrescritas por plataforma (android, apns, webpush)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fcm_push.payload_builders.base import drop_unset, format_duration, string_map
from fcm_push.utils.errors import DuplicateKeyError, InvalidFieldError

if TYPE_CHECKING:
    from fcm_push.domain.message import AndroidNotification, Message


def _merge_headers(field: str, explicit: dict[str, str], raw: dict[str, str]) -> dict[str, str]:
    lowered = {key.lower() for key in raw}
    for key in explicit:
        if key.lower() in lowered:
            raise DuplicateKeyError(field, key)
    return {**explicit, **raw}


def _android_notification(notification: AndroidNotification | None) -> dict[str, Any] | None:
    if notification is None:
        return None
    fields = drop_unset(
        {
            "title": notification.title,
            "body": notification.body,
            "icon": notification.icon,
            "color": notification.color,
            "sound": notification.sound,
            "tag": notification.tag,
            "click_action": notification.click_action,
            "channel_id": notification.channel_id,
            "image": notification.image,
        }
    )
    return fields or None


class AndroidPayloadBuilder:
    """Builder de `android` (priority, ttl, collapse_key, ...)."""

    def build(self, message: Message) -> dict[str, Any]:
        config = message.android
        if config is None:
            return {}
        ttl = None
        if config.ttl_seconds is not None:
            ttl = format_duration("android.ttl", config.ttl_seconds)
        fields = drop_unset(
            {
                "collapse_key": config.collapse_key,
                "priority": config.priority.value if config.priority else None,
                "ttl": ttl,
                "restricted_package_name": config.restricted_package_name,
                "data": string_map("android.data", config.data) or None,
                "notification": _android_notification(config.notification),
                "direct_boot_ok": config.direct_boot_ok,
            }
        )
        return {"android": fields} if fields else {}


class ApnsPayloadBuilder:
    """Builder de `apns`: campos explícitos viram headers apns-*."""

    def build(self, message: Message) -> dict[str, Any]:
        config = message.apns
        if config is None:
            return {}
        explicit = drop_unset(
            {
                "apns-priority": str(config.priority) if config.priority is not None else None,
                "apns-collapse-id": config.collapse_id,
                "apns-expiration": (
                    str(config.expiration) if config.expiration is not None else None
                ),
            }
        )
        raw = string_map("apns.headers", config.headers, case_insensitive=True)
        headers = _merge_headers("apns.headers", explicit, raw)
        fields = drop_unset(
            {
                "headers": headers or None,
                "payload": dict(config.payload) if config.payload else None,
            }
        )
        return {"apns": fields} if fields else {}


class WebpushPayloadBuilder:
    """Builder de `webpush`: TTL e Urgency viram headers."""

    def build(self, message: Message) -> dict[str, Any]:
        config = message.webpush
        if config is None:
            return {}
        if config.ttl_seconds is not None and config.ttl_seconds < 0:
            raise InvalidFieldError("webpush.ttl não pode ser negativo")
        explicit = drop_unset(
            {
                "TTL": str(config.ttl_seconds) if config.ttl_seconds is not None else None,
                "Urgency": config.urgency.value if config.urgency else None,
            }
        )
        raw = string_map("webpush.headers", config.headers, case_insensitive=True)
        headers = _merge_headers("webpush.headers", explicit, raw)
        fields = drop_unset(
            {
                "headers": headers or None,
                "data": string_map("webpush.data", config.data) or None,
                "notification": dict(config.notification) if config.notification else None,
                "fcm_options": {"link": config.link} if config.link else None,
            }
        )
        return {"webpush": fields} if fields else {}


class FcmOptionsPayloadBuilder:
    """Builder de `fcm_options` (analytics_label)."""

    def build(self, message: Message) -> dict[str, Any]:
        options = message.fcm_options
        if options is None or not options.analytics_label:
            return {}
        return {"fcm_options": {"analytics_label": options.analytics_label}}
