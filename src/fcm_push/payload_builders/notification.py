"""Builders de notificação e dados customizados."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fcm_push.payload_builders.base import drop_unset, string_map

if TYPE_CHECKING:
    from fcm_push.domain.message import Message


class NotificationPayloadBuilder:
    """Builder da notificação básica (title/body/image)."""

    def build(self, message: Message) -> dict[str, Any]:
        notification = message.notification
        if notification is None:
            return {}
        fields = drop_unset(
            {
                "title": notification.title,
                "body": notification.body,
                "image": notification.image,
            }
        )
        return {"notification": fields} if fields else {}


class DataPayloadBuilder:
    """Builder do mapa de dados customizados.

    Chaves e valores seguem como strings opacas, sem transformação.
    """

    def build(self, message: Message) -> dict[str, Any]:
        data = string_map("data", message.data)
        return {"data": data} if data else {}
