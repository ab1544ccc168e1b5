"""Modelos de mensagem construídos pelo chamador.

Os modelos são imutáveis e não validam o contrato da API: a validação
(destino único, chaves duplicadas, TTL, tópico) acontece na codificação,
em fcm_push.payload_builders, para que todo erro de entrada surja como
EncodeError no momento do envio.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from fcm_push.utils.errors import InvalidFieldError

# Pares (chave, valor) na ordem informada; duplicatas são preservadas
# aqui e rejeitadas pelo encoder.
Pairs = tuple[tuple[str, Any], ...]
PairsInput = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]

MULTICAST_MAX_TOKENS = 500


def _as_pairs(value: PairsInput | None) -> Pairs | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return tuple(value.items())
    return tuple((key, item) for key, item in value)


def _as_readonly(value: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    if value is None:
        return None
    return MappingProxyType(dict(value))


class AndroidPriority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"


class WebpushUrgency(str, Enum):
    VERY_LOW = "very-low"
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class Notification:
    """Notificação básica exibida pelo sistema operacional."""

    title: str | None = None
    body: str | None = None
    image: str | None = None


@dataclass(frozen=True, slots=True)
class AndroidNotification:
    """Campos de notificação específicos de Android."""

    title: str | None = None
    body: str | None = None
    icon: str | None = None
    color: str | None = None
    sound: str | None = None
    tag: str | None = None
    click_action: str | None = None
    channel_id: str | None = None
    image: str | None = None


@dataclass(frozen=True, slots=True)
class AndroidConfig:
    """Sobrescritas para Android.

    Attributes:
        collapse_key: Agrupa mensagens enquanto o dispositivo está offline
        priority: normal | high
        ttl_seconds: Tempo de vida da mensagem (codificado como "Ns")
        restricted_package_name: Pacote que deve receber a mensagem
        data: Dados que substituem Message.data em Android
        notification: Notificação específica de Android
        direct_boot_ok: Entrega antes do desbloqueio do dispositivo
    """

    collapse_key: str | None = None
    priority: AndroidPriority | None = None
    ttl_seconds: float | None = None
    restricted_package_name: str | None = None
    data: Pairs | None = None
    notification: AndroidNotification | None = None
    direct_boot_ok: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _as_pairs(self.data))


@dataclass(frozen=True, slots=True)
class ApnsConfig:
    """Sobrescritas para APNs.

    priority, collapse_id e expiration viram headers apns-*; definir o
    mesmo header também em `headers` é erro de codificação.
    """

    priority: int | None = None
    collapse_id: str | None = None
    expiration: int | None = None
    headers: Pairs | None = None
    payload: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _as_pairs(self.headers))
        object.__setattr__(self, "payload", _as_readonly(self.payload))


@dataclass(frozen=True, slots=True)
class WebpushConfig:
    """Sobrescritas para Web Push (TTL e Urgency viram headers)."""

    ttl_seconds: int | None = None
    urgency: WebpushUrgency | None = None
    headers: Pairs | None = None
    data: Pairs | None = None
    notification: Mapping[str, Any] | None = None
    link: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _as_pairs(self.headers))
        object.__setattr__(self, "data", _as_pairs(self.data))
        object.__setattr__(self, "notification", _as_readonly(self.notification))


@dataclass(frozen=True, slots=True)
class FcmOptions:
    analytics_label: str | None = None


@dataclass(frozen=True, slots=True)
class Message:
    """Mensagem para um único destino.

    Exatamente um entre token, topic e condition deve ser definido.
    `data` aceita mapping ou sequência de pares; pares repetidos são
    rejeitados na codificação em vez de sobrescritos.
    """

    token: str | None = None
    topic: str | None = None
    condition: str | None = None
    notification: Notification | None = None
    data: Pairs | None = None
    android: AndroidConfig | None = None
    apns: ApnsConfig | None = None
    webpush: WebpushConfig | None = None
    fcm_options: FcmOptions | None = None
    dry_run: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _as_pairs(self.data))

    @property
    def targets(self) -> tuple[str, ...]:
        """Nomes dos campos de destino preenchidos."""
        candidates = (("token", self.token), ("topic", self.topic), ("condition", self.condition))
        return tuple(name for name, value in candidates if value)


@dataclass(frozen=True, slots=True)
class MulticastMessage:
    """Mesmo conteúdo enviado a uma lista ordenada de device tokens."""

    tokens: tuple[str, ...]
    notification: Notification | None = None
    data: Pairs | None = None
    android: AndroidConfig | None = None
    apns: ApnsConfig | None = None
    webpush: WebpushConfig | None = None
    fcm_options: FcmOptions | None = None
    dry_run: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "tokens", tuple(self.tokens))
        object.__setattr__(self, "data", _as_pairs(self.data))

    def to_messages(self) -> list[Message]:
        """Expande em uma Message por token, na ordem da entrada.

        Raises:
            InvalidFieldError: Se a lista de tokens for vazia ou exceder 500.
        """
        if not self.tokens:
            raise InvalidFieldError("MulticastMessage.tokens não pode ser vazio")
        if len(self.tokens) > MULTICAST_MAX_TOKENS:
            raise InvalidFieldError(
                f"MulticastMessage aceita no máximo {MULTICAST_MAX_TOKENS} tokens"
            )
        shared = {
            field.name: getattr(self, field.name)
            for field in dataclasses.fields(self)
            if field.name != "tokens"
        }
        return [Message(token=token, **shared) for token in self.tokens]
