"""Builder do destino (token, topic ou condition)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from fcm_push.utils.errors import AmbiguousTargetError, InvalidFieldError

if TYPE_CHECKING:
    from fcm_push.domain.message import Message

_TOPIC_PREFIX = "/topics/"
_TOPIC_PATTERN = re.compile(r"[a-zA-Z0-9\-_.~%]+")


class TargetPayloadBuilder:
    """Valida que existe exatamente um destino e o serializa."""

    def build(self, message: Message) -> dict[str, Any]:
        """Constrói a chave de destino.

        Raises:
            AmbiguousTargetError: Se zero ou mais de um destino definido
            InvalidFieldError: Se o nome do tópico for inválido
        """
        targets = message.targets
        if len(targets) != 1:
            raise AmbiguousTargetError(targets)

        if message.token:
            return {"token": message.token}
        if message.topic:
            return {"topic": normalize_topic(message.topic)}
        return {"condition": message.condition}


def normalize_topic(topic: str) -> str:
    """Remove o prefixo /topics/ e valida o nome."""
    name = topic[len(_TOPIC_PREFIX):] if topic.startswith(_TOPIC_PREFIX) else topic
    if not _TOPIC_PATTERN.fullmatch(name):
        raise InvalidFieldError(f"Nome de tópico inválido: {topic!r}")
    return name
