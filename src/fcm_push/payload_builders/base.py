"""Contrato e helpers comuns dos builders de payload FCM."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Protocol

from fcm_push.utils.errors import DuplicateKeyError, InvalidFieldError

if TYPE_CHECKING:
    from fcm_push.domain.message import Message, Pairs


class PayloadBuilder(Protocol):
    """Builder de uma seção do objeto `message` da API."""

    def build(self, message: Message) -> dict[str, Any]: ...


def drop_unset(fields: dict[str, Any]) -> dict[str, Any]:
    """Remove campos None, preservando a ordem dos demais."""
    return {key: value for key, value in fields.items() if value is not None}


def string_map(field: str, pairs: Pairs | None, *, case_insensitive: bool = False) -> dict[str, str]:
    """Converte pares em dict de strings, rejeitando chaves repetidas.

    Args:
        field: Nome do campo (para a mensagem de erro)
        pairs: Pares na ordem informada pelo chamador
        case_insensitive: Compara chaves sem diferenciar caixa (headers HTTP)

    Raises:
        DuplicateKeyError: Se uma chave aparece mais de uma vez
        InvalidFieldError: Se chave ou valor não for string
    """
    result: dict[str, str] = {}
    seen: set[str] = set()
    for key, value in pairs or ():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidFieldError(f"{field} exige chaves e valores string (chave {key!r})")
        marker = key.lower() if case_insensitive else key
        if marker in seen:
            raise DuplicateKeyError(field, key)
        seen.add(marker)
        result[key] = value
    return result


def format_duration(field: str, seconds: float) -> str:
    """Formata duração no padrão protobuf JSON ("3600s", "1.5s").

    Raises:
        InvalidFieldError: Se a duração for negativa, NaN ou infinita
    """
    if not math.isfinite(seconds):
        raise InvalidFieldError(f"{field} precisa ser um número finito")
    if seconds < 0:
        raise InvalidFieldError(f"{field} não pode ser negativo")
    if float(seconds).is_integer():
        return f"{int(seconds)}s"
    # Abaixo de 1ns a fração some e sobra só o ponto.
    return f"{seconds:.9f}".rstrip("0").rstrip(".") + "s"
