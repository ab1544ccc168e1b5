"""Resultados tipados de envio.

SendOutcome representa um destino; BatchOutcome preserva a ordem e o
índice da entrada, e falha parcial é um resultado normal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class FailureKind(str, Enum):
    """Causas semânticas de falha por destino."""

    UNREGISTERED = "unregistered"
    INVALID_ARGUMENT = "invalid_argument"
    MISMATCHED_SENDER_IDENTITY = "mismatched_sender_identity"
    MESSAGE_TOO_BIG = "message_too_big"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"
    THIRD_PARTY_AUTH = "third_party_auth"
    UNAUTHORIZED = "unauthorized"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class SendFailure:
    """Falha estruturada de um envio.

    Attributes:
        kind: Causa semântica (UNKNOWN quando o código não é conhecido)
        code: Código bruto devolvido pelo serviço, sempre preservado
        message: Mensagem legível do serviço (sem PII)
        status_code: Status HTTP, quando houve resposta
        retry_after_seconds: Dica de espera enviada pelo serviço
    """

    kind: FailureKind
    code: str
    message: str = ""
    status_code: int | None = None
    retry_after_seconds: float | None = None

    @property
    def is_unknown(self) -> bool:
        return self.kind is FailureKind.UNKNOWN


@dataclass(frozen=True, slots=True)
class SendOutcome:
    """Resultado de um envio: message_id em sucesso, failure em falha."""

    message_id: str | None = None
    failure: SendFailure | None = None

    def __post_init__(self) -> None:
        if (self.message_id is None) == (self.failure is None):
            raise ValueError("SendOutcome exige message_id ou failure, nunca ambos")

    @classmethod
    def succeeded(cls, message_id: str) -> SendOutcome:
        return cls(message_id=message_id)

    @classmethod
    def failed(cls, failure: SendFailure) -> SendOutcome:
        return cls(failure=failure)

    @property
    def success(self) -> bool:
        return self.failure is None


@dataclass(frozen=True, slots=True)
class BatchOutcome:
    """Resultados por destino, alinhados índice a índice com a entrada."""

    outcomes: tuple[SendOutcome, ...]

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[SendOutcome]:
        return iter(self.outcomes)

    def __getitem__(self, index: int) -> SendOutcome:
        return self.outcomes[index]

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failure_count(self) -> int:
        return len(self.outcomes) - self.success_count

    def failed_indices(self) -> list[int]:
        """Índices (da entrada) dos destinos que falharam."""
        return [i for i, outcome in enumerate(self.outcomes) if not outcome.success]
