"""Exceções do cliente FCM.

Hierarquia única com raiz em FcmPushError. Nenhuma mensagem de erro
carrega token de acesso, chave privada ou token de dispositivo.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fcm_push.domain.outcome import SendFailure


class FcmPushError(Exception):
    """Base para todos os erros do cliente."""


# ──────────────────────────────────────────────────────────────────────────────
# Autenticação
# ──────────────────────────────────────────────────────────────────────────────


class AuthError(FcmPushError):
    """Falha ao obter token de acesso."""

    retryable: bool = False


class CredentialInvalidError(AuthError):
    """Credencial rejeitada pelo token endpoint ou mal formada."""


class AuthNetworkError(AuthError):
    """Troca de token não concluiu por falha de transporte."""

    retryable = True


class ClockSkewError(AuthError):
    """Token endpoint devolveu expiração já vencida."""


# ──────────────────────────────────────────────────────────────────────────────
# Codificação de mensagem (erros do chamador)
# ──────────────────────────────────────────────────────────────────────────────


class EncodeError(FcmPushError, ValueError):
    """Mensagem não pode ser convertida em corpo de requisição."""


class AmbiguousTargetError(EncodeError):
    """Zero ou mais de um destino definido (token, topic, condition)."""

    def __init__(self, targets: tuple[str, ...]) -> None:
        if targets:
            detail = f"mais de um destino definido: {', '.join(targets)}"
        else:
            detail = "nenhum destino definido"
        super().__init__(f"Mensagem exige exatamente um destino ({detail})")
        self.targets = targets


class DuplicateKeyError(EncodeError):
    """Chave repetida em mapeamento que não admite sobrescrita."""

    def __init__(self, field: str, key: str) -> None:
        super().__init__(f"Chave duplicada em {field}: {key!r}")
        self.field = field
        self.key = key


class InvalidFieldError(EncodeError):
    """Valor de campo fora do contrato da API."""


class PayloadTooLargeError(EncodeError):
    """Corpo codificado excede o limite local configurado."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Payload com {size} bytes excede limite de {limit} bytes")
        self.size = size
        self.limit = limit


# ──────────────────────────────────────────────────────────────────────────────
# Transporte
# ──────────────────────────────────────────────────────────────────────────────


class TransportError(FcmPushError):
    """Falha no envio HTTP ao endpoint de mensagens."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        failure: SendFailure | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.failure = failure


class InvalidRequestError(TransportError):
    """Requisição rejeitada com 4xx não retentável."""


class UnauthorizedError(TransportError):
    """Endpoint devolveu 401 mesmo após renovação forçada do token."""


class RetryExhaustedError(TransportError):
    """Orçamento de tentativas esgotado; carrega a última falha observada."""

    def __init__(
        self,
        attempts: int,
        last_failure: SendFailure,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            f"Tentativas esgotadas após {attempts} envios (última falha: {last_failure.code})",
            status_code=status_code,
            failure=last_failure,
        )
        self.attempts = attempts
        self.last_failure = last_failure


class MalformedResponseError(TransportError):
    """Resposta 200 sem o campo esperado ou com JSON inválido."""
