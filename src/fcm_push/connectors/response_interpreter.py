"""Response Interpreter: resposta HTTP -> resultado tipado.

Converte respostas de sucesso em SendOutcome, respostas de erro e
exceções de rede em SendFailure, e resultados por destino em BatchOutcome
alinhado com a entrada.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fcm_push.connectors.fcm_errors import ErrorCodeCatalog, parse_fcm_error
from fcm_push.domain.outcome import BatchOutcome, FailureKind, SendFailure, SendOutcome
from fcm_push.utils.errors import AuthError, MalformedResponseError, TransportError

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

logger = logging.getLogger(__name__)

NETWORK_ERROR_CODE = "NETWORK_ERROR"
TIMEOUT_CODE = "TIMEOUT"
MALFORMED_RESPONSE_CODE = "MALFORMED_RESPONSE"
AUTH_ERROR_CODE = "AUTH_ERROR"

# Status HTTP sem corpo legível: classificação pelo próprio status
_STATUS_KINDS: dict[int, FailureKind] = {
    401: FailureKind.UNAUTHORIZED,
    404: FailureKind.UNREGISTERED,
    413: FailureKind.MESSAGE_TOO_BIG,
    429: FailureKind.QUOTA_EXCEEDED,
    500: FailureKind.INTERNAL,
    503: FailureKind.UNAVAILABLE,
}


class ResponseInterpreter:
    """Classifica respostas do endpoint messages:send.

    Args:
        catalog: Tabela de códigos de erro conhecidos
    """

    def __init__(self, catalog: ErrorCodeCatalog | None = None) -> None:
        self._catalog = catalog or ErrorCodeCatalog()

    def interpret(self, response: httpx.Response) -> SendOutcome:
        """Extrai o message_id (campo `name`) de uma resposta 2xx.

        Raises:
            MalformedResponseError: JSON inválido ou sem `name`
        """
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None

        name = data.get("name") if isinstance(data, dict) else None
        if not isinstance(name, str) or not name:
            logger.error("fcm_response_malformed", extra={"status_code": response.status_code})
            raise MalformedResponseError(
                "Resposta de sucesso sem campo 'name'",
                status_code=response.status_code,
                failure=SendFailure(
                    kind=FailureKind.UNKNOWN,
                    code=MALFORMED_RESPONSE_CODE,
                    status_code=response.status_code,
                ),
            )
        return SendOutcome.succeeded(name)

    def failure_from_response(
        self,
        response: httpx.Response,
        retry_after_seconds: float | None = None,
    ) -> SendFailure:
        """Decodifica o corpo de erro; sem corpo legível, usa o status HTTP."""
        status = response.status_code
        try:
            api_error = parse_fcm_error(response.json())
        except (json.JSONDecodeError, UnicodeDecodeError):
            api_error = None

        if api_error is None:
            return SendFailure(
                kind=_STATUS_KINDS.get(status, FailureKind.UNKNOWN),
                code=f"HTTP_{status}",
                status_code=status,
                retry_after_seconds=retry_after_seconds,
            )

        return SendFailure(
            kind=self._catalog.classify(api_error.code),
            code=api_error.code,
            message=api_error.message,
            status_code=status,
            retry_after_seconds=retry_after_seconds,
        )

    def failure_from_exception(self, exc: Exception | None, *, timed_out: bool) -> SendFailure:
        """Falha de tentativa sem resposta HTTP."""
        detail = type(exc).__name__ if exc is not None else ""
        return SendFailure(
            kind=FailureKind.UNAVAILABLE,
            code=TIMEOUT_CODE if timed_out else NETWORK_ERROR_CODE,
            message=detail,
        )

    def failure_from_auth_error(self, exc: AuthError) -> SendFailure:
        """Falha de um destino cujo token não pôde ser obtido ou renovado."""
        return SendFailure(
            kind=FailureKind.UNAVAILABLE if exc.retryable else FailureKind.UNAUTHORIZED,
            code=AUTH_ERROR_CODE,
            message=type(exc).__name__,
        )

    def assemble_batch(self, results: Sequence[SendOutcome | BaseException]) -> BatchOutcome:
        """Monta BatchOutcome preservando a ordem da entrada.

        Falhas de transporte por destino viram entradas com falha. AuthError
        só sobe ao chamador quando todos os destinos falharam na
        autenticação (nada foi entregue); caso contrário vira entrada com
        falha para não perder os message_ids já entregues. Erros
        de codificação ou inesperados sempre sobem.
        """
        outcomes: list[SendOutcome] = []
        auth_errors: list[AuthError] = []
        for result in results:
            if isinstance(result, SendOutcome):
                outcomes.append(result)
            elif isinstance(result, TransportError) and result.failure is not None:
                outcomes.append(SendOutcome.failed(result.failure))
            elif isinstance(result, AuthError):
                auth_errors.append(result)
                outcomes.append(SendOutcome.failed(self.failure_from_auth_error(result)))
            else:
                raise result

        if auth_errors and len(auth_errors) == len(outcomes):
            raise auth_errors[0]
        if auth_errors:
            logger.warning(
                "fcm_batch_auth_failures",
                extra={
                    "failed_targets": len(auth_errors),
                    "batch_size": len(outcomes),
                    "error_type": type(auth_errors[0]).__name__,
                },
            )
        return BatchOutcome(outcomes=tuple(outcomes))
