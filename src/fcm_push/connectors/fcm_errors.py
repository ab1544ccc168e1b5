"""Erros e helpers de parsing da API FCM.

A tabela de códigos conhecidos é dado de configuração: ErrorCodeCatalog
aceita códigos extras sem mudança de código. Códigos fora da tabela viram
FailureKind.UNKNOWN com o código bruto preservado.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from fcm_push.domain.outcome import FailureKind

FCM_ERROR_DETAIL_TYPE = "type.googleapis.com/google.firebase.fcm.v1.FcmError"

DEFAULT_ERROR_CODES: Mapping[str, FailureKind] = MappingProxyType(
    {
        # FCM HTTP v1 (FcmError.errorCode)
        "UNREGISTERED": FailureKind.UNREGISTERED,
        "INVALID_ARGUMENT": FailureKind.INVALID_ARGUMENT,
        "SENDER_ID_MISMATCH": FailureKind.MISMATCHED_SENDER_IDENTITY,
        "QUOTA_EXCEEDED": FailureKind.QUOTA_EXCEEDED,
        "UNAVAILABLE": FailureKind.UNAVAILABLE,
        "INTERNAL": FailureKind.INTERNAL,
        "THIRD_PARTY_AUTH_ERROR": FailureKind.THIRD_PARTY_AUTH,
        # google.rpc status, quando não há detalhe FcmError
        "RESOURCE_EXHAUSTED": FailureKind.QUOTA_EXCEEDED,
        "UNAUTHENTICATED": FailureKind.UNAUTHORIZED,
        # API legada (results[].error)
        "NotRegistered": FailureKind.UNREGISTERED,
        "InvalidRegistration": FailureKind.UNREGISTERED,
        "MissingRegistration": FailureKind.UNREGISTERED,
        "MismatchSenderId": FailureKind.MISMATCHED_SENDER_IDENTITY,
        "InvalidPackageName": FailureKind.MISMATCHED_SENDER_IDENTITY,
        "MessageTooBig": FailureKind.MESSAGE_TOO_BIG,
        "DeviceMessageRateExceeded": FailureKind.QUOTA_EXCEEDED,
        "TopicsMessageRateExceeded": FailureKind.QUOTA_EXCEEDED,
        "Unavailable": FailureKind.UNAVAILABLE,
        "InternalServerError": FailureKind.INTERNAL,
    }
)


class ErrorCodeCatalog:
    """Mapeia códigos de erro do serviço para FailureKind.

    Args:
        extra_codes: Códigos adicionais ou reclassificados; têm precedência
            sobre DEFAULT_ERROR_CODES.
    """

    def __init__(self, extra_codes: Mapping[str, FailureKind] | None = None) -> None:
        self._codes: dict[str, FailureKind] = {**DEFAULT_ERROR_CODES, **(extra_codes or {})}

    def classify(self, code: str) -> FailureKind:
        return self._codes.get(code, FailureKind.UNKNOWN)

    def __contains__(self, code: object) -> bool:
        return code in self._codes


@dataclass(frozen=True, slots=True)
class FcmApiError:
    """Erro retornado pela API FCM."""

    code: str
    message: str
    status: str = ""


def _fcm_error_code(details: Any) -> str | None:
    if not isinstance(details, list):
        return None
    for detail in details:
        if isinstance(detail, dict) and detail.get("@type") == FCM_ERROR_DETAIL_TYPE:
            code = detail.get("errorCode")
            if isinstance(code, str) and code:
                return code
    return None


def parse_fcm_error(response_data: Any) -> FcmApiError | None:
    """Extrai o erro do corpo JSON da resposta.

    Aceita o formato google.rpc.Status do HTTP v1 (`error` objeto, com
    código FCM em `details`) e o formato legado (`error` string).

    Returns:
        FcmApiError se houver erro, None caso contrário
    """
    if not isinstance(response_data, dict):
        return None
    error_obj = response_data.get("error")

    if isinstance(error_obj, str) and error_obj:
        return FcmApiError(code=error_obj, message="")

    if not isinstance(error_obj, dict):
        return None

    status = error_obj.get("status")
    status = status if isinstance(status, str) else ""
    message = error_obj.get("message")
    message = message if isinstance(message, str) else ""
    code = _fcm_error_code(error_obj.get("details")) or status
    if not code:
        return None
    return FcmApiError(code=code, message=message, status=status)
