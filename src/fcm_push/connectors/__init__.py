"""Conector FCM - único ponto de IO com o endpoint de mensagens.

Responsabilidades:
- HTTP client com timeout por tentativa
- Máquina de estados de retry/backoff
- Decodificação de erros FCM (v1 e legado)
- Classificação de respostas e montagem de lotes
"""

from .fcm_errors import DEFAULT_ERROR_CODES, ErrorCodeCatalog, FcmApiError, parse_fcm_error
from .fcm_http_client import FcmHttpClient
from .http_base import AttemptResult, HttpClient, HttpClientConfig
from .response_interpreter import ResponseInterpreter
from .retry import (
    Attempting,
    Failed,
    FailureReason,
    Observation,
    RetryPolicy,
    Succeeded,
    Waiting,
    next_state,
    parse_retry_after,
    resume,
)

__all__ = [
    "DEFAULT_ERROR_CODES",
    "AttemptResult",
    "Attempting",
    "ErrorCodeCatalog",
    "Failed",
    "FailureReason",
    "FcmApiError",
    "FcmHttpClient",
    "HttpClient",
    "HttpClientConfig",
    "Observation",
    "ResponseInterpreter",
    "RetryPolicy",
    "Succeeded",
    "Waiting",
    "next_state",
    "parse_retry_after",
    "resume",
]
