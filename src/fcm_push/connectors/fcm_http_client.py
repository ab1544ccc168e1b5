"""Cliente HTTP especializado para o endpoint FCM messages:send.

Estende HttpClient com o comportamento do FCM:
- Bearer token do TokenCache em cada tentativa
- Retry dirigido pela máquina de estados de connectors/retry.py
- Uma renovação forçada de token após 401
- Timeout por tentativa, logado de forma distinguível
- Logging estruturado sem tokens nem destinos
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from fcm_push.connectors.fcm_logging import (
    log_attempt_timeout,
    log_retry_scheduled,
    log_send_failure,
    log_success,
)
from fcm_push.connectors.http_base import AttemptResult, HttpClient, HttpClientConfig
from fcm_push.connectors.response_interpreter import ResponseInterpreter
from fcm_push.connectors.retry import (
    Attempting,
    Failed,
    FailureReason,
    Succeeded,
    next_state,
    resume,
)
from fcm_push.observability import record_latency, record_send_attempt
from fcm_push.utils.errors import (
    InvalidRequestError,
    RetryExhaustedError,
    TransportError,
    UnauthorizedError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from fcm_push.auth.token_cache import AccessToken
    from fcm_push.domain.outcome import SendFailure, SendOutcome
    from fcm_push.protocols.auth import TokenProviderProtocol

logger: logging.Logger = logging.getLogger(__name__)

_COMPONENT = "fcm_http_client"
CONTENT_TYPE = "application/json; charset=UTF-8"


class FcmHttpClient(HttpClient):
    """Transporte para o FCM HTTP v1.

    Args:
        token_provider: Fonte de tokens válidos (TokenCache)
        config: Configuração HTTP base (timeout, retries, backoff)
        http_client: Cliente httpx injetado
        interpreter: Classificador de respostas
        sleep: Função de espera entre tentativas (injetável em testes)
    """

    def __init__(
        self,
        token_provider: TokenProviderProtocol,
        config: HttpClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        interpreter: ResponseInterpreter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(config, http_client)
        self._tokens = token_provider
        self._interpreter = interpreter or ResponseInterpreter()
        self._sleep = sleep
        self._policy = self._config.retry_policy()

    @property
    def interpreter(self) -> ResponseInterpreter:
        return self._interpreter

    async def send(self, url: str, body: bytes) -> SendOutcome:
        """Envia um corpo já codificado.

        Returns:
            SendOutcome de sucesso com o message_id

        Raises:
            InvalidRequestError: 4xx não retentável
            UnauthorizedError: 401 após a renovação forçada
            RetryExhaustedError: Orçamento esgotado em falhas transitórias
            MalformedResponseError: 2xx sem message_id
            AuthError: Falha ao obter token
        """
        state = Attempting(attempt=1)
        token = await self._tokens.get_valid_token()

        while True:
            result = await self._attempt(url, body, token, state.attempt)
            transition = next_state(self._policy, state, result.observation)
            status = result.observation.status_code

            if isinstance(transition, Succeeded):
                record_send_attempt(state.attempt, status, "succeeded")
                log_success(state.attempt, status or 0)
                return self._interpreter.interpret(result.response)  # type: ignore[arg-type]

            if isinstance(transition, Failed):
                record_send_attempt(state.attempt, status, "failed")
                raise self._failure_error(transition, result)

            if transition.refresh_token:
                record_send_attempt(state.attempt, status, "refresh_token")
                logger.info("fcm_send_unauthorized_refresh", extra={"attempt": state.attempt})
                token = await self._tokens.get_valid_token(force_refresh=True, rejected=token)
            else:
                record_send_attempt(state.attempt, status, "retry")
                log_retry_scheduled(state.attempt, status, transition.delay_seconds)
                await self._sleep(transition.delay_seconds)
                token = await self._tokens.get_valid_token()

            state = resume(transition)

    async def _attempt(
        self,
        url: str,
        body: bytes,
        token: AccessToken,
        attempt: int,
    ) -> AttemptResult:
        headers = {
            "Authorization": f"Bearer {token.value}",
            "Content-Type": CONTENT_TYPE,
        }
        started = time.perf_counter()
        result = await self.post_once(url, body, headers)
        record_latency(_COMPONENT, "send_attempt", (time.perf_counter() - started) * 1000)
        if result.observation.timed_out:
            log_attempt_timeout(attempt, self._config.timeout_seconds)
        return result

    def _failure_of(self, result: AttemptResult) -> SendFailure:
        if result.response is None:
            return self._interpreter.failure_from_exception(
                result.error, timed_out=result.observation.timed_out
            )
        return self._interpreter.failure_from_response(
            result.response, result.observation.retry_after_seconds
        )

    def _failure_error(self, state: Failed, result: AttemptResult) -> TransportError:
        failure = self._failure_of(result)
        status = result.observation.status_code
        log_send_failure(failure, state.attempt, state.reason.value)

        if state.reason is FailureReason.UNAUTHORIZED:
            return UnauthorizedError(
                "Endpoint rejeitou o token renovado (401)",
                status_code=status,
                failure=failure,
            )
        if state.reason is FailureReason.EXHAUSTED:
            error = RetryExhaustedError(state.attempt, failure, status_code=status)
            error.__cause__ = result.error
            return error
        return InvalidRequestError(
            f"Requisição rejeitada: {failure.code}",
            status_code=status,
            failure=failure,
        )
