"""Cliente HTTP base: uma tentativa por chamada, com timeout próprio.

A decisão de repetir fica com quem chama (ver connectors/retry.py); aqui
cada POST vira uma AttemptResult com a observação usada pela máquina de
estados e a resposta ou exceção original.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from fcm_push.connectors.retry import Observation, RetryPolicy, parse_retry_after

if TYPE_CHECKING:
    from fcm_push.config.settings import FcmSettings

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True

    @classmethod
    def from_settings(cls, settings: FcmSettings) -> HttpClientConfig:
        return cls(
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
            backoff_base_seconds=settings.backoff_base_seconds,
            backoff_max_seconds=settings.backoff_max_seconds,
        )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_retries + 1,
            base_delay_seconds=self.backoff_base_seconds,
            max_delay_seconds=self.backoff_max_seconds,
        )


@dataclass(frozen=True, slots=True)
class AttemptResult:
    """Resultado bruto de uma tentativa HTTP."""

    observation: Observation
    response: httpx.Response | None = None
    error: Exception | None = None


class HttpClient:
    """Cliente HTTP com um httpx.AsyncClient compartilhado.

    Args:
        config: Configuração HTTP
        http_client: Cliente httpx injetado (não é fechado por aclose)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=self._config.verify_ssl,
                timeout=self._config.timeout_seconds,
            )
        return self._client

    async def aclose(self) -> None:
        """Fecha o cliente httpx se ele foi criado aqui."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def post_once(
        self,
        url: str,
        content: bytes,
        headers: dict[str, str] | None = None,
    ) -> AttemptResult:
        """Executa um único POST limitado por timeout_seconds.

        Falhas de rede e timeouts não levantam exceção: voltam como
        observação sem status_code. CancelledError sempre propaga.
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        timeout = self._config.timeout_seconds
        try:
            response = await asyncio.wait_for(
                self.client.post(url, content=content, headers=merged_headers, timeout=timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.debug("http_attempt_timeout", extra={"timeout_seconds": timeout})
            return AttemptResult(Observation(timed_out=True), error=exc)
        except httpx.TransportError as exc:
            logger.debug("http_connection_error", extra={"error_type": type(exc).__name__})
            return AttemptResult(Observation(), error=exc)

        raw_retry_after = response.headers.get("Retry-After")
        retry_after = parse_retry_after(raw_retry_after)
        if raw_retry_after is not None and retry_after is None:
            logger.warning("http_retry_after_invalid", extra={"status_code": response.status_code})

        return AttemptResult(
            Observation(status_code=response.status_code, retry_after_seconds=retry_after),
            response=response,
        )
