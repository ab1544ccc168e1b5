"""FcmClient: fachada de envio de push notifications via FCM HTTP v1.

Fluxo: Message -> MessageEncoder -> FcmHttpClient (token do TokenCache)
-> ResponseInterpreter -> SendOutcome/BatchOutcome.

Uma instância é segura para uso concorrente: o único estado mutável
compartilhado é o TokenCache.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import httpx

from fcm_push.auth import (
    ServiceAccountTokenFetcher,
    TokenCache,
    load_credentials_from_env,
    load_credentials_from_file,
)
from fcm_push.config.settings import FcmSettings, get_fcm_settings
from fcm_push.connectors import (
    ErrorCodeCatalog,
    FcmHttpClient,
    HttpClientConfig,
    ResponseInterpreter,
)
from fcm_push.observability import correlation_scope, record_batch_result
from fcm_push.payload_builders import MessageEncoder

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping
    from types import TracebackType

    from fcm_push.auth import Credentials
    from fcm_push.domain import (
        BatchOutcome,
        FailureKind,
        Message,
        MulticastMessage,
        SendOutcome,
    )
    from fcm_push.protocols import MessageEncoderProtocol, TokenProviderProtocol

logger = logging.getLogger(__name__)


class FcmClient:
    """Cliente assíncrono do FCM.

    Args:
        credentials: Service account já carregada
        settings: Configurações (padrão: get_fcm_settings())
        token_cache: Provedor de tokens (padrão: TokenCache com troca JWT)
        http_client: Cliente httpx compartilhado; não é fechado por aclose
        encoder: Codificador de mensagens
        error_codes: Códigos de erro extras para a classificação
        sleep: Espera entre tentativas (injetável em testes)
        clock: Relógio de parede usado pela autenticação
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        settings: FcmSettings | None = None,
        token_cache: TokenProviderProtocol | None = None,
        http_client: httpx.AsyncClient | None = None,
        encoder: MessageEncoderProtocol | None = None,
        error_codes: Mapping[str, FailureKind] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings or get_fcm_settings()
        errors = self._settings.validate()
        if errors:
            raise ValueError(f"Configuração FCM inválida: {'; '.join(errors)}")

        self._project_id = self._settings.project_id or credentials.project_id
        if not self._project_id:
            raise ValueError("project_id ausente em FCM_PROJECT_ID e na service account")
        self._send_url = self._settings.get_send_endpoint(self._project_id)

        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self._settings.request_timeout_seconds
        )

        self._tokens = token_cache or TokenCache(
            ServiceAccountTokenFetcher(
                credentials,
                http_client=self._http,
                timeout_seconds=self._settings.token_request_timeout_seconds,
                clock=clock,
            ),
            refresh_margin_seconds=self._settings.token_refresh_margin_seconds,
            clock=clock,
        )
        self._encoder = encoder or MessageEncoder(self._settings.max_body_bytes or None)
        self._transport = FcmHttpClient(
            self._tokens,
            config=HttpClientConfig.from_settings(self._settings),
            http_client=self._http,
            interpreter=ResponseInterpreter(ErrorCodeCatalog(error_codes)),
            sleep=sleep,
        )

    @property
    def project_id(self) -> str:
        return self._project_id

    async def send(self, message: Message) -> SendOutcome:
        """Envia uma mensagem.

        Returns:
            SendOutcome de sucesso com o message_id

        Raises:
            EncodeError: Mensagem inválida (nada é enviado)
            AuthError: Falha ao obter token
            TransportError: Falha HTTP terminal, 401 persistente ou retries esgotados
        """
        body = self._encoder.encode(message)
        with correlation_scope():
            return await self._transport.send(self._send_url, body)

    async def send_each(self, messages: Iterable[Message]) -> BatchOutcome:
        """Envia várias mensagens em paralelo.

        Todas são codificadas antes do primeiro envio; uma mensagem inválida
        aborta o lote sem IO. O resultado é alinhado índice a índice com a
        entrada e falhas por destino não levantam exceção.

        Raises:
            EncodeError: Alguma mensagem inválida
            AuthError: Falha ao obter token em todos os destinos; com
                entregas parciais ela vira entrada com falha (AUTH_ERROR)
        """
        bodies = [self._encoder.encode(message) for message in messages]
        semaphore = asyncio.Semaphore(self._settings.batch_max_concurrency)

        async def _send_one(body: bytes) -> SendOutcome:
            async with semaphore:
                return await self._transport.send(self._send_url, body)

        with correlation_scope():
            results = await asyncio.gather(
                *(_send_one(body) for body in bodies), return_exceptions=True
            )
            batch = self._transport.interpreter.assemble_batch(results)
            record_batch_result(len(batch), batch.success_count, batch.failure_count)
        return batch

    async def send_multicast(self, multicast: MulticastMessage) -> BatchOutcome:
        """Envia o mesmo conteúdo para uma lista de device tokens.

        O BatchOutcome segue a ordem de multicast.tokens.
        """
        return await self.send_each(multicast.to_messages())

    async def aclose(self) -> None:
        """Fecha o cliente httpx se ele foi criado aqui."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> FcmClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def create_fcm_client(settings: FcmSettings | None = None, **kwargs: object) -> FcmClient:
    """Cria FcmClient com credenciais do ambiente.

    Usa settings.credentials_path quando definido; senão
    FCM_SERVICE_ACCOUNT_JSON / GOOGLE_APPLICATION_CREDENTIALS.
    """
    settings = settings or get_fcm_settings()
    if settings.credentials_path:
        credentials = load_credentials_from_file(settings.credentials_path)
    else:
        credentials = load_credentials_from_env()
    logger.info(
        "fcm_client_created",
        extra={"project_id": settings.project_id or credentials.project_id},
    )
    return FcmClient(credentials, settings=settings, **kwargs)  # type: ignore[arg-type]
