"""Token Cache: entrega tokens válidos com no máximo uma renovação em voo.

Estado compartilhado do cliente. Leitores concorrentes recebem o token em
cache sem I/O; quando o token está ausente, perto de expirar ou foi
rejeitado com 401, uma única task de renovação é criada e todos os
chamadores aguardam o mesmo resultado (token ou exceção).
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fcm_push.observability import record_latency, record_token_refresh
from fcm_push.utils.errors import AuthError, ClockSkewError

if TYPE_CHECKING:
    from collections.abc import Callable

    from fcm_push.protocols.auth import TokenFetcherProtocol

logger = logging.getLogger(__name__)

_COMPONENT = "token_cache"
DEFAULT_REFRESH_MARGIN_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Bearer token com expiração absoluta (epoch em segundos)."""

    value: str = field(repr=False)
    expires_at: float

    def remaining_seconds(self, now: float) -> float:
        return self.expires_at - now


def _retrieve_exception(task: asyncio.Task[AccessToken]) -> None:
    # Evita "exception was never retrieved" quando todos os waiters cancelaram.
    if not task.cancelled():
        task.exception()


class TokenCache:
    """Cache de token com renovação single-flight.

    Args:
        fetcher: Executa a troca no token endpoint
        refresh_margin_seconds: Renova quando restar menos que isso
        clock: Relógio de parede em segundos (injetável em testes)
    """

    def __init__(
        self,
        fetcher: TokenFetcherProtocol,
        *,
        refresh_margin_seconds: float = DEFAULT_REFRESH_MARGIN_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._fetcher = fetcher
        self._margin = refresh_margin_seconds
        self._clock = clock
        self._token: AccessToken | None = None
        self._refresh_task: asyncio.Task[AccessToken] | None = None

    def _is_fresh(self, token: AccessToken) -> bool:
        return token.remaining_seconds(self._clock()) > self._margin

    async def get_valid_token(
        self,
        *,
        force_refresh: bool = False,
        rejected: AccessToken | None = None,
    ) -> AccessToken:
        """Retorna um token com vida útil acima da margem.

        Args:
            force_refresh: Ignora o token em cache (usado após um 401)
            rejected: Token rejeitado pelo endpoint; se o cache já tiver
                outro token válido, ele é devolvido sem nova troca

        Raises:
            CredentialInvalidError: Credencial rejeitada pelo token endpoint
            AuthNetworkError: Troca não concluída por falha de transporte
            ClockSkewError: Expiração retornada já vencida (após uma retentativa)
        """
        token = self._token
        if token is not None and self._is_fresh(token):
            if not force_refresh:
                return token
            if rejected is not None and token.value != rejected.value:
                return token

        if force_refresh and token is not None:
            if rejected is None or token.value == rejected.value:
                self._token = None

        task = self._refresh_task
        if task is None:
            reason = "forced" if force_refresh else ("absent" if token is None else "expiring")
            task = asyncio.get_running_loop().create_task(self._refresh(reason))
            task.add_done_callback(_retrieve_exception)
            self._refresh_task = task
        # shield: cancelar um chamador não cancela a renovação compartilhada
        return await asyncio.shield(task)

    def invalidate(self) -> None:
        """Descarta o token em cache; o próximo pedido força uma troca."""
        self._token = None

    async def _refresh(self, reason: str) -> AccessToken:
        started = time.perf_counter()
        try:
            token = await self._fetch_checked()
            self._token = token
        except AuthError as exc:
            logger.warning(
                "fcm_token_refresh_failed",
                extra={
                    "component": _COMPONENT,
                    "reason": reason,
                    "error_type": type(exc).__name__,
                },
            )
            record_token_refresh(reason, success=False)
            raise
        finally:
            self._refresh_task = None
            record_latency(_COMPONENT, "token_exchange", (time.perf_counter() - started) * 1000)

        logger.info(
            "fcm_token_refreshed",
            extra={
                "component": _COMPONENT,
                "reason": reason,
                "expires_in_seconds": round(token.remaining_seconds(self._clock())),
            },
        )
        record_token_refresh(reason, success=True)
        return token

    async def _fetch_checked(self) -> AccessToken:
        # Token novo também precisa estar acima da margem; senão, uma nova troca.
        token = await self._fetcher.fetch_token()
        if self._is_fresh(token):
            return token

        logger.warning(
            "fcm_token_clock_skew_retry",
            extra={
                "component": _COMPONENT,
                "expires_in_seconds": round(token.remaining_seconds(self._clock())),
            },
        )
        token = await self._fetcher.fetch_token()
        if self._is_fresh(token):
            return token
        raise ClockSkewError(
            "Token endpoint retornou expiração vencida ou dentro da margem duas vezes"
        )
