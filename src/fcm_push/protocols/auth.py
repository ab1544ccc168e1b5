"""Protocolos de autenticação.

Permitem substituir a troca de token e o cache em testes sem tocar no
transporte.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from fcm_push.auth.token_cache import AccessToken


class TokenFetcherProtocol(Protocol):
    """Executa uma troca de token no token endpoint."""

    async def fetch_token(self) -> AccessToken: ...


class TokenProviderProtocol(Protocol):
    """Entrega tokens válidos ao transporte."""

    async def get_valid_token(
        self,
        *,
        force_refresh: bool = False,
        rejected: AccessToken | None = None,
    ) -> AccessToken: ...
