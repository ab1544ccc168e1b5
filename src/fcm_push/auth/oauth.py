"""Troca OAuth2 JWT-bearer contra o token endpoint do Google.

A asserção RS256 é assinada com google-auth; o POST usa httpx. A
classificação de falhas segue o contrato do TokenCache:
- 4xx com corpo OAuth2 (ou 2xx sem access_token): CredentialInvalidError
- rede, timeout, 429 e 5xx: AuthNetworkError
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import httpx
from google.auth import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fcm_push.auth.token_cache import AccessToken
from fcm_push.utils.errors import AuthNetworkError, CredentialInvalidError

if TYPE_CHECKING:
    from collections.abc import Callable

    from fcm_push.auth.credentials import Credentials

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 3600


class TokenResponse(BaseModel):
    """Resposta de sucesso do token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    expires_in: float
    token_type: str = "Bearer"


class OAuthErrorResponse(BaseModel):
    """Corpo de erro OAuth2 (RFC 6749 §5.2)."""

    model_config = ConfigDict(extra="ignore")

    error: str = "unknown_error"
    error_description: str = ""


class ServiceAccountTokenFetcher:
    """Obtém access tokens para uma service account.

    Args:
        credentials: Service account carregada
        http_client: Cliente httpx compartilhado; se None, um cliente é
            aberto e fechado por troca
        timeout_seconds: Timeout da troca
        clock: Relógio de parede (epoch em segundos)
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credentials = credentials
        self._signer = credentials.signer()
        self._http_client = http_client
        self._timeout = timeout_seconds
        self._clock = clock

    def build_assertion(self, issued_at: float) -> str:
        """Monta e assina a asserção JWT (iss, scope, aud, iat, exp)."""
        iat = int(issued_at)
        claims = {
            "iss": self._credentials.issuer,
            "scope": " ".join(self._credentials.scopes),
            "aud": self._credentials.token_uri,
            "iat": iat,
            "exp": iat + ASSERTION_LIFETIME_SECONDS,
        }
        return jwt.encode(self._signer, claims).decode("ascii")

    async def fetch_token(self) -> AccessToken:
        """Executa a troca e devolve o token com expiração absoluta.

        Raises:
            CredentialInvalidError: Credencial rejeitada
            AuthNetworkError: Falha de transporte ou endpoint indisponível
        """
        issued_at = self._clock()
        form = {
            "grant_type": JWT_BEARER_GRANT_TYPE,
            "assertion": self.build_assertion(issued_at),
        }
        try:
            response = await self._post(form)
        except httpx.TimeoutException as exc:
            raise AuthNetworkError("Timeout na troca de token") from exc
        except httpx.TransportError as exc:
            raise AuthNetworkError(f"Falha de rede na troca de token: {type(exc).__name__}") from exc

        return self._parse_response(response, issued_at)

    async def _post(self, form: dict[str, str]) -> httpx.Response:
        url = self._credentials.token_uri
        if self._http_client is not None:
            return await self._http_client.post(url, data=form, timeout=self._timeout)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(url, data=form)

    def _parse_response(self, response: httpx.Response, issued_at: float) -> AccessToken:
        status = response.status_code
        if status == 429 or status >= 500:
            logger.warning("fcm_token_endpoint_unavailable", extra={"status_code": status})
            raise AuthNetworkError(f"Token endpoint indisponível (HTTP {status})")

        if status >= 400:
            error = _parse_oauth_error(response)
            logger.error(
                "fcm_token_credential_rejected",
                extra={"status_code": status, "oauth_error": error.error},
            )
            raise CredentialInvalidError(f"Credencial rejeitada pelo token endpoint: {error.error}")

        try:
            body = TokenResponse.model_validate_json(response.content)
        except ValidationError:
            # Troca concluída sem token: a chave da service account é o suspeito.
            logger.error("fcm_token_missing_in_response", extra={"status_code": status})
            raise CredentialInvalidError("Token endpoint respondeu sem access_token") from None

        return AccessToken(value=body.access_token, expires_at=issued_at + body.expires_in)


def _parse_oauth_error(response: httpx.Response) -> OAuthErrorResponse:
    try:
        return OAuthErrorResponse.model_validate_json(response.content)
    except ValidationError:
        return OAuthErrorResponse()
