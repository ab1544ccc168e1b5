"""Autenticação: credenciais de service account e cache de access token."""

from fcm_push.auth.credentials import (
    Credentials,
    load_credentials_from_env,
    load_credentials_from_file,
    load_credentials_from_info,
    load_credentials_from_json,
    load_credentials_from_secret_manager,
)
from fcm_push.auth.oauth import ServiceAccountTokenFetcher
from fcm_push.auth.token_cache import AccessToken, TokenCache

__all__ = [
    "AccessToken",
    "Credentials",
    "ServiceAccountTokenFetcher",
    "TokenCache",
    "load_credentials_from_env",
    "load_credentials_from_file",
    "load_credentials_from_info",
    "load_credentials_from_json",
    "load_credentials_from_secret_manager",
]
