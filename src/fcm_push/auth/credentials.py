"""Credential Source: carrega credenciais de service account.

Formatos aceitos: dict já decodificado, string JSON, arquivo JSON,
variáveis de ambiente e Google Secret Manager. Toda falha de carga vira
CredentialInvalidError sem ecoar o conteúdo da chave.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from google.auth import crypt
from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator

from fcm_push.config.settings import FIREBASE_MESSAGING_SCOPE, GOOGLE_TOKEN_URI
from fcm_push.utils.errors import CredentialInvalidError

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_TYPE = "service_account"
CREDENTIALS_PATH_ENV = "GOOGLE_APPLICATION_CREDENTIALS"
CREDENTIALS_JSON_ENV = "FCM_SERVICE_ACCOUNT_JSON"


def load_rsa_private_key(private_key_pem: str) -> rsa.RSAPrivateKey:
    """Carrega chave privada RSA em formato PEM (sem passphrase).

    Raises:
        ValueError: Se o PEM for inválido ou a chave não for RSA
    """
    try:
        key = serialization.load_pem_private_key(private_key_pem.encode("utf-8"), password=None)
    except (TypeError, UnsupportedAlgorithm) as exc:
        # TypeError: chave cifrada com passphrase
        raise ValueError("chave privada ilegível") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError("chave privada não é RSA")
    return key


class Credentials(BaseModel):
    """Credenciais de service account (imutáveis após a carga).

    Attributes:
        client_email: Identidade emissora da asserção JWT
        private_key: Chave RSA em PEM (oculta em repr/logs)
        private_key_id: ID da chave, enviado como `kid`
        token_uri: Token endpoint OAuth2
        project_id: Projeto Firebase usado na URL de envio
        scopes: Escopos solicitados na asserção
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = SERVICE_ACCOUNT_TYPE
    client_email: str
    private_key: SecretStr
    private_key_id: str | None = None
    token_uri: str = GOOGLE_TOKEN_URI
    project_id: str = ""
    scopes: tuple[str, ...] = (FIREBASE_MESSAGING_SCOPE,)

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value != SERVICE_ACCOUNT_TYPE:
            raise ValueError(f"tipo de credencial não suportado: {value}")
        return value

    @field_validator("client_email", "token_uri")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("campo obrigatório vazio")
        return value

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, value: SecretStr) -> SecretStr:
        load_rsa_private_key(value.get_secret_value())
        return value

    @property
    def issuer(self) -> str:
        return self.client_email

    def signer(self) -> crypt.RSASigner:
        """Cria o signer RS256 usado na asserção JWT."""
        return crypt.RSASigner.from_string(
            self.private_key.get_secret_value(),
            key_id=self.private_key_id,
        )


def load_credentials_from_info(
    info: dict[str, Any],
    scopes: tuple[str, ...] | None = None,
) -> Credentials:
    """Carrega credenciais de um dict no formato do JSON de service account.

    Raises:
        CredentialInvalidError: Se campos obrigatórios faltarem ou a chave for inválida
    """
    data = dict(info)
    if scopes is not None:
        data["scopes"] = tuple(scopes)
    try:
        credentials = Credentials.model_validate(data)
    except ValidationError as exc:
        # Só as localizações: a mensagem do pydantic ecoa o input (a chave).
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        raise CredentialInvalidError(f"Service account inválida (campos: {fields})") from None
    logger.debug(
        "fcm_credentials_loaded",
        extra={"project_id": credentials.project_id, "has_key_id": bool(credentials.private_key_id)},
    )
    return credentials


def load_credentials_from_json(
    raw_json: str,
    scopes: tuple[str, ...] | None = None,
) -> Credentials:
    """Carrega credenciais de uma string JSON."""
    try:
        info = json.loads(raw_json)
    except json.JSONDecodeError:
        raise CredentialInvalidError("Service account JSON inválido") from None
    if not isinstance(info, dict):
        raise CredentialInvalidError("Service account JSON deve ser um objeto")
    return load_credentials_from_info(info, scopes)


def load_credentials_from_file(
    path: str | Path,
    scopes: tuple[str, ...] | None = None,
) -> Credentials:
    """Carrega credenciais de um arquivo JSON de service account."""
    try:
        raw_json = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise CredentialInvalidError(f"Não foi possível ler service account: {path}") from exc
    return load_credentials_from_json(raw_json, scopes)


def load_credentials_from_env(scopes: tuple[str, ...] | None = None) -> Credentials:
    """Carrega credenciais do ambiente.

    Ordem: FCM_SERVICE_ACCOUNT_JSON (conteúdo inline) e depois
    GOOGLE_APPLICATION_CREDENTIALS (caminho do arquivo).

    Raises:
        CredentialInvalidError: Se nenhuma variável estiver definida
    """
    inline = os.getenv(CREDENTIALS_JSON_ENV)
    if inline:
        return load_credentials_from_json(inline, scopes)

    path = os.getenv(CREDENTIALS_PATH_ENV)
    if path:
        return load_credentials_from_file(path, scopes)

    raise CredentialInvalidError(
        f"Defina {CREDENTIALS_JSON_ENV} ou {CREDENTIALS_PATH_ENV} com a service account"
    )


def load_credentials_from_secret_manager(
    secret_id: str,
    project_id: str | None = None,
    version: str = "latest",
    scopes: tuple[str, ...] | None = None,
) -> Credentials:
    """Carrega o JSON da service account guardado no Google Secret Manager.

    Raises:
        CredentialInvalidError: Projeto ausente, falha na API do Secret
            Manager ou conteúdo inválido (causa original em __cause__)
        ImportError: Se google-cloud-secret-manager não estiver instalado
    """
    from fcm_push.auth.secrets import get_secret

    try:
        raw_json = get_secret(secret_id, project_id, version)
    except ImportError:
        raise
    except Exception as exc:
        raise CredentialInvalidError(
            f"Falha ao ler a service account do secret {secret_id!r}: {type(exc).__name__}"
        ) from exc
    return load_credentials_from_json(raw_json, scopes)
