"""Settings do cliente FCM.

Configurações do endpoint HTTP v1, do token endpoint OAuth2 e da política
de retry. Carregadas do ambiente e cacheadas como singleton.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes da API FCM
FCM_API_VERSION: str = "v1"
FCM_API_BASE_URL: str = "https://fcm.googleapis.com"
GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
FIREBASE_MESSAGING_SCOPE: str = "https://www.googleapis.com/auth/firebase.messaging"


@dataclass(frozen=True)
class FcmSettings:
    """Configurações do cliente FCM.

    Attributes:
        project_id: ID do projeto Firebase (sobrepõe o da service account)
        credentials_path: Caminho do JSON da service account
        api_version: Versão da API FCM (ex: v1)
        api_base_url: URL base da API FCM
        request_timeout_seconds: Timeout de cada tentativa de envio
        token_request_timeout_seconds: Timeout da troca de token OAuth2
        max_retries: Retentativas após a primeira tentativa
        backoff_base_seconds: Atraso inicial do backoff exponencial
        backoff_max_seconds: Teto do backoff exponencial
        token_refresh_margin_seconds: Margem de segurança antes da expiração
        batch_max_concurrency: Envios simultâneos dentro de um lote
        max_body_bytes: Limite local do corpo codificado (0 = desativado)
    """

    # Projeto e credenciais
    project_id: str = ""
    credentials_path: str = ""

    # API
    api_version: str = FCM_API_VERSION
    api_base_url: str = FCM_API_BASE_URL

    # Timeouts e retries
    request_timeout_seconds: float = 30.0
    token_request_timeout_seconds: float = 10.0
    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 30.0

    # Token
    token_refresh_margin_seconds: float = 60.0

    # Lotes
    batch_max_concurrency: int = 50

    max_body_bytes: int = 0

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}"

    @property
    def max_attempts(self) -> int:
        """Total de tentativas HTTP por envio."""
        return self.max_retries + 1

    def get_send_endpoint(self, project_id: str | None = None) -> str:
        """Retorna URL de envio de mensagens.

        Args:
            project_id: ID do projeto. Usa self.project_id se None.

        Returns:
            URL no formato: https://fcm.googleapis.com/v1/projects/{id}/messages:send

        Raises:
            ValueError: Se project_id não informado e não configurado.
        """
        pid = project_id or self.project_id
        if not pid:
            raise ValueError("project_id é obrigatório")
        return f"{self.api_endpoint}/projects/{pid}/messages:send"

    def validate(self) -> list[str]:
        """Valida configurações mínimas.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.request_timeout_seconds <= 0:
            errors.append("FCM_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.token_request_timeout_seconds <= 0:
            errors.append("FCM_TOKEN_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("FCM_MAX_RETRIES deve ser >= 0")

        if self.backoff_base_seconds < 0:
            errors.append("FCM_BACKOFF_BASE_SECONDS deve ser >= 0")

        if self.backoff_max_seconds < self.backoff_base_seconds:
            errors.append("FCM_BACKOFF_MAX_SECONDS deve ser >= FCM_BACKOFF_BASE_SECONDS")

        if self.token_refresh_margin_seconds < 0:
            errors.append("FCM_TOKEN_REFRESH_MARGIN_SECONDS deve ser >= 0")

        if self.batch_max_concurrency < 1:
            errors.append("FCM_BATCH_MAX_CONCURRENCY deve ser >= 1")

        if self.max_body_bytes < 0:
            errors.append("FCM_MAX_BODY_BYTES deve ser >= 0")

        return errors


def _load_from_env() -> FcmSettings:
    """Carrega FcmSettings a partir de variáveis de ambiente."""
    return FcmSettings(
        project_id=os.getenv("FCM_PROJECT_ID", ""),
        credentials_path=os.getenv("GOOGLE_APPLICATION_CREDENTIALS", ""),
        api_version=os.getenv("FCM_API_VERSION", FCM_API_VERSION),
        api_base_url=os.getenv("FCM_API_BASE_URL", FCM_API_BASE_URL),
        request_timeout_seconds=float(os.getenv("FCM_REQUEST_TIMEOUT_SECONDS", "30")),
        token_request_timeout_seconds=float(
            os.getenv("FCM_TOKEN_REQUEST_TIMEOUT_SECONDS", "10")
        ),
        max_retries=int(os.getenv("FCM_MAX_RETRIES", "3")),
        backoff_base_seconds=float(os.getenv("FCM_BACKOFF_BASE_SECONDS", "1")),
        backoff_max_seconds=float(os.getenv("FCM_BACKOFF_MAX_SECONDS", "30")),
        token_refresh_margin_seconds=float(
            os.getenv("FCM_TOKEN_REFRESH_MARGIN_SECONDS", "60")
        ),
        batch_max_concurrency=int(os.getenv("FCM_BATCH_MAX_CONCURRENCY", "50")),
        max_body_bytes=int(os.getenv("FCM_MAX_BODY_BYTES", "0")),
    )


@lru_cache(maxsize=1)
def get_fcm_settings() -> FcmSettings:
    """Retorna instância cacheada de FcmSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
