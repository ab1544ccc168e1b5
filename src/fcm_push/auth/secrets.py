"""Google Secret Manager como origem do JSON da service account.

O SDK é importado sob demanda: só quem usa esta origem precisa do
pacote google-cloud-secret-manager instalado.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google.cloud.secretmanager import SecretManagerServiceClient

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_client() -> SecretManagerServiceClient:
    """Obtém cliente do Secret Manager (singleton via lru_cache)."""
    from google.cloud import secretmanager

    return secretmanager.SecretManagerServiceClient()


@lru_cache(maxsize=16)
def get_secret(
    secret_id: str,
    project_id: str | None = None,
    version: str = "latest",
) -> str:
    """Obtém valor de secret do GCP Secret Manager.

    Args:
        secret_id: ID do secret (ex.: fcm-service-account)
        project_id: ID do projeto GCP (default: env GCP_PROJECT)
        version: Versão do secret (default: latest)

    Returns:
        Valor do secret como string

    Raises:
        ValueError: Se project_id não fornecido e GCP_PROJECT não definido
        google.api_core.exceptions.GoogleAPIError: Falha no Secret Manager
    """
    if project_id is None:
        project_id = os.getenv("GCP_PROJECT") or os.getenv("GOOGLE_CLOUD_PROJECT")
        if not project_id:
            msg = "GCP_PROJECT não definido e project_id não fornecido"
            raise ValueError(msg)

    name = f"projects/{project_id}/secrets/{secret_id}/versions/{version}"
    try:
        response = _get_client().access_secret_version(request={"name": name})
    except Exception as exc:
        logger.error(
            "fcm_secret_load_error",
            extra={"secret_id": secret_id, "error_type": type(exc).__name__},
        )
        raise
    logger.debug("fcm_secret_loaded", extra={"secret_id": secret_id})
    return response.payload.data.decode("UTF-8")
