"""Configuração do pytest para o projeto fcm_push."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(scope="session")
def rsa_private_key_pem() -> str:
    """Chave RSA gerada uma vez por sessão (PKCS#8, sem senha)."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def service_account_info(rsa_private_key_pem: str) -> dict[str, Any]:
    return {
        "type": "service_account",
        "project_id": "demo-project",
        "private_key_id": "key-123",
        "private_key": rsa_private_key_pem,
        "client_email": "push@demo-project.iam.gserviceaccount.com",
        "client_id": "1234567890",
        "token_uri": "https://oauth2.googleapis.com/token",
    }


@pytest.fixture
def service_account_file(tmp_path: Path, service_account_info: dict[str, Any]) -> Path:
    path = tmp_path / "service-account.json"
    path.write_text(json.dumps(service_account_info), encoding="utf-8")
    return path


@pytest.fixture
def credentials(service_account_info: dict[str, Any]):
    from fcm_push.auth import load_credentials_from_info

    return load_credentials_from_info(service_account_info)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    from fcm_push.config.settings import get_fcm_settings

    get_fcm_settings.cache_clear()
    yield
    get_fcm_settings.cache_clear()


class FakeTokenProvider:
    """Provedor de tokens em memória que registra renovações forçadas."""

    def __init__(self) -> None:
        self.issued = 0
        self.forced_refreshes = 0
        self._current = None

    async def get_valid_token(self, *, force_refresh=False, rejected=None):
        from fcm_push.auth.token_cache import AccessToken

        if force_refresh:
            self.forced_refreshes += 1
        if self._current is None or force_refresh:
            self.issued += 1
            self._current = AccessToken(value=f"token-{self.issued}", expires_at=10**10)
        return self._current


class RecordingSleep:
    """Substitui asyncio.sleep e registra as esperas pedidas."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def token_provider() -> FakeTokenProvider:
    return FakeTokenProvider()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
