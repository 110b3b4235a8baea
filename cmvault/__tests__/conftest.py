from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from cmvault.errors import UploadFailedError
from cmvault.vaults.base import VaultClient


class RecordingVaultClient(VaultClient):
    healthy: bool = True
    fail_with: str | None = None
    health_checks: int = 0
    puts: list[tuple[str, list[tuple[str, str]]]] = []

    def health_check(self) -> bool:
        self.health_checks += 1
        return self.healthy

    def kv_put(self, path: str, pairs: Sequence[tuple[str, str]]) -> None:
        self.puts.append((path, list(pairs)))
        if self.fail_with is not None:
            raise UploadFailedError(self.fail_with)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: Any) -> None:
    for name in ("VAULT_URL", "CONFIGMAP_FILE", "VAULT_PATH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def vault_client() -> RecordingVaultClient:
    return RecordingVaultClient(address="https://vault.example:8200")
