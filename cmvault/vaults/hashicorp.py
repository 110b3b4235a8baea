from __future__ import annotations

import json
import logging
import os
import subprocess
from collections.abc import Sequence
from typing import Literal

import httpx

from cmvault.errors import UploadFailedError
from cmvault.vaults.base import VaultClient

logger = logging.getLogger(__name__)

HEALTH_ENDPOINT = "/v1/sys/health"


class VaultCliClient(VaultClient):
    """HashiCorp Vault client that probes over HTTP and writes through the ``vault`` CLI.

    Authentication is left to the CLI's ambient environment (``VAULT_TOKEN``,
    a prior ``vault login``, ...). ``VAULT_ADDR`` is pointed at ``address`` for
    the child process.
    """

    provider: Literal["hashicorp"] = "hashicorp"
    executable: str = "vault"
    health_timeout: float = 5.0

    @property
    def health_url(self) -> str:
        return f"{self.address.rstrip('/')}{HEALTH_ENDPOINT}"

    def health_check(self) -> bool:
        try:
            response = httpx.get(self.health_url, timeout=self.health_timeout)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Health check against %s failed: %r", self.health_url, exc)
            return False
        return True

    def kv_put(self, path: str, pairs: Sequence[tuple[str, str]]) -> None:
        # JSON on stdin keeps "@file" and "-" values literal.
        command = [self.executable, "kv", "put", path, "-"]
        payload = json.dumps(dict(pairs))
        logger.debug("Running %s kv put %s with %d pair(s)", self.executable, path, len(pairs))
        try:
            subprocess.run(
                command,
                input=payload,
                check=True,
                capture_output=True,
                text=True,
                env={**os.environ, "VAULT_ADDR": self.address},
            )
        except FileNotFoundError as exc:
            raise UploadFailedError(
                "Vault CLI executable was not found. Install `vault` or set executable."
            ) from exc
        except subprocess.CalledProcessError as exc:
            message = exc.stderr.strip() if exc.stderr else "unknown error"
            raise UploadFailedError(f"Failed to write to Vault path {path}: {message}") from exc
