from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class VaultClient(BaseModel, ABC):
    """Base model for a client that can write key/value pairs into a secret store."""

    model_config = ConfigDict(extra="forbid")

    address: str

    @abstractmethod
    def health_check(self) -> bool:
        """Return whether the server answered its health endpoint successfully."""

    @abstractmethod
    def kv_put(self, path: str, pairs: Sequence[tuple[str, str]]) -> None:
        """Replace the values stored at ``path`` with ``pairs``."""
