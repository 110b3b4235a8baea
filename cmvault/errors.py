from __future__ import annotations

from collections.abc import Sequence


class UploaderError(RuntimeError):
    """Base class for failures that abort a ConfigMap upload."""


class MissingConfigurationError(UploaderError):
    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing required arguments: {', '.join(self.missing)}.")


class ConfigMapNotFoundError(UploaderError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"ConfigMap file '{path}' not found!")


class ConfigMapParseError(UploaderError):
    pass


class UploadFailedError(UploaderError):
    pass
