from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmvault.errors import ConfigMapNotFoundError, MissingConfigurationError

logger = logging.getLogger(__name__)

PROMPTS = {
    "vault_url": "Enter the Vault URL (e.g. https://my-vault:8200): ",
    "configmap_file": "Enter the ConfigMap YAML file (e.g. my-configmap.yaml): ",
    "vault_path": "Enter the Vault path (e.g. secret/my-configmap): ",
}


class UploaderSettings(BaseSettings):
    """Values read from VAULT_URL, CONFIGMAP_FILE and VAULT_PATH.

    Keyword arguments passed at construction win over the environment.
    """

    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    vault_url: str | None = None
    configmap_file: str | None = None
    vault_path: str | None = None


class Configuration(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    vault_url: str = Field(min_length=1)
    configmap_file: str = Field(min_length=1)
    vault_path: str = Field(min_length=1)

    @property
    def configmap_path(self) -> Path:
        return Path(self.configmap_file)

    def summary(self) -> str:
        rule = "-" * 55
        return "\n".join(
            [
                rule,
                f"HashiCorp Vault URL:  {self.vault_url}",
                f"ConfigMap file:       {self.configmap_file}",
                f"Vault KV path:        {self.vault_path}",
                rule,
            ]
        )


def resolve_configuration(
    flags: Mapping[str, str | None] | None = None,
    prompt: Callable[[str], str] | None = input,
) -> Configuration:
    """Resolve each field from flags, then the environment, then an interactive prompt.

    Pass ``prompt=None`` to disable prompting. Raises ``MissingConfigurationError``
    when a field is still empty after every source has been tried.
    """
    explicit = {key: value for key, value in (flags or {}).items() if value}
    settings = UploaderSettings(**explicit)

    values: dict[str, str] = {}
    for field_name in PROMPTS:
        value = (getattr(settings, field_name) or "").strip()
        if not value and prompt is not None:
            value = _ask(prompt, PROMPTS[field_name])
        values[field_name] = value

    missing = [name for name, value in values.items() if not value]
    if missing:
        raise MissingConfigurationError(missing)

    logger.debug("Resolved configuration: %s", values)
    return Configuration(**values)


def validate_configmap_file(config: Configuration) -> Path:
    path = config.configmap_path
    if not path.is_file():
        raise ConfigMapNotFoundError(config.configmap_file)
    return path


def _ask(prompt: Callable[[str], str], message: str) -> str:
    try:
        return prompt(message).strip()
    except EOFError:
        return ""
