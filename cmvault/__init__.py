from cmvault.configmap import load_configmap_data, render_tokens
from cmvault.settings import Configuration, resolve_configuration
from cmvault.vaults.base import VaultClient
from cmvault.vaults.hashicorp import VaultCliClient

__all__ = [
    "Configuration",
    "VaultCliClient",
    "VaultClient",
    "load_configmap_data",
    "render_tokens",
    "resolve_configuration",
]
