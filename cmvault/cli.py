from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import NoReturn

from cmvault.configmap import load_configmap_data, render_tokens
from cmvault.errors import MissingConfigurationError, UploaderError
from cmvault.settings import Configuration, resolve_configuration, validate_configmap_file
from cmvault.vaults.base import VaultClient
from cmvault.vaults.hashicorp import VaultCliClient

logger = logging.getLogger(__name__)

PROG = "cmvault"
RULE = "-" * 55
USAGE_EPILOG = f"""\
Environment variables (alternative):
  VAULT_URL
  CONFIGMAP_FILE
  VAULT_PATH

Example:
  {PROG} -u https://my-vault:8200 -c my-configmap.yaml -p secret/my-configmap
"""


@dataclass(slots=True)
class UploadResult:
    vault_path: str
    keys_written: tuple[str, ...]
    health_ok: bool
    uploaded: bool


class _UsageError(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """Parser whose errors end in usage and exit status 1 instead of exiting with 2."""

    def error(self, message: str) -> NoReturn:
        raise _UsageError(message)


def upload_configmap_to_vault(
    config: Configuration,
    client: VaultClient | None = None,
) -> UploadResult:
    configmap_path = validate_configmap_file(config)
    print(config.summary())

    if client is None:
        client = VaultCliClient(address=config.vault_url)

    print("Checking Vault connectivity...")
    health_ok = client.health_check()
    if not health_ok:
        logger.warning("Could not verify Vault at %s. Continuing anyway...", config.vault_url)

    print("Parsing key-value pairs from ConfigMap...")
    pairs = load_configmap_data(configmap_path)
    if pairs is None:
        print("No data found in the ConfigMap's .data section! Nothing to upload.")
        return UploadResult(
            vault_path=config.vault_path,
            keys_written=(),
            health_ok=health_ok,
            uploaded=False,
        )

    keys = tuple(key for key, _ in pairs)
    print(f"Key-value pairs extracted from {config.configmap_file}:")
    print(f"  {', '.join(keys)}")
    logger.debug("Tokens: %s", render_tokens(pairs))

    print(f"Uploading {len(pairs)} key-value pair(s) to Vault: {config.vault_path}")
    client.kv_put(config.vault_path, pairs)

    return UploadResult(
        vault_path=config.vault_path,
        keys_written=keys,
        health_ok=health_ok,
        uploaded=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description=(
            "Read the .data section of a ConfigMap YAML file and write its key-value pairs "
            "into a HashiCorp Vault KV path."
        ),
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-u",
        dest="vault_url",
        metavar="<vault-url>",
        help="HashiCorp Vault URL (e.g. https://my-vault:8200)",
    )
    parser.add_argument(
        "-c",
        dest="configmap_file",
        metavar="<configmap-file>",
        help="ConfigMap file name (YAML) (e.g. my-configmap.yaml)",
    )
    parser.add_argument(
        "-p",
        dest="vault_path",
        metavar="<vault-path>",
        help="Target path in Vault KV (e.g. secret/my-configmap)",
    )
    parser.add_argument("-v", dest="verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("-h", dest="help", action="store_true", help="Show this message.")
    return parser


def cli(
    argv: Sequence[str] | None = None,
    prompt: Callable[[str], str] | None = input,
    client: VaultClient | None = None,
) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except _UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_help()
        return 1

    if args.help:
        parser.print_help()
        return 1

    if args.verbose:
        logging.getLogger("cmvault").setLevel(logging.DEBUG)

    try:
        config = resolve_configuration(
            flags={
                "vault_url": args.vault_url,
                "configmap_file": args.configmap_file,
                "vault_path": args.vault_path,
            },
            prompt=prompt,
        )
    except MissingConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_help()
        return 1

    try:
        result = upload_configmap_to_vault(config, client=client)
    except UploaderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if result.uploaded:
        print()
        print("Upload complete!")
        print(RULE)
        print(f"You can verify with: vault kv get {result.vault_path}")
        print(RULE)
    return 0


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    try:
        exit_code = cli()
    except KeyboardInterrupt:
        print(file=sys.stderr)
        exit_code = 130
    raise SystemExit(exit_code)
