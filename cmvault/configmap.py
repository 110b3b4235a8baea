"""Read the ``data`` section of a ConfigMap manifest as ordered key/value pairs.

Scalars are taken from the composed YAML node tree rather than the constructed
document, so ``1.10``, ``0644`` or ``yes`` reach Vault exactly as written.
"""

from __future__ import annotations

import json
import shlex
from collections.abc import Sequence
from pathlib import Path

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode

from cmvault.errors import ConfigMapParseError

KeyValueSet = tuple[tuple[str, str], ...]

NULL_TAG = "tag:yaml.org,2002:null"


def load_configmap_data(path: Path) -> KeyValueSet | None:
    """Return the ``data`` entries of the manifest at ``path`` in document order.

    ``None`` means there is nothing to upload: the document has no ``data`` key,
    ``data`` is null, or it is an empty mapping.
    """
    try:
        root = yaml.compose(path.read_text(encoding="utf-8"), Loader=yaml.SafeLoader)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigMapParseError(f"Failed to read ConfigMap file '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigMapParseError(f"Failed to parse ConfigMap file '{path}': {exc}") from exc

    return extract_data(root)


def extract_data(root: Node | None) -> KeyValueSet | None:
    if not isinstance(root, MappingNode):
        return None

    data = _lookup(root, "data")
    if data is None or _is_null(data):
        return None
    if not isinstance(data, MappingNode):
        raise ConfigMapParseError(f"ConfigMap 'data' must be a mapping, got {data.id}.")
    if not data.value:
        return None

    values: dict[str, str] = {}
    for key_node, value_node in data.value:
        if not isinstance(key_node, ScalarNode):
            raise ConfigMapParseError(
                f"ConfigMap 'data' keys must be scalars (line {key_node.start_mark.line + 1})."
            )
        values[key_node.value] = _to_value_string(value_node)
    return tuple(values.items())


def render_tokens(pairs: Sequence[tuple[str, str]]) -> str:
    """Render pairs as space-separated ``KEY=VALUE`` shell words.

    Each token survives ``shlex.split`` unchanged.
    """
    return " ".join(shlex.quote(f"{key}={value}") for key, value in pairs)


def _lookup(mapping: MappingNode, key: str) -> Node | None:
    for key_node, value_node in mapping.value:
        if isinstance(key_node, ScalarNode) and key_node.value == key:
            return value_node
    return None


def _is_null(node: Node) -> bool:
    return isinstance(node, ScalarNode) and node.tag == NULL_TAG


def _to_value_string(node: Node) -> str:
    if isinstance(node, ScalarNode):
        return node.value

    # nested sequences and mappings
    loader = yaml.SafeLoader("")
    try:
        value = loader.construct_document(node)
    finally:
        loader.dispose()
    return json.dumps(value, separators=(",", ":"), default=str)
