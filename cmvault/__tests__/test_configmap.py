from __future__ import annotations

import shlex
from pathlib import Path
from textwrap import dedent
from unittest.mock import patch

import pytest

from cmvault.configmap import load_configmap_data, render_tokens
from cmvault.errors import ConfigMapParseError


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "configmap.yaml"
    path.write_text(dedent(body).lstrip(), encoding="utf-8")
    return path


def test_load_configmap_data_preserves_document_order(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        apiVersion: v1
        kind: ConfigMap
        metadata:
          name: my-app
        data:
          foo: bar
          baz: qux
        """,
    )

    pairs = load_configmap_data(path)

    assert pairs == (("foo", "bar"), ("baz", "qux"))
    assert render_tokens(pairs) == "foo=bar baz=qux"


@pytest.mark.parametrize(
    "body",
    [
        "kind: ConfigMap\n",
        "kind: ConfigMap\ndata:\n",
        "kind: ConfigMap\ndata: null\n",
        "kind: ConfigMap\ndata: {}\n",
        "",
    ],
)
def test_load_configmap_data_returns_none_without_data(tmp_path: Path, body: str) -> None:
    assert load_configmap_data(_write(tmp_path, body)) is None


def test_scalar_values_keep_their_source_text(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        data:
          version: 1.10
          mode: 0644
          flag: yes
          hex: 0x1F
          t: 12:30
          enabled: true
          empty: null
          blank:
          quoted: "007"
          true: key-as-written
          1234: numeric-key
        """,
    )

    assert load_configmap_data(path) == (
        ("version", "1.10"),
        ("mode", "0644"),
        ("flag", "yes"),
        ("hex", "0x1F"),
        ("t", "12:30"),
        ("enabled", "true"),
        ("empty", "null"),
        ("blank", ""),
        ("quoted", "007"),
        ("true", "key-as-written"),
        ("1234", "numeric-key"),
    )


def test_nested_values_are_rendered_as_compact_json(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        data:
          hosts: [a, b]
          limits:
            cpu: 1
        """,
    )

    assert load_configmap_data(path) == (("hosts", '["a","b"]'), ("limits", '{"cpu":1}'))


def test_duplicate_keys_keep_the_last_value(tmp_path: Path) -> None:
    path = _write(tmp_path, "data:\n  a: first\n  b: other\n  a: second\n")

    assert load_configmap_data(path) == (("a", "second"), ("b", "other"))


@pytest.mark.parametrize("body", ["data: [a, b]\n", "data: plain\n"])
def test_non_mapping_data_is_rejected(tmp_path: Path, body: str) -> None:
    with pytest.raises(ConfigMapParseError, match="must be a mapping"):
        load_configmap_data(_write(tmp_path, body))


def test_undecodable_file_raises_parse_error(tmp_path: Path) -> None:
    path = tmp_path / "configmap.yaml"
    path.write_bytes(b"data:\n  k: \xff\xfe\n")

    with pytest.raises(ConfigMapParseError, match="Failed to read ConfigMap file"):
        load_configmap_data(path)


def test_unreadable_file_raises_parse_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "data:\n  k: v\n")

    with patch.object(Path, "read_text", side_effect=PermissionError("permission denied")):
        with pytest.raises(ConfigMapParseError, match="permission denied"):
            load_configmap_data(path)


def test_block_scalar_keeps_newlines(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        data:
          app.properties: |
            color=blue
            size=large
        """,
    )

    assert load_configmap_data(path) == (("app.properties", "color=blue\nsize=large\n"),)


def test_invalid_yaml_raises_parse_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "data: [unterminated\n")

    with pytest.raises(ConfigMapParseError, match="Failed to parse ConfigMap file"):
        load_configmap_data(path)


def test_render_tokens_round_trips_through_shell_splitting() -> None:
    pairs = [
        ("greeting", "a b"),
        ("quote", "it's \"quoted\""),
        ("meta", "$HOME; rm -rf / && `id` | cat > out"),
        ("multiline", "line one\nline two"),
        ("empty", ""),
        ("plain", "value"),
    ]

    tokens = shlex.split(render_tokens(pairs))

    assert tokens == [f"{key}={value}" for key, value in pairs]
