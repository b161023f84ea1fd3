"""Tests for render configuration loading."""

from __future__ import annotations

import typing as typ

import pytest

from docc_pages.config import (
    RenderConfig,
    SiteConfigError,
    build_render_config,
    load_render_config,
    parse_mapping_pairs,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "docc-pages.yaml"
    path.write_text(content.strip() + "\n", encoding="utf-8")
    return path


def test_loads_full_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
archive: archives/Acme.doccarchive
output_dir: public/docs
interface_language: occ
include_search: false
footer: Built by **Acme**.
pygments_style: monokai
workers: 4
link_scheme: x-doc
documented_modules:
  Acme: com.example.acme
external_docs:
  com.example.core: https://docs.example.com/core/
theme:
  site_name: Acme Docs
  tutorials_label: Guides
""",
    )
    config = load_render_config(path)
    assert config.archive == tmp_path / "archives/Acme.doccarchive", (
        "relative paths resolve against the config file's directory"
    )
    assert config.output_dir == tmp_path / "public/docs"
    assert config.interface_language == "occ"
    assert not config.include_search
    assert config.footer == "Built by **Acme**."
    assert config.pygments_style == "monokai"
    assert config.workers == 4
    assert config.link_scheme == "x-doc"
    assert config.documented_modules == {"Acme": "com.example.acme"}
    assert config.external_docs == {
        "com.example.core": "https://docs.example.com/core/"
    }
    assert config.theme.site_name == "Acme Docs"
    assert config.theme.tutorials_label == "Guides"


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    config = load_render_config(_write(tmp_path, "# nothing here"))
    defaults = RenderConfig()
    assert config.archive is None
    assert config.output_dir == defaults.output_dir, "default paths stay relative"
    assert config.include_search
    assert config.workers == 1
    assert config.theme.site_name == "Documentation"


def test_absolute_paths_are_kept(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    config = build_render_config({"output_dir": str(target)}, base_dir=tmp_path / "cfg")
    assert config.output_dir == target


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_render_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("content", "fragment"),
    [
        ("- just\n- a list", "Top-level"),
        ("theme: plain", "'theme' must be a mapping"),
        ("workers: 0", "'workers' must be a positive integer"),
        ("workers: true", "'workers' must be a positive integer"),
        ("external_docs: [a, b]", "'external_docs' must be a mapping"),
        ("documented_modules:\n  Acme: ''", "'documented_modules.Acme'"),
    ],
)
def test_invalid_shapes(tmp_path: Path, content: str, fragment: str) -> None:
    with pytest.raises(SiteConfigError, match=fragment):
        load_render_config(_write(tmp_path, content))


def test_parse_mapping_pairs_strips_and_overrides() -> None:
    pairs = parse_mapping_pairs(
        [" Acme = com.example.acme ", "Acme=com.example.other", "u=https://x/?a=b"],
        option="--documented-module",
    )
    assert pairs == {"Acme": "com.example.other", "u": "https://x/?a=b"}, (
        "later duplicates win and only the first '=' separates"
    )


@pytest.mark.parametrize("pair", ["Acme", "=value", "name=", "  =  "])
def test_parse_mapping_pairs_rejects(pair: str) -> None:
    with pytest.raises(SiteConfigError, match="NAME=VALUE"):
        parse_mapping_pairs([pair], option="--external-docs")
