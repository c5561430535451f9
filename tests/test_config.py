"""Tests for loading agentstatic.yaml."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from agentstatic.config import AgentStaticConfig, ConfigError, load_config
from agentstatic.partials import RenderContext


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "agentstatic.yaml"
    path.write_text(dedent(text).lstrip(), encoding="utf-8")
    return path


def test_load_full_config(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        engine:
          max_depth: 4
          scope_prefix: site
          wrap_tag: section
        site:
          name: Example Docs
          base_url: https://example.com/
          locale: en-GB
          development: true
        partials:
          modules:
            - mysite.partials
            - ""
        """,
    )

    config = load_config(path)

    assert config.engine.max_depth == 4
    assert config.engine.scope_prefix == "site"
    assert config.engine.wrap_tag == "section"
    assert config.site.base_url == "https://example.com"
    assert config.site.locale == "en-GB"
    assert config.site.theme is None
    assert config.site.is_development is True
    assert config.partial_modules == ["mysite.partials"]


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    assert load_config(_write(tmp_path, "")) == AgentStaticConfig()


def test_null_wrap_tag_disables_wrapping(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, "engine:\n  wrap_tag: null\n"))

    assert config.engine.wrap_tag is None


def test_single_module_string_is_accepted(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, "partials:\n  modules: mysite.partials\n"))

    assert config.partial_modules == ["mysite.partials"]


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("engine:\n  max_depth: 0\n", "max_depth"),
        ("engine:\n  max_depth: yes\n", "max_depth"),
        ("engine:\n  scope_prefix: 9x\n", "scope_prefix"),
        ("engine:\n  wrap_tag: '<div>'\n", "wrap_tag"),
        ("engine: [1, 2]\n", "Section 'engine'"),
        ("partials:\n  modules: {a: b}\n", "partials.modules"),
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        load_config(_write(tmp_path, text))


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="mapping"):
        load_config(_write(tmp_path, "- a\n- b\n"))


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_render_context_from_site_settings(tmp_path: Path) -> None:
    config = load_config(
        _write(tmp_path, "site:\n  name: Docs\n  base_url: https://docs.example\n  theme: dark\n")
    )

    context = RenderContext.from_config(config.site, current_path="/guide")

    assert context == RenderContext(
        current_path="/guide",
        site_name="Docs",
        base_url="https://docs.example",
        theme="dark",
    )
