"""Load render configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_theme_config,
    _optional_str,
    _positive_int,
    _string_mapping,
)
from .models import RenderConfig, SiteConfigError


def load_render_config(path: Path) -> RenderConfig:
    """Load the YAML configuration describing a render run.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``docc-pages.yaml``).

    Returns
    -------
    RenderConfig
        Parsed configuration with defaults applied to absent keys.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level structure is not a mapping or a key has the wrong
        shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docc_pages.config import load_render_config
    >>> config = load_render_config(Path("docc-pages.yaml"))  # doctest: +SKIP
    >>> config.interface_language  # doctest: +SKIP
    'swift'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    return build_render_config(loaded, base_dir=path.parent)


def build_render_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path | None = None
) -> RenderConfig:
    """Build a :class:`RenderConfig` from an already-parsed mapping.

    Relative ``archive`` and ``output_dir`` values are resolved against
    ``base_dir`` when given, so a config file works from any cwd.
    """
    defaults = RenderConfig()
    theme_raw = raw.get("theme") or {}
    if not isinstance(theme_raw, dict):
        msg = "'theme' must be a mapping."
        raise SiteConfigError(msg)

    archive = _optional_str(raw.get("archive"))
    output_dir = _optional_str(raw.get("output_dir"))
    return RenderConfig(
        archive=_resolve(Path(archive), base_dir) if archive else None,
        output_dir=(
            _resolve(Path(output_dir), base_dir) if output_dir else defaults.output_dir
        ),
        interface_language=_optional_str(raw.get("interface_language"))
        or defaults.interface_language,
        include_search=bool(raw.get("include_search", defaults.include_search)),
        footer=_optional_str(raw.get("footer")) or defaults.footer,
        pygments_style=_optional_str(raw.get("pygments_style"))
        or defaults.pygments_style,
        workers=_positive_int(
            raw.get("workers"), key="workers", default=defaults.workers
        ),
        link_scheme=_optional_str(raw.get("link_scheme")) or defaults.link_scheme,
        documented_modules=_string_mapping(
            raw.get("documented_modules"), key="documented_modules"
        ),
        external_docs=_string_mapping(raw.get("external_docs"), key="external_docs"),
        theme=_build_theme_config(theme_raw),
    )


def _resolve(path: Path, base_dir: Path | None) -> Path:
    if base_dir is None or path.is_absolute():
        return path
    return base_dir / path


__all__ = ["build_render_config", "load_render_config"]
