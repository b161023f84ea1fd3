"""Typed dataclasses describing docc_pages render configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from docc_pages._constants import (
    DEFAULT_FOOTER,
    DEFAULT_INTERFACE_LANGUAGE,
    DEFAULT_LINK_SCHEME,
    DEFAULT_SITE_NAME,
)


class SiteConfigError(ValueError):
    """Raised when the render configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ThemeConfig:
    """Labels applied to generated pages."""

    site_name: str = DEFAULT_SITE_NAME
    tutorials_label: str = "Tutorials"


@dc.dataclass(slots=True)
class RenderConfig:
    """A fully resolved render configuration.

    Attributes
    ----------
    archive : Path or None
        Compiled documentation archive to read; the CLI supplies it when the
        YAML file does not.
    output_dir : Path
        Directory receiving one ``index.html`` per document.
    interface_language : str
        Navigation index language tree used for sidebars.
    include_search : bool
        Whether pages reference the search scripts.
    footer : str
        Footer Markdown rendered once per run.
    pygments_style : str
        Pygments style name used by the code formatter.
    workers : int
        Thread pool size; ``1`` renders serially.
    link_scheme : str
        Scheme of cross-document tokens rewritten after rendering.
    documented_modules : dict[str, str]
        Module name to bundle id for modules documented in this run.
    external_docs : dict[str, str]
        Bundle id to base URL for modules documented elsewhere.
    theme : ThemeConfig
        Page labels.
    """

    archive: Path | None = None
    output_dir: Path = Path("build/docs")
    interface_language: str = DEFAULT_INTERFACE_LANGUAGE
    include_search: bool = True
    footer: str = DEFAULT_FOOTER
    pygments_style: str = "default"
    workers: int = 1
    link_scheme: str = DEFAULT_LINK_SCHEME
    documented_modules: dict[str, str] = dc.field(default_factory=dict)
    external_docs: dict[str, str] = dc.field(default_factory=dict)
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)


__all__ = ["RenderConfig", "SiteConfigError", "ThemeConfig"]
