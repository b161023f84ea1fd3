"""Load and validate render configuration YAML for docc_pages runs.

This subpackage parses an optional ``docc-pages.yaml`` file, applies
defaults, and produces a typed :class:`RenderConfig` that the generator
consumes. The primary entry point is :func:`load_render_config`; the CLI
layers command-line overrides on top of its result.

Examples
--------
>>> from pathlib import Path
>>> from docc_pages.config import load_render_config
>>> config = load_render_config(Path("docc-pages.yaml"))  # doctest: +SKIP
>>> config.output_dir  # doctest: +SKIP
PosixPath('build/docs')
"""

from .helpers import parse_mapping_pairs
from .loader import build_render_config, load_render_config
from .models import RenderConfig, SiteConfigError, ThemeConfig

__all__ = [
    "RenderConfig",
    "SiteConfigError",
    "ThemeConfig",
    "build_render_config",
    "load_render_config",
    "parse_mapping_pairs",
]
