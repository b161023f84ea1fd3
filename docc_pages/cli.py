"""Cyclopts CLI entrypoint for rendering documentation archives to static HTML.

The ``docc-pages`` console script defined here reads a compiled
documentation archive, renders one ``index.html`` per documented entity,
and reports what it wrote. Options can come from a YAML file, from flags,
or from ``INPUT_*`` environment variables, which keeps the command usable
as a CI action step.

Examples
--------
Render an archive with defaults:

>>> from docc_pages.cli import main
>>> main()  # doctest: +SKIP

Render into a custom directory and link an external module:

>>> from docc_pages.cli import app
>>> app(
...     [
...         "render",
...         "Acme.doccarchive",
...         "--output-dir",
...         "site",
...         "--external-docs",
...         "com.example.core=https://docs.example.com/core/",
...     ]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
import structlog
from cyclopts import App, Parameter

from .config import RenderConfig, load_render_config, parse_mapping_pairs
from .generator import ArchiveGenerator

if typ.TYPE_CHECKING:
    from .generator import GenerationResult

app = App(name="docc-pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def configure_logging(level: str = "WARNING") -> None:
    """Send structlog events to stderr at ``level`` and above."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    )


def summarize(result: GenerationResult) -> str:
    """Return the one-line run summary printed after rendering.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docc_pages.generator import GenerationResult, GenerationStats
    >>> stats = GenerationStats(generated_pages=3, modules_documented=1)
    >>> summarize(GenerationResult(Path("site"), stats=stats))
    'rendered 3 pages (1 modules, 0 symbols, 0 articles, 0 tutorials), 0 warnings'
    """
    return (
        f"rendered {result.generated_pages} pages "
        f"({result.modules_documented} modules, "
        f"{result.symbols_documented} symbols, "
        f"{result.articles_generated} articles, "
        f"{result.tutorials_generated} tutorials), "
        f"{len(result.warnings)} warnings"
    )


def build_config(  # noqa: PLR0913 - mirrors the CLI surface
    *,
    archive: Path | None,
    config: Path | None,
    output_dir: Path | None,
    disable_search: bool,
    footer: str | None,
    external_docs: typ.Sequence[str],
    documented_modules: typ.Sequence[str],
    workers: int | None,
    language: str | None,
) -> RenderConfig:
    """Merge the YAML file (when given) with command-line overrides."""
    base = load_render_config(config) if config else RenderConfig()
    external = dict(base.external_docs)
    external.update(parse_mapping_pairs(external_docs, option="--external-docs"))
    modules = dict(base.documented_modules)
    modules.update(
        parse_mapping_pairs(documented_modules, option="--documented-module")
    )
    return dc.replace(
        base,
        archive=archive or base.archive,
        output_dir=output_dir or base.output_dir,
        include_search=base.include_search and not disable_search,
        footer=footer if footer is not None else base.footer,
        external_docs=external,
        documented_modules=modules,
        workers=workers or base.workers,
        interface_language=language or base.interface_language,
    )


@app.command(help="Render a compiled documentation archive into static HTML.")
def render(  # noqa: PLR0913 - one parameter per option
    archive: typ.Annotated[
        Path | None,
        Parameter(help="Documentation archive directory", env_var="INPUT_ARCHIVE"),
    ] = None,
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to render config", env_var="INPUT_CONFIG")
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    disable_search: typ.Annotated[
        bool,
        Parameter(
            help="Omit the search script tags", env_var="INPUT_DISABLE_SEARCH"
        ),
    ] = False,
    footer: typ.Annotated[
        str | None,
        Parameter(help="Footer Markdown shown on every page", env_var="INPUT_FOOTER"),
    ] = None,
    external_docs: typ.Annotated[
        list[str] | None,
        Parameter(help="External bundle links as BUNDLE_ID=BASE_URL"),
    ] = None,
    documented_module: typ.Annotated[
        list[str] | None,
        Parameter(help="Extra documented modules as NAME=BUNDLE_ID"),
    ] = None,
    workers: typ.Annotated[
        int | None,
        Parameter(help="Render with a thread pool of this size", env_var="INPUT_WORKERS"),
    ] = None,
    language: typ.Annotated[
        str | None,
        Parameter(help="Navigation index interface language", env_var="INPUT_LANGUAGE"),
    ] = None,
    log_level: typ.Annotated[
        str, Parameter(help="Minimum log level", env_var="INPUT_LOG_LEVEL")
    ] = "WARNING",
) -> None:
    """Render every document in an archive and print the written paths.

    Parameters
    ----------
    archive : Path or None, optional
        Archive directory; falls back to ``archive`` in the config file.
    config : Path or None, optional
        YAML render configuration (overridable via ``INPUT_CONFIG``).
    output_dir : Path or None, optional
        Output directory override.
    disable_search : bool, optional
        Drop the search script tags from every page.
    footer : str or None, optional
        Footer Markdown override.
    external_docs : list[str] or None, optional
        ``BUNDLE_ID=BASE_URL`` pairs for modules documented elsewhere.
    documented_module : list[str] or None, optional
        ``NAME=BUNDLE_ID`` pairs for modules documented alongside this one.
    workers : int or None, optional
        Thread pool size; ``1`` renders serially.
    language : str or None, optional
        Interface language tree used for sidebars.
    log_level : str, optional
        Minimum structlog level written to stderr.

    Raises
    ------
    ArchiveError
        If the archive is missing, lacks a ``data`` directory, or carries an
        unreadable navigation index.
    SiteConfigError
        If the configuration file or a ``NAME=VALUE`` option is malformed.
    """
    configure_logging(log_level)
    render_config = build_config(
        archive=archive,
        config=config,
        output_dir=output_dir,
        disable_search=disable_search,
        footer=footer,
        external_docs=external_docs or [],
        documented_modules=documented_module or [],
        workers=workers,
        language=language,
    )
    result = ArchiveGenerator(render_config).run()
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    for warning in result.warnings:
        print(str(warning), file=sys.stderr)
    print(summarize(result))


def main() -> None:
    """Invoke the Cyclopts application behind the ``docc-pages`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
