"""High-level orchestration for rendering a compiled documentation archive.

:class:`ArchiveGenerator` reads ``data/**/*.json`` render nodes and the
shared ``index/index.json`` navigation tree from an archive, renders every
document through :class:`~docc_pages.generator.page_builder.PageAssembler`
and :class:`~docc_pages.generator.link_rewriter.DocLinkPostProcessor`, and
writes one ``index.html`` per document under the configured output
directory.

Documents are loaded and rendered by a pure per-document function, either
serially or on a thread pool. Outcomes come back in input order and a
single writer writes files, updates counters, and merges diagnostics, so
no shared state is touched concurrently.

Example
-------
>>> from pathlib import Path
>>> from docc_pages.config import RenderConfig
>>> from docc_pages.generator import ArchiveGenerator
>>> config = RenderConfig(archive=Path("Acme.doccarchive"))  # doctest: +SKIP
>>> ArchiveGenerator(config).run().generated_pages  # doctest: +SKIP
42
"""

from __future__ import annotations

import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import msgspec
import structlog

from docc_pages.content_model import Document, DocumentKind
from docc_pages.content_parser import DocumentDecodeError, load_document
from docc_pages.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    SourceLocation,
    log_diagnostic,
)
from docc_pages.generator.link_rewriter import DocLinkPostProcessor
from docc_pages.generator.links import normalize_id, output_path_for
from docc_pages.generator.models import (
    GenerationResult,
    GenerationStats,
    PageCategory,
    PageOutcome,
)
from docc_pages.generator.navigation import NavigationSidebarBuilder
from docc_pages.generator.page_builder import PageAssembler
from docc_pages.navigation_index import (
    NavigationIndex,
    NavigationIndexError,
    load_navigation_index,
)

if typ.TYPE_CHECKING:
    from docc_pages.config import RenderConfig

logger = structlog.get_logger(__name__)

DOCUMENT_ROOTS = ("documentation", "tutorials")
_T = typ.TypeVar("_T")
_R = typ.TypeVar("_R")


class ArchiveError(RuntimeError):
    """Raised when the archive cannot be rendered at all."""


def is_module_page(document: Document) -> bool:
    """Return ``True`` for ``/documentation/<module>`` pages."""
    segments = document.segments
    return len(segments) == 2 and segments[0].lower() == "documentation"  # noqa: PLR2004


def page_category(document: Document) -> PageCategory:
    """Return the statistics bucket for ``document``."""
    match document.kind:
        case DocumentKind.TUTORIAL:
            return PageCategory.TUTORIAL
        case DocumentKind.TUTORIAL_OVERVIEW:
            return PageCategory.OTHER
        case _:
            pass
    if document.role == "collection" or is_module_page(document):
        return PageCategory.MODULE
    if document.node_kind == "article" or document.role in {
        "article",
        "collectionGroup",
    }:
        return PageCategory.ARTICLE
    if document.node_kind == "symbol":
        return PageCategory.SYMBOL
    return PageCategory.OTHER


def discover_modules(documents: typ.Iterable[Document]) -> dict[str, str]:
    """Return module name to bundle id for every module page in ``documents``."""
    modules: dict[str, str] = {}
    for document in documents:
        if not is_module_page(document) or not document.bundle_id:
            continue
        name = document.title or document.segments[1]
        modules[name] = document.bundle_id
    return modules


class ArchiveGenerator:
    """Render every document in an archive into static HTML pages."""

    def __init__(
        self,
        config: RenderConfig,
        *,
        archive: Path | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        config : RenderConfig
            Render options, output directory, and link mappings.
        archive : Path, optional
            Archive directory; overrides ``config.archive``.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.

        Raises
        ------
        ArchiveError
            If neither ``archive`` nor ``config.archive`` is set.
        """
        resolved = archive or config.archive
        if resolved is None:
            msg = "No documentation archive was configured."
            raise ArchiveError(msg)
        self.config = config
        self.archive = resolved
        self.templates_dir = templates_dir

    @property
    def data_dir(self) -> Path:
        return self.archive / "data"

    @property
    def index_path(self) -> Path:
        return self.archive / "index" / "index.json"

    def run(self) -> GenerationResult:
        """Render the archive and write every page.

        Returns
        -------
        GenerationResult
            Written paths, page counters, and merged diagnostics.

        Raises
        ------
        ArchiveError
            If the archive or its ``data`` directory is missing, or if the
            navigation index exists but cannot be decoded.

        Notes
        -----
        Output files are created or overwritten; stale pages from earlier
        runs are left in place.
        """
        self._check_archive()
        run_diagnostics = DiagnosticCollector()
        index = self._load_navigation(run_diagnostics)
        paths = self.document_paths()
        logger.info(
            "GENERATION_STARTED",
            archive=str(self.archive),
            documents=len(paths),
            workers=self.config.workers,
        )

        loaded = self._map(self._load, paths)
        documents = [item for item in loaded if isinstance(item, tuple)]
        modules = discover_modules(document for _, document in documents)
        modules.update(self.config.documented_modules)

        navigation = NavigationSidebarBuilder(
            index,
            language=self.config.interface_language,
            fallback_title=self.config.theme.site_name,
        )
        assembler = PageAssembler(
            self.config, navigation, templates_dir=self.templates_dir
        )
        postprocessor = DocLinkPostProcessor(
            modules, self.config.external_docs, scheme=self.config.link_scheme
        )

        def render_one(item: tuple[Path, Document] | PageOutcome) -> PageOutcome:
            if isinstance(item, PageOutcome):
                return item
            source, document = item
            try:
                return self.render_document(
                    source, document, assembler, postprocessor
                )
            except Exception as exc:  # noqa: BLE001 - one page never aborts the run
                logger.exception("PAGE_RENDER_FAILED", source=str(source))
                warning = Diagnostic.warning(
                    f"Skipped document that failed to render: {exc}",
                    SourceLocation(file=str(source)),
                )
                return PageOutcome(
                    source=source, output_path=None, diagnostics=(warning,)
                )

        outcomes = self._map(render_one, loaded)
        return self._write(outcomes, run_diagnostics)

    def document_paths(self) -> list[Path]:
        """Return render-node files under ``data/`` in sorted order."""
        paths: list[Path] = []
        for root in DOCUMENT_ROOTS:
            folder = self.data_dir / root
            if folder.is_dir():
                paths.extend(folder.rglob("*.json"))
        return sorted(paths)

    @staticmethod
    def render_document(
        source: Path,
        document: Document,
        assembler: PageAssembler,
        postprocessor: DocLinkPostProcessor,
    ) -> PageOutcome:
        """Render one parsed document into a :class:`PageOutcome`.

        Diagnostics without a location are attributed to ``source``.
        """
        collector = DiagnosticCollector()
        html = assembler.build_page(document, report=collector)
        html = postprocessor.process(html, document.depth, report=collector)
        location = SourceLocation(file=str(source))
        diagnostics = tuple(
            item if item.location else item.with_location(location)
            for item in collector.items
        )
        return PageOutcome(
            source=source,
            output_path=output_path_for(document.id),
            html=html,
            category=page_category(document),
            diagnostics=diagnostics,
        )

    def _check_archive(self) -> None:
        if not self.archive.is_dir():
            msg = f"Documentation archive not found: {self.archive}"
            raise ArchiveError(msg)
        if not self.data_dir.is_dir():
            msg = f"Archive has no data directory: {self.data_dir}"
            raise ArchiveError(msg)

    def _load_navigation(
        self, report: DiagnosticCollector
    ) -> NavigationIndex | None:
        if not self.index_path.is_file():
            report(
                Diagnostic.note(
                    "Navigation index not found; pages use the fallback sidebar",
                    SourceLocation(file=str(self.index_path)),
                )
            )
            return None
        try:
            return load_navigation_index(self.index_path)
        except (NavigationIndexError, OSError) as exc:
            msg = f"Cannot read navigation index {self.index_path}: {exc}"
            raise ArchiveError(msg) from exc

    @staticmethod
    def _load(path: Path) -> tuple[Path, Document] | PageOutcome:
        try:
            return path, load_document(path)
        except (msgspec.DecodeError, OSError, DocumentDecodeError) as exc:
            warning = Diagnostic.warning(
                f"Skipped unreadable document: {exc}",
                SourceLocation(file=str(path)),
            )
            return PageOutcome(source=path, output_path=None, diagnostics=(warning,))

    def _map(
        self, func: typ.Callable[[_T], _R], items: typ.Sequence[_T]
    ) -> list[_R]:
        """Apply ``func`` to ``items`` preserving order."""
        if self.config.workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            return list(pool.map(func, items))

    def _write(
        self,
        outcomes: typ.Iterable[PageOutcome],
        run_diagnostics: DiagnosticCollector,
    ) -> GenerationResult:
        out_dir = self.config.output_dir
        out_dir.mkdir(parents=True, exist_ok=True)
        stats = GenerationStats()
        diagnostics = list(run_diagnostics.items)
        written: list[Path] = []
        seen: dict[str, Path] = {}
        for outcome in outcomes:
            diagnostics.extend(outcome.diagnostics)
            if outcome.output_path is None:
                continue
            key = normalize_id(str(outcome.output_path))
            if key in seen:
                diagnostics.append(
                    Diagnostic.warning(
                        f"Duplicate page {outcome.output_path}; "
                        f"already written from {seen[key]}",
                        SourceLocation(file=str(outcome.source)),
                    )
                )
                continue
            seen[key] = outcome.source
            target = out_dir / outcome.output_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(outcome.html, encoding="utf-8")
            written.append(target)
            stats.record(outcome.category)
            logger.debug("PAGE_WRITTEN", path=str(target))

        for diagnostic in diagnostics:
            log_diagnostic(diagnostic)
        result = GenerationResult(
            output_directory=out_dir,
            written=tuple(written),
            stats=stats,
            diagnostics=tuple(diagnostics),
        )
        logger.info(
            "GENERATION_COMPLETE",
            output_directory=str(out_dir),
            pages=stats.generated_pages,
            modules=stats.modules_documented,
            symbols=stats.symbols_documented,
            articles=stats.articles_generated,
            tutorials=stats.tutorials_generated,
            warnings=len(result.warnings),
        )
        return result


__all__ = [
    "DOCUMENT_ROOTS",
    "ArchiveError",
    "ArchiveGenerator",
    "discover_modules",
    "is_module_page",
    "page_category",
]
