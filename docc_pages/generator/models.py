"""Shared dataclasses used by the archive generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path, PurePosixPath

    from docc_pages.diagnostics import Diagnostic


class PageCategory(enum.Enum):
    """Statistics bucket a rendered page is counted in."""

    MODULE = "module"
    SYMBOL = "symbol"
    ARTICLE = "article"
    TUTORIAL = "tutorial"
    OTHER = "other"


@dc.dataclass(frozen=True, slots=True)
class PageOutcome:
    """Result of rendering one document file.

    Attributes
    ----------
    source : Path
        Render-node JSON file the page came from.
    output_path : PurePosixPath or None
        Output-relative path of the page; ``None`` when rendering failed.
    html : str
        Finished page markup; empty when rendering failed.
    category : PageCategory
        Statistics bucket.
    diagnostics : tuple of Diagnostic
        Everything reported while rendering, in arrival order.
    """

    source: Path
    output_path: PurePosixPath | None
    html: str = ""
    category: PageCategory = PageCategory.OTHER
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def succeeded(self) -> bool:
        """Return ``True`` when a page was produced."""
        return self.output_path is not None


@dc.dataclass(slots=True)
class GenerationStats:
    """Page counters accumulated by the single writer."""

    generated_pages: int = 0
    modules_documented: int = 0
    symbols_documented: int = 0
    articles_generated: int = 0
    tutorials_generated: int = 0

    def record(self, category: PageCategory) -> None:
        """Count one written page."""
        self.generated_pages += 1
        match category:
            case PageCategory.MODULE:
                self.modules_documented += 1
            case PageCategory.SYMBOL:
                self.symbols_documented += 1
            case PageCategory.ARTICLE:
                self.articles_generated += 1
            case PageCategory.TUTORIAL:
                self.tutorials_generated += 1
            case PageCategory.OTHER:
                pass


@dc.dataclass(frozen=True, slots=True)
class GenerationResult:
    """Summary returned by :meth:`ArchiveGenerator.run`.

    Attributes
    ----------
    output_directory : Path
        Root the pages were written under.
    written : tuple of Path
        Page files in the order they were written.
    stats : GenerationStats
        Page counters.
    diagnostics : tuple of Diagnostic
        Merged warnings and notes from every document.
    """

    output_directory: Path
    written: tuple[Path, ...] = ()
    stats: GenerationStats = dc.field(default_factory=GenerationStats)
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def generated_pages(self) -> int:
        return self.stats.generated_pages

    @property
    def modules_documented(self) -> int:
        return self.stats.modules_documented

    @property
    def symbols_documented(self) -> int:
        return self.stats.symbols_documented

    @property
    def articles_generated(self) -> int:
        return self.stats.articles_generated

    @property
    def tutorials_generated(self) -> int:
        return self.stats.tutorials_generated

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        """Return only the ``warning``-level diagnostics."""
        return tuple(item for item in self.diagnostics if item.level == "warning")


__all__ = ["GenerationResult", "GenerationStats", "PageCategory", "PageOutcome"]
