"""Rendering, navigation, and archive generation for documentation pages."""

from .link_rewriter import DocLinkPostProcessor
from .models import GenerationResult, GenerationStats, PageCategory, PageOutcome
from .navigation import NavigationSidebarBuilder
from .page_builder import PageAssembler
from .page_generator import ArchiveError, ArchiveGenerator
from .renderer import ContentRenderer

__all__ = [
    "ArchiveError",
    "ArchiveGenerator",
    "ContentRenderer",
    "DocLinkPostProcessor",
    "GenerationResult",
    "GenerationStats",
    "NavigationSidebarBuilder",
    "PageAssembler",
    "PageCategory",
    "PageOutcome",
]
