"""Assemble complete HTML pages from documents.

:class:`PageAssembler` picks one of three page templates by
:class:`~docc_pages.content_model.DocumentKind` and feeds it view models
built by :class:`~docc_pages.generator.sections.PageSections`. The
templates live under ``docc_pages/templates`` and share ``_layout.jinja``,
so every page gets the same head, asset links, and footer.

Example
-------
>>> from docc_pages.config import RenderConfig
>>> from docc_pages.content_model import Document, DocumentKind
>>> assembler = PageAssembler(RenderConfig())
>>> page = Document(id="/documentation/acme", kind=DocumentKind.REFERENCE)
>>> html = assembler.build_page(page)
>>> "<title>Acme</title>" in html
True
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from docc_pages._constants import (
    APPEARANCE_CHOICES,
    APPEARANCE_STORAGE_KEY,
    HOME_PAGE,
    SEARCH_SCRIPT_PATHS,
    STYLESHEET_PATH,
)
from docc_pages.content_model import DocumentKind
from docc_pages.diagnostics import DiagnosticSink, discard
from docc_pages.generator.links import relative_asset
from docc_pages.generator.navigation import NavigationSidebarBuilder
from docc_pages.generator.renderer import ContentRenderer
from docc_pages.generator.sections import PageSections

if typ.TYPE_CHECKING:
    from docc_pages.config import RenderConfig
    from docc_pages.content_model import Document

_ROLE_LABELS = {
    "collection": "Framework",
    "article": "Article",
    "tutorial": "Tutorial",
}

_SYMBOL_LABELS = {
    "class": "Class",
    "struct": "Structure",
    "enum": "Enumeration",
    "protocol": "Protocol",
    "typealias": "Type Alias",
    "func": "Function",
    "var": "Property",
    "property": "Property",
    "init": "Initializer",
    "macro": "Macro",
}

_TEMPLATES = {
    DocumentKind.REFERENCE: "reference_page.jinja",
    DocumentKind.TUTORIAL: "tutorial_page.jinja",
    DocumentKind.TUTORIAL_OVERVIEW: "tutorial_overview.jinja",
}

DOCUMENT_DECORATION = Markup(
    '<svg viewBox="0 0 120 120" aria-hidden="true">'
    '<rect x="30" y="18" width="60" height="84" rx="6" fill="none" '
    'stroke="currentColor" stroke-width="3"/>'
    '<path d="M42 40h36M42 54h36M42 68h24" stroke="currentColor" '
    'stroke-width="3" stroke-linecap="round"/>'
    '<path d="M18 46l-8 14 8 14M102 46l8 14-8 14" fill="none" '
    'stroke="currentColor" stroke-width="3"/></svg>'
)

BRACKETS_DECORATION = Markup(
    '<svg viewBox="0 0 120 120" aria-hidden="true">'
    '<path d="M44 30L16 60l28 30M76 30l28 30-28 30" fill="none" '
    'stroke="currentColor" stroke-width="6" stroke-linecap="round" '
    'stroke-linejoin="round"/></svg>'
)


def role_label(document: Document) -> str:
    """Return the eyebrow label shown above a reference page title.

    Examples
    --------
    >>> from docc_pages.content_model import Document, DocumentKind
    >>> rocket = Document(
    ...     id="/documentation/acme/rocket",
    ...     kind=DocumentKind.REFERENCE,
    ...     symbol_kind="struct",
    ... )
    >>> role_label(rocket)
    'Structure'
    """
    if document.role_heading:
        return document.role_heading
    if document.role in _ROLE_LABELS:
        return _ROLE_LABELS[document.role]
    if document.symbol_kind:
        return _SYMBOL_LABELS.get(
            document.symbol_kind, document.symbol_kind.capitalize()
        )
    if document.node_kind == "symbol":
        return "Symbol"
    return "Framework"


def page_title(document: Document) -> str:
    """Return the document title, falling back to its capitalised last segment."""
    if document.title:
        return document.title
    segments = document.segments
    if not segments:
        return ""
    last = segments[-1]
    return last[:1].upper() + last[1:]


def hero_decoration(document: Document) -> Markup:
    """Return the decoration for article-like heroes or empty markup."""
    match document.node_kind:
        case "overview":
            return BRACKETS_DECORATION
        case "article" | "tutorial":
            return DOCUMENT_DECORATION
        case _:
            if document.role in {"article", "collectionGroup"}:
                return DOCUMENT_DECORATION
            return Markup("")


class PageAssembler:
    """Compose full HTML documents for every page archetype."""

    def __init__(
        self,
        config: RenderConfig,
        navigation: NavigationSidebarBuilder | None = None,
        *,
        templates_dir: Path | None = None,
        renderer: ContentRenderer | None = None,
    ) -> None:
        """Prepare templates, renderer, and the shared footer.

        Parameters
        ----------
        config : RenderConfig
            Render options; supplies the footer, search toggle, and site name.
        navigation : NavigationSidebarBuilder, optional
            Sidebar builder shared by every reference page. Defaults to one
            without an index, which yields the fallback sidebar.
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to
            ``docc_pages/templates``.
        renderer : ContentRenderer, optional
            Content renderer to reuse; one is created from
            ``config.pygments_style`` when omitted.
        """
        self.config = config
        self.navigation = navigation or NavigationSidebarBuilder(
            language=config.interface_language,
            fallback_title=config.theme.site_name,
        )
        self.renderer = renderer or ContentRenderer(config.pygments_style)
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.footer_html = Markup(self.renderer.markdown(config.footer))

    def build_page(
        self, document: Document, *, report: DiagnosticSink = discard
    ) -> str:
        """Render ``document`` into a complete HTML page.

        Diagnostics raised while rendering content, breadcrumbs, or the
        sidebar are sent to ``report``.
        """
        renderer = self.renderer.with_sink(report)
        sections = PageSections(renderer, document, report=report)
        context = self._shared_context(document, sections)
        match document.kind:
            case DocumentKind.TUTORIAL:
                context |= self._tutorial_context(document, sections)
            case DocumentKind.TUTORIAL_OVERVIEW:
                context |= self._overview_context(sections)
            case _:
                context |= self._reference_context(document, sections, report)
        template = self.env.get_template(_TEMPLATES[document.kind])
        return template.render(**context)

    def _shared_context(
        self, document: Document, sections: PageSections
    ) -> dict[str, typ.Any]:
        depth = document.depth
        abstract = sections.inline(document.abstract or ())
        scripts = (
            [relative_asset(path, depth) for path in SEARCH_SCRIPT_PATHS]
            if self.config.include_search
            else []
        )
        return {
            "page_title": page_title(document),
            "description": abstract.plain_text.strip(),
            "abstract_html": Markup(abstract.html),
            "stylesheet_href": relative_asset(STYLESHEET_PATH, depth),
            "script_srcs": scripts,
            "home_href": relative_asset(HOME_PAGE, depth),
            "site_name": self.config.theme.site_name,
            "footer_html": self.footer_html,
            "appearance_choices": APPEARANCE_CHOICES,
            "appearance_storage_key": APPEARANCE_STORAGE_KEY,
        }

    def _reference_context(
        self,
        document: Document,
        sections: PageSections,
        report: DiagnosticSink,
    ) -> dict[str, typ.Any]:
        sidebar = self.navigation.build_for_document(
            document.id, document.depth, report=report
        )
        return {
            "sidebar_html": Markup(sidebar),
            "breadcrumbs": sections.breadcrumbs(),
            "eyebrow": role_label(document),
            "decoration": hero_decoration(document),
            "declarations": sections.declarations(),
            "sections": sections.reference_sections(),
            "topic_groups": sections.topic_groups(document.topic_groups),
            "relationships": sections.relationship_groups(),
            "see_also_groups": sections.topic_groups(document.see_also_groups),
        }

    def _tutorial_context(
        self, document: Document, sections: PageSections
    ) -> dict[str, typ.Any]:
        title = page_title(document)
        return {
            "overview": sections.overview_link(self.config.theme.tutorials_label),
            "chapter_menu": sections.chapter_menu(title),
            "section_menu": sections.section_menu(),
            "hero": sections.tutorial_hero(),
            "tasks": sections.tasks(),
            "assessments": sections.assessments(),
            "call_to_action": sections.call_to_action(),
        }

    def _overview_context(self, sections: PageSections) -> dict[str, typ.Any]:
        return {
            "hero": sections.overview_hero(),
            "volumes": sections.volumes(),
            "resources": sections.resources(),
        }


__all__ = ["PageAssembler", "hero_decoration", "page_title", "role_label"]
