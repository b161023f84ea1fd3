"""Build the collapsible navigation sidebar for reference pages.

The sidebar is rendered from the module's subtree of the shared navigation
index. Group markers split each sibling list into collapsible sections;
a marker whose only member is an expandable node with the same title is
folded into that node so the sidebar does not show the same heading twice.
Every collapsible control is a pre-rendered checkbox, so expanding and
collapsing needs CSS only.

Disclosure ids are numbered ``nav-0``, ``nav-1`` ... in pre-order. The
counter is threaded through the recursion as a return value and restarts
on every :meth:`NavigationSidebarBuilder.build_sidebar` call, so two builds
of the same tree produce identical markup.

Examples
--------
>>> from docc_pages.navigation_index import NavigationNode
>>> module = NavigationNode(
...     title="Acme",
...     path="/documentation/acme",
...     type="module",
...     children=(NavigationNode(title="Rocket", path="/documentation/acme/rocket"),),
... )
>>> html = NavigationSidebarBuilder().build_sidebar(module, "/documentation/acme", 2)
>>> 'href="../../documentation/acme/rocket/index.html"' in html
True
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from html import escape

from docc_pages._constants import DEFAULT_INTERFACE_LANGUAGE, DEFAULT_SITE_NAME
from docc_pages.diagnostics import Diagnostic, DiagnosticSink, discard
from docc_pages.generator.badges import marker_for
from docc_pages.generator.links import normalize_id, relative_link

if typ.TYPE_CHECKING:
    from docc_pages.navigation_index import NavigationIndex, NavigationNode

CHEVRON_SVG = (
    '<svg viewBox="0 0 10 10" aria-hidden="true">'
    '<path d="M3 2l4 3-4 3" fill="none" stroke="currentColor"/></svg>'
)
SIDEBAR_FILTER = (
    '<div class="sidebar-filter" id="sidebar-filter">'
    '<input type="text" placeholder="Filter" class="filter-input"'
    ' aria-label="Filter navigation">'
    '<span class="filter-shortcut">/</span>'
    "</div>"
)


@dc.dataclass(frozen=True, slots=True)
class _Context:
    active: str
    depth: int


def module_name_for(document_id: str) -> str | None:
    """Return the module segment of a ``/documentation/<module>/...`` id."""
    segments = [segment for segment in document_id.split("/") if segment]
    if len(segments) >= 2 and segments[0].lower() == "documentation":
        return segments[1]
    return None


def contains_active(node: NavigationNode, active: str) -> bool:
    """Return ``True`` when ``node`` or any descendant is the active page."""
    return any(
        candidate.path is not None and normalize_id(candidate.path) == active
        for candidate in node.walk()
    )


def flattened_target(
    marker: NavigationNode, members: typ.Sequence[NavigationNode]
) -> NavigationNode | None:
    """Return the node a marker folds into, or ``None`` when it stays a group.

    A marker folds when its segment holds exactly one node, that node is
    expandable, and its title equals the marker title ignoring case.
    """
    if len(members) != 1:
        return None
    candidate = members[0]
    if not candidate.is_expandable:
        return None
    if candidate.title.casefold() != marker.title.casefold():
        return None
    return candidate


def partition(
    nodes: typ.Sequence[NavigationNode],
) -> tuple[list[NavigationNode], list[tuple[NavigationNode, list[NavigationNode]]]]:
    """Split siblings into leading items and ``(marker, members)`` groups."""
    leading: list[NavigationNode] = []
    groups: list[tuple[NavigationNode, list[NavigationNode]]] = []
    for node in nodes:
        if node.is_group_marker:
            groups.append((node, []))
        elif groups:
            groups[-1][1].append(node)
        else:
            leading.append(node)
    return leading, groups


class NavigationSidebarBuilder:
    """Render navigation subtrees into sidebar HTML."""

    def __init__(
        self,
        index: NavigationIndex | None = None,
        *,
        language: str = DEFAULT_INTERFACE_LANGUAGE,
        fallback_title: str = DEFAULT_SITE_NAME,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        index : NavigationIndex, optional
            Shared navigation index; without one every page gets the
            fallback sidebar.
        language : str, optional
            Interface language tree to read from the index.
        fallback_title : str, optional
            Heading shown when a page's module is not in the index.
        """
        self.index = index
        self.language = language
        self.fallback_title = fallback_title

    def build_for_document(
        self,
        document_id: str,
        depth: int,
        *,
        report: DiagnosticSink = discard,
    ) -> str:
        """Locate the document's module in the index and render its sidebar.

        Falls back to :meth:`fallback_sidebar` and reports a note when the
        module cannot be found.
        """
        module_name = module_name_for(document_id)
        module = None
        if self.index is not None and module_name:
            module = self.index.find_module(module_name, self.language)
        if module is None:
            report(
                Diagnostic.note(
                    f"Module '{module_name or document_id}' not found in navigation "
                    "index; using fallback sidebar"
                )
            )
            return self.fallback_sidebar()
        return self.build_sidebar(module, document_id, depth)

    def fallback_sidebar(self) -> str:
        """Return the title-only sidebar."""
        return (
            '<nav class="doc-sidebar" aria-label="Documentation">'
            '<div class="sidebar-content">'
            f'<h2 class="sidebar-module">{escape(self.fallback_title)}</h2>'
            f"{SIDEBAR_FILTER}"
            "</div></nav>"
        )

    def build_sidebar(
        self, tree: NavigationNode, active_document_id: str, depth: int
    ) -> str:
        """Render ``tree`` as a sidebar for a page at ``depth``.

        Parameters
        ----------
        tree : NavigationNode
            Module root; its children become the sidebar entries.
        active_document_id : str
            Id of the page being rendered; its ancestors render expanded and
            its entry is marked ``selected``.
        depth : int
            Depth of the page being rendered.

        Returns
        -------
        str
            A ``<nav class="doc-sidebar">`` element.
        """
        ctx = _Context(active=normalize_id(active_document_id), depth=depth)
        body, _ = self._siblings(tree.children, ctx, 0, nested=False)
        title = escape(tree.title)
        if tree.path:
            href = escape(relative_link(tree.path, depth), quote=True)
            heading = (
                f'<a href="{href}" class="sidebar-module-link">'
                f'<h2 class="sidebar-module">{title}</h2></a>'
            )
        else:
            heading = f'<h2 class="sidebar-module">{title}</h2>'
        return (
            '<nav class="doc-sidebar" aria-label="Documentation">'
            f'<div class="sidebar-content">{heading}'
            f'<div class="sidebar-tree">{body}</div>'
            f"{SIDEBAR_FILTER}"
            "</div></nav>"
        )

    def _siblings(
        self,
        nodes: typ.Sequence[NavigationNode],
        ctx: _Context,
        next_id: int,
        *,
        nested: bool,
    ) -> tuple[str, int]:
        """Render one sibling list; nested lists emit ``<li>`` elements only."""
        leading, groups = partition(nodes)
        parts: list[str] = []
        if leading:
            items, next_id = self._items(leading, ctx, next_id)
            parts.append(items if nested else f'<ul class="sidebar-list">{items}</ul>')
        for marker, members in groups:
            target = flattened_target(marker, members)
            if target is not None:
                html, next_id = self._flattened_group(
                    marker, target, ctx, next_id, nested=nested
                )
            else:
                html, next_id = self._group(marker, members, ctx, next_id, nested=nested)
            parts.append(html)
        return "".join(parts), next_id

    def _items(
        self, nodes: typ.Sequence[NavigationNode], ctx: _Context, next_id: int
    ) -> tuple[str, int]:
        parts: list[str] = []
        for node in nodes:
            html, next_id = self._item(node, ctx, next_id)
            parts.append(html)
        return "".join(parts), next_id

    def _item(
        self, node: NavigationNode, ctx: _Context, next_id: int
    ) -> tuple[str, int]:
        selected = node.path is not None and normalize_id(node.path) == ctx.active
        classes = ["sidebar-item"]
        if selected:
            classes.append("selected")
        if node.deprecated:
            classes.append("deprecated")
        if node.beta:
            classes.append("beta")
        marker = marker_for(node.type).html()
        link = self._link(node.title, node.path, ctx, selected=selected)
        if not node.is_expandable:
            return f'<li class="{" ".join(classes)}">{marker}{link}</li>', next_id

        classes.append("expandable")
        control_id = f"nav-{next_id}"
        children, next_id = self._siblings(node.children, ctx, next_id + 1, nested=True)
        checked = " checked" if contains_active(node, ctx.active) else ""
        return (
            f'<li class="{" ".join(classes)}">'
            f'<input type="checkbox" id="{control_id}" class="disclosure-checkbox"{checked}>'
            f'<label for="{control_id}" class="disclosure-chevron" '
            f'aria-label="Toggle {escape(node.title, quote=True)}">{CHEVRON_SVG}</label>'
            f"{marker}{link}"
            f'<ul class="nav-children">{children}</ul></li>'
        ), next_id

    def _group(
        self,
        marker: NavigationNode,
        members: typ.Sequence[NavigationNode],
        ctx: _Context,
        next_id: int,
        *,
        nested: bool,
    ) -> tuple[str, int]:
        """Render an ordinary group; these default to expanded."""
        control_id = f"nav-{next_id}"
        items, next_id = self._items(members, ctx, next_id + 1)
        tag = "li" if nested else "section"
        return (
            f'<{tag} class="sidebar-section">'
            f'<input type="checkbox" id="{control_id}" class="disclosure-checkbox" checked>'
            f'<label for="{control_id}" class="sidebar-heading">'
            f"{CHEVRON_SVG}{escape(marker.title)}</label>"
            f'<ul class="sidebar-list">{items}</ul></{tag}>'
        ), next_id

    def _flattened_group(
        self,
        marker: NavigationNode,
        target: NavigationNode,
        ctx: _Context,
        next_id: int,
        *,
        nested: bool,
    ) -> tuple[str, int]:
        """Render a folded marker; collapsed unless it holds the active page."""
        control_id = f"nav-{next_id}"
        items, next_id = self._siblings(target.children, ctx, next_id + 1, nested=True)
        selected = target.path is not None and normalize_id(target.path) == ctx.active
        checked = " checked" if contains_active(target, ctx.active) else ""
        heading = self._link(
            marker.title,
            target.path,
            ctx,
            selected=selected,
            css_class="sidebar-heading nav-link",
        )
        tag = "li" if nested else "section"
        return (
            f'<{tag} class="sidebar-section flattened">'
            f'<input type="checkbox" id="{control_id}" class="disclosure-checkbox"{checked}>'
            f'<label for="{control_id}" class="disclosure-chevron" '
            f'aria-label="Toggle {escape(marker.title, quote=True)}">{CHEVRON_SVG}</label>'
            f"{heading}"
            f'<ul class="sidebar-list">{items}</ul></{tag}>'
        ), next_id

    @staticmethod
    def _link(
        title: str,
        path: str | None,
        ctx: _Context,
        *,
        selected: bool,
        css_class: str = "nav-link",
    ) -> str:
        classes = f"{css_class} selected" if selected else css_class
        if path is None:
            return f'<span class="{classes}">{escape(title)}</span>'
        href = escape(relative_link(path, ctx.depth), quote=True)
        current = ' aria-current="page"' if selected else ""
        return f'<a href="{href}" class="{classes}"{current}>{escape(title)}</a>'


__all__ = [
    "SIDEBAR_FILTER",
    "NavigationSidebarBuilder",
    "contains_active",
    "flattened_target",
    "module_name_for",
    "partition",
]
