"""Badge and icon lookup for navigation and topic entries.

API symbols show a short letter badge, documents and tutorials show a
pictogram, and structural nodes show neither. Unknown type tags fall back to
a generic placeholder badge so new symbol kinds still line up in lists.
"""

from __future__ import annotations

import dataclasses as dc
from html import escape

_DOCUMENT_ICON = (
    '<svg class="nav-icon-svg" viewBox="0 0 14 14" fill="none" aria-hidden="true">'
    '<path d="M3 1.5A.5.5 0 013.5 1h5.793a.5.5 0 01.353.146l2.208 2.208a.5.5 0 '
    '01.146.353V12.5a.5.5 0 01-.5.5h-8a.5.5 0 01-.5-.5v-11z" stroke="currentColor"/>'
    '<path d="M9 1v3h3" stroke="currentColor"/></svg>'
)
_TUTORIAL_ICON = (
    '<svg class="nav-icon-svg" viewBox="0 0 14 14" fill="none" aria-hidden="true">'
    '<path d="M7 2L2 4.5l5 2.5 5-2.5L7 2z" stroke="currentColor"/>'
    '<path d="M2 7l5 2.5L12 7" stroke="currentColor"/>'
    '<path d="M2 9.5l5 2.5 5-2.5" stroke="currentColor"/></svg>'
)

_ALIASES = {
    "structure": "struct",
    "enumeration": "enum",
    "initializer": "init",
    "deinitializer": "deinit",
    "function": "func",
    "method": "func",
    "instanceMethod": "func",
    "typeMethod": "func",
    "instanceProperty": "property",
    "typeProperty": "property",
    "variable": "var",
    "globalVariable": "var",
    "localVariable": "var",
    "constant": "let",
    "enumerationCase": "case",
    "instanceSubscript": "subscript",
    "typeSubscript": "subscript",
}

_BADGES: dict[str, tuple[str, str]] = {
    "class": ("C", "badge-class"),
    "struct": ("S", "badge-struct"),
    "enum": ("E", "badge-enum"),
    "case": ("E", "badge-enum"),
    "protocol": ("Pr", "badge-protocol"),
    "extension": ("Ex", "badge-module"),
    "func": ("M", "badge-func"),
    "init": ("M", "badge-func"),
    "deinit": ("M", "badge-func"),
    "property": ("P", "badge-var"),
    "var": ("P", "badge-var"),
    "let": ("P", "badge-var"),
    "subscript": ("Su", "badge-func"),
    "operator": ("Op", "badge-func"),
    "macro": ("Ma", "badge-macro"),
    "typealias": ("T", "badge-typealias"),
    "associatedtype": ("T", "badge-typealias"),
    "module": ("Mo", "badge-module"),
}

_ICONS = {
    "article": _DOCUMENT_ICON,
    "overview": _DOCUMENT_ICON,
    "tutorial": _TUTORIAL_ICON,
}

_UNMARKED = {"section", "groupMarker", "languageGroup", "link"}

PLACEHOLDER_BADGE = ("·", "badge-other")


@dc.dataclass(frozen=True, slots=True)
class NodeMarker:
    """Visual marker of a node: exactly one of badge or icon, or neither."""

    badge: str | None = None
    badge_class: str | None = None
    icon: str | None = None

    def html(self) -> str:
        """Return the marker markup, empty when the node has no marker."""
        if self.icon is not None:
            return f'<span class="nav-icon">{self.icon}</span>'
        if self.badge is not None:
            return (
                f'<span class="badge {self.badge_class}">{escape(self.badge)}</span>'
            )
        return ""


def canonical_type(type_tag: str) -> str:
    """Map synonyms such as ``instanceMethod`` onto one canonical tag."""
    return _ALIASES.get(type_tag, type_tag)


def marker_for(type_tag: str) -> NodeMarker:
    """Return the marker for a navigation type or topic kind tag.

    Examples
    --------
    >>> marker_for("structure").badge
    'S'
    >>> marker_for("tutorial").icon is not None
    True
    >>> marker_for("somethingNew").badge_class
    'badge-other'
    """
    canonical = canonical_type(type_tag)
    if canonical in _UNMARKED:
        return NodeMarker()
    if canonical in _ICONS:
        return NodeMarker(icon=_ICONS[canonical])
    badge, badge_class = _BADGES.get(canonical, PLACEHOLDER_BADGE)
    return NodeMarker(badge=badge, badge_class=badge_class)


__all__ = ["PLACEHOLDER_BADGE", "NodeMarker", "canonical_type", "marker_for"]
