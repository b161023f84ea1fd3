"""Whole-site navigation tree loaded once per generation run.

The archive ships ``index/index.json`` describing every page as a tree per
interface language. :func:`load_navigation_index` decodes it with
:mod:`msgspec.json` and converts it into immutable :class:`NavigationNode`
values that every page render shares read-only.

Examples
--------
>>> from docc_pages.navigation_index import NavigationNode
>>> node = NavigationNode(title="Acme", path="/documentation/acme", type="module")
>>> node.is_expandable
False
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec
import msgspec.json as msgspec_json

if typ.TYPE_CHECKING:
    from pathlib import Path

GROUP_MARKER = "groupMarker"


class NavigationIndexError(ValueError):
    """Raised when the navigation index cannot be decoded."""


@dc.dataclass(frozen=True, slots=True)
class NavigationNode:
    """Node of the navigation tree.

    Attributes
    ----------
    title : str
        Label shown in the sidebar.
    path : str or None
        Canonical id of the page; group markers have none.
    type : str
        Raw node type tag such as ``struct`` or ``groupMarker``.
    children : tuple of NavigationNode
        Child nodes in display order.
    deprecated, external, beta : bool
        Status flags carried through to CSS classes.
    """

    title: str
    path: str | None = None
    type: str = "symbol"
    children: tuple[NavigationNode, ...] = ()
    deprecated: bool = False
    external: bool = False
    beta: bool = False

    @property
    def is_group_marker(self) -> bool:
        """Return ``True`` for section headers that are not destinations."""
        return self.type == GROUP_MARKER

    @property
    def is_expandable(self) -> bool:
        """Return ``True`` when at least one child is a real destination."""
        return any(not child.is_group_marker for child in self.children)

    def walk(self) -> typ.Iterator[NavigationNode]:
        """Yield this node and every descendant in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dc.dataclass(frozen=True, slots=True)
class NavigationIndex:
    """Navigation roots keyed by interface language."""

    languages: typ.Mapping[str, tuple[NavigationNode, ...]] = dc.field(
        default_factory=dict
    )
    schema_version: str | None = None

    def roots(self, language: str) -> tuple[NavigationNode, ...]:
        """Return the top-level nodes for ``language``.

        Falls back to the first language present when ``language`` is
        missing, since single-language archives may use another key.
        """
        if language in self.languages:
            return self.languages[language]
        for nodes in self.languages.values():
            return nodes
        return ()

    def find_module(self, module_name: str, language: str) -> NavigationNode | None:
        """Return the node whose path ends with ``/<module_name>``.

        The comparison is case-insensitive; the first match in pre-order
        wins.
        """
        suffix = "/" + module_name.strip("/").lower()
        for root in self.roots(language):
            for node in root.walk():
                if node.path and node.path.rstrip("/").lower().endswith(suffix):
                    return node
        return None


def load_navigation_index(path: Path) -> NavigationIndex:
    """Read and decode the navigation index at ``path``.

    Raises
    ------
    OSError
        If the file cannot be read.
    NavigationIndexError
        If the content is not JSON or not shaped like a navigation index.
    """
    return parse_navigation_index(path.read_bytes())


def parse_navigation_index(raw: bytes | str) -> NavigationIndex:
    """Decode navigation index JSON."""
    try:
        payload = msgspec_json.decode(raw)
    except msgspec.DecodeError as exc:
        msg = f"Navigation index is not valid JSON: {exc}"
        raise NavigationIndexError(msg) from exc
    if not isinstance(payload, dict):
        msg = "Navigation index must be a JSON object."
        raise NavigationIndexError(msg)
    languages_raw = payload.get("interfaceLanguages")
    if not isinstance(languages_raw, dict):
        msg = "Navigation index is missing 'interfaceLanguages'."
        raise NavigationIndexError(msg)

    languages: dict[str, tuple[NavigationNode, ...]] = {}
    for language, nodes in languages_raw.items():
        match nodes:
            case list():
                languages[str(language)] = _parse_nodes(nodes)
            case _:
                continue
    version = payload.get("schemaVersion")
    match version:
        case dict():
            schema_version = ".".join(
                str(version.get(part, 0)) for part in ("major", "minor", "patch")
            )
        case None:
            schema_version = None
        case _:
            schema_version = str(version)
    return NavigationIndex(languages=languages, schema_version=schema_version)


def _parse_nodes(items: list[typ.Any]) -> tuple[NavigationNode, ...]:
    return tuple(_parse_node(item) for item in items if isinstance(item, dict))


def _parse_node(item: typ.Mapping[str, typ.Any]) -> NavigationNode:
    children = item.get("children")
    path = item.get("path")
    return NavigationNode(
        title=str(item.get("title", "")),
        path=str(path) if path else None,
        type=str(item.get("type") or "symbol"),
        children=_parse_nodes(children) if isinstance(children, list) else (),
        deprecated=bool(item.get("deprecated", False)),
        external=bool(item.get("external", False)),
        beta=bool(item.get("beta", False)),
    )


__all__ = [
    "GROUP_MARKER",
    "NavigationIndex",
    "NavigationIndexError",
    "NavigationNode",
    "load_navigation_index",
    "parse_navigation_index",
]
