"""Tests for the navigation index and the sidebar builder.

The sidebar must flatten markers that duplicate their only child, expand
every collapsible on the path to the active page, and number disclosure
controls deterministically.
"""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from docc_pages.diagnostics import DiagnosticCollector
from docc_pages.generator.badges import PLACEHOLDER_BADGE, marker_for
from docc_pages.generator.navigation import (
    NavigationSidebarBuilder,
    flattened_target,
    module_name_for,
    partition,
)
from docc_pages.navigation_index import (
    NavigationIndex,
    NavigationIndexError,
    NavigationNode,
    parse_navigation_index,
)


def _leaf(title: str, path: str, node_type: str = "struct") -> NavigationNode:
    return NavigationNode(title=title, path=path, type=node_type)


def _marker(title: str) -> NavigationNode:
    return NavigationNode(title=title, type="groupMarker")


@pytest.fixture
def module_tree() -> NavigationNode:
    """Return a module with a flattenable group and an ordinary group."""
    tutorials = NavigationNode(
        title="Tutorials",
        path="/tutorials/acme",
        type="overview",
        children=(
            _leaf("Basics", "/tutorials/acme/basics", "tutorial"),
            _leaf("Advanced", "/tutorials/acme/advanced", "tutorial"),
        ),
    )
    rocket = NavigationNode(
        title="Rocket",
        path="/documentation/acme/rocket",
        type="struct",
        children=(_leaf("launch()", "/documentation/acme/rocket/launch()", "method"),),
    )
    return NavigationNode(
        title="Acme",
        path="/documentation/acme",
        type="module",
        children=(
            _leaf("Overview", "/documentation/acme/overview", "article"),
            _marker("Tutorials"),
            tutorials,
            _marker("Structures"),
            rocket,
            _leaf("Engine", "/documentation/acme/engine"),
        ),
    )


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestFlattening:
    def test_marker_with_matching_expandable_is_elided(
        self, module_tree: NavigationNode
    ) -> None:
        html = NavigationSidebarBuilder().build_sidebar(
            module_tree, "/documentation/acme", 2
        )
        soup = _soup(html)
        flattened = soup.select("section.sidebar-section.flattened")
        assert len(flattened) == 1, "exactly one flattened group is expected"
        group = flattened[0]
        heading = group.find("a", class_="sidebar-heading")
        assert heading.get_text() == "Tutorials"
        assert heading["href"] == "../../tutorials/acme/index.html", (
            "the flattened header links to the expandable node's own path"
        )
        items = group.find("ul", class_="sidebar-list").find_all("li", recursive=False)
        assert [item.find("a").get_text() for item in items] == ["Basics", "Advanced"], (
            "the expandable node's children are promoted one level"
        )
        assert group.select("li.expandable") == [], "no nested collapsible remains"

    def test_flattened_group_defaults_collapsed(
        self, module_tree: NavigationNode
    ) -> None:
        soup = _soup(
            NavigationSidebarBuilder().build_sidebar(module_tree, "/documentation/acme", 2)
        )
        control = soup.select_one("section.flattened > input.disclosure-checkbox")
        assert not control.has_attr("checked"), "unrelated flattened groups start collapsed"

    def test_ordinary_group_defaults_expanded(self, module_tree: NavigationNode) -> None:
        soup = _soup(
            NavigationSidebarBuilder().build_sidebar(module_tree, "/documentation/acme", 2)
        )
        groups = soup.select("section.sidebar-section:not(.flattened)")
        assert len(groups) == 1
        assert groups[0].find("label").get_text() == "Structures"
        assert groups[0].find("input").has_attr("checked"), "ordinary groups start expanded"

    def test_flattening_requires_single_member(self) -> None:
        expandable = NavigationNode(
            title="Tutorials",
            path="/tutorials/acme",
            children=(_leaf("A", "/a"),),
        )
        marker = _marker("tutorials")
        assert flattened_target(marker, [expandable]) is expandable, (
            "titles compare case-insensitively"
        )
        assert flattened_target(marker, [expandable, _leaf("B", "/b")]) is None
        assert flattened_target(marker, [_leaf("Tutorials", "/t")]) is None, (
            "non-expandable members never flatten"
        )


class TestExpandOnLoad:
    def test_active_descendant_forces_flattened_group_open(
        self, module_tree: NavigationNode
    ) -> None:
        soup = _soup(
            NavigationSidebarBuilder().build_sidebar(
                module_tree, "/tutorials/acme/advanced", 3
            )
        )
        control = soup.select_one("section.flattened > input.disclosure-checkbox")
        assert control.has_attr("checked"), "groups holding the active page are expanded"
        selected = soup.select("a.nav-link.selected")
        assert [link.get_text() for link in selected] == ["Advanced"]
        assert selected[0]["aria-current"] == "page"

    def test_deep_descendant_expands_ancestor_item(
        self, module_tree: NavigationNode
    ) -> None:
        soup = _soup(
            NavigationSidebarBuilder().build_sidebar(
                module_tree, "/Documentation/Acme/Rocket/launch()", 4
            )
        )
        rocket = soup.select_one("li.expandable")
        assert rocket.find("input")["id"].startswith("nav-")
        assert rocket.find("input").has_attr("checked"), (
            "ids compare case-insensitively and the whole subtree is searched"
        )
        link = soup.select_one("a.nav-link.selected")
        assert link["href"] == "../../../../documentation/acme/rocket/launch()/index.html"

    def test_unrelated_expandable_item_collapsed(
        self, module_tree: NavigationNode
    ) -> None:
        soup = _soup(
            NavigationSidebarBuilder().build_sidebar(
                module_tree, "/documentation/acme/engine", 3
            )
        )
        rocket = soup.select_one("li.expandable")
        assert not rocket.find("input").has_attr("checked")


def test_disclosure_ids_are_unique_and_deterministic(
    module_tree: NavigationNode,
) -> None:
    builder = NavigationSidebarBuilder()
    first = builder.build_sidebar(module_tree, "/documentation/acme/engine", 3)
    second = builder.build_sidebar(module_tree, "/documentation/acme/engine", 3)
    assert first == second, "repeated builds must produce identical markup"
    ids = [control["id"] for control in _soup(first).select("input.disclosure-checkbox")]
    assert ids == [f"nav-{index}" for index in range(len(ids))], (
        "ids are numbered in pre-order from zero"
    )
    labels = [label["for"] for label in _soup(first).select("label[for]")]
    assert sorted(labels) == sorted(ids), "every control has exactly one label"


def test_module_heading_links_to_module(module_tree: NavigationNode) -> None:
    soup = _soup(
        NavigationSidebarBuilder().build_sidebar(module_tree, "/documentation/acme", 2)
    )
    link = soup.select_one("a.sidebar-module-link")
    assert link["href"] == "../../documentation/acme/index.html"
    assert link.get_text() == "Acme"


def test_badges_and_icons_are_exclusive(module_tree: NavigationNode) -> None:
    soup = _soup(
        NavigationSidebarBuilder().build_sidebar(module_tree, "/documentation/acme", 2)
    )
    overview = soup.find("a", string="Overview").parent
    assert overview.find("span", class_="nav-icon") is not None
    assert overview.find("span", class_="badge") is None, "articles get an icon only"
    engine = soup.find("a", string="Engine").parent
    assert engine.find("span", class_="badge-struct").get_text() == "S"
    assert engine.find("span", class_="nav-icon") is None


def test_unknown_node_type_gets_placeholder_badge() -> None:
    marker = marker_for("hologram")
    assert (marker.badge, marker.badge_class) == PLACEHOLDER_BADGE
    assert marker_for("groupMarker").html() == ""


class TestBuildForDocument:
    def test_missing_module_falls_back_with_note(self) -> None:
        index = NavigationIndex(languages={"swift": ()})
        collector = DiagnosticCollector()
        builder = NavigationSidebarBuilder(index, fallback_title="Docs")
        html = builder.build_for_document(
            "/documentation/ghost", 2, report=collector
        )
        soup = _soup(html)
        assert soup.find("h2").get_text() == "Docs"
        assert soup.select(".sidebar-tree") == [], "the fallback sidebar has no tree"
        assert [item.level for item in collector.items] == ["note"]

    def test_locates_module_in_index(self, module_tree: NavigationNode) -> None:
        index = NavigationIndex(languages={"occ": (module_tree,)})
        builder = NavigationSidebarBuilder(index, language="swift")
        html = builder.build_for_document("/documentation/Acme/Engine", 3)
        assert "sidebar-tree" in html, "the first language is used when swift is absent"

    def test_both_sidebars_carry_the_filter(self, module_tree: NavigationNode) -> None:
        builder = NavigationSidebarBuilder()
        for html in (
            builder.build_sidebar(module_tree, "/documentation/acme", 2),
            builder.fallback_sidebar(),
        ):
            content = _soup(html).select_one("nav.doc-sidebar div.sidebar-content")
            field = content.select_one("div#sidebar-filter input.filter-input")
            assert field["aria-label"] == "Filter navigation"


def test_partition_splits_on_markers() -> None:
    a, b, c = _leaf("A", "/a"), _leaf("B", "/b"), _leaf("C", "/c")
    leading, groups = partition([a, _marker("G"), b, c, _marker("H")])
    assert leading == [a]
    assert [(marker.title, members) for marker, members in groups] == [
        ("G", [b, c]),
        ("H", []),
    ]


def test_module_name_for() -> None:
    assert module_name_for("/documentation/Acme/Rocket") == "Acme"
    assert module_name_for("/tutorials/acme") is None


class TestNavigationIndexParsing:
    def test_parses_languages_and_schema(self) -> None:
        index = parse_navigation_index(
            b'{"interfaceLanguages": {"swift": [{"title": "Acme", '
            b'"path": "/documentation/acme", "type": "module", "children": '
            b'[{"title": "Things", "type": "groupMarker"}]}]}, '
            b'"schemaVersion": {"major": 0, "minor": 1, "patch": 2}}'
        )
        assert index.schema_version == "0.1.2"
        root = index.roots("swift")[0]
        assert root.children[0].is_group_marker
        assert not root.is_expandable, "group markers alone do not make a node expandable"
        assert index.find_module("ACME", "swift") is root

    @pytest.mark.parametrize(
        "payload", [b"{not json", b"[]", b'{"schemaVersion": "1"}']
    )
    def test_rejects_malformed_index(self, payload: bytes) -> None:
        with pytest.raises(NavigationIndexError):
            parse_navigation_index(payload)
