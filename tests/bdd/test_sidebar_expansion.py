"""Behaviour tests for sidebar flattening and expand-on-load.

The scenarios in ``sidebar_expansion.feature`` build a sidebar from a small
module tree and check which disclosure checkboxes start checked.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from docc_pages.generator.links import depth_of
from docc_pages.generator.navigation import NavigationSidebarBuilder
from docc_pages.navigation_index import NavigationNode

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "sidebar_expansion.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _soup(scenario_state: dict[str, object]) -> BeautifulSoup:
    return BeautifulSoup(typ.cast("str", scenario_state["html"]), "html.parser")


@given(
    parsers.parse('a module tree with a "{marker}" marker over a "{title}" overview')
)
def given_module_tree(
    scenario_state: dict[str, object], marker: str, title: str
) -> None:
    """Store a module whose marker duplicates its only expandable member."""
    overview = NavigationNode(
        title=title,
        path="/tutorials/acme",
        type="overview",
        children=(
            NavigationNode("Basics", "/tutorials/acme/basics", "tutorial"),
            NavigationNode("Advanced", "/tutorials/acme/advanced", "tutorial"),
        ),
    )
    rocket = NavigationNode(
        title="Rocket",
        path="/documentation/acme/rocket",
        type="struct",
        children=(
            NavigationNode("launch()", "/documentation/acme/rocket/launch()", "method"),
        ),
    )
    scenario_state["tree"] = NavigationNode(
        title="Acme",
        path="/documentation/acme",
        type="module",
        children=(
            NavigationNode(marker, type="groupMarker"),
            overview,
            NavigationNode("Structures", type="groupMarker"),
            rocket,
            NavigationNode("Engine", "/documentation/acme/engine", "struct"),
        ),
    )


@when(parsers.parse('I build the sidebar for "{document_id}"'))
def when_build_sidebar(scenario_state: dict[str, object], document_id: str) -> None:
    """Render the sidebar as it appears on ``document_id``."""
    tree = typ.cast("NavigationNode", scenario_state["tree"])
    scenario_state["html"] = NavigationSidebarBuilder().build_sidebar(
        tree, document_id, depth_of(document_id)
    )


def _flattened_control(soup: BeautifulSoup, title: str) -> typ.Any:
    for group in soup.select("section.sidebar-section.flattened"):
        heading = group.find("a", class_="sidebar-heading")
        if heading is not None and heading.get_text() == title:
            return group.find("input", class_="disclosure-checkbox")
    pytest.fail(f"no flattened group titled {title!r}")


@then(parsers.parse('the flattened "{title}" group is expanded'))
def then_group_expanded(scenario_state: dict[str, object], title: str) -> None:
    control = _flattened_control(_soup(scenario_state), title)
    assert control.has_attr("checked"), f"expected {title!r} to start expanded"


@then(parsers.parse('the flattened "{title}" group is collapsed'))
def then_group_collapsed(scenario_state: dict[str, object], title: str) -> None:
    control = _flattened_control(_soup(scenario_state), title)
    assert not control.has_attr("checked"), f"expected {title!r} to start collapsed"


@then(parsers.parse('the "{title}" item is expanded'))
def then_item_expanded(scenario_state: dict[str, object], title: str) -> None:
    link = _soup(scenario_state).find("a", class_="nav-link", string=title)
    assert link is not None, f"no sidebar link named {title!r}"
    item = link.find_parent("li")
    assert "expandable" in item["class"]
    assert item.find("input").has_attr("checked"), f"expected {title!r} to be open"


@then(parsers.parse('the "{title}" link is marked as the current page'))
def then_link_current(scenario_state: dict[str, object], title: str) -> None:
    selected = _soup(scenario_state).select("a.nav-link.selected")
    assert [link.get_text() for link in selected] == [title]
    assert selected[0]["aria-current"] == "page"
