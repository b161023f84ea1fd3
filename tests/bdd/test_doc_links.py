"""Behaviour tests for rewriting leftover ``doc://`` tokens.

``doc_links.feature`` renders the shared fixture archive end to end and
checks the anchors produced for documented, external, and unknown
bundles. The ``populated_archive`` fixture from ``tests/conftest.py``
provides the render nodes.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from docc_pages.config import RenderConfig
from docc_pages.generator import ArchiveGenerator

if typ.TYPE_CHECKING:
    from conftest import ArchiveFactory

    from docc_pages.generator import GenerationResult

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "doc_links.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {"external_docs": {}}


@given(parsers.parse('an archive documenting the "{module}" module'))
def given_archive(
    scenario_state: dict[str, object],
    populated_archive: ArchiveFactory,
    module: str,
) -> None:
    """Use the shared fixture archive, whose module page is ``module``."""
    documentation_dir = populated_archive.root / "data" / "documentation"
    assert (documentation_dir / f"{module.lower()}.json").is_file()
    scenario_state["archive"] = populated_archive.root


@given(parsers.parse('external documentation for "{bundle}" at "{base_url}"'))
def given_external_docs(
    scenario_state: dict[str, object], bundle: str, base_url: str
) -> None:
    external = typ.cast("dict[str, str]", scenario_state["external_docs"])
    external[bundle] = base_url


@when("I render the archive")
def when_render(scenario_state: dict[str, object], tmp_path: Path) -> None:
    """Run the generator into ``tmp_path / "site"``."""
    output_dir = tmp_path / "site"
    config = RenderConfig(
        archive=typ.cast("Path", scenario_state["archive"]),
        output_dir=output_dir,
        external_docs=typ.cast("dict[str, str]", scenario_state["external_docs"]),
    )
    scenario_state["result"] = ArchiveGenerator(config).run()
    scenario_state["output_dir"] = output_dir


def _page(scenario_state: dict[str, object], page: str) -> BeautifulSoup:
    output_dir = typ.cast("Path", scenario_state["output_dir"])
    html = (output_dir / page / "index.html").read_text(encoding="utf-8")
    return BeautifulSoup(html, "html.parser")


@then(parsers.parse('the page "{page}" links "{label}" to "{href}"'))
def then_page_links(
    scenario_state: dict[str, object], page: str, label: str, href: str
) -> None:
    anchor = _page(scenario_state, page).find("a", string=label)
    assert anchor is not None, f"expected a link named {label!r} on {page}"
    assert anchor["href"] == href


@then(parsers.parse('the page "{page}" has no link named "{label}"'))
def then_page_has_no_link(
    scenario_state: dict[str, object], page: str, label: str
) -> None:
    assert _page(scenario_state, page).find("a", string=label) is None


@then(parsers.parse('code samples on the page "{page}" keep their literal links'))
def then_code_untouched(scenario_state: dict[str, object], page: str) -> None:
    blocks = _page(scenario_state, page).select(".codehilite code")
    assert blocks, "expected at least one code listing"
    assert all(block.find("a") is None for block in blocks), (
        "tokens inside code must not become anchors"
    )
    assert any("doc://" in block.get_text() for block in blocks)


@then(parsers.parse("the run reports {count:d} unresolved link"))
@then(parsers.parse("the run reports {count:d} unresolved links"))
def then_unresolved_count(scenario_state: dict[str, object], count: int) -> None:
    result = typ.cast("GenerationResult", scenario_state["result"])
    unresolved = [
        item for item in result.warnings if "Unresolved documentation link" in item.message
    ]
    assert len(unresolved) == count
