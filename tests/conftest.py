"""Shared fixtures for docc_pages tests.

The ``archive_factory`` fixture writes small compiled documentation
archives into ``tmp_path`` with :func:`msgspec.json.encode`, so generator
and CLI tests read real files without any checked-in binary fixtures.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
import pytest

BUNDLE_ID = "com.example.acme"


def doc_url(path: str, bundle: str = BUNDLE_ID) -> str:
    """Return the ``doc://`` identifier for ``path`` in ``bundle``."""
    return f"doc://{bundle}{path}"


def text(value: str) -> dict[str, str]:
    return {"type": "text", "text": value}


def paragraph(*inline: dict[str, typ.Any]) -> dict[str, typ.Any]:
    return {"type": "paragraph", "inlineContent": list(inline)}


def topic(path: str, title: str, **extra: typ.Any) -> dict[str, typ.Any]:
    """Return a topic reference entry pointing at ``path``."""
    return {"type": "topic", "title": title, "url": path.lower(), **extra}


class ArchiveFactory:
    """Write render nodes and a navigation index under one archive root."""

    def __init__(self, root: Path) -> None:
        self.root = root
        (root / "data").mkdir(parents=True, exist_ok=True)

    def add_document(self, relative: str, payload: dict[str, typ.Any]) -> Path:
        """Write ``payload`` to ``data/<relative>`` and return the path."""
        path = self.root / "data" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(msgspec_json.encode(payload))
        return path

    def add_raw(self, relative: str, content: str) -> Path:
        """Write undecodable content to ``data/<relative>``."""
        path = self.root / "data" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def write_index(
        self, nodes: list[dict[str, typ.Any]], language: str = "swift"
    ) -> Path:
        """Write ``index/index.json`` with ``nodes`` under ``language``."""
        path = self.root / "index" / "index.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "interfaceLanguages": {language: nodes},
            "schemaVersion": {"major": 0, "minor": 1, "patch": 2},
        }
        path.write_bytes(msgspec_json.encode(payload))
        return path


@pytest.fixture
def archive_factory(tmp_path: Path) -> ArchiveFactory:
    """Return a factory rooted at ``tmp_path / "Acme.doccarchive"``."""
    return ArchiveFactory(tmp_path / "Acme.doccarchive")


def _module_page() -> dict[str, typ.Any]:
    return {
        "kind": "symbol",
        "identifier": {"url": doc_url("/documentation/Acme")},
        "metadata": {"title": "Acme", "role": "collection", "roleHeading": "Framework"},
        "abstract": [text("Rockets for everyone.")],
        "topicSections": [
            {
                "title": "Essentials",
                "identifiers": [doc_url("/documentation/Acme/GettingStarted")],
            },
            {
                "title": "Structures",
                "identifiers": [doc_url("/documentation/Acme/Rocket")],
            },
        ],
        "references": {
            doc_url("/documentation/Acme/GettingStarted"): topic(
                "/documentation/Acme/GettingStarted",
                "Getting Started",
                kind="article",
                role="article",
            ),
            doc_url("/documentation/Acme/Rocket"): topic(
                "/documentation/Acme/Rocket",
                "Rocket",
                kind="symbol",
                role="symbol",
                fragments=[
                    {"kind": "keyword", "text": "struct"},
                    {"kind": "text", "text": " "},
                    {"kind": "identifier", "text": "Rocket"},
                ],
                abstract=[text("A reusable launch vehicle.")],
            ),
        },
    }


def _rocket_page() -> dict[str, typ.Any]:
    return {
        "kind": "symbol",
        "identifier": {"url": doc_url("/documentation/Acme/Rocket")},
        "metadata": {"title": "Rocket", "role": "symbol", "symbolKind": "struct"},
        "abstract": [text("A reusable launch vehicle.")],
        "hierarchy": {"paths": [[doc_url("/documentation/Acme")]]},
        "primaryContentSections": [
            {
                "kind": "declarations",
                "declarations": [
                    {
                        "tokens": [
                            {"kind": "keyword", "text": "struct"},
                            {"kind": "text", "text": " "},
                            {"kind": "identifier", "text": "Rocket"},
                        ]
                    }
                ],
            },
            {
                "kind": "content",
                "content": [
                    paragraph(
                        text(
                            "Pair it with doc://com.example.acme/documentation/Acme/Engine"
                            " and doc://com.example.core/documentation/Core/Clock."
                        )
                    ),
                    {
                        "type": "codeListing",
                        "syntax": None,
                        "code": ["// doc://com.example.acme/documentation/Acme/Engine"],
                    },
                    paragraph(text("Unknown doc://org.nowhere/documentation/Lost/Page.")),
                ],
            },
        ],
        "references": {
            doc_url("/documentation/Acme"): topic(
                "/documentation/Acme", "Acme", role="collection"
            ),
        },
    }


def _article_page() -> dict[str, typ.Any]:
    return {
        "kind": "article",
        "identifier": {"url": doc_url("/documentation/Acme/GettingStarted")},
        "metadata": {"title": "Getting Started", "role": "article"},
        "hierarchy": {"paths": [[doc_url("/documentation/Acme")]]},
        "primaryContentSections": [
            {"kind": "content", "content": [paragraph(text("Install the toolkit."))]}
        ],
        "references": {
            doc_url("/documentation/Acme"): topic(
                "/documentation/Acme", "Acme", role="collection"
            ),
        },
    }


def _overview_page() -> dict[str, typ.Any]:
    tutorial = doc_url("/tutorials/Acme-Tutorials/BuildingRockets")
    return {
        "kind": "overview",
        "identifier": {"url": doc_url("/tutorials/Acme-Tutorials")},
        "metadata": {"title": "Acme Tutorials", "role": "overview"},
        "sections": [
            {
                "kind": "hero",
                "title": "Meet Acme",
                "content": [paragraph(text("Learn to launch."))],
            },
            {
                "kind": "volume",
                "name": "Basics",
                "chapters": [
                    {
                        "name": "Getting Off the Ground",
                        "content": [paragraph(text("Your first launch."))],
                        "tutorials": [tutorial],
                    }
                ],
            },
        ],
        "references": {
            tutorial: topic(
                "/tutorials/Acme-Tutorials/BuildingRockets",
                "Building Rockets",
                kind="project",
                role="project",
                abstract=[text("Assemble a rocket.")],
            ),
        },
    }


def _tutorial_page() -> dict[str, typ.Any]:
    tutorial = doc_url("/tutorials/Acme-Tutorials/BuildingRockets")
    return {
        "kind": "tutorial",
        "identifier": {"url": tutorial},
        "metadata": {"title": "Building Rockets", "role": "project"},
        "hierarchy": {
            "paths": [[doc_url("/tutorials/Acme-Tutorials")]],
            "modules": [
                {
                    "reference": doc_url("/tutorials/Acme-Tutorials/Getting-Off-the-Ground"),
                    "projects": [{"reference": tutorial}],
                }
            ],
        },
        "sections": [
            {
                "kind": "hero",
                "title": "Building Rockets",
                "chapter": "Getting Off the Ground",
                "estimatedTimeInMinutes": 20,
                "content": [paragraph(text("Assemble your first rocket."))],
            },
            {
                "kind": "tasks",
                "tasks": [
                    {
                        "title": "Create a Rocket",
                        "anchor": "Create-a-Rocket",
                        "contentSection": [
                            {
                                "kind": "contentAndMedia",
                                "content": [paragraph(text("Start a new file."))],
                            }
                        ],
                        "stepsSection": [
                            {
                                "type": "step",
                                "content": [paragraph(text("Declare the structure."))],
                                "caption": [],
                                "code": "Rocket.swift",
                            }
                        ],
                    }
                ],
            },
        ],
        "references": {
            doc_url("/tutorials/Acme-Tutorials"): topic(
                "/tutorials/Acme-Tutorials", "Acme Tutorials", kind="overview"
            ),
            doc_url("/tutorials/Acme-Tutorials/Getting-Off-the-Ground"): topic(
                "/tutorials/Acme-Tutorials/Getting-Off-the-Ground",
                "Getting Off the Ground",
            ),
            tutorial: topic(
                "/tutorials/Acme-Tutorials/BuildingRockets", "Building Rockets"
            ),
            "Rocket.swift": {
                "type": "file",
                "fileName": "Rocket.swift",
                "syntax": "swift",
                "content": ["struct Rocket {", "}"],
            },
        },
    }


def navigation_nodes() -> list[dict[str, typ.Any]]:
    """Return the navigation tree matching :func:`populated_archive`."""
    return [
        {
            "title": "Acme",
            "path": "/documentation/acme",
            "type": "module",
            "children": [
                {"title": "Essentials", "type": "groupMarker"},
                {
                    "title": "Getting Started",
                    "path": "/documentation/acme/gettingstarted",
                    "type": "article",
                },
                {"title": "Structures", "type": "groupMarker"},
                {
                    "title": "Rocket",
                    "path": "/documentation/acme/rocket",
                    "type": "struct",
                    "children": [
                        {
                            "title": "launch()",
                            "path": "/documentation/acme/rocket/launch()",
                            "type": "method",
                        }
                    ],
                },
            ],
        }
    ]


@pytest.fixture
def populated_archive(archive_factory: ArchiveFactory) -> ArchiveFactory:
    """Return an archive with a module, symbol, article, and tutorials."""
    archive_factory.add_document("documentation/acme.json", _module_page())
    archive_factory.add_document("documentation/acme/rocket.json", _rocket_page())
    archive_factory.add_document(
        "documentation/acme/gettingstarted.json", _article_page()
    )
    archive_factory.add_document("tutorials/acme-tutorials.json", _overview_page())
    archive_factory.add_document(
        "tutorials/acme-tutorials/buildingrockets.json", _tutorial_page()
    )
    archive_factory.write_index(navigation_nodes())
    return archive_factory
