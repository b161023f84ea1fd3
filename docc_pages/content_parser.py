"""Convert render-node JSON into the typed content model.

Payloads are decoded with :mod:`msgspec.json` into plain mappings and then
walked with ``match`` statements, mirroring how the configuration loader
turns YAML mappings into dataclasses. Unknown block, inline, and section
tags become ``Unsupported*`` nodes instead of errors so newer archives
still render. Structural problems that leave no usable document, such as a
missing identifier, raise :class:`DocumentDecodeError`.

Examples
--------
>>> from docc_pages.content_parser import parse_document
>>> doc = parse_document(
...     b'{"kind": "article", "identifier": {"url": "doc://acme/documentation/Acme/Intro"}}'
... )
>>> doc.id
'/documentation/Acme/Intro'
"""

from __future__ import annotations

import typing as typ
from urllib.parse import urlsplit

import msgspec.json as msgspec_json

from .content_model import (
    ArticleBodySection,
    Aside,
    Assessment,
    AssessmentsSection,
    CallToActionSection,
    Chapter,
    Choice,
    CodeListing,
    CodeVoice,
    ContentAndMediaSection,
    ContentBlock,
    ContentLayout,
    ContentSection,
    DeclarationsSection,
    DeclarationToken,
    DiscussionSection,
    Document,
    DocumentKind,
    FileReference,
    Heading,
    HeroSection,
    Hierarchy,
    HierarchyChapter,
    ImageReference,
    ImageVariant,
    InlineContent,
    InlineImage,
    InlineReference,
    InlineStyle,
    ListBlock,
    Paragraph,
    Parameter,
    ParametersSection,
    Reference,
    RelationshipGroup,
    ResourcesSection,
    ResourceTile,
    Section,
    Step,
    Styled,
    Table,
    TasksSection,
    TermList,
    TermListItem,
    Text,
    ThematicBreak,
    TopicGroup,
    TopicReference,
    TutorialTask,
    UnsupportedBlock,
    UnsupportedInline,
    UnsupportedSection,
    VolumeSection,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

Payload = typ.Mapping[str, typ.Any]

_STYLES = {style.value: style for style in InlineStyle}
_SYMBOL_KEYWORDS = {
    "class",
    "struct",
    "enum",
    "protocol",
    "func",
    "var",
    "let",
    "case",
    "init",
    "deinit",
    "typealias",
    "associatedtype",
    "macro",
    "subscript",
    "operator",
    "extension",
    "actor",
}
_ROLE_TAGS = {
    "collection": "module",
    "collectionGroup": "article",
    "article": "article",
    "sampleCode": "article",
    "tutorial": "tutorial",
    "overview": "overview",
}


class DocumentDecodeError(ValueError):
    """Raised when a render node cannot be turned into a document."""


def load_document(path: Path) -> Document:
    """Read and parse the render-node JSON file at ``path``.

    Raises
    ------
    OSError
        If the file cannot be read.
    msgspec.DecodeError
        If the file is not valid JSON.
    DocumentDecodeError
        If the JSON does not describe a document.
    """
    return parse_document(path.read_bytes())


def parse_document(raw: bytes | str) -> Document:
    """Decode render-node JSON and convert it into a :class:`Document`."""
    payload = msgspec_json.decode(raw)
    if not isinstance(payload, dict):
        msg = "Render node must be a JSON object."
        raise DocumentDecodeError(msg)
    return build_document(payload)


def build_document(payload: Payload) -> Document:
    """Convert a decoded render-node mapping into a :class:`Document`.

    Parameters
    ----------
    payload : Mapping[str, Any]
        Top-level render-node object.

    Returns
    -------
    Document
        Immutable document with its reference table attached.

    Raises
    ------
    DocumentDecodeError
        If the identifier is missing or not a ``scheme://bundle/path`` URL.
    """
    bundle_id, doc_id = _parse_identifier(payload.get("identifier"))
    node_kind = str(payload.get("kind") or "symbol")
    metadata = _mapping(payload.get("metadata"))

    sections: list[Section] = [
        _parse_primary_section(item)
        for item in _mappings(payload.get("primaryContentSections"))
    ]
    sections.extend(
        _parse_section(item) for item in _mappings(payload.get("sections"))
    )

    abstract = payload.get("abstract")
    return Document(
        id=doc_id,
        kind=_document_kind(node_kind),
        node_kind=node_kind,
        bundle_id=bundle_id,
        title=_optional_str(metadata.get("title")),
        abstract=parse_inlines(abstract) if isinstance(abstract, list) else None,
        role=_optional_str(metadata.get("role")),
        role_heading=_optional_str(metadata.get("roleHeading")),
        symbol_kind=_optional_str(metadata.get("symbolKind")),
        sections=tuple(sections),
        topic_groups=_parse_topic_groups(payload.get("topicSections")),
        relationship_groups=_parse_relationship_groups(
            payload.get("relationshipsSections")
        ),
        see_also_groups=_parse_topic_groups(payload.get("seeAlsoSections")),
        references=parse_references(payload.get("references")),
        hierarchy=_parse_hierarchy(payload.get("hierarchy")),
    )


def _parse_identifier(value: object) -> tuple[str | None, str]:
    """Split ``identifier.url`` into bundle id and canonical path."""
    url = _mapping(value).get("url")
    if not isinstance(url, str) or not url:
        msg = "Render node has no identifier URL."
        raise DocumentDecodeError(msg)
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        msg = f"Identifier URL {url!r} is malformed: {exc}"
        raise DocumentDecodeError(msg) from exc
    if not parts.scheme:
        return None, "/" + url.strip("/")
    if not parts.path.strip("/"):
        msg = f"Identifier URL {url!r} has no path."
        raise DocumentDecodeError(msg)
    return parts.netloc or None, "/" + parts.path.strip("/")


def _document_kind(node_kind: str) -> DocumentKind:
    match node_kind:
        case "tutorial":
            return DocumentKind.TUTORIAL
        case "overview":
            return DocumentKind.TUTORIAL_OVERVIEW
        case _:
            return DocumentKind.REFERENCE


# Inline -----------------------------------------------------------------


def parse_inlines(items: object) -> tuple[InlineContent, ...]:
    """Convert a JSON array of inline nodes."""
    return tuple(parse_inline(item) for item in _mappings(items))


def parse_inline(item: Payload) -> InlineContent:
    """Convert one inline node, degrading unknown tags to unsupported."""
    kind = str(item.get("type", ""))
    match kind:
        case "text":
            return Text(str(item.get("text", "")))
        case "codeVoice":
            return CodeVoice(str(item.get("code", "")))
        case "reference":
            override = item.get("overridingTitleInlineContent")
            return InlineReference(
                target_id=str(item.get("identifier", "")),
                is_active=bool(item.get("isActive", True)),
                override_title=_optional_str(item.get("overridingTitle")),
                override_inline=(
                    parse_inlines(override) if isinstance(override, list) else None
                ),
            )
        case "image":
            return InlineImage(str(item.get("identifier", "")))
        case _ if kind in _STYLES:
            return Styled(_STYLES[kind], parse_inlines(item.get("inlineContent")))
        case _:
            return UnsupportedInline(kind)


# Blocks -----------------------------------------------------------------


def parse_blocks(items: object) -> tuple[ContentBlock, ...]:
    """Convert a JSON array of block nodes."""
    return tuple(parse_block(item) for item in _mappings(items))


def parse_block(item: Payload) -> ContentBlock:  # noqa: C901, PLR0911 - one case per tag
    """Convert one block node, degrading unknown tags to unsupported."""
    kind = str(item.get("type", ""))
    match kind:
        case "paragraph":
            return Paragraph(parse_inlines(item.get("inlineContent")))
        case "heading":
            return Heading(
                level=_int(item.get("level"), 2),
                text=str(item.get("text", "")),
                anchor=_optional_str(item.get("anchor")),
            )
        case "aside":
            return Aside(
                style=str(item.get("style") or "note"),
                title=_optional_str(item.get("name")),
                children=parse_blocks(item.get("content")),
            )
        case "codeListing":
            return CodeListing(
                syntax=_optional_str(item.get("syntax")),
                lines=_strings(item.get("code")),
            )
        case "unorderedList" | "orderedList":
            return ListBlock(
                ordered=kind == "orderedList",
                items=tuple(
                    parse_blocks(entry.get("content"))
                    for entry in _mappings(item.get("items"))
                ),
                start=_int(item.get("start"), 1),
            )
        case "table":
            return Table(rows=_parse_rows(item.get("rows")))
        case "termList":
            return TermList(
                items=tuple(
                    TermListItem(
                        term=parse_inlines(_mapping(entry.get("term")).get("inlineContent")),
                        definition=parse_blocks(
                            _mapping(entry.get("definition")).get("content")
                        ),
                    )
                    for entry in _mappings(item.get("items"))
                )
            )
        case "step":
            return Step(
                content=parse_blocks(item.get("content")),
                caption=parse_blocks(item.get("caption")),
                media=_optional_str(item.get("media")),
                code=_optional_str(item.get("code")),
            )
        case "thematicBreak":
            return ThematicBreak()
        case _:
            return UnsupportedBlock(kind)


def _parse_rows(rows: object) -> tuple[tuple[tuple[ContentBlock, ...], ...], ...]:
    """Convert ``[[cell blocks, ...], ...]`` table rows."""
    if not isinstance(rows, list):
        return ()
    return tuple(
        tuple(parse_blocks(cell) for cell in row)
        for row in rows
        if isinstance(row, list)
    )


# References -------------------------------------------------------------


def parse_references(value: object) -> dict[str, Reference]:
    """Build the local reference table, skipping reference types not modelled."""
    table: dict[str, Reference] = {}
    for key, item in _mapping(value).items():
        if not isinstance(item, dict):
            continue
        reference = parse_reference(str(key), item)
        if reference is not None:
            table[str(key)] = reference
    return table


def parse_reference(identifier: str, item: Payload) -> Reference | None:
    """Convert one reference table entry, or return ``None`` for unknown types."""
    match item.get("type"):
        case "topic":
            return TopicReference(
                identifier=identifier,
                title=str(item.get("title") or identifier),
                url=str(item.get("url") or ""),
                abstract=parse_inlines(item.get("abstract")),
                kind_tag=topic_kind_tag(item),
            )
        case "link":
            return TopicReference(
                identifier=identifier,
                title=str(item.get("title") or item.get("url") or identifier),
                url=str(item.get("url") or ""),
                kind_tag="link",
            )
        case "image":
            return ImageReference(
                identifier=identifier,
                variants=tuple(
                    ImageVariant(
                        url=str(variant.get("url", "")),
                        traits=_strings(variant.get("traits")),
                    )
                    for variant in _mappings(item.get("variants"))
                ),
                alt_text=_optional_str(item.get("alt")),
            )
        case "file":
            return FileReference(
                identifier=identifier,
                file_name=str(item.get("fileName") or identifier),
                syntax=_optional_str(item.get("syntax")),
                lines=_strings(item.get("content")),
            )
        case _:
            return None


def topic_kind_tag(item: Payload) -> str:
    """Derive the kind tag of a topic reference.

    Pages use their role or kind; symbols use the first keyword fragment of
    their declaration, e.g. ``struct`` for ``struct Rocket``.
    """
    kind = _optional_str(item.get("kind"))
    role = _optional_str(item.get("role"))
    if kind in {"article", "tutorial", "overview"}:
        return str(kind)
    if role in _ROLE_TAGS:
        return _ROLE_TAGS[role]
    for fragment in _mappings(item.get("fragments")):
        if fragment.get("kind") == "keyword":
            text = str(fragment.get("text", "")).strip()
            if text in _SYMBOL_KEYWORDS:
                return text
    return "symbol"


# Sections ---------------------------------------------------------------


def _parse_primary_section(item: Payload) -> Section:
    match item.get("kind"):
        case "content":
            return ContentSection(parse_blocks(item.get("content")))
        case "discussion":
            return DiscussionSection(
                parse_blocks(item.get("content")),
                title=str(item.get("title") or "Discussion"),
            )
        case "parameters":
            return ParametersSection(
                tuple(
                    Parameter(
                        name=str(entry.get("name", "")),
                        blocks=parse_blocks(entry.get("content")),
                    )
                    for entry in _mappings(item.get("parameters"))
                )
            )
        case "declarations":
            return DeclarationsSection(
                tuple(
                    _parse_tokens(entry.get("tokens"))
                    for entry in _mappings(item.get("declarations"))
                )
            )
        case other:
            return UnsupportedSection(str(other))


def _parse_tokens(tokens: object) -> tuple[DeclarationToken, ...]:
    return tuple(
        DeclarationToken(
            kind=str(token.get("kind", "text")),
            text=str(token.get("text", "")),
            identifier=_optional_str(token.get("identifier")),
        )
        for token in _mappings(tokens)
    )


def _parse_section(item: Payload) -> Section:  # noqa: PLR0911 - one case per kind
    match item.get("kind"):
        case "hero":
            return HeroSection(
                title=str(item.get("title", "")),
                chapter=_optional_str(item.get("chapter")),
                estimated_minutes=_optional_int(item.get("estimatedTimeInMinutes")),
                content=parse_blocks(item.get("content")),
                image=_optional_str(item.get("image")),
                background_image=_optional_str(item.get("backgroundImage")),
            )
        case "tasks":
            return TasksSection(
                tuple(_parse_task(task) for task in _mappings(item.get("tasks")))
            )
        case "assessments":
            return AssessmentsSection(
                assessments=tuple(
                    _parse_assessment(entry)
                    for entry in _mappings(item.get("assessments"))
                ),
                anchor=str(item.get("anchor") or "Check-Your-Understanding"),
            )
        case "callToAction":
            action = item.get("action")
            parsed_action = parse_inline(action) if isinstance(action, dict) else None
            return CallToActionSection(
                title=str(item.get("title", "")),
                abstract=parse_inlines(item.get("abstract")),
                action=(
                    parsed_action if isinstance(parsed_action, InlineReference) else None
                ),
                eyebrow=_optional_str(item.get("featuredEyebrow")),
            )
        case "volume":
            return VolumeSection(
                name=_optional_str(item.get("name")),
                content=parse_blocks(item.get("content")),
                chapters=tuple(
                    Chapter(
                        name=str(chapter.get("name", "")),
                        content=parse_blocks(chapter.get("content")),
                        tutorials=_strings(chapter.get("tutorials")),
                        image=_optional_str(chapter.get("image")),
                    )
                    for chapter in _mappings(item.get("chapters"))
                ),
            )
        case "resources":
            return ResourcesSection(
                content=parse_blocks(item.get("content")),
                tiles=tuple(_parse_tile(tile) for tile in _mappings(item.get("tiles"))),
            )
        case "contentAndMedia":
            return ContentAndMediaSection(
                title=_optional_str(item.get("title")),
                eyebrow=_optional_str(item.get("eyebrow")),
                content=parse_blocks(item.get("content")),
                media=_optional_str(item.get("media")),
                media_position=str(item.get("mediaPosition") or "trailing"),
            )
        case "articleBody":
            return ArticleBodySection(_parse_layouts(item.get("content")))
        case other:
            return UnsupportedSection(str(other))


def _parse_task(task: Payload) -> TutorialTask:
    title = str(task.get("title", ""))
    return TutorialTask(
        title=title,
        anchor=str(task.get("anchor") or title.replace(" ", "-")),
        content=_parse_layouts(task.get("contentSection")),
        steps=parse_blocks(task.get("stepsSection")),
    )


def _parse_layouts(items: object) -> tuple[ContentLayout, ...]:
    return tuple(_parse_layout(item) for item in _mappings(items))


def _parse_layout(item: Payload) -> ContentLayout:
    kind = str(item.get("kind") or "fullWidth")
    if kind == "columns":
        return ContentLayout(kind=kind, columns=_parse_layouts(item.get("content")))
    return ContentLayout(
        kind=kind,
        content=parse_blocks(item.get("content")),
        media=_optional_str(item.get("media")),
        media_position=str(item.get("mediaPosition") or "trailing"),
    )


def _parse_assessment(item: Payload) -> Assessment:
    return Assessment(
        title=parse_blocks(item.get("title")),
        content=parse_blocks(item.get("content")),
        choices=tuple(
            Choice(
                content=parse_blocks(choice.get("content")),
                is_correct=bool(choice.get("isCorrect", False)),
                justification=parse_blocks(choice.get("justification")),
            )
            for choice in _mappings(item.get("choices"))
        ),
    )


def _parse_tile(item: Payload) -> ResourceTile:
    action = item.get("action")
    parsed_action = parse_inline(action) if isinstance(action, dict) else None
    return ResourceTile(
        identifier=str(item.get("identifier", "")),
        title=str(item.get("title", "")),
        content=parse_blocks(item.get("content")),
        action=parsed_action if isinstance(parsed_action, InlineReference) else None,
    )


def _parse_topic_groups(value: object) -> tuple[TopicGroup, ...]:
    return tuple(
        TopicGroup(
            title=_optional_str(item.get("title")),
            target_ids=_strings(item.get("identifiers")),
            anchor=_optional_str(item.get("anchor")),
        )
        for item in _mappings(value)
    )


def _parse_relationship_groups(value: object) -> tuple[RelationshipGroup, ...]:
    return tuple(
        RelationshipGroup(
            title=str(item.get("title", "")),
            kind=str(item.get("type", "")),
            target_ids=_strings(item.get("identifiers")),
        )
        for item in _mappings(value)
    )


def _parse_hierarchy(value: object) -> Hierarchy:
    payload = _mapping(value)
    paths = tuple(
        _strings(path) for path in _lists(payload.get("paths"))
    )
    chapters = tuple(
        HierarchyChapter(
            reference=str(module.get("reference", "")),
            tutorials=tuple(
                str(project.get("reference", ""))
                for project in _mappings(
                    module.get("projects", module.get("tutorials"))
                )
            ),
        )
        for module in _mappings(payload.get("modules"))
    )
    return Hierarchy(paths=paths, chapters=chapters)


# Helpers ----------------------------------------------------------------


def _mapping(value: object) -> Payload:
    """Return ``value`` when it is a mapping, otherwise an empty mapping."""
    return value if isinstance(value, dict) else {}


def _mappings(value: object) -> list[Payload]:
    """Return the mapping members of a JSON array, ignoring anything else."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _lists(value: object) -> list[list[typ.Any]]:
    """Return the array members of a JSON array, ignoring anything else."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, list)]


def _strings(value: object) -> tuple[str, ...]:
    """Return the scalar members of a JSON array as strings.

    Anything that is not an array yields an empty tuple.

    >>> _strings(["a", 1, {"b": 2}])
    ('a', '1')
    >>> _strings(5)
    ()
    """
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if not isinstance(item, (dict, list)))


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int(value: object, default: int) -> int:
    match value:
        case bool():
            return default
        case int():
            return value
        case _:
            return default


def _optional_int(value: object) -> int | None:
    match value:
        case bool():
            return None
        case int():
            return value
        case str() if value.strip().isdigit():
            return int(value)
        case _:
            return None


__all__ = [
    "DocumentDecodeError",
    "build_document",
    "load_document",
    "parse_block",
    "parse_blocks",
    "parse_document",
    "parse_inline",
    "parse_inlines",
    "parse_reference",
    "parse_references",
    "topic_kind_tag",
]
