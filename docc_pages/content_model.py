"""Typed content model for compiled documentation render nodes.

Every documented entity in an archive arrives as one render-node JSON
document. :mod:`docc_pages.content_parser` converts those payloads into
the immutable dataclasses defined here, and the rendering layer walks them
with ``match`` statements. Each union carries an explicit ``Unsupported``
member so content kinds this package does not know yet render as nothing
instead of aborting a run.

Examples
--------
>>> from docc_pages.content_model import Document, DocumentKind
>>> doc = Document(id="/documentation/acme", kind=DocumentKind.REFERENCE)
>>> doc.depth
2
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ


class DocumentKind(enum.Enum):
    """Page archetype selected for a document."""

    REFERENCE = "reference"
    TUTORIAL = "tutorial"
    TUTORIAL_OVERVIEW = "tutorial-overview"


class InlineStyle(enum.Enum):
    """Inline wrappers that only differ by the element they emit."""

    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"
    NEW_TERM = "newTerm"
    INLINE_HEAD = "inlineHead"


# Inline content ---------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class Text:
    """Plain text run."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class CodeVoice:
    """Inline code span."""

    code: str


@dc.dataclass(frozen=True, slots=True)
class Styled:
    """Styled wrapper around nested inline content."""

    style: InlineStyle
    children: tuple[InlineContent, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class InlineReference:
    """Cross-reference to another entry in the document's reference table.

    Attributes
    ----------
    target_id : str
        Key into :attr:`Document.references`.
    is_active : bool
        ``False`` when the compiler marked the link as non-navigable.
    override_title : str or None
        Plain-string label replacing the referenced title.
    override_inline : tuple of InlineContent or None
        Rich label replacing every other label source.
    """

    target_id: str
    is_active: bool = True
    override_title: str | None = None
    override_inline: tuple[InlineContent, ...] | None = None


@dc.dataclass(frozen=True, slots=True)
class InlineImage:
    """Image embedded in running text."""

    target_id: str


@dc.dataclass(frozen=True, slots=True)
class UnsupportedInline:
    """Inline node whose type tag is not understood."""

    type_name: str


InlineContent: typ.TypeAlias = (
    Text | CodeVoice | Styled | InlineReference | InlineImage | UnsupportedInline
)


# Block content ----------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class Paragraph:
    """Paragraph of inline content."""

    inline: tuple[InlineContent, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Heading:
    """Section heading; ``anchor`` may be empty and is then derived."""

    level: int
    text: str
    anchor: str | None = None


@dc.dataclass(frozen=True, slots=True)
class Aside:
    """Callout box such as a note, warning, or tip."""

    style: str
    title: str | None = None
    children: tuple[ContentBlock, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class CodeListing:
    """Multi-line code sample."""

    syntax: str | None
    lines: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ListBlock:
    """Ordered or unordered list whose items are block sequences."""

    ordered: bool
    items: tuple[tuple[ContentBlock, ...], ...] = ()
    start: int = 1


@dc.dataclass(frozen=True, slots=True)
class Table:
    """Table of rows, each row a sequence of cells made of blocks."""

    rows: tuple[tuple[tuple[ContentBlock, ...], ...], ...] = ()


@dc.dataclass(frozen=True, slots=True)
class TermListItem:
    """Term and definition pair."""

    term: tuple[InlineContent, ...]
    definition: tuple[ContentBlock, ...]


@dc.dataclass(frozen=True, slots=True)
class TermList:
    """Definition list."""

    items: tuple[TermListItem, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Step:
    """Tutorial step with optional media and code file references."""

    content: tuple[ContentBlock, ...] = ()
    caption: tuple[ContentBlock, ...] = ()
    media: str | None = None
    code: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ThematicBreak:
    """Horizontal rule."""


@dc.dataclass(frozen=True, slots=True)
class UnsupportedBlock:
    """Block node whose type tag is not understood."""

    type_name: str


ContentBlock: typ.TypeAlias = (
    Paragraph
    | Heading
    | Aside
    | CodeListing
    | ListBlock
    | Table
    | TermList
    | Step
    | ThematicBreak
    | UnsupportedBlock
)


# References -------------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class TopicReference:
    """Link target for a page, symbol, or external URL."""

    identifier: str
    title: str
    url: str
    abstract: tuple[InlineContent, ...] = ()
    kind_tag: str = "symbol"


@dc.dataclass(frozen=True, slots=True)
class ImageVariant:
    """One rendition of an image, tagged with traits such as ``dark``."""

    url: str
    traits: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ImageReference:
    """Image asset with appearance variants."""

    identifier: str
    variants: tuple[ImageVariant, ...] = ()
    alt_text: str | None = None

    @property
    def light_url(self) -> str | None:
        """Return the default rendition, preferring one without ``dark``."""
        for variant in self.variants:
            if "dark" not in variant.traits:
                return variant.url
        return self.variants[0].url if self.variants else None

    @property
    def dark_url(self) -> str | None:
        """Return the rendition tagged ``dark``, if present."""
        for variant in self.variants:
            if "dark" in variant.traits:
                return variant.url
        return None


@dc.dataclass(frozen=True, slots=True)
class FileReference:
    """Source file shown next to tutorial steps."""

    identifier: str
    file_name: str
    syntax: str | None = None
    lines: tuple[str, ...] = ()


Reference: typ.TypeAlias = TopicReference | ImageReference | FileReference


# Declarations -----------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class DeclarationToken:
    """Token of a symbol declaration; ``identifier`` links it when resolvable."""

    kind: str
    text: str
    identifier: str | None = None


# Sections ---------------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class ContentSection:
    """Primary content blocks."""

    blocks: tuple[ContentBlock, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class DiscussionSection:
    """Discussion prose rendered under its own heading."""

    blocks: tuple[ContentBlock, ...] = ()
    title: str = "Discussion"


@dc.dataclass(frozen=True, slots=True)
class Parameter:
    """Named parameter description."""

    name: str
    blocks: tuple[ContentBlock, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ParametersSection:
    """Parameter list of a symbol."""

    parameters: tuple[Parameter, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class DeclarationsSection:
    """One or more declarations, each a token sequence."""

    declarations: tuple[tuple[DeclarationToken, ...], ...] = ()


@dc.dataclass(frozen=True, slots=True)
class HeroSection:
    """Introductory hero of tutorials and tutorial overviews."""

    title: str = ""
    chapter: str | None = None
    estimated_minutes: int | None = None
    content: tuple[ContentBlock, ...] = ()
    image: str | None = None
    background_image: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ContentLayout:
    """Layout wrapper used by tutorial tasks and article bodies.

    ``kind`` is ``fullWidth``, ``contentAndMedia`` or ``columns``; only
    ``columns`` uses :attr:`columns`.
    """

    kind: str
    content: tuple[ContentBlock, ...] = ()
    media: str | None = None
    media_position: str = "trailing"
    columns: tuple[ContentLayout, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class TutorialTask:
    """One numbered section of a tutorial."""

    title: str
    anchor: str
    content: tuple[ContentLayout, ...] = ()
    steps: tuple[ContentBlock, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class TasksSection:
    """Ordered tutorial tasks."""

    tasks: tuple[TutorialTask, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Choice:
    """Answer option of an assessment question."""

    content: tuple[ContentBlock, ...]
    is_correct: bool = False
    justification: tuple[ContentBlock, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Assessment:
    """Multiple-choice question."""

    title: tuple[ContentBlock, ...] = ()
    content: tuple[ContentBlock, ...] = ()
    choices: tuple[Choice, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class AssessmentsSection:
    """Quiz block shown under "Check Your Understanding"."""

    assessments: tuple[Assessment, ...] = ()
    anchor: str = "Check-Your-Understanding"


@dc.dataclass(frozen=True, slots=True)
class CallToActionSection:
    """Trailing prompt linking to the next tutorial or article."""

    title: str = ""
    abstract: tuple[InlineContent, ...] = ()
    action: InlineReference | None = None
    eyebrow: str | None = None


@dc.dataclass(frozen=True, slots=True)
class Chapter:
    """Chapter of a tutorial volume."""

    name: str
    content: tuple[ContentBlock, ...] = ()
    tutorials: tuple[str, ...] = ()
    image: str | None = None


@dc.dataclass(frozen=True, slots=True)
class VolumeSection:
    """Group of chapters on a tutorial overview page."""

    name: str | None = None
    content: tuple[ContentBlock, ...] = ()
    chapters: tuple[Chapter, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ResourceTile:
    """Link tile in a resources section."""

    identifier: str
    title: str
    content: tuple[ContentBlock, ...] = ()
    action: InlineReference | None = None


@dc.dataclass(frozen=True, slots=True)
class ResourcesSection:
    """Further-reading tiles."""

    content: tuple[ContentBlock, ...] = ()
    tiles: tuple[ResourceTile, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ContentAndMediaSection:
    """Standalone content next to an image or video."""

    title: str | None = None
    eyebrow: str | None = None
    content: tuple[ContentBlock, ...] = ()
    media: str | None = None
    media_position: str = "trailing"


@dc.dataclass(frozen=True, slots=True)
class ArticleBodySection:
    """Body of a tutorial-style article made of layouts."""

    layouts: tuple[ContentLayout, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class UnsupportedSection:
    """Section whose kind tag is not understood."""

    kind: str


Section: typ.TypeAlias = (
    ContentSection
    | DiscussionSection
    | ParametersSection
    | DeclarationsSection
    | HeroSection
    | TasksSection
    | AssessmentsSection
    | CallToActionSection
    | VolumeSection
    | ResourcesSection
    | ContentAndMediaSection
    | ArticleBodySection
    | UnsupportedSection
)


# Groups and hierarchy ---------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class TopicGroup:
    """Titled list of reference ids (topics and see-also)."""

    title: str | None
    target_ids: tuple[str, ...] = ()
    anchor: str | None = None


@dc.dataclass(frozen=True, slots=True)
class RelationshipGroup:
    """Relationship list such as "Conforms To" or "Inherits From"."""

    title: str
    kind: str
    target_ids: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class HierarchyChapter:
    """Chapter of the tutorial table of contents."""

    reference: str
    tutorials: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Hierarchy:
    """Ancestor paths and, for tutorials, the chapter table of contents."""

    paths: tuple[tuple[str, ...], ...] = ()
    chapters: tuple[HierarchyChapter, ...] = ()

    @property
    def first_path(self) -> tuple[str, ...]:
        """Return the first ancestor path or an empty tuple."""
        return self.paths[0] if self.paths else ()


# Document ---------------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class Document:
    """A single documented entity and everything needed to render it.

    Attributes
    ----------
    id : str
        Canonical root-relative path, unique across the site.
    kind : DocumentKind
        Archetype used by the page assembler.
    node_kind : str
        Raw render-node kind (``symbol``, ``article`` ...).
    bundle_id : str or None
        Bundle that emitted the document.
    title : str or None
        Display title.
    abstract : tuple of InlineContent or None
        Short summary.
    role, role_heading, symbol_kind : str or None
        Metadata used for the hero eyebrow label.
    sections : tuple of Section
        Primary content sections followed by page sections.
    topic_groups, relationship_groups, see_also_groups : tuple
        Curated link lists.
    references : Mapping[str, Reference]
        Local reference table; the only place link targets are resolved.
    hierarchy : Hierarchy
        Breadcrumb paths and tutorial chapters.
    """

    id: str
    kind: DocumentKind
    node_kind: str = "symbol"
    bundle_id: str | None = None
    title: str | None = None
    abstract: tuple[InlineContent, ...] | None = None
    role: str | None = None
    role_heading: str | None = None
    symbol_kind: str | None = None
    sections: tuple[Section, ...] = ()
    topic_groups: tuple[TopicGroup, ...] = ()
    relationship_groups: tuple[RelationshipGroup, ...] = ()
    see_also_groups: tuple[TopicGroup, ...] = ()
    references: typ.Mapping[str, Reference] = dc.field(default_factory=dict)
    hierarchy: Hierarchy = dc.field(default_factory=Hierarchy)

    @property
    def segments(self) -> list[str]:
        """Return the non-empty path segments of :attr:`id`."""
        return [segment for segment in self.id.split("/") if segment]

    @property
    def depth(self) -> int:
        """Return the directory depth of the page written for this document."""
        return len(self.segments)

    def topic(self, target_id: str) -> TopicReference | None:
        """Return the topic reference for ``target_id`` if the table has one."""
        match self.references.get(target_id):
            case TopicReference() as reference:
                return reference
            case _:
                return None

    def image(self, target_id: str | None) -> ImageReference | None:
        """Return the image reference for ``target_id`` if the table has one."""
        if target_id is None:
            return None
        match self.references.get(target_id):
            case ImageReference() as reference:
                return reference
            case _:
                return None

    def file(self, target_id: str | None) -> FileReference | None:
        """Return the file reference for ``target_id`` if the table has one."""
        if target_id is None:
            return None
        match self.references.get(target_id):
            case FileReference() as reference:
                return reference
            case _:
                return None


__all__ = [
    "ArticleBodySection",
    "Aside",
    "Assessment",
    "AssessmentsSection",
    "CallToActionSection",
    "Chapter",
    "Choice",
    "CodeListing",
    "CodeVoice",
    "ContentAndMediaSection",
    "ContentBlock",
    "ContentLayout",
    "ContentSection",
    "DeclarationToken",
    "DeclarationsSection",
    "DiscussionSection",
    "Document",
    "DocumentKind",
    "FileReference",
    "Heading",
    "HeroSection",
    "Hierarchy",
    "HierarchyChapter",
    "ImageReference",
    "ImageVariant",
    "InlineContent",
    "InlineImage",
    "InlineReference",
    "InlineStyle",
    "ListBlock",
    "Paragraph",
    "Parameter",
    "ParametersSection",
    "Reference",
    "RelationshipGroup",
    "ResourceTile",
    "ResourcesSection",
    "Section",
    "Step",
    "Styled",
    "Table",
    "TasksSection",
    "TermList",
    "TermListItem",
    "Text",
    "ThematicBreak",
    "TopicGroup",
    "TopicReference",
    "TutorialTask",
    "UnsupportedBlock",
    "UnsupportedInline",
    "UnsupportedSection",
    "VolumeSection",
]
