"""Render content-model blocks and inline spans into HTML fragments.

:class:`ContentRenderer` walks the typed content tree with ``match``
statements and returns HTML strings. It holds no per-document state: the
reference table and page depth are passed on every call, so one instance
can serve any number of documents and threads. Code listings are
highlighted with Pygments and footer prose is rendered with Markdown, the
same pairing the page generator has always used.

Examples
--------
>>> from docc_pages.content_model import Paragraph, Text
>>> renderer = ContentRenderer()
>>> renderer.render(Paragraph((Text("Fish & chips"),)), {}, 0)
'<p>Fish &amp; chips</p>'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from docc_pages.content_model import (
    Aside,
    CodeListing,
    CodeVoice,
    FileReference,
    Heading,
    ImageReference,
    InlineImage,
    InlineReference,
    InlineStyle,
    ListBlock,
    Paragraph,
    Step,
    Styled,
    Table,
    TermList,
    Text,
    ThematicBreak,
    TopicReference,
    UnsupportedBlock,
    UnsupportedInline,
)
from docc_pages.diagnostics import Diagnostic, DiagnosticSink, discard
from docc_pages.generator.links import resolve_media_url, resolve_url

if typ.TYPE_CHECKING:
    from docc_pages.content_model import (
        ContentBlock,
        DeclarationToken,
        InlineContent,
        Reference,
    )

References = typ.Mapping[str, "Reference"]

_STYLE_TAGS: dict[InlineStyle, tuple[str, str]] = {
    InlineStyle.EMPHASIS: ("<em>", "</em>"),
    InlineStyle.STRONG: ("<strong>", "</strong>"),
    InlineStyle.STRIKETHROUGH: ("<s>", "</s>"),
    InlineStyle.SUBSCRIPT: ("<sub>", "</sub>"),
    InlineStyle.SUPERSCRIPT: ("<sup>", "</sup>"),
    InlineStyle.NEW_TERM: ("<dfn>", "</dfn>"),
    InlineStyle.INLINE_HEAD: ('<strong class="inline-head">', "</strong>"),
}

_TOKEN_CLASSES = {
    "keyword": "keyword",
    "typeIdentifier": "type",
    "genericParameter": "type",
    "externalParam": "param",
    "internalParam": "param",
    "identifier": "identifier",
    "label": "label",
    "number": "number",
    "string": "string",
    "attribute": "attribute",
}

_SLUG_STRIP = re.compile(r"[^a-z0-9-]")
_CLASS_STRIP = re.compile(r"[^A-Za-z0-9_-]")


@dc.dataclass(frozen=True, slots=True)
class InlineResult:
    """Rendered inline content with its plain-text equivalent.

    The plain text feeds ``<meta name="description">`` and ``alt``-style
    attributes where markup is not allowed.
    """

    html: str
    plain_text: str

    @classmethod
    def join(cls, parts: typ.Iterable[InlineResult]) -> InlineResult:
        """Concatenate several results."""
        items = list(parts)
        return cls(
            "".join(part.html for part in items),
            "".join(part.plain_text for part in items),
        )


EMPTY = InlineResult("", "")


def slugify(text: str) -> str:
    """Return a heading anchor: lowercase, spaces to ``-``, alphanumerics kept.

    Examples
    --------
    >>> slugify("Creating a Rocket!")
    'creating-a-rocket'
    """
    return _SLUG_STRIP.sub("", text.lower().replace(" ", "-"))


def token_class(kind: str) -> str | None:
    """Return the CSS class for a declaration token kind, ``None`` for text."""
    if kind == "text":
        return None
    return _TOKEN_CLASSES.get(kind, _CLASS_STRIP.sub("", kind) or None)


class ContentRenderer:
    """Render content-model nodes and code snippets with consistent styling."""

    def __init__(
        self,
        pygments_style: str = "default",
        *,
        report: DiagnosticSink | None = None,
    ) -> None:
        """Initialize a renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults
            to ``"default"``.
        report : DiagnosticSink, optional
            Receives warnings about unresolved references; dropped when
            omitted.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, nowrap=True)
        self._report = report if report is not None else discard

    def with_sink(self, report: DiagnosticSink) -> ContentRenderer:
        """Return a renderer sharing this formatter but reporting to ``report``."""
        clone = ContentRenderer.__new__(ContentRenderer)
        clone.pygments_style = self.pygments_style
        clone._formatter = self._formatter
        clone._report = report
        return clone

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render Markdown prose such as the configurable footer."""
        if not text.strip():
            return ""
        md = Markdown(extensions=["sane_lists", "tables"])
        return md.convert(text)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with a language tag.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name; defaults to ``"text"`` when not provided or
            when the lexer lookup fails.

        Returns
        -------
        str
            ``<div class="codehilite">`` wrapping ``<pre><code>`` with
            ``data-language`` metadata applied.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        body = highlight(code, lexer, self._formatter).rstrip("\n")
        safe_lang = escape(lang, quote=True)
        return (
            f'<div class="codehilite" data-language="{safe_lang}">'
            f'<pre class="code-listing language-{safe_lang}"><code>{body}</code></pre>'
            "</div>"
        )

    # Dispatch ---------------------------------------------------------------

    def render(
        self, node: ContentBlock | InlineContent, references: References, depth: int
    ) -> str:
        """Render any block or inline node to HTML."""
        match node:
            case (
                Text()
                | CodeVoice()
                | Styled()
                | InlineReference()
                | InlineImage()
                | UnsupportedInline()
            ):
                return self.render_inline((node,), references, depth).html
            case _:
                return self.render_block(node, references, depth)

    # Inline -------------------------------------------------------------------

    def render_inline(
        self,
        content: typ.Iterable[InlineContent],
        references: References,
        depth: int,
    ) -> InlineResult:
        """Render a sequence of inline nodes."""
        return InlineResult.join(
            self._inline(node, references, depth) for node in content
        )

    def _inline(
        self, node: InlineContent, references: References, depth: int
    ) -> InlineResult:
        match node:
            case Text(text=text):
                return InlineResult(escape(text, quote=False), text)
            case CodeVoice(code=code):
                return InlineResult(f"<code>{escape(code, quote=False)}</code>", code)
            case Styled(style=style, children=children):
                inner = self.render_inline(children, references, depth)
                opening, closing = _STYLE_TAGS[style]
                return InlineResult(f"{opening}{inner.html}{closing}", inner.plain_text)
            case InlineReference():
                return self._reference(node, references, depth)
            case InlineImage(target_id=target_id):
                image = references.get(target_id)
                alt = image.alt_text if isinstance(image, ImageReference) else None
                return InlineResult(self.image(target_id, references, depth), alt or "")
            case _:
                return EMPTY

    def _reference(
        self, node: InlineReference, references: References, depth: int
    ) -> InlineResult:
        """Render a cross-reference, linking only when it is active and resolved."""
        match references.get(node.target_id):
            case TopicReference() as topic:
                pass
            case _:
                topic = None

        if node.override_inline is not None:
            label = self.render_inline(node.override_inline, references, depth)
        elif node.override_title is not None:
            title = node.override_title
            label = InlineResult(escape(title, quote=False), title)
        elif topic is not None:
            label = InlineResult(escape(topic.title, quote=False), topic.title)
        else:
            label = InlineResult(escape(node.target_id, quote=False), node.target_id)

        if node.is_active and topic is not None and topic.url:
            href = escape(resolve_url(topic.url, depth), quote=True)
            return InlineResult(f'<a href="{href}">{label.html}</a>', label.plain_text)
        if node.is_active and topic is None:
            self._report(Diagnostic.warning(f"Unresolved reference '{node.target_id}'"))
        return InlineResult(
            f'<span class="inactive-reference">{label.html}</span>', label.plain_text
        )

    def image(
        self,
        target_id: str | None,
        references: References,
        depth: int,
        *,
        css_class: str | None = None,
    ) -> str:
        """Render an image reference, with a dark-mode source when available.

        Returns an empty string when the reference is missing or has no
        renditions.
        """
        match references.get(target_id or ""):
            case ImageReference() as image if image.light_url:
                pass
            case _:
                return ""
        src = escape(resolve_media_url(image.light_url, depth), quote=True)
        alt = escape(image.alt_text or "", quote=True)
        class_attr = f' class="{escape(css_class, quote=True)}"' if css_class else ""
        img = f'<img src="{src}" alt="{alt}"{class_attr} loading="lazy">'
        dark = image.dark_url
        if dark is None:
            return img
        dark_src = escape(resolve_media_url(dark, depth), quote=True)
        return (
            f'<picture><source srcset="{dark_src}" '
            f'media="(prefers-color-scheme: dark)">{img}</picture>'
        )

    # Blocks -------------------------------------------------------------------

    def render_blocks(
        self,
        blocks: typ.Iterable[ContentBlock],
        references: References,
        depth: int,
    ) -> str:
        """Render a sequence of blocks, newline separated."""
        rendered = (self.render_block(block, references, depth) for block in blocks)
        return "\n".join(html for html in rendered if html)

    def render_block(  # noqa: C901, PLR0911 - one case per block kind
        self, block: ContentBlock, references: References, depth: int
    ) -> str:
        """Render a single block; unsupported kinds render as ``""``."""
        match block:
            case Paragraph(inline=inline):
                return f"<p>{self.render_inline(inline, references, depth).html}</p>"
            case Heading(level=level, text=text, anchor=anchor):
                tag = f"h{min(max(level, 1), 6)}"
                slug = escape(anchor or slugify(text), quote=True)
                return (
                    f'<{tag} id="{slug}"><a href="#{slug}">'
                    f"{escape(text, quote=False)}</a></{tag}>"
                )
            case Aside(style=style, title=title, children=children):
                css = _CLASS_STRIP.sub("", style.lower()) or "note"
                label = escape(title or style.capitalize(), quote=False)
                body = self.render_blocks(children, references, depth)
                return (
                    f'<aside class="aside {css}"><p class="label">{label}</p>'
                    f"{body}</aside>"
                )
            case CodeListing(syntax=syntax, lines=lines):
                return self.code_block("\n".join(lines), syntax)
            case ListBlock():
                return self._list(block, references, depth)
            case Table(rows=rows):
                return self._table(rows, references, depth)
            case TermList(items=items):
                entries = "".join(
                    f"<dt>{self.render_inline(item.term, references, depth).html}</dt>"
                    f"<dd>{self.render_blocks(item.definition, references, depth)}</dd>"
                    for item in items
                )
                return f"<dl>{entries}</dl>"
            case Step():
                return self._step(block, references, depth)
            case ThematicBreak():
                return "<hr>"
            case UnsupportedBlock():
                return ""
            case _:
                return ""

    def _list(self, block: ListBlock, references: References, depth: int) -> str:
        items = "".join(
            f"<li>{self.render_blocks(item, references, depth)}</li>"
            for item in block.items
        )
        if not block.ordered:
            return f"<ul>{items}</ul>"
        start = f' start="{block.start}"' if block.start != 1 else ""
        return f"<ol{start}>{items}</ol>"

    def _table(
        self,
        rows: tuple[tuple[tuple[ContentBlock, ...], ...], ...],
        references: References,
        depth: int,
    ) -> str:
        if not rows:
            return "<table></table>"
        header = "".join(
            f"<th>{self.render_blocks(cell, references, depth)}</th>" for cell in rows[0]
        )
        html = f"<table><thead><tr>{header}</tr></thead>"
        if len(rows) > 1:
            body = "".join(
                "<tr>"
                + "".join(
                    f"<td>{self.render_blocks(cell, references, depth)}</td>"
                    for cell in row
                )
                + "</tr>"
                for row in rows[1:]
            )
            html += f"<tbody>{body}</tbody>"
        return html + "</table>"

    def _step(self, block: Step, references: References, depth: int) -> str:
        parts = [
            '<div class="step">',
            '<div class="step-content">',
            self.render_blocks(block.content, references, depth),
            "</div>",
        ]
        media = self.image(block.media, references, depth)
        if media:
            parts.append(f'<div class="step-media">{media}</div>')
        code = self.file_listing(references.get(block.code or ""))
        if code:
            parts.append(f'<div class="step-code">{code}</div>')
        if block.caption:
            caption = self.render_blocks(block.caption, references, depth)
            parts.append(f'<div class="step-caption">{caption}</div>')
        parts.append("</div>")
        return "".join(parts)

    def file_listing(self, reference: Reference | None) -> str:
        """Render a file reference as a named, highlighted listing."""
        match reference:
            case FileReference() as file_ref:
                pass
            case _:
                return ""
        name = escape(file_ref.file_name, quote=False)
        return (
            f'<div class="code-file-name">{name}</div>'
            + self.code_block("\n".join(file_ref.lines), file_ref.syntax)
        )

    # Declarations -------------------------------------------------------------

    def render_declaration(
        self,
        tokens: typ.Iterable[DeclarationToken],
        references: References,
        depth: int,
    ) -> str:
        """Render declaration tokens as classed spans, linking resolvable ones."""
        pieces: list[str] = []
        for token in tokens:
            text = escape(token.text, quote=False)
            match references.get(token.identifier or ""):
                case TopicReference(url=url) if url:
                    href = escape(resolve_url(url, depth), quote=True)
                    text = f'<a href="{href}">{text}</a>'
                case _:
                    pass
            css = token_class(token.kind)
            pieces.append(f'<span class="{css}">{text}</span>' if css else text)
        return "".join(pieces)


__all__ = [
    "ContentRenderer",
    "InlineResult",
    "References",
    "slugify",
    "token_class",
]
