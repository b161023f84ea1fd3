"""Turn document sections into template-ready view models.

:class:`PageSections` binds one document, its page depth, and a diagnostic
sink to a shared :class:`~docc_pages.generator.renderer.ContentRenderer`.
Its methods return plain dictionaries holding :class:`markupsafe.Markup`
fragments; the Jinja templates only arrange them, so every link inside
still comes from the single relative-link implementation.
"""

from __future__ import annotations

import typing as typ

from markupsafe import Markup

from docc_pages.content_model import (
    ArticleBodySection,
    AssessmentsSection,
    CallToActionSection,
    ContentAndMediaSection,
    ContentSection,
    DeclarationsSection,
    DiscussionSection,
    HeroSection,
    ParametersSection,
    ResourcesSection,
    Step,
    TasksSection,
    VolumeSection,
)
from docc_pages.diagnostics import Diagnostic, DiagnosticSink, discard
from docc_pages.generator.badges import marker_for
from docc_pages.generator.links import (
    normalize_id,
    relative_link,
    resolve_media_url,
    resolve_url,
)

if typ.TYPE_CHECKING:
    from docc_pages.content_model import (
        ContentBlock,
        ContentLayout,
        Document,
        InlineContent,
        TopicGroup,
        TopicReference,
        TutorialTask,
    )
    from docc_pages.generator.renderer import ContentRenderer, InlineResult

ViewModel = dict[str, typ.Any]


class PageSections:
    """Per-page helper producing view models for the page templates."""

    def __init__(
        self,
        renderer: ContentRenderer,
        document: Document,
        *,
        report: DiagnosticSink = discard,
    ) -> None:
        self.renderer = renderer
        self.document = document
        self.depth = document.depth
        self.report = report

    # Primitives ---------------------------------------------------------------

    def blocks(self, blocks: typ.Iterable[ContentBlock]) -> Markup:
        """Render blocks against this page's references and depth."""
        return Markup(
            self.renderer.render_blocks(blocks, self.document.references, self.depth)
        )

    def inline(self, content: typ.Iterable[InlineContent]) -> InlineResult:
        """Render inline content against this page's references and depth."""
        return self.renderer.render_inline(
            content, self.document.references, self.depth
        )

    def image(self, target_id: str | None, css_class: str | None = None) -> Markup:
        """Render an image reference or return empty markup."""
        return Markup(
            self.renderer.image(
                target_id, self.document.references, self.depth, css_class=css_class
            )
        )

    def link(self, target_id: str) -> ViewModel | None:
        """Return ``{"title", "href"}`` for a topic reference, if resolvable."""
        topic = self.document.topic(target_id)
        if topic is None or not topic.url:
            return None
        return {"title": topic.title, "href": resolve_url(topic.url, self.depth)}

    # Reference pages ----------------------------------------------------------

    def breadcrumbs(self) -> list[ViewModel]:
        """Return the trail for the first hierarchy path.

        Resolved entries carry an ``href``; unresolved ones only a title and
        a warning.
        """
        crumbs: list[ViewModel] = []
        for target_id in self.document.hierarchy.first_path:
            if self.document.topic(target_id) is None:
                self.report(Diagnostic.warning(f"Unresolved breadcrumb '{target_id}'"))
            resolved = self.link(target_id)
            crumbs.append(resolved or {"title": target_id, "href": None})
        return crumbs

    def declarations(self) -> list[Markup]:
        """Return rendered token runs for every declaration on the page."""
        rendered: list[Markup] = []
        for section in self.document.sections:
            match section:
                case DeclarationsSection(declarations=declarations):
                    rendered.extend(
                        Markup(
                            self.renderer.render_declaration(
                                tokens, self.document.references, self.depth
                            )
                        )
                        for tokens in declarations
                    )
                case _:
                    continue
        return rendered

    def reference_sections(self) -> list[ViewModel]:  # noqa: C901 - one case per kind
        """Return body sections of a reference page in document order."""
        views: list[ViewModel] = []
        for section in self.document.sections:
            match section:
                case ContentSection(blocks=blocks):
                    views.append({"kind": "content", "html": self.blocks(blocks)})
                case DiscussionSection(blocks=blocks, title=title):
                    views.append(
                        {"kind": "discussion", "title": title, "html": self.blocks(blocks)}
                    )
                case ParametersSection(parameters=parameters):
                    views.append(
                        {
                            "kind": "parameters",
                            "title": "Parameters",
                            "parameters": [
                                {"name": item.name, "html": self.blocks(item.blocks)}
                                for item in parameters
                            ],
                        }
                    )
                case ContentAndMediaSection():
                    views.append({"kind": "content", "html": self.content_and_media(section)})
                case ArticleBodySection(layouts=layouts):
                    views.append(
                        {
                            "kind": "content",
                            "html": Markup("").join(self.layout(item) for item in layouts),
                        }
                    )
                case ResourcesSection():
                    views.append({"kind": "resources", **self.resources(section)})
                case _:
                    continue
        return views

    def topic_groups(self, groups: typ.Iterable[TopicGroup]) -> list[ViewModel]:
        """Return topic or see-also groups with one card per target."""
        return [
            {
                "title": group.title,
                "anchor": group.anchor,
                "cards": [self.card(target_id) for target_id in group.target_ids],
            }
            for group in groups
        ]

    def card(self, target_id: str) -> ViewModel:
        """Return a symbol card; unresolved targets keep their id as title."""
        topic = self.document.topic(target_id)
        if topic is None:
            self.report(Diagnostic.warning(f"Unresolved topic '{target_id}'"))
            return {
                "title": target_id,
                "href": None,
                "abstract": Markup(""),
                "marker": Markup(marker_for("symbol").html()),
            }
        return {
            "title": topic.title,
            "href": resolve_url(topic.url, self.depth) if topic.url else None,
            "abstract": Markup(self.inline(topic.abstract).html),
            "marker": Markup(marker_for(topic.kind_tag).html()),
        }

    def relationship_groups(self) -> list[ViewModel]:
        """Return relationship lists such as "Conforms To"."""
        groups: list[ViewModel] = []
        for group in self.document.relationship_groups:
            items: list[ViewModel] = []
            for target_id in group.target_ids:
                resolved = self.link(target_id)
                if resolved is None:
                    self.report(
                        Diagnostic.warning(f"Unresolved relationship '{target_id}'")
                    )
                    resolved = {"title": target_id, "href": None}
                items.append(resolved)
            groups.append({"title": group.title, "kind": group.kind, "items": items})
        return groups

    # Layouts ------------------------------------------------------------------

    def layout(self, layout: ContentLayout) -> Markup:
        """Render a content layout wrapper."""
        match layout.kind:
            case "columns":
                columns = Markup("").join(
                    Markup('<div class="content-column">{}</div>').format(
                        self.layout(column)
                    )
                    for column in layout.columns
                )
                return Markup('<div class="content-columns">{}</div>').format(columns)
            case "contentAndMedia":
                return self._content_media_row(
                    layout.content, layout.media, layout.media_position
                )
            case _:
                return Markup('<div class="content-full-width">{}</div>').format(
                    self.blocks(layout.content)
                )

    def content_and_media(self, section: ContentAndMediaSection) -> Markup:
        """Render a standalone content-and-media section."""
        heading = Markup("")
        if section.eyebrow:
            heading += Markup('<p class="eyebrow">{}</p>').format(section.eyebrow)
        if section.title:
            heading += Markup("<h2>{}</h2>").format(section.title)
        row = self._content_media_row(
            section.content, section.media, section.media_position
        )
        return Markup('<section class="content-and-media-section">{}{}</section>').format(
            heading, row
        )

    def _content_media_row(
        self,
        content: typ.Iterable[ContentBlock],
        media: str | None,
        position: str,
    ) -> Markup:
        text = Markup('<div class="content-side">{}</div>').format(self.blocks(content))
        image = self.image(media)
        media_html = (
            Markup('<div class="media-side">{}</div>').format(image) if image else Markup("")
        )
        inner = media_html + text if position == "leading" else text + media_html
        return Markup('<div class="content-and-media">{}</div>').format(inner)

    # Tutorials ----------------------------------------------------------------

    def _first(self, kind: type[typ.Any]) -> typ.Any | None:
        for section in self.document.sections:
            if isinstance(section, kind):
                return section
        return None

    def overview_link(self, fallback_title: str) -> ViewModel:
        """Return the link back to the tutorial overview page."""
        for target_id in self.document.hierarchy.first_path[:1]:
            resolved = self.link(target_id)
            if resolved is not None:
                return resolved
        segments = self.document.segments
        if len(segments) >= 2:
            href = relative_link("/".join(segments[:2]), self.depth)
        else:
            href = "#"
        return {"title": fallback_title, "href": href}

    def chapter_menu(self, page_title: str) -> list[ViewModel]:
        """Return every tutorial of the course grouped by chapter."""
        current = normalize_id(self.document.id)
        chapters: list[ViewModel] = []
        for chapter in self.document.hierarchy.chapters:
            topic = self.document.topic(chapter.reference)
            items: list[ViewModel] = []
            for tutorial_id in chapter.tutorials:
                tutorial = self.document.topic(tutorial_id)
                if tutorial is None or not tutorial.url:
                    continue
                items.append(
                    {
                        "title": tutorial.title,
                        "href": resolve_url(tutorial.url, self.depth),
                        "selected": normalize_id(tutorial.url) == current,
                    }
                )
            title = topic.title if topic else chapter.reference.rsplit("/", 1)[-1]
            chapters.append({"title": title, "items": items})
        if not any(chapter["items"] for chapter in chapters):
            return [
                {
                    "title": None,
                    "items": [{"title": page_title, "href": "#", "selected": True}],
                }
            ]
        return chapters

    def section_menu(self) -> list[ViewModel]:
        """Return in-page anchors, starting with "Introduction"."""
        entries: list[ViewModel] = [{"title": "Introduction", "href": "#"}]
        for section in self.document.sections:
            match section:
                case TasksSection(tasks=tasks):
                    entries.extend(
                        {"title": task.title, "href": f"#{task.anchor}"} for task in tasks
                    )
                case AssessmentsSection(anchor=anchor):
                    entries.append(
                        {"title": "Check Your Understanding", "href": f"#{anchor}"}
                    )
                case _:
                    continue
        return entries

    def tutorial_hero(self) -> ViewModel:
        """Return chapter, abstract, time, and background for the tutorial hero."""
        hero: HeroSection | None = self._first(HeroSection)
        view: ViewModel = {
            "chapter": None,
            "abstract": Markup(""),
            "estimated_time": None,
            "background": None,
        }
        if hero is not None:
            view["chapter"] = hero.chapter
            if hero.estimated_minutes is not None:
                view["estimated_time"] = f"{hero.estimated_minutes} mins"
            if hero.content:
                view["abstract"] = self.blocks(hero.content)
            background = self.document.image(hero.background_image or hero.image)
            if background is not None:
                url = background.dark_url or background.light_url
                if url:
                    view["background"] = resolve_media_url(url, self.depth)
        if not view["abstract"] and self.document.abstract:
            view["abstract"] = Markup("<p>{}</p>").format(
                Markup(self.inline(self.document.abstract).html)
            )
        return view

    def tasks(self) -> list[ViewModel]:
        """Return numbered tutorial sections with their step rows."""
        views: list[ViewModel] = []
        tasks_section: TasksSection | None = self._first(TasksSection)
        if tasks_section is None:
            return views
        for number, task in enumerate(tasks_section.tasks, start=1):
            views.append(self._task(number, task))
        return views

    def _task(self, number: int, task: TutorialTask) -> ViewModel:
        text = Markup("")
        media = Markup("")
        for layout in task.content:
            if layout.kind == "columns":
                for column in layout.columns:
                    text += self.blocks(column.content)
                continue
            text += self.blocks(layout.content)
            if layout.kind == "contentAndMedia" and not media:
                media = self.image(layout.media)
        steps: list[ViewModel] = []
        step_number = 0
        for block in task.steps:
            match block:
                case Step():
                    step_number += 1
                    steps.append(self._step(step_number, block))
                case _:
                    steps.append({"number": None, "html": self.blocks((block,))})
        return {
            "number": number,
            "title": task.title,
            "anchor": task.anchor,
            "text": text,
            "media": media,
            "steps": steps,
        }

    def _step(self, number: int, step: Step) -> ViewModel:
        code = self.document.file(step.code)
        code_view = None
        if code is not None:
            code_view = {
                "file_name": code.file_name,
                "lines": list(enumerate(code.lines, start=1)),
            }
        return {
            "number": number,
            "html": self.blocks(step.content),
            "caption": self.blocks(step.caption) if step.caption else Markup(""),
            "code": code_view,
            "media": self.image(step.media) if code_view is None else Markup(""),
        }

    def assessments(self) -> ViewModel | None:
        """Return the quiz with radio-input ids ``q<i>c<j>``."""
        section: AssessmentsSection | None = self._first(AssessmentsSection)
        if section is None:
            return None
        total = len(section.assessments)
        questions: list[ViewModel] = []
        for index, assessment in enumerate(section.assessments):
            question_id = f"q{index}"
            questions.append(
                {
                    "id": question_id,
                    "number": index + 1,
                    "total": total,
                    "html": self.blocks(assessment.title)
                    + self.blocks(assessment.content),
                    "choices": [
                        {
                            "id": f"{question_id}c{choice_index}",
                            "correct": choice.is_correct,
                            "html": self.blocks(choice.content),
                            "justification": self.blocks(choice.justification),
                        }
                        for choice_index, choice in enumerate(assessment.choices)
                    ],
                }
            )
        return {"anchor": section.anchor, "questions": questions}

    def call_to_action(self) -> ViewModel | None:
        """Return the trailing call to action, if any."""
        section: CallToActionSection | None = self._first(CallToActionSection)
        if section is None:
            return None
        action = Markup("")
        if section.action is not None:
            action = Markup(self.inline((section.action,)).html)
        return {
            "eyebrow": section.eyebrow,
            "title": section.title,
            "abstract": Markup(self.inline(section.abstract).html),
            "action": action,
        }

    def resources(self, section: ResourcesSection | None = None) -> ViewModel:
        """Return resource tiles."""
        section = section or self._first(ResourcesSection)
        if section is None:
            return {"content": Markup(""), "tiles": []}
        tiles: list[ViewModel] = []
        for tile in section.tiles:
            action = Markup("")
            if tile.action is not None:
                action = Markup(self.inline((tile.action,)).html)
            tiles.append(
                {
                    "title": tile.title,
                    "html": self.blocks(tile.content),
                    "action": action,
                }
            )
        return {"content": self.blocks(section.content), "tiles": tiles}

    # Tutorial overview --------------------------------------------------------

    def overview_hero(self) -> ViewModel:
        """Return the overview hero title, content, and image."""
        hero: HeroSection | None = self._first(HeroSection)
        if hero is None:
            return {
                "title": self.document.title or "",
                "html": Markup(self.inline(self.document.abstract or ()).html),
                "image": Markup(""),
            }
        return {
            "title": hero.title or self.document.title or "",
            "html": self.blocks(hero.content),
            "image": self.image(hero.background_image or hero.image),
        }

    def volumes(self) -> list[ViewModel]:
        """Return volumes with their chapters and tutorial cards."""
        views: list[ViewModel] = []
        for section in self.document.sections:
            match section:
                case VolumeSection(name=name, content=content, chapters=chapters):
                    views.append(
                        {
                            "name": name,
                            "html": self.blocks(content),
                            "chapters": [
                                {
                                    "name": chapter.name,
                                    "html": self.blocks(chapter.content),
                                    "image": self.image(chapter.image),
                                    "tutorials": self._chapter_tutorials(
                                        chapter.tutorials
                                    ),
                                }
                                for chapter in chapters
                            ],
                        }
                    )
                case _:
                    continue
        return views

    def _chapter_tutorials(self, target_ids: typ.Iterable[str]) -> list[ViewModel]:
        cards: list[ViewModel] = []
        for target_id in target_ids:
            topic = self.document.topic(target_id)
            if topic is None:
                self.report(Diagnostic.warning(f"Unresolved tutorial '{target_id}'"))
                continue
            cards.append(self._tutorial_card(topic))
        return cards

    def _tutorial_card(self, topic: TopicReference) -> ViewModel:
        return {
            "title": topic.title,
            "href": resolve_url(topic.url, self.depth) if topic.url else "#",
            "abstract": self.inline(topic.abstract).plain_text,
        }


__all__ = ["PageSections", "ViewModel"]
