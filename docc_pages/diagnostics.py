"""Diagnostic records emitted while rendering documentation pages.

Rendering components never write to stdout or stderr. They accept an
optional :data:`DiagnosticSink`, a plain callable receiving
:class:`Diagnostic` records, so callers decide whether diagnostics are
collected, logged, or ignored. The generator gives every document its own
:class:`DiagnosticCollector` and merges the collected records after the
parallel map, then forwards each record to ``structlog`` through
:func:`log_diagnostic`.

Examples
--------
>>> from docc_pages.diagnostics import Diagnostic, DiagnosticCollector
>>> collector = DiagnosticCollector()
>>> collector(Diagnostic.warning("Unresolved link"))
>>> [str(item) for item in collector.items]
['[warning] Unresolved link']
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import structlog

logger = structlog.get_logger(__name__)

DiagnosticLevel = typ.Literal["warning", "note"]


@dc.dataclass(frozen=True, slots=True)
class SourceLocation:
    """Point in an input artifact that a diagnostic refers to."""

    file: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        """Return ``file:line:column`` omitting unknown components."""
        parts = [self.file]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


@dc.dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal problem found while rendering.

    Attributes
    ----------
    level : {"warning", "note"}
        Severity of the record.
    message : str
        One-line summary of the problem.
    location : SourceLocation or None
        Input artifact location, when known.
    """

    level: DiagnosticLevel
    message: str
    location: SourceLocation | None = None

    @classmethod
    def warning(
        cls, message: str, location: SourceLocation | None = None
    ) -> Diagnostic:
        """Build a warning-level diagnostic."""
        return cls("warning", message, location)

    @classmethod
    def note(cls, message: str, location: SourceLocation | None = None) -> Diagnostic:
        """Build a note-level diagnostic."""
        return cls("note", message, location)

    def with_location(self, location: SourceLocation) -> Diagnostic:
        """Return a copy carrying ``location`` unless one is already set."""
        if self.location is not None:
            return self
        return dc.replace(self, location=location)

    def __str__(self) -> str:
        """Format as ``[level] message at location``."""
        text = f"[{self.level}] {self.message}"
        if self.location is not None:
            text = f"{text} at {self.location}"
        return text


DiagnosticSink = typ.Callable[[Diagnostic], None]


def discard(_diagnostic: Diagnostic) -> None:
    """Sink that drops every diagnostic."""


@dc.dataclass(slots=True)
class DiagnosticCollector:
    """Sink that keeps diagnostics in arrival order.

    One collector belongs to exactly one document render so no locking is
    needed; the generator merges collectors on a single thread.
    """

    items: list[Diagnostic] = dc.field(default_factory=list)

    def __call__(self, diagnostic: Diagnostic) -> None:
        """Record ``diagnostic``."""
        self.items.append(diagnostic)

    def __len__(self) -> int:
        """Return the number of collected diagnostics."""
        return len(self.items)


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Forward ``diagnostic`` to the structured logger."""
    location = str(diagnostic.location) if diagnostic.location else None
    if diagnostic.level == "warning":
        logger.warning("RENDER_WARNING", message=diagnostic.message, location=location)
    else:
        logger.info("RENDER_NOTE", message=diagnostic.message, location=location)


__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticLevel",
    "DiagnosticSink",
    "SourceLocation",
    "discard",
    "log_diagnostic",
]
