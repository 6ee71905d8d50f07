"""Diagnostics, source spans, labels and readable source text."""

from __future__ import annotations

import copy
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Sequence, Union


class Severity(Enum):
    """How serious a diagnostic is."""

    ERROR = "error"
    WARNING = "warning"
    ADVICE = "advice"


@dataclass(frozen=True)
class SourceSpan:
    """A character offset and length into a piece of source text."""

    offset: int
    length: int = 0

    def __post_init__(self) -> None:
        if self.offset < 0 or self.length < 0:
            raise ValueError(
                f"span offset and length must be non-negative, got "
                f"offset={self.offset}, length={self.length}"
            )

    def end(self) -> int:
        """Offset one past the last character of the span."""
        return self.offset + self.length

    def is_empty(self) -> bool:
        return self.length == 0


@dataclass(frozen=True)
class LabeledSpan:
    """A span with optional label text, as attached to a diagnostic."""

    label: Optional[str]
    offset: int
    length: int
    primary: bool = False

    def __post_init__(self) -> None:
        SourceSpan(self.offset, self.length)

    @classmethod
    def at(cls, start: int, end: int, label: Optional[str] = None) -> "LabeledSpan":
        """Create a label covering the half-open range ``start..end``."""
        if end < start:
            raise ValueError(f"span end {end} lies before its start {start}")
        return cls(label, start, end - start)

    def span(self) -> SourceSpan:
        return SourceSpan(self.offset, self.length)


@dataclass(frozen=True)
class SpanContents:
    """Text read from a source around a span, with its position."""

    data: str
    span: SourceSpan
    line: int
    column: int
    line_count: int
    name: Optional[str] = None
    language: Optional[str] = None


class OutOfBoundsError(Exception):
    """Raised when a span reaches past the end of its source."""


@dataclass
class TextSource:
    """Source text in memory, optionally with a file name and language."""

    text: str
    name: Optional[str] = None
    language: Optional[str] = None
    _line_starts: list = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._line_starts = [0] + [
            index + 1 for index, char in enumerate(self.text) if char == "\n"
        ]

    def _line_of(self, position: int) -> int:
        return bisect_right(self._line_starts, position) - 1

    def read_span(
        self,
        span: SourceSpan,
        context_lines_before: int = 0,
        context_lines_after: int = 0,
    ) -> SpanContents:
        """Read the span together with whole lines of context around it.

        Without context before, the contents start at the span itself; without
        context after, they stop at its end.
        """
        text = self.text
        if span.end() > len(text):
            raise OutOfBoundsError(
                f"span {span.offset}..{span.end()} lies outside a source "
                f"of length {len(text)}"
            )
        starts = self._line_starts
        first_line = self._line_of(span.offset)
        last_line = self._line_of(max(span.offset, span.end() - 1))

        if context_lines_before:
            context_first = max(0, first_line - context_lines_before)
            start = starts[context_first]
            column = 0
        else:
            context_first = first_line
            start = span.offset
            column = span.offset - starts[first_line]

        if context_lines_after:
            context_last = min(len(starts) - 1, last_line + context_lines_after)
            stop = starts[context_last + 1] if context_last + 1 < len(starts) else len(text)
        else:
            stop = span.end()

        data = text[start:stop]
        return SpanContents(
            data=data,
            span=SourceSpan(start, stop - start),
            line=context_first,
            column=column,
            line_count=data.count("\n"),
            name=self.name,
            language=self.language,
        )


SourceLike = Union[TextSource, str, None]


def _as_source(source_code: SourceLike) -> Optional[TextSource]:
    if isinstance(source_code, str):
        return TextSource(source_code)
    return source_code


class Diagnostic(Exception):
    """An error carrying a code, help text, labels and related diagnostics."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        severity: Optional[Severity] = None,
        url: Optional[str] = None,
        help: Optional[str] = None,
        labels: Optional[Sequence[LabeledSpan]] = None,
        related: Optional[Sequence["Diagnostic"]] = None,
        source_code: SourceLike = None,
        diagnostic_source: Optional["Diagnostic"] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.severity = severity
        self.url = url
        self.help = help
        self.labels = list(labels) if labels is not None else None
        self.related = list(related) if related is not None else None
        self.source_code = _as_source(source_code)
        self.diagnostic_source = diagnostic_source
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def with_source_code(self, source_code: SourceLike) -> "Diagnostic":
        """Return a copy of this diagnostic that reads its snippets from ``source_code``."""
        attached = copy.copy(self)
        attached.__cause__ = self.__cause__
        attached.source_code = _as_source(source_code)
        return attached


def _next_cause(error: BaseException) -> Optional[BaseException]:
    if isinstance(error, Diagnostic):
        if error.diagnostic_source is not None:
            return error.diagnostic_source
        if error.cause is not None:
            return error.cause
    return error.__cause__


def iter_causes(diagnostic: BaseException) -> Iterator[BaseException]:
    """Yield the chain of errors that caused ``diagnostic``, nearest first."""
    seen = {id(diagnostic)}
    current = _next_cause(diagnostic)
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = _next_cause(current)