"""Plain-text rendering of diagnostics suited to screen readers."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from wcwidth import wcwidth

from .diagnostic import (
    Diagnostic,
    LabeledSpan,
    Severity,
    SourceSpan,
    SpanContents,
    TextSource,
    iter_causes,
)


@dataclass(frozen=True)
class _Line:
    line_number: int
    offset: int
    text: str
    at_end_of_file: bool

    def span_attach(self, span: SourceSpan) -> Optional[str]:
        """Describe where ``span`` touches this line, or None if it does not."""
        span_end = span.end()
        line_end = self.offset + len(self.text)
        start_after = span.offset >= self.offset
        end_before = self.at_end_of_file or span_end <= line_end

        if start_after and end_before:
            col_start = _column(self.text, span.offset - self.offset, True)
            col_end = (
                col_start
                if span.is_empty()
                else _column(self.text, span_end - self.offset, False)
            )
            if col_start == col_end:
                return f"label at line {self.line_number}, column {col_start}"
            return f"label at line {self.line_number}, columns {col_start} to {col_end}"
        if start_after and span.offset <= line_end:
            col_start = _column(self.text, span.offset - self.offset, True)
            return f"label starting at line {self.line_number}, column {col_start}"
        if end_before and span_end >= self.offset:
            col_end = _column(self.text, span_end - self.offset, False)
            return f"label ending at line {self.line_number}, column {col_end}"
        return None


def _column(text: str, offset: int, start: bool) -> int:
    """Display column at ``offset``; starts are one-based, ends inclusive."""
    column = sum(max(0, wcwidth(char)) for char in text[:offset])
    return column + 1 if start else column


def _severity_name(diagnostic: Diagnostic) -> str:
    return (diagnostic.severity or Severity.ERROR).value


def _split_lines(contents: SpanContents) -> List[_Line]:
    lines: List[_Line] = []
    text = contents.data
    line = contents.line
    column = contents.column
    offset = contents.span.offset
    line_offset = offset
    current: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        index += 1
        offset += 1
        at_end_of_file = False
        if char == "\r":
            if index < len(text) and text[index] == "\n":
                index += 1
                offset += 1
                line += 1
                column = 0
            else:
                current.append(char)
                column += 1
            at_end_of_file = index >= len(text)
        elif char == "\n":
            at_end_of_file = index >= len(text)
            line += 1
            column = 0
        else:
            current.append(char)
            column += 1

        exhausted = index >= len(text)
        if exhausted and not at_end_of_file:
            line += 1
        if column == 0 or exhausted:
            lines.append(_Line(line, line_offset, "".join(current), at_end_of_file))
            current = []
            line_offset = offset
    return lines


@dataclass(frozen=True)
class NarratableReportHandler:
    """Renders diagnostics as plain narrated text, without any graphics."""

    context_lines: int = 1
    cause_chain: bool = True
    footer: Optional[str] = None

    def with_cause_chain(self) -> "NarratableReportHandler":
        """Include the cause chain of the top-level error."""
        return dataclasses.replace(self, cause_chain=True)

    def without_cause_chain(self) -> "NarratableReportHandler":
        """Leave out the cause chain of the top-level error."""
        return dataclasses.replace(self, cause_chain=False)

    def with_footer(self, footer: str) -> "NarratableReportHandler":
        return dataclasses.replace(self, footer=footer)

    def with_context_lines(self, lines: int) -> "NarratableReportHandler":
        return dataclasses.replace(self, context_lines=lines)

    def render_report(self, diagnostic: Diagnostic) -> str:
        """Render ``diagnostic`` as text.

        Raises OutOfBoundsError when a label lies outside its source.
        """
        out: List[str] = []
        self._header(out, diagnostic)
        if self.cause_chain:
            self._causes(out, diagnostic)
        src = diagnostic.source_code
        self._snippets(out, diagnostic, src)
        self._footer(out, diagnostic)
        self._related(out, diagnostic, src)
        if self.footer is not None:
            out.append(f"{self.footer}\n")
        return "".join(out)

    @staticmethod
    def _header(out: List[str], diagnostic: Diagnostic) -> None:
        out.append(f"{diagnostic}\n")
        out.append(f"    Diagnostic severity: {_severity_name(diagnostic)}\n")

    @staticmethod
    def _causes(out: List[str], diagnostic: Diagnostic) -> None:
        for error in iter_causes(diagnostic):
            out.append(f"    Caused by: {error}\n")

    @staticmethod
    def _footer(out: List[str], diagnostic: Diagnostic) -> None:
        if diagnostic.help is not None:
            out.append(f"diagnostic help: {diagnostic.help}\n")
        if diagnostic.code is not None:
            out.append(f"diagnostic code: {diagnostic.code}\n")
        if diagnostic.url is not None:
            out.append(f"For more details, see:\n{diagnostic.url}\n")

    def _related(
        self, out: List[str], diagnostic: Diagnostic, parent_src: Optional[TextSource]
    ) -> None:
        if diagnostic.related is None:
            return
        out.append("\n")
        for rel in diagnostic.related:
            out.append(f"{_severity_name(rel).capitalize()}: ")
            self._header(out, rel)
            out.append("\n")
            self._causes(out, rel)
            src = rel.source_code or parent_src
            self._snippets(out, rel, src)
            self._footer(out, rel)
            self._related(out, rel, src)

    def _read(self, source: TextSource, span: SourceSpan) -> SpanContents:
        return source.read_span(span, self.context_lines, self.context_lines)

    def _snippets(
        self, out: List[str], diagnostic: Diagnostic, source: Optional[TextSource]
    ) -> None:
        if source is None or not diagnostic.labels:
            return
        labels = sorted(diagnostic.labels, key=lambda label: label.offset)
        contents = [self._read(source, label.span()) for label in labels]

        contexts: List[Tuple[LabeledSpan, SpanContents]] = []
        for right, right_conts in zip(labels, contents):
            if contexts:
                left, left_conts = contexts[-1]
                if left_conts.line + left_conts.line_count >= right_conts.line:
                    left_end = left.offset + left.length
                    right_end = right.offset + right.length
                    length = right_end - left.offset if right_end >= left_end else left.length
                    merged = LabeledSpan(left.label, left.offset, length)
                    try:
                        self._read(source, merged.span())
                    except Exception:
                        contexts.append((right, right_conts))
                    else:
                        contexts[-1] = (merged, left_conts)
                    continue
            contexts.append((right, right_conts))

        for context, _ in contexts:
            self._context(out, source, context, labels)

    def _context(
        self,
        out: List[str],
        source: TextSource,
        context: LabeledSpan,
        labels: Sequence[LabeledSpan],
    ) -> None:
        contents = self._read(source, context.span())
        lines = _split_lines(contents)
        name = f" for {contents.name}" if contents.name is not None else ""
        out.append(
            f"Begin snippet{name} starting at line {contents.line + 1}, "
            f"column {contents.column + 1}\n\n"
        )
        for line in lines:
            out.append(f"snippet line {line.line_number}: {line.text}\n")
            for label in labels:
                attach = line.span_attach(label.span())
                if attach is None:
                    continue
                text = f": {label.label}" if label.label is not None else ""
                out.append(f"    {attach}{text}\n")