"""Graphical rendering of diagnostics with colours and box-drawing characters."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from wcwidth import wcwidth

from .diagnostic import (
    Diagnostic,
    LabeledSpan,
    OutOfBoundsError,
    Severity,
    SpanContents,
    TextSource,
    iter_causes,
)
from .graphical_context import ContextRenderer
from .graphical_lines import wrap_text
from .highlighters import BlankHighlighter, Highlighter, default_highlighter
from .theme import GraphicalTheme, Style


class _LinkStyle(Enum):
    NONE = "none"
    LINK = "link"
    TEXT = "text"


def _str_width(text: str) -> int:
    return sum(max(0, wcwidth(char)) for char in text)


@dataclass(frozen=True)
class GraphicalReportHandler:
    """Renders diagnostics quasi-graphically, with colours and drawing characters.

    Every ``with_*`` method returns a new, reconfigured handler.
    """

    links: _LinkStyle = _LinkStyle.LINK
    termwidth: int = 200
    theme: GraphicalTheme = field(default_factory=GraphicalTheme.default)
    footer: Optional[str] = None
    context_lines: int = 1
    tab_size: int = 4
    cause_chain: bool = True
    wrap_lines: bool = True
    break_words: bool = True
    highlighter: Highlighter = field(default_factory=default_highlighter)
    link_display_text: Optional[str] = None

    # -- configuration ------------------------------------------------------

    def tab_width(self, width: int) -> "GraphicalReportHandler":
        """Set the displayed tab width in spaces."""
        return dataclasses.replace(self, tab_size=width)

    def with_links(self, links: bool) -> "GraphicalReportHandler":
        """Turn error-code links on, or show the URL as plain text instead."""
        return dataclasses.replace(
            self, links=_LinkStyle.LINK if links else _LinkStyle.TEXT
        )

    def with_cause_chain(self) -> "GraphicalReportHandler":
        return dataclasses.replace(self, cause_chain=True)

    def without_cause_chain(self) -> "GraphicalReportHandler":
        return dataclasses.replace(self, cause_chain=False)

    def with_urls(self, urls: bool) -> "GraphicalReportHandler":
        """Whether to show diagnostic URLs at all."""
        if not urls:
            links = _LinkStyle.NONE
        elif self.links is _LinkStyle.NONE:
            links = _LinkStyle.LINK
        else:
            links = self.links
        return dataclasses.replace(self, links=links)

    def with_theme(self, theme: GraphicalTheme) -> "GraphicalReportHandler":
        return dataclasses.replace(self, theme=theme)

    def with_width(self, width: int) -> "GraphicalReportHandler":
        """Set the width to wrap the report at."""
        return dataclasses.replace(self, termwidth=width)

    def with_wrap_lines(self, wrap_lines: bool) -> "GraphicalReportHandler":
        return dataclasses.replace(self, wrap_lines=wrap_lines)

    def with_break_words(self, break_words: bool) -> "GraphicalReportHandler":
        return dataclasses.replace(self, break_words=break_words)

    def with_footer(self, footer: str) -> "GraphicalReportHandler":
        return dataclasses.replace(self, footer=footer)

    def with_context_lines(self, lines: int) -> "GraphicalReportHandler":
        """Set the number of context lines shown around each label."""
        return dataclasses.replace(self, context_lines=lines)

    def with_syntax_highlighting(self, highlighter: Highlighter) -> "GraphicalReportHandler":
        return dataclasses.replace(self, highlighter=highlighter)

    def without_syntax_highlighting(self) -> "GraphicalReportHandler":
        return dataclasses.replace(self, highlighter=BlankHighlighter())

    def with_link_display_text(self, text: str) -> "GraphicalReportHandler":
        """Set the text shown for links instead of ``(link)``."""
        return dataclasses.replace(self, link_display_text=text)

    # -- rendering ----------------------------------------------------------

    def render_report(self, diagnostic: Diagnostic) -> str:
        """Render ``diagnostic`` as a graphical report."""
        out: List[str] = []
        self._render_header(out, diagnostic)
        self._render_causes(out, diagnostic)
        src = diagnostic.source_code
        self._render_snippets(out, diagnostic, src)
        self._render_footer(out, diagnostic)
        self._render_related(out, diagnostic, src)
        if self.footer is not None:
            out.append("\n")
            out.append(self._wrap(self.footer, "  ", "  ") + "\n")
        return "".join(out)

    def _wrap(self, text: str, initial_indent: str, subsequent_indent: str) -> str:
        return wrap_text(
            text,
            max(0, self.termwidth - 2),
            initial_indent,
            subsequent_indent,
            self.break_words,
            self.wrap_lines,
        )

    def _severity(self, diagnostic: Diagnostic) -> Tuple[Style, str]:
        styles = self.theme.styles
        chars = self.theme.characters
        if diagnostic.severity is Severity.WARNING:
            return styles.warning, chars.warning
        if diagnostic.severity is Severity.ADVICE:
            return styles.advice, chars.advice
        return styles.error, chars.error

    def _render_header(self, out: List[str], diagnostic: Diagnostic) -> None:
        severity_style, _ = self._severity(diagnostic)
        link_style = self.theme.styles.link
        if self.links is _LinkStyle.LINK and diagnostic.url is not None:
            code = (
                severity_style.apply(f"{diagnostic.code} ")
                if diagnostic.code is not None
                else ""
            )
            display = link_style.apply(
                self.link_display_text if self.link_display_text is not None else "(link)"
            )
            out.append(
                f"\x1b]8;;{diagnostic.url}\x1b\\{code}{display}\x1b]8;;\x1b\\\n"
            )
        elif diagnostic.code is not None:
            header = severity_style.apply(str(diagnostic.code))
            if self.links is _LinkStyle.TEXT and diagnostic.url is not None:
                header += f" ({link_style.apply(str(diagnostic.url))})"
            out.append(header + "\n")
        out.append("\n")

    def _render_causes(self, out: List[str], diagnostic: Diagnostic) -> None:
        chars = self.theme.characters
        severity_style, icon = self._severity(diagnostic)
        initial_indent = f"  {severity_style.apply(icon)} "
        rest_indent = f"  {severity_style.apply(chars.vbar)} "
        out.append(self._wrap(str(diagnostic), initial_indent, rest_indent) + "\n")

        if not self.cause_chain:
            return

        causes = list(iter_causes(diagnostic))
        for index, error in enumerate(causes):
            is_last = index == len(causes) - 1
            corner = chars.lbot if is_last else chars.lcross
            initial_indent = severity_style.apply(
                f"  {corner}{chars.hbar}{chars.rarrow} "
            )
            rest_indent = severity_style.apply(
                f"  {' ' if is_last else chars.vbar}   "
            )
            if isinstance(error, Diagnostic):
                inner_renderer = dataclasses.replace(
                    self,
                    footer=None,
                    cause_chain=False,
                    termwidth=max(0, self.termwidth - _str_width(rest_indent)),
                )
                inner = inner_renderer.render_report(error).lstrip("\n")
                out.append(self._wrap(inner, initial_indent, rest_indent) + "\n")
            else:
                out.append(self._wrap(str(error), initial_indent, rest_indent) + "\n")

    def _render_footer(self, out: List[str], diagnostic: Diagnostic) -> None:
        if diagnostic.help is None:
            return
        initial_indent = self.theme.styles.help.apply("  help: ")
        out.append(self._wrap(str(diagnostic.help), initial_indent, " " * 8) + "\n")

    def _render_related(
        self,
        out: List[str],
        diagnostic: Diagnostic,
        parent_src: Optional[TextSource],
    ) -> None:
        if diagnostic.related is None:
            return
        inner_renderer = dataclasses.replace(self, cause_chain=True)
        for rel in diagnostic.related:
            out.append("\n")
            out.append(f"{(rel.severity or Severity.ERROR).value.capitalize()}: ")
            inner_renderer._render_header(out, rel)
            inner_renderer._render_causes(out, rel)
            src = rel.source_code or parent_src
            inner_renderer._render_snippets(out, rel, src)
            inner_renderer._render_footer(out, rel)
            inner_renderer._render_related(out, rel, src)

    def _read(self, source: TextSource, label: LabeledSpan) -> SpanContents:
        return source.read_span(label.span(), self.context_lines, self.context_lines)

    def _render_snippets(
        self,
        out: List[str],
        diagnostic: Diagnostic,
        source: Optional[TextSource],
    ) -> None:
        if source is None or diagnostic.labels is None:
            return
        styles = self.theme.styles
        labels = sorted(diagnostic.labels, key=lambda label: label.offset)

        contexts: List[Tuple[LabeledSpan, SpanContents]] = []
        for right in labels:
            try:
                right_conts = self._read(source, right)
            except OutOfBoundsError:
                out.append(
                    "  [{} `{}` (offset: {}, length: {}): {}]\n".format(
                        styles.error.apply("Failed to read contents for label"),
                        styles.link.apply(right.label if right.label is not None else "<none>"),
                        styles.link.apply(str(right.offset)),
                        styles.link.apply(str(right.length)),
                        styles.warning.apply("OutOfBounds"),
                    )
                )
                return

            if contexts:
                left, left_conts = contexts[-1]
                if left_conts.line + left_conts.line_count >= right_conts.line:
                    new_end = max(left.offset + left.length, right.offset + right.length)
                    merged = LabeledSpan(left.label, left.offset, new_end - left.offset)
                    try:
                        merged_conts = self._read(source, merged)
                    except OutOfBoundsError:
                        pass
                    else:
                        contexts[-1] = (merged, merged_conts)
                        continue
            contexts.append((right, right_conts))

        renderer = ContextRenderer(
            theme=self.theme,
            context_lines=self.context_lines,
            tab_width=self.tab_size,
            highlighter=self.highlighter,
        )
        for context, _ in contexts:
            out.append(renderer.render(source, context, labels))