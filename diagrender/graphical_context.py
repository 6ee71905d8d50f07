"""Rendering of one source snippet, with its gutter and label highlights."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import cycle
from typing import List, Optional, Sequence, Tuple

from .diagnostic import LabeledSpan, SpanContents, TextSource
from .graphical_lines import (
    FancySpan,
    LabelRenderMode,
    Line,
    split_lines,
    visual_char_widths,
    visual_offset,
)
from .highlighters import Highlighter, default_highlighter
from .theme import GraphicalTheme, Style


@dataclass(frozen=True)
class ContextRenderer:
    """Draws a snippet of source with line numbers, gutters and labels."""

    theme: GraphicalTheme
    context_lines: int = 1
    tab_width: int = 4
    highlighter: Highlighter = field(default_factory=default_highlighter)

    def render(
        self,
        source: TextSource,
        context: LabeledSpan,
        labels: Sequence[LabeledSpan],
    ) -> str:
        """Render the snippet around ``context``, marking every label in ``labels``.

        Raises OutOfBoundsError when the context or a label lies outside the source.
        """
        out: List[str] = []
        chars = self.theme.characters
        contents = source.read_span(context.span(), self.context_lines, self.context_lines)
        lines = split_lines(contents)

        context_end = context.offset + context.length
        ctx_labels = [
            label
            for label in labels
            if context.offset <= label.offset and label.offset + label.length <= context_end
        ]
        primary = next(
            (label for label in ctx_labels if label.primary),
            ctx_labels[0] if ctx_labels else None,
        )

        fancy = [
            FancySpan(label.label, label.span(), style)
            for label, style in zip(labels, cycle(self.theme.styles.highlights))
        ]

        state = self.highlighter.start_highlighter_state(contents)

        max_gutter = max(
            (
                sum(
                    1
                    for hl in fancy
                    if not line.span_line_only(hl) and line.span_applies_gutter(hl)
                )
                for line in lines
            ),
            default=0,
        )
        linum_width = len(str(lines[-1].line_number if lines else 0))

        out.append(" " * (linum_width + 2) + chars.ltop + chars.hbar)
        primary_contents: SpanContents = (
            source.read_span(primary.span(), 0, 0) if primary is not None else contents
        )
        if primary_contents.name is not None:
            name = self.theme.styles.link.apply(primary_contents.name)
            out.append(
                f"[{name}:{primary_contents.line + 1}:{primary_contents.column + 1}]\n"
            )
        elif len(lines) <= 1:
            out.append(chars.hbar * 3 + "\n")
        else:
            out.append(f"[{primary_contents.line + 1}:{primary_contents.column + 1}]\n")

        for line in lines:
            self._write_linum(out, linum_width, line.line_number)
            self._render_line_gutter(out, max_gutter, line, fancy)
            styled = "".join(
                style.apply(text) for style, text in state.highlight_line(line.text)
            )
            self._render_line_text(out, styled)

            applicable = [hl for hl in fancy if line.span_applies(hl)]
            single_line = [hl for hl in applicable if line.span_line_only(hl)]
            multi_line = [hl for hl in applicable if not line.span_line_only(hl)]
            if single_line:
                self._write_no_linum(out, linum_width)
                self._render_highlight_gutter(
                    out, max_gutter, line, fancy, LabelRenderMode.SINGLE_LINE
                )
                self._render_single_line_highlights(
                    out, line, linum_width, max_gutter, single_line, fancy
                )
            for hl in multi_line:
                if (
                    hl.label_lines is not None
                    and line.span_ends(hl)
                    and not line.span_starts(hl)
                ):
                    self._render_multi_line_end(out, fancy, max_gutter, linum_width, line, hl)

        out.append(" " * (linum_width + 2) + chars.lbot + chars.hbar * 4 + "\n")
        return "".join(out)

    # -- pieces -------------------------------------------------------------

    def _write_linum(self, out: List[str], width: int, linum: int) -> None:
        number = self.theme.styles.linum.apply(f"{linum:>{width}}")
        out.append(f" {number} {self.theme.characters.vbar} ")

    def _write_no_linum(self, out: List[str], width: int) -> None:
        out.append(" " + " " * width + f" {self.theme.characters.vbar_break} ")

    def _render_line_text(self, out: List[str], text: str) -> None:
        for char, width in zip(text, visual_char_widths(text, self.tab_width)):
            out.append(" " * width if char == "\t" else char)
        out.append("\n")

    def _render_line_gutter(
        self,
        out: List[str],
        max_gutter: int,
        line: Line,
        highlights: Sequence[FancySpan],
    ) -> None:
        if max_gutter == 0:
            return
        chars = self.theme.characters
        gutter = ""
        arrow = False
        applicable = [hl for hl in highlights if line.span_applies_gutter(hl)]
        for index, hl in enumerate(applicable):
            if line.span_starts(hl) or line.span_ends(hl):
                if line.span_starts(hl):
                    corner = chars.ltop
                elif hl.label_lines is not None:
                    corner = chars.lcross
                else:
                    corner = chars.lbot
                gutter += hl.style.apply(corner)
                gutter += hl.style.apply(chars.hbar * max(0, max_gutter - index))
                gutter += hl.style.apply(chars.rarrow)
                arrow = True
                break
            if line.span_flyby(hl):
                gutter += hl.style.apply(chars.vbar)
            else:
                gutter += " "
        padding = (1 if arrow else 3) + max(0, max_gutter - len(gutter))
        out.append(gutter + " " * padding)

    def _render_highlight_gutter(
        self,
        out: List[str],
        max_gutter: int,
        line: Line,
        highlights: Sequence[FancySpan],
        render_mode: LabelRenderMode,
    ) -> None:
        if max_gutter == 0:
            return
        chars = self.theme.characters
        gutter = ""
        gutter_cols = 0
        applicable = [hl for hl in highlights if line.span_applies_gutter(hl)]
        for index, hl in enumerate(applicable):
            if not line.span_line_only(hl) and line.span_ends(hl):
                if render_mode is LabelRenderMode.MULTI_LINE_REST:
                    horizontal_space = max(0, max_gutter - index) + 2
                    gutter += " " * horizontal_space
                    gutter_cols += horizontal_space + 1
                else:
                    num_repeat = max(0, max_gutter - index) + 2
                    bars = num_repeat - (
                        1 if render_mode is LabelRenderMode.MULTI_LINE_FIRST else 0
                    )
                    gutter += hl.style.apply(chars.lbot)
                    gutter += hl.style.apply(chars.hbar * bars)
                    gutter_cols += num_repeat + 1
                break
            gutter += hl.style.apply(chars.vbar)
            gutter_cols += 1
        out.append(gutter + " " * max(0, max_gutter + 3 - gutter_cols))

    def _render_single_line_highlights(
        self,
        out: List[str],
        line: Line,
        linum_width: int,
        max_gutter: int,
        single_liners: Sequence[FancySpan],
        all_highlights: Sequence[FancySpan],
    ) -> None:
        chars = self.theme.characters
        underlines: List[str] = []
        highest = 0
        vbar_offsets: List[Tuple[FancySpan, int]] = []
        for hl in single_liners:
            byte_start = hl.offset
            byte_end = hl.offset + hl.length
            start = max(visual_offset(line, byte_start, True, self.tab_width), highest)
            if hl.length == 0:
                end = start + 1
            else:
                end = max(visual_offset(line, byte_end, False, self.tab_width), start + 1)
            vbar_offset = (start + end) // 2
            num_left = vbar_offset - start
            num_right = end - vbar_offset - 1
            if hl.length == 0:
                marker = chars.uarrow
            elif hl.label_lines is not None:
                marker = chars.underbar
            else:
                marker = chars.underline
            piece = (
                " " * max(0, start - highest)
                + chars.underline * num_left
                + marker
                + chars.underline * num_right
            )
            underlines.append(hl.style.apply(piece))
            highest = max(highest, end)
            vbar_offsets.append((hl, vbar_offset))
        out.append("".join(underlines) + "\n")

        for hl in reversed(single_liners):
            parts = hl.label_parts()
            if parts is None:
                continue
            if len(parts) == 1:
                self._write_label_text(
                    out, line, linum_width, max_gutter, all_highlights,
                    vbar_offsets, hl, parts[0], LabelRenderMode.SINGLE_LINE,
                )
                continue
            for index, part in enumerate(parts):
                mode = (
                    LabelRenderMode.MULTI_LINE_FIRST
                    if index == 0
                    else LabelRenderMode.MULTI_LINE_REST
                )
                self._write_label_text(
                    out, line, linum_width, max_gutter, all_highlights,
                    vbar_offsets, hl, part, mode,
                )

    def _write_label_text(
        self,
        out: List[str],
        line: Line,
        linum_width: int,
        max_gutter: int,
        all_highlights: Sequence[FancySpan],
        vbar_offsets: Sequence[Tuple[FancySpan, int]],
        hl: FancySpan,
        label: str,
        render_mode: LabelRenderMode,
    ) -> None:
        chars = self.theme.characters
        self._write_no_linum(out, linum_width)
        self._render_highlight_gutter(
            out, max_gutter, line, all_highlights, LabelRenderMode.SINGLE_LINE
        )
        curr_offset = 1
        for offset_hl, vbar_offset in vbar_offsets:
            if curr_offset < vbar_offset + 1:
                out.append(" " * (vbar_offset + 1 - curr_offset))
                curr_offset = vbar_offset + 1
            if offset_hl != hl:
                out.append(offset_hl.style.apply(chars.vbar))
                curr_offset += 1
                continue
            if render_mode is LabelRenderMode.SINGLE_LINE:
                text = f"{chars.lbot}{chars.hbar * 2} {label}"
            elif render_mode is LabelRenderMode.MULTI_LINE_FIRST:
                text = f"{chars.lbot}{chars.hbar}{chars.rcross} {label}"
            else:
                text = f"  {chars.vbar} {label}"
            out.append(hl.style.apply(text) + "\n")
            break

    def _render_multi_line_end(
        self,
        out: List[str],
        labels: Sequence[FancySpan],
        max_gutter: int,
        linum_width: int,
        line: Line,
        label: FancySpan,
    ) -> None:
        self._write_no_linum(out, linum_width)
        parts = label.label_parts()
        if parts is None:
            self._render_highlight_gutter(
                out, max_gutter, line, labels, LabelRenderMode.SINGLE_LINE
            )
            out.append(label.style.apply(self.theme.characters.hbar) + "\n")
            return

        first, rest = parts[0], parts[1:]
        if not rest:
            self._render_highlight_gutter(
                out, max_gutter, line, labels, LabelRenderMode.SINGLE_LINE
            )
            self._render_multi_line_end_single(
                out, first, label.style, LabelRenderMode.SINGLE_LINE
            )
            return

        self._render_highlight_gutter(
            out, max_gutter, line, labels, LabelRenderMode.MULTI_LINE_FIRST
        )
        self._render_multi_line_end_single(
            out, first, label.style, LabelRenderMode.MULTI_LINE_FIRST
        )
        for part in rest:
            self._write_no_linum(out, linum_width)
            self._render_highlight_gutter(
                out, max_gutter, line, labels, LabelRenderMode.MULTI_LINE_REST
            )
            self._render_multi_line_end_single(
                out, part, label.style, LabelRenderMode.MULTI_LINE_REST
            )

    def _render_multi_line_end_single(
        self,
        out: List[str],
        label: str,
        style: Style,
        render_mode: LabelRenderMode,
    ) -> None:
        chars = self.theme.characters
        if render_mode is LabelRenderMode.SINGLE_LINE:
            mark: Optional[str] = chars.hbar
        elif render_mode is LabelRenderMode.MULTI_LINE_FIRST:
            mark = chars.rcross
        else:
            mark = chars.vbar
        out.append(f"{style.apply(mark)} {label}\n")