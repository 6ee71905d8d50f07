"""Line splitting, span geometry and text wrapping for graphical reports."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from wcwidth import wcwidth

from .diagnostic import SourceSpan, SpanContents
from .theme import Style


class LabelRenderMode(Enum):
    """How a label's text is being drawn."""

    SINGLE_LINE = "single_line"
    MULTI_LINE_FIRST = "multi_line_first"
    MULTI_LINE_REST = "multi_line_rest"


class FancySpan:
    """A label span with its text split into lines and its drawing style."""

    def __init__(self, label: Optional[str], span: SourceSpan, style: Style) -> None:
        self.label_lines: Optional[List[str]] = (
            label.split("\n") if label is not None else None
        )
        self.span = span
        self.style = style

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FancySpan):
            return NotImplemented
        return self.label_lines == other.label_lines and self.span == other.span

    def __hash__(self) -> int:
        lines = tuple(self.label_lines) if self.label_lines is not None else None
        return hash((lines, self.span))

    def __repr__(self) -> str:
        return f"FancySpan(label={self.label_lines!r}, span={self.span!r})"

    @property
    def offset(self) -> int:
        return self.span.offset

    @property
    def length(self) -> int:
        return self.span.length

    def label(self) -> Optional[str]:
        """The whole label text, styled, or None if the span has no label."""
        if self.label_lines is None:
            return None
        return self.style.apply("\n".join(self.label_lines))

    def label_parts(self) -> Optional[List[str]]:
        """Each line of the label, styled separately."""
        if self.label_lines is None:
            return None
        return [self.style.apply(part) for part in self.label_lines]


@dataclass(frozen=True)
class Line:
    """One line of a snippet: its number, offset, length with newline, and text."""

    line_number: int
    offset: int
    length: int
    text: str

    @property
    def _end(self) -> int:
        return self.offset + self.length

    def span_line_only(self, span: FancySpan) -> bool:
        """Whether the span lies entirely within this line."""
        return span.offset >= self.offset and span.offset + span.length <= self._end

    def span_applies(self, span: FancySpan) -> bool:
        """Whether the span is visible on this line, in the gutter or under the text."""
        spanlen = span.length or 1
        span_end = span.offset + spanlen
        starts_here = self.offset <= span.offset < self._end
        passes_through = span.offset < self.offset and span_end > self._end
        ends_here = self.offset < span_end <= self._end
        return starts_here or passes_through or ends_here

    def span_applies_gutter(self, span: FancySpan) -> bool:
        """Whether the span shows in the gutter: it applies but is not confined here."""
        spanlen = span.length or 1
        span_end = span.offset + spanlen
        starts_here = self.offset <= span.offset < self._end
        ends_here = self.offset < span_end <= self._end
        return self.span_applies(span) and not (starts_here and ends_here)

    def span_flyby(self, span: FancySpan) -> bool:
        """Whether a multi-line span covers this line without starting or ending on it."""
        return span.offset < self.offset and span.offset + span.length > self._end

    def span_starts(self, span: FancySpan) -> bool:
        """Whether the span begins on this line, given that it applies here."""
        return span.offset >= self.offset

    def span_ends(self, span: FancySpan) -> bool:
        """Whether the span ends on this line, given that it applies here."""
        span_end = span.offset + span.length
        return self.offset <= span_end <= self._end


def split_lines(contents: SpanContents) -> List[Line]:
    """Split read contents into lines, numbered from one."""
    text = contents.data
    lines: List[Line] = []
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
            lines.append(Line(line, line_offset, offset - line_offset, "".join(current)))
            current = []
            line_offset = offset
    return lines


def _char_width(char: str) -> int:
    return max(0, wcwidth(char))


def visual_char_widths(text: str, tab_width: int) -> Iterator[int]:
    """Yield the display width of each character, expanding tabs and skipping ANSI codes."""
    column = 0
    escaped = False
    for char in text:
        if escaped:
            width = 0
            if char == "m":
                escaped = False
        elif char == "\t":
            width = tab_width - column % tab_width
        elif char == "\x1b":
            escaped = True
            width = 0
        else:
            width = _char_width(char)
        column += width
        yield width


def visual_offset(line: Line, offset: int, start: bool, tab_width: int) -> int:
    """Display column of a source offset on ``line``.

    Offsets past the visible text land one column beyond its end. ``start`` is
    kept for symmetry with byte-based sources; character offsets are always on
    a boundary.
    """
    if not line.offset <= offset <= line.offset + line.length:
        raise ValueError(
            f"offset {offset} lies outside line {line.offset}..{line.offset + line.length}"
        )
    text_index = offset - line.offset
    width = sum(visual_char_widths(line.text[:text_index], tab_width))
    if text_index > len(line.text):
        return width + 1
    return width


# ---------------------------------------------------------------------------
# Wrapping


def _display_chars(text: str) -> Iterator[Tuple[str, int]]:
    """Yield each character with its display width, treating CSI escapes as zero-width."""
    in_escape = False
    after_esc = False
    for char in text:
        if after_esc:
            after_esc = False
            in_escape = char == "["
            yield char, 0
        elif in_escape:
            if "\x40" <= char <= "\x7e":
                in_escape = False
            yield char, 0
        elif char == "\x1b":
            after_esc = True
            yield char, 0
        else:
            yield char, _char_width(char)


def _display_width(text: str) -> int:
    return sum(width for _, width in _display_chars(text))


@dataclass(frozen=True)
class _Word:
    word: str
    whitespace: str = ""
    penalty: str = ""

    @property
    def width(self) -> int:
        return _display_width(self.word)


_WORD_RE = re.compile(r"([^ ]*)( *)")


def _find_words(line: str) -> List[_Word]:
    words: List[_Word] = []
    pos = 0
    while pos < len(line):
        match = _WORD_RE.match(line, pos)
        words.append(_Word(match.group(1), match.group(2)))
        pos = match.end()
    return words


def _split_hyphens(word: _Word) -> List[_Word]:
    text = word.word
    points = [
        index + 1
        for index, char in enumerate(text)
        if char == "-"
        and index > 0
        and text[index - 1].isalnum()
        and index + 1 < len(text)
        and text[index + 1].isalnum()
    ]
    if not points:
        return [word]
    bounds = [0, *points, len(text)]
    pieces = [_Word(text[a:b]) for a, b in zip(bounds, bounds[1:])]
    pieces[-1] = _Word(pieces[-1].word, word.whitespace, word.penalty)
    return pieces


def _break_apart(word: _Word, line_width: int) -> List[_Word]:
    chunks: List[_Word] = []
    current: List[str] = []
    width = 0
    for char, char_width in _display_chars(word.word):
        if width + char_width > line_width and current:
            chunks.append(_Word("".join(current)))
            current = []
            width = 0
        current.append(char)
        width += char_width
    chunks.append(_Word("".join(current), word.whitespace, word.penalty))
    return chunks


def _first_fit(words: List[_Word], widths: Tuple[int, int]) -> List[List[_Word]]:
    lines: List[List[_Word]] = []
    line_start = 0
    width = 0
    for index, word in enumerate(words):
        line_width = widths[min(len(lines), 1)]
        if width + word.width + len(word.penalty) > line_width and index > line_start:
            lines.append(words[line_start:index])
            line_start = index
            width = 0
        width += word.width + len(word.whitespace)
    lines.append(words[line_start:])
    return lines


def _wrap_line(
    line: str,
    width: int,
    initial_indent: str,
    subsequent_indent: str,
    break_words: bool,
    out: List[str],
) -> None:
    indent = initial_indent if not out else subsequent_indent
    if len(line.encode("utf-8")) < width and not indent:
        out.append(line.rstrip(" "))
        return

    widths = (
        max(0, width - _display_width(initial_indent)),
        max(0, width - _display_width(subsequent_indent)),
    )
    words = [piece for word in _find_words(line) for piece in _split_hyphens(word)]
    if break_words:
        broken: List[_Word] = []
        for word in words:
            if word.width > widths[1]:
                broken.extend(_break_apart(word, widths[1]))
            else:
                broken.append(word)
        if initial_indent:
            broken.insert(0, _Word(""))
        words = broken

    for group in _first_fit(words, widths):
        if not group:
            out.append("")
            continue
        prefix = initial_indent if not out else subsequent_indent
        body = "".join(w.word + w.whitespace for w in group[:-1])
        last = group[-1]
        out.append(prefix + body + last.word + last.penalty)


def wrap_text(
    text: str,
    width: int,
    initial_indent: str = "",
    subsequent_indent: str = "",
    break_words: bool = True,
    wrap_lines: bool = True,
) -> str:
    """Fill ``text`` to ``width`` columns with the given indents.

    With ``wrap_lines`` off, lines are only indented, never broken.
    """
    if wrap_lines:
        out: List[str] = []
        for line in text.split("\n"):
            _wrap_line(line, width, initial_indent, subsequent_indent, break_words, out)
        return "\n".join(out)

    result: List[str] = []
    pieces = text.split("\n")
    if text.endswith("\n"):
        pieces.pop()
    trimmed_subsequent = subsequent_indent.rstrip()
    for index, line in enumerate(pieces):
        if index > 0:
            result.append("\n")
        blank = not line.strip()
        if index == 0:
            result.append(initial_indent.rstrip() if blank else initial_indent)
        else:
            result.append(trimmed_subsequent if blank else subsequent_indent)
        result.append(line)
    if text.endswith("\n"):
        result.append("\n")
    return "".join(result)