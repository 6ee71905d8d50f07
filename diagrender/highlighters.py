"""Syntax highlighting hooks for source snippets."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

from .diagnostic import SpanContents
from .theme import Style

StyledSegment = Tuple[Style, str]


class HighlighterState(ABC):
    """Highlights the lines of one snippet, one after another."""

    @abstractmethod
    def highlight_line(self, line: str) -> List[StyledSegment]:
        """Split ``line`` into styled segments that together make up the line."""


class Highlighter(ABC):
    """Creates a highlighting state for each snippet to be rendered."""

    @abstractmethod
    def start_highlighter_state(self, source: SpanContents) -> HighlighterState:
        """Begin highlighting ``source``; the state does the actual work."""


class BlankHighlighterState(HighlighterState):
    """Leaves every line unstyled."""

    def highlight_line(self, line: str) -> List[StyledSegment]:
        return [(Style(), line)]


class BlankHighlighter(Highlighter):
    """A highlighter that applies no styling."""

    def start_highlighter_state(self, source: SpanContents) -> HighlighterState:
        return BlankHighlighterState()


def default_highlighter() -> Highlighter:
    """The highlighter used when none is configured."""
    return BlankHighlighter()