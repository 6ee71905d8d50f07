import pytest

from diagrender.diagnostic import SourceSpan, TextSource
from diagrender.highlighters import (
    BlankHighlighter,
    BlankHighlighterState,
    Highlighter,
    HighlighterState,
    default_highlighter,
)
from diagrender.theme import Style


@pytest.fixture
def contents():
    return TextSource("let x = 1;\nlet y = 2;").read_span(SourceSpan(0, 3), 1, 1)


def test_blank_state_returns_single_plain_segment():
    assert BlankHighlighterState().highlight_line("abc") == [(Style(), "abc")]


def test_blank_highlighter_keeps_line_text(contents):
    state = BlankHighlighter().start_highlighter_state(contents)
    segments = state.highlight_line("let x = 1;")
    assert "".join(style.apply(text) for style, text in segments) == "let x = 1;"


def test_default_highlighter_is_blank(contents):
    highlighter = default_highlighter()
    state = highlighter.start_highlighter_state(contents)
    assert state.highlight_line("let y") == [(Style(), "let y")]


def test_abstract_bases_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Highlighter()
    with pytest.raises(TypeError):
        HighlighterState()