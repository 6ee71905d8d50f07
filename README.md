# diagrender

Render diagnostics as text meant for people or for machines. A diagnostic is
an error message with an optional code, severity, URL, help text, labelled
spans over source text, a chain of causes and related diagnostics.

## Install

    pip install diagrender

## Describing a diagnostic

`diagrender.diagnostic` holds the data types:

- `Diagnostic` is an `Exception` carrying `message`, `code`, `severity`,
  `url`, `help`, `labels`, `related`, `source_code`, `diagnostic_source` and
  `cause`. `with_source_code(...)` returns a copy that reads its snippets from
  the given source (a `TextSource` or a plain string).
- `Severity` is one of `ERROR`, `WARNING` or `ADVICE`; no severity renders as
  an error.
- `LabeledSpan` is a label text (or `None`), a character offset and a length.
  `LabeledSpan.at(start, end, label)` builds one from a half-open range.
- `SourceSpan` is an offset and length; negative values raise `ValueError`.
- `TextSource` is source text in memory with an optional `name` and
  `language`. `read_span(span, before, after)` returns `SpanContents` with
  whole lines of context, and raises `OutOfBoundsError` when the span reaches
  past the end of the text.
- `iter_causes(diagnostic)` yields the chain of causes, nearest first:
  `diagnostic_source`, then `cause`, then `__cause__`.

```python
from diagrender.diagnostic import Diagnostic, LabeledSpan, Severity, TextSource

source = TextSource("source\n  text\n    here", name="bad_file.rs")
diag = Diagnostic(
    "oops!",
    code="oops::my::bad",
    severity=Severity.ERROR,
    help="try doing it better next time?",
    labels=[LabeledSpan.at(9, 13, "This bit here")],
).with_source_code(source)
```

## Renderers

Each handler has a `render_report(diagnostic)` method that returns a string.

- `diagrender.graphical.GraphicalReportHandler` draws boxed snippets with line
  numbers, underlines, gutters for spans over several lines, wrapped text and
  terminal hyperlinks for diagnostic URLs. It is an immutable dataclass; each
  configuration call returns a new handler: `with_width`, `with_context_lines`,
  `tab_width`, `with_links`, `with_urls`, `with_link_display_text`,
  `with_footer`, `with_cause_chain`, `without_cause_chain`, `with_theme`,
  `with_wrap_lines`, `with_break_words`, `with_syntax_highlighting` and
  `without_syntax_highlighting`. A label outside its source is reported as a
  line in the output rather than raised.
- `diagrender.narratable.NarratableReportHandler` writes plain sentences suited
  to screen readers and non-terminal output. It offers `with_context_lines`,
  `with_footer`, `with_cause_chain` and `without_cause_chain`, and raises
  `OutOfBoundsError` for a label outside its source.
- `diagrender.json_handler.JSONReportHandler` writes one JSON object per
  diagnostic, related diagnostics nested inside. `escape(text)` escapes a
  string for a JSON literal.
- `diagrender.debug.DebugReportHandler` writes a compact listing of the
  diagnostic's fields followed by a short note.

```python
from diagrender.graphical import GraphicalReportHandler
from diagrender.theme import GraphicalTheme

handler = GraphicalReportHandler(theme=GraphicalTheme.unicode_nocolor()).with_width(80)
print(handler.render_report(diag))
```

## Themes

`diagrender.theme.GraphicalTheme` combines `ThemeCharacters` (`unicode()`,
`emoji()`, `ascii()`) with `ThemeStyles` (`ansi()`, `rgb()`, `none()`), and
offers the presets `ascii()`, `unicode()`, `unicode_nocolor()` and `none()`.
`GraphicalTheme.default()` picks `ascii()` when standard output or standard
error is not a terminal, `unicode_nocolor()` when `NO_COLOR` is set to
anything but `0`, and `unicode()` otherwise. A `Style` wraps text in ANSI
escape sequences with `apply(text)`.

## Highlighters

`diagrender.highlighters` defines the `Highlighter` and `HighlighterState`
interfaces for colouring snippet lines. `BlankHighlighter` leaves text
unstyled and is what `default_highlighter()` returns.

## What it does not do

The package only renders diagnostics you hand to it. It has no command-line
tool, installs no global error hook, and ships no language-aware syntax
highlighter: to colour source, supply your own `Highlighter`.