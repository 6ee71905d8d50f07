import pytest

from diagrender.diagnostic import (
    Diagnostic,
    LabeledSpan,
    OutOfBoundsError,
    Severity,
    TextSource,
)
from diagrender.narratable import NarratableReportHandler

SRC = "source\n  text\n    here"


@pytest.fixture
def handler():
    return NarratableReportHandler()


def example(**kwargs):
    return Diagnostic(
        "oops!",
        code="oops::my::bad",
        help="try doing it better next time?",
        labels=[LabeledSpan("This bit here", 9, 4)],
        source_code=TextSource(SRC, name="bad_file.rs"),
        **kwargs,
    )


def test_full_example(handler):
    out = handler.render_report(example())
    assert out == (
        "oops!\n"
        "    Diagnostic severity: error\n"
        "Begin snippet for bad_file.rs starting at line 1, column 1\n"
        "\n"
        "snippet line 1: source\n"
        "snippet line 2:   text\n"
        "    label at line 2, columns 3 to 6: This bit here\n"
        "snippet line 3:     here\n"
        "diagnostic help: try doing it better next time?\n"
        "diagnostic code: oops::my::bad\n"
    )


def test_context_lines_zero_shows_only_span_line(handler):
    out = handler.with_context_lines(0).render_report(example())
    assert "snippet line 1" not in out
    assert "snippet line 3" not in out
    assert "snippet line 2: text\n" in out


def test_builders_do_not_mutate(handler):
    changed = handler.with_context_lines(0).without_cause_chain()
    assert handler.context_lines == 1
    assert handler.cause_chain is True
    assert changed.with_cause_chain().cause_chain is True


def test_severity_in_header(handler):
    out = handler.render_report(Diagnostic("w", severity=Severity.WARNING))
    assert out == "w\n    Diagnostic severity: warning\n"


def test_cause_chain_toggle(handler):
    diag = Diagnostic("outer", cause=ValueError("boom"))
    assert "    Caused by: boom\n" in handler.render_report(diag)
    assert "Caused by" not in handler.without_cause_chain().render_report(diag)


def test_diagnostic_source_chain(handler):
    inner = Diagnostic("middle", diagnostic_source=Diagnostic("root"))
    out = handler.render_report(Diagnostic("top", diagnostic_source=inner))
    assert out.index("Caused by: middle") < out.index("Caused by: root")


def test_url_and_footer(handler):
    diag = Diagnostic("m", url="https://example.com/errors/1")
    out = handler.with_footer("end of report").render_report(diag)
    assert "For more details, see:\nhttps://example.com/errors/1\n" in out
    assert out.endswith("end of report\n")


def test_no_source_no_snippet(handler):
    diag = Diagnostic("m", labels=[LabeledSpan("x", 0, 1)])
    assert "Begin snippet" not in handler.render_report(diag)


def test_related_inherit_parent_source(handler):
    related = [
        Diagnostic("first inner", labels=[LabeledSpan("a", 0, 6)]),
        Diagnostic("second inner", severity=Severity.ADVICE),
    ]
    diag = Diagnostic("outer", related=related, source_code=SRC)
    out = handler.render_report(diag)
    assert "Error: first inner\n    Diagnostic severity: error\n\n" in out
    assert "Advice: second inner\n" in out
    assert "snippet line 1: source\n" in out


def test_out_of_bounds_label_raises(handler):
    diag = Diagnostic("m", labels=[LabeledSpan("x", 100, 2)], source_code="short")
    with pytest.raises(OutOfBoundsError):
        handler.render_report(diag)


def test_empty_span_single_column(handler):
    diag = Diagnostic("m", labels=[LabeledSpan("here", 4, 0)], source_code="abc def")
    out = handler.render_report(diag)
    assert "    label at line 1, column 5: here\n" in out


def test_labels_on_same_line_share_snippet(handler):
    diag = Diagnostic(
        "m",
        labels=[LabeledSpan("second", 11, 2), LabeledSpan("first", 7, 2)],
        source_code=SRC,
    )
    out = handler.render_report(diag)
    assert out.count("Begin snippet") == 1
    assert out.index(": first") < out.index(": second")


def test_distant_labels_make_separate_snippets(handler):
    text = "a\nb\nc\nd\ne\nf"
    diag = Diagnostic(
        "m",
        labels=[LabeledSpan("x", 0, 1), LabeledSpan("y", 10, 1)],
        source_code=text,
    )
    out = handler.with_context_lines(0).render_report(diag)
    assert out.count("Begin snippet") == 2


def test_crlf_is_not_shown(handler):
    diag = Diagnostic("m", labels=[LabeledSpan("cd", 4, 2)], source_code="ab\r\ncd")
    out = handler.render_report(diag)
    assert "snippet line 1: ab\n" in out
    assert "\r" not in out
    assert "snippet line 2: cd\n" in out


def test_unlabelled_span_has_no_colon_text(handler):
    diag = Diagnostic("m", labels=[LabeledSpan(None, 9, 4)], source_code=SRC)
    out = handler.render_report(diag)
    assert "    label at line 2, columns 3 to 6\n" in out