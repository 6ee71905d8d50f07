import pytest

from diagrender.diagnostic import (
    Diagnostic,
    LabeledSpan,
    OutOfBoundsError,
    Severity,
    SourceSpan,
    TextSource,
    iter_causes,
)


def test_span_end_and_emptiness():
    span = SourceSpan(3, 4)
    assert span.end() == span.offset + span.length
    assert span.is_empty() is False
    assert SourceSpan(5, 0).is_empty() is True


def test_negative_span_is_rejected():
    with pytest.raises(ValueError):
        SourceSpan(-1, 2)
    with pytest.raises(ValueError):
        LabeledSpan("x", 0, -3)


def test_labeled_span_at_range():
    label = LabeledSpan.at(2, 5, "here")
    assert label.span().offset == 2
    assert label.span().end() == 5
    assert label.label == "here"


def test_labeled_span_at_rejects_reversed_range():
    with pytest.raises(ValueError):
        LabeledSpan.at(5, 2, "bad")


def test_read_span_without_context_is_exact_slice():
    text = "source\n  text\n    here"
    contents = TextSource(text).read_span(SourceSpan(9, 4))
    assert contents.data == text[9:13]
    assert contents.span == SourceSpan(9, 4)


def test_read_span_line_and_column():
    text = "first\nsecond\nthird"
    offset = text.index("cond")
    contents = TextSource(text).read_span(SourceSpan(offset, 4), 0, 0)
    assert contents.line == 1
    assert contents.column == 2


def test_read_span_with_context_covers_whole_lines():
    text = "one\ntwo\nthree\nfour\nfive"
    offset = text.index("three")
    contents = TextSource(text).read_span(SourceSpan(offset, 5), 1, 1)
    assert contents.data.splitlines() == text.splitlines()[1:4]
    assert contents.column == 0
    assert text[contents.span.offset:contents.span.end()] == contents.data
    assert contents.line_count == contents.data.count("\n")


def test_read_span_context_is_clamped_at_edges():
    text = "alpha\nbeta"
    contents = TextSource(text).read_span(SourceSpan(0, 5), 3, 3)
    assert contents.data == text
    assert contents.span.offset == 0


def test_read_span_out_of_bounds():
    with pytest.raises(OutOfBoundsError):
        TextSource("abc").read_span(SourceSpan(2, 5))


def test_read_span_of_empty_source():
    contents = TextSource("").read_span(SourceSpan(0, 0), 1, 1)
    assert contents.data == ""


def test_read_span_carries_name_and_language():
    source = TextSource("let x = 1;", name="main.rs", language="Rust")
    contents = source.read_span(SourceSpan(4, 1))
    assert contents.name == "main.rs"
    assert contents.language == "Rust"


def test_diagnostic_message_and_fields():
    diag = Diagnostic("oops", code="my::code", severity=Severity.WARNING, help="try again")
    assert str(diag) == "oops"
    assert diag.code == "my::code"
    assert diag.severity is Severity.WARNING
    assert diag.help == "try again"


def test_with_source_code_returns_new_diagnostic():
    diag = Diagnostic("oops", labels=[LabeledSpan("here", 0, 3)])
    attached = diag.with_source_code("abcdef")
    assert diag.source_code is None
    assert attached.source_code.text == "abcdef"
    assert attached.labels == diag.labels
    assert str(attached) == "oops"


def test_string_source_code_is_wrapped():
    diag = Diagnostic("oops", source_code="some text")
    assert diag.source_code.read_span(SourceSpan(5, 4)).data == "text"


def test_iter_causes_follows_diagnostic_and_plain_causes():
    root = ValueError("boom")
    inner = Diagnostic("inner", cause=root)
    outer = Diagnostic("outer", diagnostic_source=inner)
    assert [str(err) for err in iter_causes(outer)] == ["inner", "boom"]


def test_iter_causes_uses_raise_from():
    try:
        try:
            raise KeyError("missing")
        except KeyError as exc:
            raise Diagnostic("wrapped") from exc
    except Diagnostic as diag:
        causes = list(iter_causes(diag))
    assert len(causes) == 1
    assert isinstance(causes[0], KeyError)


def test_iter_causes_empty_without_cause():
    assert list(iter_causes(Diagnostic("alone"))) == []