import pytest

from diagrender.debug import DebugReportHandler
from diagrender.diagnostic import Diagnostic, LabeledSpan, Severity


@pytest.fixture
def handler():
    return DebugReportHandler()


def test_message_only_layout(handler):
    out = handler.render_report(Diagnostic("oops"))
    first, note, rest = out.split("\n")
    assert first == 'Diagnostic { message: "oops" }'
    assert note.startswith("NOTE: If you're looking for the fancy error reports")
    assert rest == ""


def test_code_present_and_absent(handler):
    with_code = handler.render_report(Diagnostic("oops", code="my::code"))
    without = handler.render_report(Diagnostic("oops"))
    assert 'code: "my::code"' in with_code
    assert "code:" not in without


def test_severity_uses_variant_name(handler):
    out = handler.render_report(Diagnostic("w", severity=Severity.WARNING))
    assert 'severity: "Warning"' in out


def test_fields_in_order(handler):
    diag = Diagnostic("m", code="c", severity=Severity.ADVICE, url="u", help="h")
    first = handler.render_report(diag).split("\n")[0]
    positions = [first.index(key) for key in ("message:", "code:", "severity:", "url:", "help:")]
    assert positions == sorted(positions)


def test_quotes_are_escaped(handler):
    out = handler.render_report(Diagnostic('say "hi"\n'))
    assert 'message: "say \\"hi\\"\\n"' in out


def test_labels_are_listed(handler):
    diag = Diagnostic("m", labels=[LabeledSpan("here", 9, 4), LabeledSpan(None, 1, 0)])
    first = handler.render_report(diag).split("\n")[0]
    assert "labels: " in first
    assert 'Some(\\"here\\")' in first
    assert "offset: 9" in first
    assert "label: None" in first


def test_caused_by_nested(handler):
    inner = Diagnostic("inner problem")
    outer = Diagnostic("outer", diagnostic_source=inner)
    first = handler.render_report(outer).split("\n")[0]
    assert "caused by: " in first
    assert "inner problem" in first
    assert first.count("NOTE") == 0