import json

from diagrender.diagnostic import Diagnostic, LabeledSpan, Severity, TextSource
from diagrender.json_handler import JSONReportHandler, escape


def test_escape():
    assert escape("a\nb") == r"a\nb"
    assert escape("C:\\Miette") == r"C:\\Miette"


def test_escape_quotes_and_controls():
    assert escape('say "hi"\t\r\b\f') == r'say \"hi\"\t\r\b\f'


def test_minimal_report():
    out = JSONReportHandler().render_report(Diagnostic("oops"))
    assert out == (
        '{"message": "oops","severity": "error","causes": [],'
        '"labels": [],"related": []}'
    )


def test_full_report():
    diag = Diagnostic(
        "oops",
        code="oops::my::bad",
        help="try doing it better next time?",
        labels=[LabeledSpan("This bit here", 9, 4)],
        source_code=TextSource("source\n  text\n    here", name="bad_file.rs"),
    )
    out = JSONReportHandler().render_report(diag)
    assert out == (
        '{"message": "oops","code": "oops::my::bad","severity": "error",'
        '"causes": [],"help": "try doing it better next time?",'
        '"filename": "bad_file.rs","labels": [{"label": "This bit here",'
        '"span": {"offset": 9,"length": 4}}],"related": []}'
    )


def test_output_is_valid_json():
    diag = Diagnostic(
        'bad "quote"\nsecond line',
        severity=Severity.WARNING,
        url="https://example.com/errors#bad",
        labels=[LabeledSpan(None, 0, 3)],
        source_code="abcdef",
    )
    parsed = json.loads(JSONReportHandler().render_report(diag))
    assert parsed["message"] == 'bad "quote"\nsecond line'
    assert parsed["severity"] == "warning"
    assert parsed["url"] == "https://example.com/errors#bad"
    assert parsed["filename"] == ""
    assert parsed["labels"] == [{"span": {"offset": 0, "length": 3}}]


def test_causes_are_listed():
    inner = Diagnostic("inner", cause=ValueError("boom"))
    diag = Diagnostic("outer", diagnostic_source=inner)
    parsed = json.loads(JSONReportHandler().render_report(diag))
    assert parsed["causes"] == ["inner", "boom"]


def test_related_uses_parent_source():
    child = Diagnostic("child", severity=Severity.ADVICE, labels=[LabeledSpan("here", 0, 2)])
    parent = Diagnostic(
        "parent",
        related=[child],
        source_code=TextSource("xy", name="input.txt"),
    )
    parsed = json.loads(JSONReportHandler().render_report(parent))
    assert parsed["filename"] == ""
    assert parsed["related"][0]["message"] == "child"
    assert parsed["related"][0]["severity"] == "advice"
    assert parsed["related"][0]["filename"] == "input.txt"


def test_unreadable_label_gives_empty_filename():
    diag = Diagnostic(
        "oops",
        labels=[LabeledSpan("far", 50, 2)],
        source_code=TextSource("short", name="f.txt"),
    )
    parsed = json.loads(JSONReportHandler().render_report(diag))
    assert parsed["filename"] == ""
    assert parsed["labels"][0]["span"]["offset"] == 50