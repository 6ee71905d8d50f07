"""Plain structural rendering of diagnostics, meant for debugging."""

from __future__ import annotations

from typing import List, Tuple

from .diagnostic import Diagnostic, LabeledSpan

_NOTE = (
    "NOTE: If you're looking for the fancy error reports, use the graphical "
    "report handler, or write your own report handler."
)

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _quote(text: str) -> str:
    """Quote ``text`` as a double-quoted string literal with escapes."""
    pieces = []
    for char in text:
        if char in _SIMPLE_ESCAPES:
            pieces.append(_SIMPLE_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            pieces.append(f"\\u{{{ord(char):x}}}")
        else:
            pieces.append(char)
    return '"' + "".join(pieces) + '"'


def _struct(name: str, fields: List[Tuple[str, str]]) -> str:
    if not fields:
        return name
    body = ", ".join(f"{key}: {value}" for key, value in fields)
    return f"{name} {{ {body} }}"


def _label_repr(label: LabeledSpan) -> str:
    text = "None" if label.label is None else f"Some({_quote(label.label)})"
    span = _struct(
        "SourceSpan",
        [("offset", str(label.offset)), ("length", str(label.length))],
    )
    return _struct(
        "LabeledSpan",
        [("label", text), ("span", span), ("primary", str(label.primary).lower())],
    )


class DebugReportHandler:
    """Renders a diagnostic as a flat structure of its fields."""

    def render_report(self, diagnostic: Diagnostic) -> str:
        return f"{self._describe(diagnostic)}\n{_NOTE}\n"

    def _describe(self, diagnostic: Diagnostic) -> str:
        fields = [("message", _quote(str(diagnostic)))]
        if diagnostic.code is not None:
            fields.append(("code", _quote(str(diagnostic.code))))
        if diagnostic.severity is not None:
            fields.append(("severity", _quote(diagnostic.severity.name.capitalize())))
        if diagnostic.url is not None:
            fields.append(("url", _quote(str(diagnostic.url))))
        if diagnostic.help is not None:
            fields.append(("help", _quote(str(diagnostic.help))))
        if diagnostic.labels is not None:
            labels = "[" + ", ".join(_label_repr(label) for label in diagnostic.labels) + "]"
            fields.append(("labels", _quote(labels)))
        if diagnostic.diagnostic_source is not None:
            fields.append(
                ("caused by", _quote(self._describe(diagnostic.diagnostic_source)))
            )
        return _struct("Diagnostic", fields)