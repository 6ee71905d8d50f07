"""Machine-readable JSON rendering of diagnostics."""

from __future__ import annotations

from typing import Optional

from .diagnostic import Diagnostic, OutOfBoundsError, Severity, TextSource, iter_causes

_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        '"': '\\"',
        "\r": "\\r",
        "\n": "\\n",
        "\t": "\\t",
        "\b": "\\b",
        "\f": "\\f",
    }
)


def escape(text: str) -> str:
    """Escape ``text`` for use inside a JSON string literal."""
    return text.translate(_ESCAPES)


class JSONReportHandler:
    """Renders a diagnostic as a single JSON object."""

    def render_report(self, diagnostic: Diagnostic) -> str:
        return self._render(diagnostic, None)

    def _render(self, diagnostic: Diagnostic, parent_src: Optional[TextSource]) -> str:
        parts = [f'{{"message": "{escape(str(diagnostic))}",']
        if diagnostic.code is not None:
            parts.append(f'"code": "{escape(str(diagnostic.code))}",')
        severity = (diagnostic.severity or Severity.ERROR).value
        parts.append(f'"severity": "{severity}",')

        causes = ",".join(f'"{escape(str(err))}"' for err in iter_causes(diagnostic))
        parts.append(f'"causes": [{causes}],')

        if diagnostic.url is not None:
            parts.append(f'"url": "{diagnostic.url}",')
        if diagnostic.help is not None:
            parts.append(f'"help": "{escape(str(diagnostic.help))}",')

        src = diagnostic.source_code or parent_src
        if src is not None:
            parts.append(self._render_filename(diagnostic, src))

        labels = ",".join(
            "{"
            + (f'"label": "{escape(label.label)}",' if label.label is not None else "")
            + f'"span": {{"offset": {label.offset},"length": {label.length}}}}}'
            for label in diagnostic.labels or ()
        )
        parts.append(f'"labels": [{labels}],')

        related = ",".join(self._render(rel, src) for rel in diagnostic.related or ())
        parts.append(f'"related": [{related}]')
        parts.append("}")
        return "".join(parts)

    @staticmethod
    def _render_filename(diagnostic: Diagnostic, source: TextSource) -> str:
        if diagnostic.labels:
            try:
                contents = source.read_span(diagnostic.labels[0].span(), 0, 0)
            except OutOfBoundsError:
                pass
            else:
                return f'"filename": "{escape(contents.name or "")}",'
        return '"filename": "",'