"""Drawing characters and colour styles for graphical reports."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

_RED = "31"
_GREEN = "32"
_YELLOW = "33"
_MAGENTA = "35"
_CYAN = "36"


def _rgb(red: int, green: int, blue: int) -> str:
    return f"38;2;{red};{green};{blue}"


@dataclass(frozen=True)
class Style:
    """An ANSI text style: a foreground colour code and text effects."""

    fg: Optional[str] = None
    bold: bool = False
    dimmed: bool = False
    underline: bool = False

    def apply(self, text: str) -> str:
        """Wrap ``text`` in escape sequences; plain styles leave it untouched."""
        codes = [self.fg] if self.fg else []
        if self.bold:
            codes.append("1")
        if self.dimmed:
            codes.append("2")
        if self.underline:
            codes.append("4")
        if not codes:
            return text
        return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


@dataclass(frozen=True)
class ThemeStyles:
    """Styles for the parts of a graphical report."""

    error: Style
    warning: Style
    advice: Style
    help: Style
    link: Style
    linum: Style
    highlights: Tuple[Style, ...]

    @classmethod
    def rgb(cls) -> "ThemeStyles":
        """Truecolour styles."""
        return cls(
            error=Style(fg=_rgb(255, 30, 30)),
            warning=Style(fg=_rgb(244, 191, 117)),
            advice=Style(fg=_rgb(106, 159, 181)),
            help=Style(fg=_rgb(106, 159, 181)),
            link=Style(fg=_rgb(92, 157, 255), underline=True, bold=True),
            linum=Style(dimmed=True),
            highlights=(
                Style(fg=_rgb(246, 87, 248)),
                Style(fg=_rgb(30, 201, 212)),
                Style(fg=_rgb(145, 246, 111)),
            ),
        )

    @classmethod
    def ansi(cls) -> "ThemeStyles":
        """Styles using the basic ANSI colours."""
        return cls(
            error=Style(fg=_RED),
            warning=Style(fg=_YELLOW),
            advice=Style(fg=_CYAN),
            help=Style(fg=_CYAN),
            link=Style(fg=_CYAN, underline=True, bold=True),
            linum=Style(dimmed=True),
            highlights=(
                Style(fg=_MAGENTA, bold=True),
                Style(fg=_YELLOW, bold=True),
                Style(fg=_GREEN, bold=True),
            ),
        )

    @classmethod
    def none(cls) -> "ThemeStyles":
        """No styling at all."""
        plain = Style()
        return cls(
            error=plain,
            warning=plain,
            advice=plain,
            help=plain,
            link=plain,
            linum=plain,
            highlights=(plain,),
        )


@dataclass(frozen=True)
class ThemeCharacters:
    """Characters used to draw graphical reports."""

    hbar: str
    vbar: str
    xbar: str
    vbar_break: str
    uarrow: str
    rarrow: str
    ltop: str
    mtop: str
    rtop: str
    lbot: str
    rbot: str
    mbot: str
    lbox: str
    rbox: str
    lcross: str
    rcross: str
    underbar: str
    underline: str
    error: str
    warning: str
    advice: str

    @classmethod
    def unicode(cls) -> "ThemeCharacters":
        """Box-drawing characters."""
        return cls(
            hbar="─", vbar="│", xbar="┼", vbar_break="·",
            uarrow="▲", rarrow="▶",
            ltop="╭", mtop="┬", rtop="╮", lbot="╰", rbot="╯", mbot="┴",
            lbox="[", rbox="]", lcross="├", rcross="┤",
            underbar="┬", underline="─",
            error="×", warning="⚠", advice="☞",
        )

    @classmethod
    def emoji(cls) -> "ThemeCharacters":
        """Box-drawing characters with emoji severity icons."""
        return cls(
            hbar="─", vbar="│", xbar="┼", vbar_break="·",
            uarrow="▲", rarrow="▶",
            ltop="╭", mtop="┬", rtop="╮", lbot="╰", rbot="╯", mbot="┴",
            lbox="[", rbox="]", lcross="├", rcross="┤",
            underbar="┬", underline="─",
            error="💥", warning="⚠️", advice="💡",
        )

    @classmethod
    def ascii(cls) -> "ThemeCharacters":
        """Plain ASCII characters for older terminals."""
        return cls(
            hbar="-", vbar="|", xbar="+", vbar_break=":",
            uarrow="^", rarrow=">",
            ltop=",", mtop="v", rtop=".", lbot="`", rbot="'", mbot="^",
            lbox="[", rbox="]", lcross="|", rcross="|",
            underbar="|", underline="^",
            error="x", warning="!", advice=">",
        )


def _is_terminal(stream) -> bool:
    return stream is not None and stream.isatty()


@dataclass(frozen=True)
class GraphicalTheme:
    """Characters and styles for the graphical report handler."""

    characters: ThemeCharacters
    styles: ThemeStyles

    @classmethod
    def ascii(cls) -> "GraphicalTheme":
        return cls(ThemeCharacters.ascii(), ThemeStyles.ansi())

    @classmethod
    def unicode(cls) -> "GraphicalTheme":
        return cls(ThemeCharacters.unicode(), ThemeStyles.ansi())

    @classmethod
    def unicode_nocolor(cls) -> "GraphicalTheme":
        return cls(ThemeCharacters.unicode(), ThemeStyles.none())

    @classmethod
    def none(cls) -> "GraphicalTheme":
        return cls(ThemeCharacters.ascii(), ThemeStyles.none())

    @classmethod
    def default(cls) -> "GraphicalTheme":
        """Pick a theme from the terminal and the NO_COLOR variable."""
        if not _is_terminal(sys.stdout) or not _is_terminal(sys.stderr):
            return cls.ascii()
        no_color = os.environ.get("NO_COLOR")
        if no_color is not None and no_color != "0":
            return cls.unicode_nocolor()
        return cls.unicode()