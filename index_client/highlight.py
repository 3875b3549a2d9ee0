"""Search term highlighting for titles and snippets."""

from dataclasses import dataclass
from typing import Callable

from rich.markup import escape as rich_escape

WORD_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz0123456789")


def escape_angle_brackets(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


@dataclass(frozen=True)
class Markup:
    """How a highlighted term is wrapped, and how raw text is made safe for the same display."""

    open: str
    close: str
    escape: Callable[[str], str]


HTML_MARKUP = Markup(
    open='<span style="background-color:#FFFF00;font-weight:bold">',
    close="</span>",
    escape=escape_angle_brackets,
)

RICH_MARKUP = Markup(open="[bold black on yellow]", close="[/]", escape=rich_escape)


def _shadow(text: str) -> str:
    """Lower-cased copy of ``text`` with every non-word character blanked, plus a trailing blank."""
    return "".join(c.lower() if c.lower() in WORD_CHARS else " " for c in text) + " "


def highlight_terms(text: str, terms: list[str], markup: Markup = HTML_MARKUP) -> str:
    """Wrap whole-token, case-insensitive occurrences of any term in ``markup``.

    Matching runs on a shadow copy where only ``[a-z0-9]`` count as word
    characters, so the output keeps the original casing. At every token
    start the terms are tried in order and the first one that matches up to
    a word boundary wins; phrases match across the separators in between.
    """
    shadow = _shadow(text)
    patterns = [term.lower() + " " for term in terms if term]
    out = []
    i = 0
    n = len(text)

    while i < n:
        j = i
        while j < n and shadow[j] == " ":
            j += 1
        out.append(text[i:j])
        i = j
        if i >= n:
            break

        for pattern in patterns:
            if shadow.startswith(pattern, i):
                j = i + len(pattern) - 1
                out.append(markup.open + text[i:j] + markup.close)
                i = j
                break
        else:
            j = i
            while j < n and shadow[j] != " ":
                j += 1
            out.append(text[i:j])
            i = j

    return "".join(out)
