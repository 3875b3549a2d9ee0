"""Parsing of tagged result lines.

A result line is a run of pseudo-tags::

    <filename>/home/u/a.pdf</filename><score>1.25</score><title>...</title>...

Tags may be missing or out of order; a missing tag is an empty field.
"""

from .decoder import decode_encoded_words
from .highlight import HTML_MARKUP, Markup, highlight_terms
from .models import ResultRecord

MAX_TITLE_LENGTH = 80
ELLIPSIS = " ..."


def extract_field(line: str, tag: str) -> str:
    """Text between ``<tag>`` and ``</tag>``, trimmed; ``""`` if either is missing."""
    opening = f"<{tag}>"
    start = line.find(opening)
    if start < 0:
        return ""
    start += len(opening)
    end = line.find(f"</{tag}>", start)
    if end < 0:
        return ""
    return line[start:end].strip()


def parse_score(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


def clean_text(raw: str, markup: Markup) -> str:
    """Escape for the target display, then decode encoded words."""
    return decode_encoded_words(markup.escape(raw))


def truncate_title(title: str) -> str:
    if len(title) <= MAX_TITLE_LENGTH:
        return title
    return title[:MAX_TITLE_LENGTH] + ELLIPSIS


def parse_result_line(line: str, terms: list[str], markup: Markup = HTML_MARKUP) -> ResultRecord:
    """Turn one result line into a ResultRecord ready for display."""
    filename = extract_field(line, "filename")

    author = extract_field(line, "author")
    if author:
        author = clean_text(author, markup)

    title = extract_field(line, "title")
    if title:
        title = clean_text(title, markup)
    else:
        title = markup.escape(filename.rsplit("/", 1)[-1])

    return ResultRecord(
        filename=filename,
        author=author,
        score=parse_score(extract_field(line, "score")),
        title=highlight_terms(truncate_title(title), terms, markup),
        dstart=extract_field(line, "dstart"),
        dend=extract_field(line, "dend"),
        mime_type=extract_field(line, "type"),
        page=extract_field(line, "page"),
        date=extract_field(line, "date"),
        filesize=extract_field(line, "filesize"),
        snippet=highlight_terms(clean_text(extract_field(line, "snippet"), markup), terms, markup),
    )
