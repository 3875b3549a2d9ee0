"""Search orchestration: one request in, one renderable page out."""

import logging
from typing import Optional

from .highlight import HTML_MARKUP, Markup
from .models import (
    PAGE_SIZE,
    DocumentText,
    FileTypeStat,
    IndexSummary,
    ResultPage,
    RootCoverage,
    SearchRequest,
)
from .paginator import compute_page_window
from .query import (
    FILESTATS_COMMAND,
    SUMMARY_COMMAND,
    TYPE_DESCRIPTIONS,
    EmptyQueryError,
    build_get_command,
    build_search_command,
    create_query_vector,
    describe_file_types,
)
from .records import parse_result_line
from .session import NOT_CONNECTED, IndexSession

logger = logging.getLogger(__name__)


def count_result_lines(lines: list[str]) -> int:
    """Number of leading result lines, stopping at an empty or ``@`` line."""
    count = 0
    for line in lines:
        if not line or line.startswith("@"):
            break
        count += 1
    return count


def parse_elapsed(status: str) -> float:
    """Seconds taken by the daemon, read from a status like ``@0-Ok (123 ms)``."""
    _, paren, rest = status.partition("(")
    if not paren:
        return 0.0
    figure = rest.split(" ", 1)[0]
    try:
        return float(figure) / 1000.0
    except ValueError:
        logger.debug(f"No elapsed time in status {status!r}")
        return 0.0


def parse_coverage(line: str) -> RootCoverage:
    fields = line.split("\t")
    fields += [""] * (3 - len(fields))
    return RootCoverage(filesystem=fields[0], files=fields[1], directories=fields[2])


def describe_file_stat(mime_type: str, count: int) -> str:
    """Human wording for a file-type count, e.g. ``"HTML documents"`` or ``"Text file"``."""
    desc = TYPE_DESCRIPTIONS.get(mime_type, "Unknown files")
    if not any(word in desc for word in ("documents", "files", "messages")):
        desc += " documents"
    if desc == "E-mail messages":
        desc = "E-mail message (mbox) files"
    if count == 1:
        desc = desc[:-1]
    return desc


def parse_file_stats(lines: list[str]) -> list[FileTypeStat]:
    """Parse ``@filestats`` lines of the form ``text/html: 42``."""
    stats = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        parts = line.split(" ")
        mime_type = parts[0][:-1] if parts[0].endswith(":") else parts[0]
        try:
            count = int(parts[1])
        except (IndexError, ValueError):
            logger.debug(f"Skipping malformed file statistics line {line!r}")
            continue
        stats.append(FileTypeStat(mime_type, count, describe_file_stat(mime_type, count)))
    return stats


class SearchEngine:
    """Answers search requests over an authenticated IndexSession."""

    def __init__(self, session: IndexSession, markup: Markup = HTML_MARKUP):
        self.session = session
        self.markup = markup

    def search(self, request: SearchRequest) -> ResultPage:
        """Run a search and return one page of decoded, highlighted results.

        A request without search terms returns the index summary instead
        (``page.summary``). A session that is not ready yields an empty page
        whose status is the not-connected status.
        """
        terms = create_query_vector(request.query)
        page = ResultPage(
            request=request,
            terms=terms,
            start=request.start,
            end=request.end,
            type_description=describe_file_types(request.file_types),
        )

        if not self.session.is_ready:
            page.status = NOT_CONNECTED
            return page

        try:
            command = build_search_command(request, terms)
        except EmptyQueryError:
            logger.debug("Empty query, returning index summary")
            page.summary = self.index_summary()
            page.status = self.session.status
            return page

        frame = self.session.execute(command)
        page.status = frame.status
        page.elapsed_seconds = parse_elapsed(frame.status)
        page.total_hits = count_result_lines(frame.body)
        page.end = min(request.end, page.total_hits)

        page.records = [
            parse_result_line(line, terms, self.markup)
            for line in frame.body[request.start:page.end]
        ]
        if page.total_hits > PAGE_SIZE:
            page.window = compute_page_window(page.total_hits, request.start)

        logger.info(
            f"Search {terms} returned {page.total_hits} hits "
            f"in {page.elapsed_seconds:.3f}s"
        )
        return page

    def index_summary(self) -> IndexSummary:
        """Index coverage and per-type file counts."""
        summary = IndexSummary()

        lines = self.session.execute(SUMMARY_COMMAND).body
        if lines:
            summary.master = parse_coverage(lines[0])
            summary.roots = [parse_coverage(line) for line in lines[1:]]

        summary.file_types = parse_file_stats(self.session.execute(FILESTATS_COMMAND).body)
        return summary

    def get_text(self, from_offset: int, to_offset: Optional[int] = None) -> DocumentText:
        """Fetch original document text between two index offsets."""
        if to_offset is None or to_offset < from_offset:
            to_offset = from_offset
        frame = self.session.execute(build_get_command(from_offset, to_offset))

        document = DocumentText(from_offset, to_offset, status=frame.status)
        if document.permission_denied:
            logger.warning(f"Access to offsets {from_offset}-{to_offset} denied: {frame.status}")
            return document
        document.lines = list(frame.body)
        return document
