"""Data model shared by the session, parser and search layers."""

from dataclasses import dataclass, field
from typing import Optional

PAGE_SIZE = 10
MAX_WINDOW = 20


def _to_int(value, default: int) -> int:
    """Parse a row offset, falling back to ``default`` for missing or malformed values."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class SearchRequest:
    """A structured search as submitted by the caller."""

    start: int = 0
    end: int = PAGE_SIZE
    query: str = ""
    filename: Optional[str] = None  # glob, passed through to the daemon
    file_types: tuple[str, ...] = ("everything",)

    @classmethod
    def create(
        cls,
        query: str = "",
        start: int = 0,
        end: Optional[int] = None,
        filename: Optional[str] = None,
        file_types=None,
    ) -> "SearchRequest":
        """Build a request, clamping the row window to 10-20 rows."""
        start = max(0, _to_int(start, 0))
        end = _to_int(end, start + PAGE_SIZE)
        if end < start + PAGE_SIZE:
            end = start + PAGE_SIZE
        if end > start + MAX_WINDOW:
            end = start + MAX_WINDOW

        if isinstance(file_types, str):
            file_types = [file_types]
        types = tuple(t for t in (file_types or []) if t)
        if not types:
            types = ("everything",)

        return cls(
            start=start,
            end=end,
            query=query.replace("\\", ""),
            filename=filename or None,
            file_types=types,
        )


@dataclass
class ResponseFrame:
    """Body lines of one protocol exchange plus its terminating status."""

    body: list[str] = field(default_factory=list)
    status: str = ""  # empty when the stream ended without a status line

    @property
    def complete(self) -> bool:
        return self.status.startswith("@")

    @property
    def text(self) -> str:
        return "".join(line + "\n" for line in self.body)


@dataclass
class ResultRecord:
    """One decoded search hit."""

    filename: str = ""
    author: str = ""
    score: float = 0.0
    title: str = ""
    dstart: str = ""
    dend: str = ""
    mime_type: str = ""
    page: str = ""  # single page or a range such as "3-5"
    date: str = ""
    filesize: str = ""
    snippet: str = ""

    @property
    def page_label(self) -> str:
        if "-" in self.page:
            return f"pages {self.page}"
        try:
            if int(self.page) > 1:
                return f"page {self.page}"
        except ValueError:
            pass
        return ""


@dataclass
class PageWindow:
    """Page-number navigation for a result set."""

    current_page: int
    count_from: int
    count_to: int
    max_page: int
    previous_start: Optional[int] = None
    next_start: Optional[int] = None
    page_size: int = PAGE_SIZE

    def pages(self) -> list[int]:
        return list(range(self.count_from, self.count_to + 1))

    def page_offsets(self, page: int) -> tuple[int, int]:
        """Row window ``(start, end)`` that displays the given page."""
        return (page - 1) * self.page_size, page * self.page_size


@dataclass
class RootCoverage:
    """Coverage figures for the whole index or one indexed file system."""

    filesystem: str = ""
    files: str = ""
    directories: str = ""


@dataclass
class FileTypeStat:
    mime_type: str
    count: int
    description: str


@dataclass
class IndexSummary:
    """What the daemon has indexed, shown when there is nothing to search for."""

    master: RootCoverage = field(default_factory=RootCoverage)
    roots: list[RootCoverage] = field(default_factory=list)
    file_types: list[FileTypeStat] = field(default_factory=list)


@dataclass
class ResultPage:
    """Everything a presentation layer needs to render one result page."""

    request: SearchRequest
    terms: list[str] = field(default_factory=list)
    records: list[ResultRecord] = field(default_factory=list)
    total_hits: int = 0
    start: int = 0
    end: int = 0
    elapsed_seconds: float = 0.0
    window: Optional[PageWindow] = None
    status: str = ""
    type_description: str = ""
    summary: Optional[IndexSummary] = None  # set instead of records for an empty query

    @property
    def summary_line(self) -> str:
        seconds = f"{self.elapsed_seconds:.3f} seconds"
        if self.total_hits == 0:
            return f"No matching documents found ({seconds})."
        plus = "+" if self.total_hits >= 2000 else ""
        return f"Results {self.start + 1} - {self.end} of {self.total_hits}{plus} ({seconds})"


@dataclass
class DocumentText:
    """A byte range of original document text fetched with ``@get``."""

    from_offset: int
    to_offset: int
    lines: list[str] = field(default_factory=list)
    status: str = ""

    @property
    def permission_denied(self) -> bool:
        return self.status.startswith("@1")
