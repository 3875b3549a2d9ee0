"""Client for a line-protocol full-text index daemon."""

from .highlight import HTML_MARKUP, RICH_MARKUP, Markup, highlight_terms
from .models import DocumentText, IndexSummary, PageWindow, ResultPage, ResultRecord, SearchRequest
from .search import SearchEngine
from .session import NOT_CONNECTED, IndexSession, SessionState

__version__ = "0.1.0"

__all__ = [
    "IndexSession",
    "SessionState",
    "NOT_CONNECTED",
    "SearchEngine",
    "SearchRequest",
    "ResultPage",
    "ResultRecord",
    "PageWindow",
    "IndexSummary",
    "DocumentText",
    "Markup",
    "HTML_MARKUP",
    "RICH_MARKUP",
    "highlight_terms",
]
