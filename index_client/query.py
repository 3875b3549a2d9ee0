"""Translate search requests into daemon request lines."""

from .models import SearchRequest

SEARCH_COMMAND = "@desktop"
SUMMARY_COMMAND = "@summary"
FILESTATS_COMMAND = "@filestats"
GET_COMMAND = "@get"

# Matches anything between the markers the daemon wraps around plain file content
RAW_FILES_CLAUSE = ' "<file!>".."</file!>" by'

FILE_TYPES: dict[str, str] = {
    "text/html": "HTML documents",
    "application/pdf": "Adobe PDF",
    "application/postscript": "Adobe PostScript",
    "text/plain": "Text files",
    "application/msword": "Microsoft Office",
    "text/xml": "XML documents",
    "text/x-mail": "E-mail messages",
    "audio/mpeg": "MPEG audio files",
    "application/multitext": "MultiText input files",
}

TYPE_DESCRIPTIONS: dict[str, str] = {
    **FILE_TYPES,
    "everything": "Everything",
    "email": "E-mail messages",
    "office": "Office documents",
    "files": "Files",
}


class EmptyQueryError(ValueError):
    """Raised when a free-text query yields no search terms."""


def create_query_vector(query: str) -> list[str]:
    """Split a free-text query into terms.

    Text inside double quotes becomes one phrase term; everything else is
    split on single spaces. Line breaks count as spaces.

    >>> create_query_vector('a "b c" d')
    ['a', 'b c', 'd']
    """
    query = query.replace("\r", " ").replace("\n", " ")
    terms = []
    for position, segment in enumerate(query.split('"')):
        segment = segment.strip()
        if not segment:
            continue
        if position % 2:
            terms.append(segment)
        else:
            terms.extend(piece.strip() for piece in segment.split(" ") if piece.strip())
    return terms


def sanitize_parameter(value: str) -> str:
    """Drop characters that would open another request parameter or end the request line."""
    for char in "[]&\r\n":
        value = value.replace(char, "")
    return value


def build_search_command(request: SearchRequest, terms: list[str] | None = None) -> str:
    """Build the ``@desktop`` request line for a search.

    Raises EmptyQueryError when there is nothing to search for; callers
    should show the index summary instead.
    """
    if terms is None:
        terms = create_query_vector(request.query)
    if not terms:
        raise EmptyQueryError(f"No search terms in {request.query!r}")

    command = f"{SEARCH_COMMAND}[start={request.start}][end={request.end}]"
    if request.filename is not None:
        command += f"[filename={sanitize_parameter(request.filename)}]"

    if "files" in request.file_types:
        command += RAW_FILES_CLAUSE
    elif "everything" not in request.file_types:
        for file_type in request.file_types:
            command += f"[filetype={sanitize_parameter(file_type)}]"

    return command + " " + ", ".join(f'"{term}"' for term in terms)


def build_get_command(from_offset: int, to_offset: int | None = None) -> str:
    if to_offset is None or to_offset < from_offset:
        to_offset = from_offset
    return f"{GET_COMMAND} {from_offset} {to_offset}"


def describe_file_types(file_types) -> str:
    """Human label for a filter selection, e.g. ``"Adobe PDF, Text files"``."""
    return ", ".join(TYPE_DESCRIPTIONS[t] for t in file_types if t in TYPE_DESCRIPTIONS)
