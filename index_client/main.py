#!/usr/bin/env python3
"""index-client - search a remote full-text index daemon from the terminal.

Entry point for the CLI application.
"""

import argparse
import getpass
import logging
import sys

from rich.console import Console
from rich.errors import MarkupError
from rich.markup import escape
from rich.text import Text

from .config import ClientConfig
from .highlight import RICH_MARKUP
from .models import IndexSummary, ResultPage, ResultRecord, SearchRequest
from .query import FILE_TYPES, TYPE_DESCRIPTIONS
from .search import SearchEngine
from .session import NOT_CONNECTED, IndexSession

console = Console()


def markup_text(markup: str, style: str = "") -> Text:
    """Render highlighted text, falling back to plain text if the markup is broken."""
    try:
        return Text.from_markup(markup, style=style)
    except MarkupError:
        return Text(markup, style=style)


def open_session(args) -> IndexSession | None:
    config = ClientConfig.from_env()
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    username = args.username or config.username or getpass.getuser()
    password = config.password
    if password is None:
        password = getpass.getpass(f"Password for {username}: ")

    session = IndexSession.from_config(config, username=username, password=password)
    if not session.is_ready:
        if session.status == NOT_CONNECTED:
            console.print(f"[red]Unable to connect to index daemon at {session.address}.[/red]")
        else:
            console.print(f"[red]Authentication failed:[/red] {escape(session.status)}")
        return None
    return session


def print_record(record: ResultRecord):
    heading = markup_text(record.title, style="bold blue")
    if record.page_label:
        heading.append(f" ({record.page_label})")
    heading.append(f"  Score: {record.score:.2f}", style="dim")
    console.print(heading)

    details = []
    if record.author:
        details.append(f"Author: {record.author}")
    if record.date:
        details.append(f"Date: {escape(record.date)}")
    if details:
        console.print(markup_text("   " + "  -  ".join(details)))

    if record.snippet:
        console.print(markup_text(record.snippet))
    console.print(Text(f"{record.filename}  -  {record.mime_type}  -  {record.filesize}", style="green"))
    console.print()


def print_summary(summary: IndexSummary, username: str):
    master = summary.master
    console.print(
        f"[bold]Contents of Local Index[/bold]  Index covers {escape(master.filesystem)}, "
        f"containing {escape(master.files)} and {escape(master.directories)}."
    )
    console.print()
    for root in summary.roots:
        console.print(
            f"  • [bold]{escape(root.files)}[/bold] ({escape(root.directories)}) "
            f"indexed for file system rooted at [bold]{escape(root.filesystem)}[/bold]"
        )
    console.print()
    console.print(f"File type statistics (all files searchable by user [bold]{escape(username)}[/bold]):")
    if not summary.file_types:
        console.print("  • No searchable files in index.")
    for stat in summary.file_types:
        console.print(f"  • [bold]{stat.count} {stat.description}[/bold] ({escape(stat.mime_type)})")


def print_page(page: ResultPage):
    console.print(f"[bold]Search Results[/bold] ({escape(page.type_description)})  {page.summary_line}")
    console.print()
    if page.total_hits == 0:
        console.print("No documents match your query.")
        return

    for record in page.records:
        print_record(record)

    window = page.window
    if window is None:
        return
    nav = Text("Result page: ")
    if window.previous_start is not None:
        nav.append(f"<< (--start {window.previous_start})  ", style="dim")
    for number in window.pages():
        if number == window.current_page:
            nav.append(f"{number} ", style="bold red")
        else:
            nav.append(f"{number} ")
    if window.next_start is not None:
        nav.append(f" >> (--start {window.next_start})", style="dim")
    console.print(nav)


def cmd_search(args) -> int:
    """Run a search, or show the index summary for an empty query."""
    session = open_session(args)
    if session is None:
        return 1

    with session:
        engine = SearchEngine(session, markup=RICH_MARKUP)
        request = SearchRequest.create(
            query=" ".join(args.query),
            start=args.start,
            end=args.end,
            filename=args.filename,
            file_types=args.filetype,
        )
        page = engine.search(request)

    if page.summary is not None:
        print_summary(page.summary, session.username)
    else:
        print_page(page)
    return 0


def cmd_summary(args) -> int:
    """Show what the daemon has indexed."""
    session = open_session(args)
    if session is None:
        return 1
    with session:
        summary = SearchEngine(session).index_summary()
    print_summary(summary, session.username)
    return 0


def cmd_get(args) -> int:
    """Print original document text between two index offsets."""
    session = open_session(args)
    if session is None:
        return 1
    with session:
        document = SearchEngine(session).get_text(args.from_offset, args.to_offset)
    if document.permission_denied:
        console.print("[bold red]Permission denied[/bold red]")
        return 1
    for line in document.lines:
        console.print(Text(line))
    return 0


def cmd_types(args) -> int:
    """List the file-type filter tokens."""
    for token, description in TYPE_DESCRIPTIONS.items():
        marker = "" if token in FILE_TYPES else " (group)"
        console.print(f"  {token:<24} {description}{marker}")
    return 0


def main():
    """Main entry point for the index-client CLI."""
    parser = argparse.ArgumentParser(
        description="Search a remote full-text index daemon",
        prog="index-client",
    )
    parser.add_argument("--version", "-V", action="store_true", help="Show version")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log protocol traffic")
    parser.add_argument("--host", help="Index daemon host (default: $INDEX_CLIENT_HOST)")
    parser.add_argument("--port", type=int, help="Index daemon port (default: $INDEX_CLIENT_PORT)")
    parser.add_argument("--username", "-u", help="Login name (default: $INDEX_CLIENT_USER)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    search_parser = subparsers.add_parser("search", help="Search the index")
    search_parser.add_argument("query", nargs="*", help='Search terms; quote phrases as \'"two words"\'')
    search_parser.add_argument("--start", "-s", type=int, default=0, help="First result row")
    search_parser.add_argument("--end", "-e", type=int, help="Row after the last result (10-20 rows)")
    search_parser.add_argument("--filename", "-f", help="Restrict to file names matching a wildcard")
    search_parser.add_argument(
        "--filetype", "-t", action="append", choices=sorted(TYPE_DESCRIPTIONS),
        help="File type filter, repeatable",
    )

    subparsers.add_parser("summary", help="Show index contents")

    get_parser = subparsers.add_parser("get", help="Print document text for an offset range")
    get_parser.add_argument("from_offset", type=int, help="Start offset")
    get_parser.add_argument("to_offset", type=int, nargs="?", help="End offset")

    subparsers.add_parser("types", help="List file type filters")

    args = parser.parse_args()

    if args.version:
        from . import __version__
        print(f"index-client {__version__}")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == "search":
        return cmd_search(args)
    elif args.command == "summary":
        return cmd_summary(args)
    elif args.command == "get":
        return cmd_get(args)
    elif args.command == "types":
        return cmd_types(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
