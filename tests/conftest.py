"""Shared fixtures: an in-process fake index daemon."""

import socket
import socketserver
import threading
from typing import Optional

import pytest

ENCODING = "latin-1"


class FakeDaemon:
    """Scripted stand-in for the index daemon.

    Greets each connection, checks ``@login`` against ``users`` and answers
    other requests from the first registered prefix that matches.
    """

    def __init__(self):
        self.greeting: Optional[str] = "@0-Index daemon ready"
        self.users = {"alice": "secret"}
        self.requests: list[str] = []
        self.port = 0
        self.release = threading.Event()
        self._responses: list[tuple[str, Optional[list[str]], Optional[str], bool, float]] = []

    def respond(self, prefix, lines, status="@0-Ok (123 ms)", close=False, interval=0.0):
        """Register a reply.

        ``lines=None`` makes the daemon hang without answering; ``interval``
        spaces the reply lines out by that many seconds.
        """
        self._responses.append((prefix, lines, status, close, interval))

    def reply_for(self, request: str):
        """Return ``(lines, close, hang, interval)`` for one request line."""
        if request.startswith("@login "):
            _, username, password = (request.split(" ", 2) + ["", ""])[:3]
            if self.users.get(username) == password:
                return ["@0-Welcome"], False, False, 0.0
            return ["@1-Authentication failed"], False, False, 0.0
        for prefix, lines, status, close, interval in self._responses:
            if request.startswith(prefix):
                if lines is None:
                    return [], close, True, 0.0
                return lines + ([status] if status is not None else []), close, False, interval
        return ["@0-Ok (0 ms)"], False, False, 0.0


class _Handler(socketserver.StreamRequestHandler):
    def handle(self):
        fake = self.server.fake
        if fake.greeting is None:
            return
        self.wfile.write((fake.greeting + "\n").encode(ENCODING))
        for raw in self.rfile:
            request = raw.decode(ENCODING).rstrip("\r\n")
            fake.requests.append(request)
            lines, close, hang, interval = fake.reply_for(request)
            if hang:
                fake.release.wait(5)
                return
            try:
                if interval:
                    for line in lines:
                        self.wfile.write((line + "\n").encode(ENCODING))
                        self.wfile.flush()
                        if fake.release.wait(interval):
                            return
                else:
                    self.wfile.write("".join(line + "\n" for line in lines).encode(ENCODING))
                    self.wfile.flush()
            except OSError:
                # client gave up and closed its end
                return
            if close:
                return


class _Server(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True


@pytest.fixture
def daemon():
    """A running FakeDaemon on a free localhost port."""
    fake = FakeDaemon()
    server = _Server(("127.0.0.1", 0), _Handler)
    server.fake = fake
    fake.port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield fake
    fake.release.set()
    server.shutdown()
    server.server_close()


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


def make_result_line(index: int, **fields) -> str:
    """A daemon result line with defaults for every tag."""
    values = {
        "filename": f"/home/alice/reports/report{index}.txt",
        "author": "Alice",
        "score": f"{10 - index * 0.1:.2f}",
        "title": f"Quarterly report {index}",
        "dstart": str(index * 1000),
        "dend": str(index * 1000 + 999),
        "type": "text/plain",
        "page": "1",
        "date": "2005-10-01",
        "filesize": "4 KB",
        "snippet": "The quarterly report for this period.",
    }
    values.update(fields)
    return "".join(f"<{tag}>{value}</{tag}>" for tag, value in values.items())


@pytest.fixture
def result_line():
    return make_result_line
