"""Socket session with the index daemon.

The daemon speaks newline-terminated text. Every exchange ends with a status
line starting with ``@``; ``@1`` marks a failure. A session goes through

    DISCONNECTED -> AUTHENTICATING -> READY -> CLOSED

and never leaves CLOSED. Failures are reported through ``status`` instead of
exceptions so callers can always render something.
"""

import logging
import socket
import time
from enum import Enum
from typing import BinaryIO, Optional

from .config import CONNECT_TIMEOUT, READ_TIMEOUT, ClientConfig
from .models import ResponseFrame

logger = logging.getLogger(__name__)

NOT_CONNECTED = "@1-Not connected."
ENCODING = "latin-1"


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    AUTHENTICATING = "authenticating"
    READY = "ready"
    CLOSED = "closed"


def is_failure_status(status: str) -> bool:
    """A status is a failure if it carries the ``@1`` prefix or is too short to carry any code."""
    return len(status) < 2 or status.startswith("@1")


def read_frame(stream: BinaryIO, deadline: Optional[float] = None) -> ResponseFrame:
    """Read lines up to and including the first one starting with ``@``.

    End-of-stream, a socket error or passing ``deadline`` (a
    ``time.monotonic()`` value) stops reading and leaves the frame's status
    empty.
    """
    frame = ResponseFrame()
    try:
        for raw in iter(stream.readline, b""):
            line = raw.decode(ENCODING).rstrip("\r\n")
            if line.startswith("@"):
                frame.status = line
                break
            frame.body.append(line)
            if deadline is not None and time.monotonic() > deadline:
                logger.warning(f"Read deadline passed after {len(frame.body)} lines without a status")
                break
    except OSError as e:
        logger.warning(f"Response interrupted after {len(frame.body)} lines: {e}")
    return frame


class IndexSession:
    """One authenticated connection to the index daemon."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        connect_timeout: float = CONNECT_TIMEOUT,
        read_timeout: Optional[float] = READ_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.state = SessionState.DISCONNECTED
        self.status = ""
        self._sock: Optional[socket.socket] = None
        self._stream: Optional[BinaryIO] = None

    @classmethod
    def open(cls, host: str, port: int, username: str, password: str, **kwargs) -> "IndexSession":
        """Connect and log in. Check ``is_ready`` or ``status`` for the outcome."""
        session = cls(host, port, username, password, **kwargs)
        session.connect()
        return session

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> "IndexSession":
        return cls.open(
            config.host,
            config.port,
            username if username is not None else (config.username or ""),
            password if password is not None else (config.password or ""),
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_ready(self) -> bool:
        return self.state is SessionState.READY

    def connect(self) -> bool:
        """Open the socket and authenticate. Never retries."""
        if self.state is not SessionState.DISCONNECTED:
            return self.is_ready

        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.connect_timeout)
        except OSError as e:
            logger.warning(f"Cannot connect to index daemon at {self.address}: {e}")
            self._fail(NOT_CONNECTED)
            return False

        sock.settimeout(self.read_timeout)
        self._sock = sock
        self._stream = sock.makefile("rwb")
        self.state = SessionState.AUTHENTICATING

        try:
            greeting = self._stream.readline().decode(ENCODING).rstrip("\r\n")
        except OSError as e:
            logger.warning(f"No greeting from {self.address}: {e}")
            greeting = ""
        if not greeting:
            logger.warning(f"Index daemon at {self.address} closed the connection")
            self._fail(NOT_CONNECTED)
            return False
        if greeting.startswith("@1"):
            logger.warning(f"Index daemon at {self.address} refused the connection: {greeting}")
            self._fail(NOT_CONNECTED)
            return False

        logger.debug(f"-> @login {self.username} ***")
        if not self._send(f"@login {self.username} {self.password}"):
            self._fail(NOT_CONNECTED)
            return False
        frame = read_frame(self._stream, self._deadline())

        if is_failure_status(frame.status):
            logger.warning(f"Login as {self.username!r} rejected: {frame.status or '(no status)'}")
            self._fail(frame.status or NOT_CONNECTED)
            return False

        self.status = frame.status
        self.state = SessionState.READY
        logger.info(f"Logged in to {self.address} as {self.username!r}")
        return True

    def execute(self, request: str) -> ResponseFrame:
        """Send one request line and frame the reply."""
        if not self.is_ready:
            self.status = NOT_CONNECTED
            return ResponseFrame(status=NOT_CONNECTED)

        logger.debug(f"-> {request}")
        if not self._send(request):
            self._fail(NOT_CONNECTED)
            return ResponseFrame(status=NOT_CONNECTED)

        frame = read_frame(self._stream, self._deadline())
        self.status = frame.status
        logger.debug(f"<- {len(frame.body)} lines, status {frame.status!r}")
        if not frame.complete:
            logger.warning(f"Incomplete response from {self.address}, closing session")
            self.close()
        return frame

    def query(self, request: str) -> str:
        """Send a request and return the reply body as text; the status goes to ``status``."""
        if not self.is_ready:
            self.status = NOT_CONNECTED
            return NOT_CONNECTED
        return self.execute(request).text

    def close(self):
        if self.state is SessionState.CLOSED:
            return
        for resource in (self._stream, self._sock):
            if resource is None:
                continue
            try:
                resource.close()
            except OSError as e:
                logger.debug(f"Error while closing connection to {self.address}: {e}")
        self._stream = None
        self._sock = None
        self.state = SessionState.CLOSED

    def _deadline(self) -> Optional[float]:
        if self.read_timeout is None:
            return None
        return time.monotonic() + self.read_timeout

    def _send(self, line: str) -> bool:
        # a line break would split this into two requests
        if "\n" in line or "\r" in line:
            logger.warning(f"Refusing to send a request containing a line break to {self.address}")
            return False
        try:
            self._stream.write((line + "\n").encode(ENCODING, errors="replace"))
            self._stream.flush()
        except OSError as e:
            logger.warning(f"Failed to send request to {self.address}: {e}")
            return False
        return True

    def _fail(self, status: str):
        self.close()
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self):
        return f"IndexSession({self.address}, user={self.username!r}, state={self.state.value})"
