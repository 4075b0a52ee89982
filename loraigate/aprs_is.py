"""Line-oriented client for APRS-IS servers."""

from __future__ import annotations

import select
import socket
import time
from enum import Enum
from typing import Optional

READ_TIMEOUT = 1.0
_ENCODING = "utf-8"


class ConnectionStatus(Enum):
    SUCCESS = 0
    ERROR_CONNECTION = 1
    ERROR_PASSCODE = 2


class AprsIsClient:
    """Logs in to an APRS-IS server and exchanges packet lines with it."""

    def __init__(self, user: str, passcode: str, tool_name: str, version: str) -> None:
        self.user = user
        self.passcode = passcode
        self.tool_name = tool_name
        self.version = version
        self._sock: Optional[socket.socket] = None
        self._buffer = bytearray()
        self._eof = False

    def __enter__(self) -> "AprsIsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def login_line(self, filter: Optional[str] = None) -> str:
        """The login line sent after connecting, with an optional filter."""
        line = f"user {self.user} pass {self.passcode} vers {self.tool_name} {self.version}"
        if filter:
            line += f" filter {filter}"
        return line + "\n\r"

    def connect(self, server: str, port: int, filter: Optional[str] = None) -> ConnectionStatus:
        """Connect, log in and wait for the server's login response."""
        self.close()
        try:
            sock = socket.create_connection((server, port), timeout=READ_TIMEOUT * 5)
        except OSError:
            return ConnectionStatus.ERROR_CONNECTION
        sock.settimeout(READ_TIMEOUT)
        self._sock = sock
        self._buffer.clear()
        self._eof = False

        self.send_message(self.login_line(filter))
        while True:
            line = self._read_line()
            if "logresp" in line:
                if "unverified" in line:
                    return ConnectionStatus.ERROR_PASSCODE
                return ConnectionStatus.SUCCESS
            if self._eof and not self._buffer:
                self.close()
                return ConnectionStatus.ERROR_CONNECTION

    def connected(self) -> bool:
        self._fill()
        return self._sock is not None and not self._eof

    def send_message(self, message: str) -> bool:
        """Send ``message`` followed by CR LF; False when not connected."""
        if not self.connected():
            return False
        try:
            self._sock.sendall((message + "\r\n").encode(_ENCODING))
        except OSError:
            self._eof = True
            return False
        return True

    def send_aprs_message(self, message) -> bool:
        """Send a packet given as text or as an object whose ``encode()`` yields text."""
        text = message if isinstance(message, str) else message.encode()
        return self.send_message(text + "\n")

    def available(self) -> int:
        """Number of received bytes not read yet."""
        self._fill()
        return len(self._buffer)

    def get_message(self) -> str:
        """Next received line without its newline, or "" if nothing is waiting."""
        if self.available() > 0:
            return self._read_line()
        return ""

    def next_packet(self) -> Optional[str]:
        """Next packet line, skipping server comments; None if there is none."""
        line = self.get_message().rstrip("\r")
        if not line or line.startswith("#"):
            return None
        return line

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None
        self._eof = False

    def _fill(self) -> None:
        """Move whatever the socket has ready into the buffer without blocking."""
        if self._sock is None or self._eof:
            return
        sock = self._sock
        sock.setblocking(False)
        try:
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    self._eof = True
                    break
                self._buffer += chunk
        except (BlockingIOError, InterruptedError):
            pass
        except OSError:
            self._eof = True
        finally:
            try:
                sock.settimeout(READ_TIMEOUT)
            except OSError:
                self._eof = True

    def _read_line(self, timeout: float = READ_TIMEOUT) -> str:
        """Read up to a newline; on timeout or end of stream return what arrived."""
        deadline = time.monotonic() + timeout
        while True:
            index = self._buffer.find(b"\n")
            if index >= 0:
                raw = bytes(self._buffer[:index])
                del self._buffer[:index + 1]
                return raw.decode(_ENCODING, errors="replace")
            if self._sock is None or self._eof:
                break
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            ready, _, _ = select.select([self._sock], [], [], remaining)
            if ready:
                self._fill()
        raw = bytes(self._buffer)
        self._buffer.clear()
        return raw.decode(_ENCODING, errors="replace")