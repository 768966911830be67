"""
Command transport for NNTP sessions.
Copyright (C) 2013-2026  Byron Platt

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""

import logging
import socket
from collections.abc import Iterable, Iterator
from typing import Protocol, Union

from .errors import NNTPError, NNTPProtocolError, NNTPSyncError
from .fifo import LineFifo
from .types import Response

__all__ = ["SocketTransport", "Transport", "split_lines"]

log = logging.getLogger(__name__)

Lines = Union[str, Iterable[str]]


class Transport(Protocol):
    """What a session needs from the connection underneath it."""

    def send_command(self, verb: str, *args: str) -> Response: ...

    def read_response(self) -> Response: ...

    def read_block(self) -> list[str]: ...

    def send_data(self, lines: Lines) -> None: ...

    def end_data(self) -> Response: ...

    def close(self) -> None: ...


def split_lines(lines: Lines) -> Iterator[str]:
    """Split article text into lines at LF only.

    A string, or any item of an iterable, may hold several lines. The line
    terminator (LF or CRLF) is removed from each line.
    """
    if isinstance(lines, str):
        if not lines:
            return
        lines = [lines]
    for item in lines:
        if item.endswith("\n"):
            item = item[:-1]
        for line in item.split("\n"):
            if line.endswith("\r"):
                line = line[:-1]
            yield line


class SocketTransport:
    """NNTP command transport over a TCP socket.

    Sends commands, reads status lines and dot terminated blocks. Reply codes
    are not interpreted here beyond checking that the status line is well
    formed.
    """

    encoding = "utf-8"
    errors = "surrogateescape"

    def __init__(self, sock: socket.socket, debug: bool = False) -> None:
        """Constructor for SocketTransport.

        Args:
            sock: A connected socket.
            debug: Log every line sent and received.
        """
        self.socket = sock
        self.debug = debug
        self._buffer = LineFifo()
        self._reading = False

    @classmethod
    def connect(
        cls,
        host: str,
        port: int = 119,
        timeout: float = 120,
        debug: bool = False,
    ) -> "SocketTransport":
        """Open a connection to a news server.

        Raises:
            OSError (socket.error): If the connection cannot be established.
        """
        if debug:
            log.debug("connecting to %s:%d", host, port)
        sock = socket.create_connection((host, port), timeout=timeout)
        return cls(sock, debug=debug)

    def _trace(self, direction: str, line: str) -> None:
        if self.debug:
            log.debug("%s %s", direction, line)

    def _recv(self, size: int = 4096) -> None:
        """Reads data from the socket.

        Raises:
            NNTPError: When connection times out or read from socket fails.
        """
        data = self.socket.recv(size)
        if not data:
            raise NNTPError("Failed to read from socket")
        self._buffer.write(data)

    def _line(self) -> Iterator[bytes]:
        """Generator that reads a line of data from the server.

        It first attempts to read from the internal buffer. If there is not
        enough data to read a line it then requests more data from the server
        and adds it to the buffer. This process repeats until a line of data
        can be read from the internal buffer.

        Yields:
            A line of data when it becomes available.
        """
        while True:
            line = self._buffer.readline()
            if not line:
                self._recv()
                continue
            yield line

    def _decode(self, data: bytes) -> str:
        return data.decode(self.encoding, self.errors)

    def _send(self, line: str) -> None:
        self.socket.sendall(line.encode(self.encoding, self.errors) + b"\r\n")

    def read_response(self) -> Response:
        """Reads a command response status.

        If there is no response message then the returned status message will
        be an empty string.

        Raises:
            NNTPError: If data is required to be read from the socket and
                fails.
            NNTPProtocolError: If the status line can't be parsed.

        Returns:
            The status code and status message.
        """
        line = self._decode(next(self._line()).rstrip())
        self._trace("<<<", line)
        parts = line.split(None, 1)

        try:
            code = int(parts[0])
        except (IndexError, ValueError):
            raise NNTPProtocolError(line)

        if code < 100 or code >= 600:
            raise NNTPProtocolError(line)

        message = parts[1] if len(parts) > 1 else ""
        return Response(code, message)

    def _block(self) -> Iterator[bytes]:
        """Generator for the lines of a multi-line block.

        When a terminating line (line containing single period) is received the
        generator exits. If there is a line beginning with an 'escaped' period
        then the extra period is trimmed.
        """
        self._reading = True

        for line in self._line():
            if line == b".\r\n":
                break
            if line.startswith(b"."):
                line = line[1:]
            yield line

        self._reading = False

    def read_block(self) -> list[str]:
        """Read a dot terminated block.

        Returns:
            The lines of the block, decoded, each ending with a single "\\n".

        Raises:
            NNTPError: If the connection fails before the terminating line.
        """
        lines = [self._decode(line[:-2]) + "\n" for line in self._block()]
        if self.debug:
            log.debug("<<< [%d lines]", len(lines))
        return lines

    def send_command(self, verb: str, *args: str) -> Response:
        """Send a command and read its status line.

        Args:
            verb: The command verb, possibly with a keyword ("LIST ACTIVE").
            args: Positional arguments. Empty arguments are dropped.

        Raises:
            NNTPSyncError: If a block is still being read.
        """
        if self._reading:
            raise NNTPSyncError("Command issued while a block is being read")

        cmd = " ".join([verb, *(a for a in args if a)])
        if verb == "AUTHINFO PASS":
            self._trace(">>>", "AUTHINFO PASS ********")
        else:
            self._trace(">>>", cmd)

        self._send(cmd)
        return self.read_response()

    def send_data(self, lines: Lines) -> None:
        """Send article lines, escaping any leading period.

        Can be called several times before end_data().
        """
        for line in split_lines(lines):
            if line.startswith("."):
                line = "." + line
            self._send(line)

    def end_data(self) -> Response:
        """Send the terminating line and read the resulting status."""
        self._trace(">>>", ".")
        self._send(".")
        return self.read_response()

    def close(self) -> None:
        """Closes the connection at the client."""
        self.socket.close()
