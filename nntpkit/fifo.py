"""
A line oriented FIFO buffer.
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

__all__ = ["LineFifo"]


_DISCARD_SIZE = 0xFFFF


class LineFifo:
    """Buffers received bytes and hands them back one CRLF line at a time."""

    eol = b"\r\n"

    def __init__(self, data: bytes = b"") -> None:
        self.buf = bytearray(data)
        self.pos = 0

    def _discard(self) -> None:
        # drop consumed bytes once enough have piled up
        if self.pos > _DISCARD_SIZE:
            del self.buf[: self.pos]
            self.pos = 0

    def write(self, data: bytes) -> None:
        self.buf += data

    def readline(self) -> bytes:
        """Return the next complete line, terminator included.

        An empty bytes object means no complete line is buffered yet.
        """
        i = self.buf.find(self.eol, self.pos)
        if i < 0:
            return b""
        newpos = i + len(self.eol)
        line = bytes(self.buf[self.pos : newpos])
        self.pos = newpos
        self._discard()
        return line
