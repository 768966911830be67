from __future__ import annotations

from collections.abc import Iterable
from typing import Union

import pytest

from nntpkit.transport import split_lines
from nntpkit.types import Response

Reply = Union[str, tuple[str, list[str]]]


class FakeTransport:
    """Plays back scripted replies and records what the session sends.

    Each reply is either a status line, or a status line and the block that
    follows it.
    """

    def __init__(self, *replies: Reply) -> None:
        self.replies: list[Reply] = list(replies)
        self.blocks: list[list[str]] = []
        self.sent: list[str] = []
        self.data: list[str] = []
        self.closed = False

    def _next(self) -> Response:
        if not self.replies:
            raise OSError("connection closed")
        reply = self.replies.pop(0)
        if isinstance(reply, tuple):
            reply, block = reply
            self.blocks.append([line + "\n" for line in block])
        code, _, message = reply.partition(" ")
        return Response(int(code), message)

    def send_command(self, verb: str, *args: str) -> Response:
        self.sent.append(" ".join([verb, *(a for a in args if a)]))
        return self._next()

    def read_response(self) -> Response:
        return self._next()

    def read_block(self) -> list[str]:
        if not self.blocks:
            raise OSError("connection closed")
        return self.blocks.pop(0)

    def send_data(self, lines: Union[str, Iterable[str]]) -> None:
        self.data.extend(split_lines(lines))

    def end_data(self) -> Response:
        self.sent.append(".")
        return self._next()

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport("200 news.example.com ready - posting allowed")
