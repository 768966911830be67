"""
NNTP command table and dispatcher.
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

from collections.abc import Callable
from typing import Any, NamedTuple, Optional, Union

from . import parsers
from .errors import NNTPUnsupportedError, NNTPUsageError, reply_error
from .transport import Lines, Transport
from .types import Response

__all__ = [
    "CMD_INFO",
    "CMD_MORE",
    "CMD_OK",
    "COMMANDS",
    "Command",
    "Dispatcher",
]

# expected response code classes, 4xx and 5xx are always failures
CMD_INFO = 1
CMD_OK = 2
CMD_MORE = 3

Parser = Callable[[list[str]], Any]


def _raw(lines: list[str]) -> list[str]:
    return lines


class Command(NamedTuple):
    verb: str
    expect: int
    parser: Optional[Parser] = None
    nargs: tuple[int, int] = (0, 0)
    usage: str = ""
    supported: bool = True


def _table(*commands: Command) -> dict[str, Command]:
    return {c.verb: c for c in commands}


COMMANDS = _table(
    # RFC 977
    Command("ARTICLE", CMD_OK, _raw, (0, 1), "ARTICLE [msgid|number]"),
    Command("BODY", CMD_OK, _raw, (0, 1), "BODY [msgid|number]"),
    Command("HEAD", CMD_OK, _raw, (0, 1), "HEAD [msgid|number]"),
    Command("STAT", CMD_OK, None, (0, 1), "STAT [msgid|number]"),
    Command("GROUP", CMD_OK, None, (1, 1), "GROUP name"),
    Command("LAST", CMD_OK),
    Command("NEXT", CMD_OK),
    Command("HELP", CMD_INFO, _raw),
    Command("IHAVE", CMD_MORE, None, (1, 1), "IHAVE msgid"),
    Command("POST", CMD_MORE),
    Command("LIST", CMD_OK, parsers.parse_grouplist),
    Command(
        "NEWGROUPS",
        CMD_OK,
        parsers.parse_grouplist,
        (1, 2),
        "NEWGROUPS since [distributions]",
    ),
    Command(
        "NEWNEWS",
        CMD_OK,
        parsers.parse_articlelist,
        (2, 3),
        "NEWNEWS groups since [distributions]",
    ),
    Command("SLAVE", CMD_OK),
    Command("QUIT", CMD_OK),
    # RFC 2980
    Command("DATE", CMD_INFO),
    Command("AUTHINFO USER", CMD_MORE, None, (1, 1), "AUTHINFO USER name"),
    Command("AUTHINFO PASS", CMD_OK, None, (1, 1), "AUTHINFO PASS password"),
    Command(
        "LISTGROUP",
        CMD_OK,
        parsers.parse_articlelist,
        (0, 1),
        "LISTGROUP [name]",
    ),
    Command(
        "LIST ACTIVE",
        CMD_OK,
        parsers.parse_grouplist,
        (0, 1),
        "LIST ACTIVE [pattern]",
    ),
    Command("LIST ACTIVE.TIMES", CMD_OK, parsers.parse_grouplist),
    Command("LIST DISTRIBUTIONS", CMD_OK, parsers.parse_description),
    Command(
        "LIST NEWSGROUPS",
        CMD_OK,
        parsers.parse_description,
        (0, 1),
        "LIST NEWSGROUPS [pattern]",
    ),
    Command("LIST OVERVIEW.FMT", CMD_OK, parsers.parse_articlelist),
    Command("LIST SUBSCRIPTIONS", CMD_OK, parsers.parse_articlelist),
    Command("XGTITLE", CMD_OK, parsers.parse_description, (1, 1), "XGTITLE pattern"),
    Command(
        "XHDR",
        CMD_OK,
        parsers.parse_description,
        (1, 2),
        "XHDR header [msgid|range]",
    ),
    Command("XOVER", CMD_OK, parsers.parse_fieldlist, (0, 1), "XOVER [range]"),
    Command(
        "XPAT",
        CMD_OK,
        parsers.parse_description,
        (3, 3),
        "XPAT header msgid|range pattern",
    ),
    Command("XPATH", CMD_OK, None, (1, 1), "XPATH msgid"),
    # never sent
    Command("XTHREAD", CMD_OK, supported=False),
    Command("XSEARCH", CMD_OK, supported=False),
    Command("XINDEX", CMD_OK, supported=False),
)


class Dispatcher:
    """Sends commands from the command table and checks their replies.

    Every method raises on failure; turning failures into falsy results is
    left to the session.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport
        self.response: Union[Response, None] = None

    def _lookup(self, verb: str, args: tuple[str, ...]) -> Command:
        try:
            cmd = COMMANDS[verb]
        except KeyError:
            raise NNTPUsageError(f"Unknown command {verb!r}")

        if not cmd.supported:
            raise NNTPUnsupportedError(f"{verb} is not supported")

        low, high = cmd.nargs
        if not low <= len(args) <= high:
            usage = cmd.usage or cmd.verb
            raise NNTPUsageError(f"usage: {usage}")

        return cmd

    def check(self, response: Response, expect: int) -> Response:
        """Record a response and test its code class.

        Raises:
            NNTPReplyError: If the code is not in the expected class.
        """
        self.response = response
        if response.status != expect:
            raise reply_error(*response)
        return response

    def command(self, verb: str, *args: str) -> Response:
        """Call a command on the server.

        Args:
            verb: A verb from the command table.
            args: Positional arguments, already encoded.

        Returns:
            The response, only if its code is in the class the command
            expects.

        Raises:
            NNTPUsageError: On an unknown verb or the wrong number of
                arguments.
            NNTPUnsupportedError: For commands that are never sent.
            NNTPReplyError: On an unexpected response code.
        """
        cmd = self._lookup(verb, args)
        response = self.transport.send_command(cmd.verb, *args)
        return self.check(response, cmd.expect)

    def fetch(self, verb: str, *args: str) -> Any:
        """Call a command that is followed by a block and parse the block.

        Returns:
            Whatever the command's parser makes of the block.
        """
        cmd = COMMANDS.get(verb)
        if cmd is not None and cmd.parser is None:
            raise NNTPUsageError(f"{verb} is not followed by a block")

        self.command(verb, *args)
        return self.parse(verb, self.transport.read_block())

    def parse(self, verb: str, lines: list[str]) -> Any:
        parser = COMMANDS[verb].parser
        if parser is None:
            raise NNTPUsageError(f"{verb} is not followed by a block")
        return parser(lines)

    def send_data(self, lines: Lines) -> None:
        self.transport.send_data(lines)

    def end_data(self) -> Response:
        """Finish a data block. The server must acknowledge it with 2xx."""
        return self.check(self.transport.end_data(), CMD_OK)
