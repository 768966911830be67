"""
An RFC 977 NNTP client library.
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

from __future__ import annotations

import functools
import logging
import os
import re
from collections.abc import Callable, Iterable
from types import TracebackType
from typing import TYPE_CHECKING, Any, Literal, Optional, TypeVar, Union, cast

from . import utils
from .commands import CMD_OK, Dispatcher
from .errors import NNTPDataError, NNTPError, NNTPUsageError
from .parsers import Token
from .transport import Lines, SocketTransport, Transport, split_lines
from .types import GroupState, MessageRange, Range, Response

if TYPE_CHECKING:
    from typing_extensions import Self

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT",
    "NNTPClient",
    "connect",
    "default_host",
]

log = logging.getLogger(__name__)

DEFAULT_HOST = "news"
DEFAULT_PORT = 119
DEFAULT_TIMEOUT = 120

_group_re = re.compile(r"(\d+)\s+(\d+)\s+(\d+)\s+(\S+)")
_xpath_re = re.compile(r"^\d+\s+(\S+)")

F = TypeVar("F", bound=Callable[..., Any])

GroupList = dict[str, tuple[Optional[Token], Optional[Token], Optional[Token]]]


def default_host() -> str:
    """The news server named by $NNTPSERVER, else "news"."""
    return os.environ.get("NNTPSERVER") or DEFAULT_HOST


def _on_failure(value: Any) -> Callable[[F], F]:
    """Return `value` instead of raising when a command fails.

    Protocol and connection errors become `value`. NNTPUsageError and any
    other exception pass through.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except (NNTPError, OSError) as e:
                log.debug("%s failed: %s", func.__name__, e)
                return value

        return cast(F, wrapper)

    return decorator


def _opt(*args: Optional[str]) -> tuple[str, ...]:
    """Drop trailing optional arguments that were not given."""
    given = list(args)
    while given and given[-1] is None:
        given.pop()
    if None in given:
        raise NNTPUsageError("Optional arguments must be given in order")
    return tuple(cast(list[str], given))


def _msgid_article(obj: Union[str, int, None]) -> tuple[str, ...]:
    if obj is None:
        return ()
    if isinstance(obj, bool) or not isinstance(obj, (str, int)):
        raise NNTPUsageError("Must be a message-id or an article number")
    return (str(obj),)


def _article_lines(message: Optional[Lines]) -> Optional[list[str]]:
    """Normalise article content to a list of lines.

    Raises:
        NNTPUsageError: If a line contains a carriage return or a null
            character, which cannot be sent.
    """
    if message is None:
        return None
    lines = list(split_lines(message))
    for line in lines:
        if "\0" in line or "\r" in line:
            raise NNTPUsageError("Illegal characters found in article")
    return lines


class NNTPClient:
    """NNTP session.

    Implements the RFC 977 commands and the common RFC 2980 extensions over
    a single connection.

    Note: Every command returns a falsy value (None, False or an empty
        result) when the server refuses it, when its reply cannot be parsed,
        or when the connection fails. Nothing is retried. Wrong arguments
        raise NNTPUsageError.

    Note: A session is not thread safe and only one command can be in flight
        at a time.
    """

    def __init__(self, transport: Transport, host: str = "") -> None:
        """Constructor for NNTPClient.

        Reads the greeting from an already connected transport. Use connect()
        to open the connection as well.

        Args:
            transport: The command transport for the connection.
            host: Name of the server, informational only.

        Raises:
            NNTPReplyError: If the greeting is not a 2xx response. The
                transport is closed.
        """
        self.host = host
        self.transport = transport
        self._dispatcher = Dispatcher(transport)
        self._group: Optional[GroupState] = None

        try:
            response = self._dispatcher.check(transport.read_response(), CMD_OK)
        except (NNTPError, OSError):
            transport.close()
            raise

        # 201 is "no posting", the rest of 200-209 allow it
        self._posting_allowed = 200 <= response.code <= 209 and response.code != 201

    @classmethod
    def connect(
        cls,
        host: Optional[str] = None,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> Optional["NNTPClient"]:
        """Connect to a news server and read its greeting.

        Args:
            host: Hostname for the news server. Defaults to default_host().
            port: Port for the news server.
            timeout: Connection and read timeout in seconds.
            debug: Log the commands and replies exchanged with the server.

        Returns:
            The session, or None if the server cannot be reached or does not
            greet with a 2xx response.
        """
        host = host or default_host()
        try:
            transport = SocketTransport.connect(host, port, timeout, debug)
        except OSError as e:
            log.debug("connect to %s:%d failed: %s", host, port, e)
            return None

        try:
            return cls(transport, host)
        except (NNTPError, OSError) as e:
            log.debug("greeting from %s:%d refused: %s", host, port, e)
            return None

    def __enter__(self) -> "Self":
        """Support for the 'with' context manager statement."""
        return self

    def __exit__(
        self,
        exc_type: Union[type[BaseException], None],
        exc_val: Union[BaseException, None],
        exc_tb: Union[TracebackType, None],
    ) -> Literal[False]:
        """Support for the 'with' context manager statement."""
        if not self.quit():
            self.close()
        return False

    @property
    def posting_allowed(self) -> bool:
        """Whether the greeting said posting is allowed."""
        return self._posting_allowed

    @property
    def response(self) -> Optional[Response]:
        """The last response checked by the session."""
        return self._dispatcher.response

    @property
    def code(self) -> Optional[int]:
        return self.response.code if self.response else None

    @property
    def message(self) -> Optional[str]:
        return self.response.message if self.response else None

    @property
    def current_group(self) -> Optional[GroupState]:
        return self._group

    def _select(self, response: Response) -> GroupState:
        """Replace the group state from a GROUP style status message."""
        match = _group_re.search(response.message)
        if not match:
            raise NNTPDataError(f'Invalid GROUP status "{response.message}"')

        count, first, last, name = match.groups()

        # group may be replied as "(current group)"
        group: Optional[str] = name
        if "(" in name:
            group = self._group.name if self._group else None

        self._group = GroupState(int(count), int(first), int(last), group)
        return self._group

    def close(self) -> None:
        """Closes the connection at the client.

        Once this method has been called, no other methods of the NNTPClient
        object should be called.
        """
        self.transport.close()

    # article retrieval
    @_on_failure(None)
    def article(
        self, msgid_article: Union[str, int, None] = None
    ) -> Optional[list[str]]:
        """ARTICLE command.

        Retrieves the headers, a blank line and the body of an article.

        Args:
            msgid_article: A message-id as a string, or an article number as
                an integer. None (the default) uses the current article.
                An article number also moves the current article pointer.

        Returns:
            The lines of the article.
        """
        return self._dispatcher.fetch("ARTICLE", *_msgid_article(msgid_article))

    @_on_failure(None)
    def body(self, msgid_article: Union[str, int, None] = None) -> Optional[list[str]]:
        """BODY command. Same as article() but only the body."""
        return self._dispatcher.fetch("BODY", *_msgid_article(msgid_article))

    @_on_failure(None)
    def head(self, msgid_article: Union[str, int, None] = None) -> Optional[list[str]]:
        """HEAD command. Same as article() but only the headers."""
        return self._dispatcher.fetch("HEAD", *_msgid_article(msgid_article))

    @_on_failure(None)
    def stat(self, msgid_article: Union[str, int, None] = None) -> Optional[str]:
        """STAT command.

        Selects an article without retrieving it. Selecting by article number
        moves the current article pointer, selecting by message-id does not.

        Returns:
            The message-id of the selected article.
        """
        response = self._dispatcher.command("STAT", *_msgid_article(msgid_article))
        try:
            return utils.parse_msgid(response.message)
        except ValueError:
            raise NNTPDataError(f'Invalid STAT status "{response.message}"')

    # group selection
    def group(self, name: Optional[str] = None) -> Optional[str]:
        """Select a group and/or get the name of the current group.

        Args:
            name: The group to select. With no name nothing is sent to the
                server and the name of the current group is returned.

        Returns:
            The group name, or None if the selection failed or no group has
            been selected.
        """
        if name is None:
            return self._group.name if self._group else None

        state = self.group_info(name)
        return state.name if state else None

    @_on_failure(None)
    def group_info(self, name: Optional[str] = None) -> Optional[GroupState]:
        """GROUP command (LISTGROUP when no name is given).

        Selects a newsgroup as the currently selected newsgroup and returns
        summary information about it.

        Args:
            name: The group name. With no name the server is asked about the
                current group.

        Returns:
            The estimated number of articles, the first and last article
            numbers and the group name. The name is None when the server
            replied with a placeholder and no group was selected before.
        """
        if name is None:
            response = self._dispatcher.command("LISTGROUP")
            # the article numbers are not wanted here
            self.transport.read_block()
        else:
            response = self._dispatcher.command("GROUP", name)

        return self._select(response)

    @_on_failure(None)
    def listgroup(self, name: Optional[str] = None) -> Optional[list[int]]:
        """LISTGROUP command.

        Selects a group (the current group if no name is given) and lists the
        article numbers in it. The group state is updated when the status
        line carries the group summary.

        Returns:
            The article numbers in ascending order as given by the server.
        """
        response = self._dispatcher.command("LISTGROUP", *_opt(name))
        numbers = self._dispatcher.parse("LISTGROUP", self.transport.read_block())

        if _group_re.search(response.message):
            self._select(response)
        try:
            return [int(n) for n in numbers if n]
        except ValueError:
            raise NNTPDataError("Invalid LISTGROUP response")

    @_on_failure(None)
    def last(self) -> Optional[str]:
        """LAST command.

        Sets the current article pointer to the previous article in the
        current newsgroup.

        Returns:
            The message-id of the article.
        """
        response = self._dispatcher.command("LAST")
        try:
            return utils.parse_msgid(response.message)
        except ValueError:
            raise NNTPDataError(f'Invalid LAST status "{response.message}"')

    @_on_failure(None)
    def next(self) -> Optional[str]:
        """NEXT command.

        Sets the current article pointer to the next article in the current
        newsgroup.

        Returns:
            The message-id of the article.
        """
        response = self._dispatcher.command("NEXT")
        try:
            return utils.parse_msgid(response.message)
        except ValueError:
            raise NNTPDataError(f'Invalid NEXT status "{response.message}"')

    # posting
    def _send_article(self, lines: Optional[list[str]]) -> bool:
        if lines is None:
            return True
        self._dispatcher.send_data(lines)
        self._dispatcher.end_data()
        return True

    @_on_failure(False)
    def post(self, message: Optional[Lines] = None) -> bool:
        """POST command.

        Args:
            message: The article, headers then a blank line then the body, as
                a string or a list of lines. Leading periods are escaped.

        Returns:
            True if the server accepted the article. With no message, True if
            the server is ready to receive it; send it with datasend() and
            dataend().

        Raises:
            NNTPUsageError: If the article contains carriage returns or null
                characters. Nothing is sent.
        """
        lines = _article_lines(message)
        self._dispatcher.command("POST")
        return self._send_article(lines)

    @_on_failure(False)
    def ihave(self, msgid: str, message: Optional[Lines] = None) -> bool:
        """IHAVE command.

        Offers an article to the server. The article is only sent if the
        server asks for it.

        Args:
            msgid: The message-id of the article.
            message: The article as for post().

        Returns:
            True if the server wanted the article and accepted it. With no
            message, True if the server wants it; send it with datasend() and
            dataend().
        """
        lines = _article_lines(message)
        self._dispatcher.command("IHAVE", msgid)
        return self._send_article(lines)

    @_on_failure(False)
    def datasend(self, message: Lines) -> bool:
        """Send article lines after a bare post() or ihave()."""
        self._dispatcher.send_data(cast(list[str], _article_lines(message)))
        return True

    @_on_failure(False)
    def dataend(self) -> bool:
        """Finish the article started with datasend()."""
        self._dispatcher.end_data()
        return True

    # session commands
    @_on_failure(False)
    def authinfo(self, user: str, password: str) -> bool:
        """AUTHINFO USER and AUTHINFO PASS commands.

        Returns:
            True if the server asked for the password and accepted it.
        """
        self._dispatcher.command("AUTHINFO USER", user)
        self._dispatcher.command("AUTHINFO PASS", password)
        return True

    @_on_failure(False)
    def slave(self) -> bool:
        """SLAVE command. Tells the server this client is another server."""
        self._dispatcher.command("SLAVE")
        return True

    @_on_failure(False)
    def quit(self) -> bool:
        """QUIT command.

        Tells the server to close the connection and closes it at the client
        once the server acknowledges.

        Once this method has succeeded, no other methods of the NNTPClient
        object should be called.
        """
        self._dispatcher.command("QUIT")
        self.close()
        return True

    # information commands
    @_on_failure(None)
    def date(self) -> Optional[int]:
        """DATE command.

        Returns:
            The time on the server in seconds since the epoch.
        """
        response = self._dispatcher.command("DATE")
        try:
            return int(utils.parse_date(response.message).timestamp())
        except ValueError:
            raise NNTPDataError(f'Invalid DATE status "{response.message}"')

    @_on_failure(None)
    def help(self) -> Optional[list[str]]:
        """HELP command.

        Returns:
            The lines of the help text from the server.
        """
        return self._dispatcher.fetch("HELP")

    @_on_failure(None)
    def list(self) -> Optional[GroupList]:
        """LIST command.

        Returns:
            The active newsgroups, keyed on name, each with a 3-tuple of the
            last article number, the first article number and the posting
            flag.
        """
        return self._dispatcher.fetch("LIST")

    @_on_failure(None)
    def newgroups(
        self,
        since: utils.Timestamp,
        distributions: Union[str, Iterable[str], None] = None,
    ) -> Optional[GroupList]:
        """NEWGROUPS command.

        Args:
            since: A datetime, seconds since the epoch, or a date string.
                Naive times are taken to be UTC.
            distributions: A distribution pattern or a list of them.

        Returns:
            The groups created since the given time, in the same form as
            list().
        """
        args = _opt(
            utils.unparse_timestamp(since),
            None if distributions is None else utils.unparse_list(distributions),
        )
        return self._dispatcher.fetch("NEWGROUPS", *args)

    @_on_failure(None)
    def newnews(
        self,
        since: utils.Timestamp,
        groups: Union[str, Iterable[str], None] = None,
        distributions: Union[str, Iterable[str], None] = None,
    ) -> Optional[list[str]]:
        """NEWNEWS command.

        Args:
            since: As for newgroups().
            groups: A group pattern or list of them. Defaults to the current
                group, or every group if none is selected.
            distributions: A distribution pattern or a list of them.

        Returns:
            The message-ids of the articles posted since the given time.
        """
        if groups is None:
            groups = self.group() or "*"

        args = _opt(
            utils.unparse_list(groups),
            utils.unparse_timestamp(since),
            None if distributions is None else utils.unparse_list(distributions),
        )
        return self._dispatcher.fetch("NEWNEWS", *args)

    # extension commands
    @_on_failure(None)
    def active(self, pattern: Optional[str] = None) -> Optional[GroupList]:
        """LIST ACTIVE command. Same as list() restricted to a pattern."""
        return self._dispatcher.fetch("LIST ACTIVE", *_opt(pattern))

    @_on_failure(None)
    def active_times(self) -> Optional[GroupList]:
        """LIST ACTIVE.TIMES command.

        Returns:
            The newsgroups keyed on name, each with a 3-tuple of the creation
            time (seconds since the epoch), the creator and None.
        """
        return self._dispatcher.fetch("LIST ACTIVE.TIMES")

    @_on_failure(None)
    def newsgroups(self, pattern: Optional[str] = None) -> Optional[dict[str, str]]:
        """LIST NEWSGROUPS command.

        Returns:
            The description line of each group matching the pattern (every
            group with no pattern), keyed on group name.
        """
        return self._dispatcher.fetch("LIST NEWSGROUPS", *_opt(pattern))

    @_on_failure(None)
    def distributions(self) -> Optional[dict[str, str]]:
        """LIST DISTRIBUTIONS command."""
        return self._dispatcher.fetch("LIST DISTRIBUTIONS")

    @_on_failure(None)
    def subscriptions(self) -> Optional[list[str]]:
        """LIST SUBSCRIPTIONS command.

        Returns:
            The groups recommended for new users.
        """
        return self._dispatcher.fetch("LIST SUBSCRIPTIONS")

    @_on_failure(None)
    def overview_fmt(self) -> Optional[list[str]]:
        """LIST OVERVIEW.FMT command.

        Returns:
            The names of the fields returned by xover(), in order.
        """
        return self._dispatcher.fetch("LIST OVERVIEW.FMT")

    @_on_failure(None)
    def xgtitle(self, pattern: str) -> Optional[dict[str, str]]:
        """XGTITLE command. Same result as newsgroups()."""
        return self._dispatcher.fetch("XGTITLE", pattern)

    @_on_failure(None)
    def xhdr(
        self,
        header: str,
        msgid_range: Optional[MessageRange] = None,
    ) -> Optional[dict[str, str]]:
        """XHDR command.

        Args:
            header: The header field to retrieve.
            msgid_range: A message-id, an article number, or a tuple range as
                accepted by utils.unparse_range(). None (the default) uses the
                current article.

        Returns:
            The reply lines keyed on article number (or message-id).
        """
        args = _opt(
            header,
            None if msgid_range is None else utils.unparse_msgid_range(msgid_range),
        )
        return self._dispatcher.fetch("XHDR", *args)

    @_on_failure(None)
    def xover(
        self,
        range: Optional[Range] = None,  # noqa: A002
    ) -> Optional[dict[Token, list[str]]]:
        """XOVER command.

        Args:
            range: An article number or a tuple range. None (the default) uses
                the current article.

        Returns:
            The overview fields of each article keyed on article number. The
            field names are given by overview_fmt().
        """
        args = _opt(None if range is None else utils.unparse_range(range))
        return self._dispatcher.fetch("XOVER", *args)

    @_on_failure(None)
    def xpat(
        self,
        header: str,
        pattern: Union[str, Iterable[str]],
        msgid_range: MessageRange,
    ) -> Optional[dict[str, str]]:
        """XPAT command.

        Same result as xhdr() restricted to headers matching the pattern (or
        any of the patterns if a list is given).
        """
        if not isinstance(pattern, str):
            pattern = " ".join(pattern)
        args = header, utils.unparse_msgid_range(msgid_range), pattern
        return self._dispatcher.fetch("XPAT", *args)

    @_on_failure(None)
    def xpath(self, msgid: str) -> Optional[str]:
        """XPATH command.

        Returns:
            The path of the file holding the article on the server.
        """
        response = self._dispatcher.command("XPATH", msgid)
        match = _xpath_re.match(response.message)
        if not match:
            raise NNTPDataError(f'Invalid XPATH status "{response.message}"')
        return match.group(1)

    @_on_failure(None)
    def xthread(self, *args: str) -> None:
        """XTHREAD is not supported, always fails."""
        self._dispatcher.command("XTHREAD", *args)

    @_on_failure(None)
    def xsearch(self, *args: str) -> None:
        """XSEARCH is not supported, always fails."""
        self._dispatcher.command("XSEARCH", *args)

    @_on_failure(None)
    def xindex(self, *args: str) -> None:
        """XINDEX is not supported, always fails."""
        self._dispatcher.command("XINDEX", *args)


connect = NNTPClient.connect
