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

__all__ = [
    "NNTPDataError",
    "NNTPError",
    "NNTPPermanentError",
    "NNTPProtocolError",
    "NNTPReplyError",
    "NNTPSyncError",
    "NNTPTemporaryError",
    "NNTPUnsupportedError",
    "NNTPUsageError",
    "reply_error",
]


class NNTPError(Exception):
    """A command failed at the server or on the connection.

    The session methods catch these and return None or False instead.
    """


class NNTPSyncError(NNTPError):
    """The transport is still inside a dot terminated block.

    SocketTransport.send_command() raises this when an earlier read_block()
    stopped before the terminating line.
    """


class NNTPReplyError(NNTPError):
    """The server answered with a code outside the class the command expects.

    Raised by Dispatcher.check(). reply_error() picks the subclass.
    """

    def __init__(self, code: int, message: str) -> None:
        """Keep the offending reply.

        Args:
            code: The three digit reply code.
            message: The text after the code.
        """
        self.code = code
        self.message = message
        super().__init__(code, message)

    def __str__(self) -> str:
        return "%d %s" % (self.code, self.message)


class NNTPTemporaryError(NNTPReplyError):
    """A 4xx reply, such as 411 no such group or 423 no such article."""


class NNTPPermanentError(NNTPReplyError):
    """A 5xx reply, such as 500 command not recognized."""


class NNTPProtocolError(NNTPError):
    """The transport read a status line without a code from 100 to 599."""


class NNTPDataError(NNTPError):
    """A well formed reply whose text the session could not pick apart.

    For example a GROUP reply without four fields or a DATE reply without a
    timestamp.
    """


class NNTPUnsupportedError(NNTPError):
    """Raised for extension commands this client never sends."""


class NNTPUsageError(ValueError):
    """Wrong number or shape of arguments for a command.

    This is a programming error. It is not an NNTPError and is never turned
    into a falsy result.
    """


def reply_error(code: int, message: str) -> NNTPReplyError:
    """Build the most specific reply error for a response code."""
    if 400 <= code <= 499:
        return NNTPTemporaryError(code, message)
    if 500 <= code <= 599:
        return NNTPPermanentError(code, message)
    return NNTPReplyError(code, message)
