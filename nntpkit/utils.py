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

import re
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Union

from dateutil import parser as dateparser

from .errors import NNTPUsageError
from .types import MessageRange, Range

Timestamp = Union[datetime, int, float, str]

_date_re = re.compile(r"(\d{4})(\d\d)(\d\d)(\d\d)(\d\d)(\d\d)")
_msgid_re = re.compile(r"<[^>]+>")


def unparse_range(obj: Range) -> str:
    """Unparse a range argument.

    Args:
        obj: An article range. Either an integer specifying a single article
            or a tuple of one or two article numbers. A pair whose second
            number is not greater than the first means every article from
            the first number onwards and is sent as the first number alone.

    Returns:
        The range as a string that can be used by an NNTP command.

    Raises:
        NNTPUsageError: If the range is not one of the formats above.

    Note: Sample valid formats.
        4678
        (4245,)
        (4245, 5234)
    """
    if isinstance(obj, bool):
        raise NNTPUsageError("Must be an integer or tuple")

    if isinstance(obj, int):
        return str(obj)

    if isinstance(obj, tuple):
        if not all(isinstance(n, int) for n in obj):
            raise NNTPUsageError("Range values must be integers")
        if len(obj) == 1:
            return str(obj[0])
        if len(obj) == 2:
            low, high = obj
            return f"{low}-{high}" if high > low else str(low)
        raise NNTPUsageError("Invalid range format")

    raise NNTPUsageError("Must be an integer or tuple")


def unparse_msgid_range(obj: MessageRange) -> str:
    """Unparse a message-id or range argument.

    Args:
        obj: A message id as a string or a range as specified by
            unparse_range().

    Raises:
        NNTPUsageError: If obj is not a valid message id or range format.

    Returns:
        A message id or range as a string that can be used by an NNTP command.
    """
    if isinstance(obj, str):
        return obj

    return unparse_range(obj)


def unparse_list(obj: Union[str, Iterable[str]]) -> str:
    """Join a group or distribution pattern list into a single token."""
    if isinstance(obj, str):
        return obj
    return ",".join(obj)


def unparse_timestamp(value: Timestamp) -> str:
    """Unparse a point in time for NEWGROUPS and NEWNEWS.

    Args:
        value: A datetime, seconds since the epoch, or a date string. Naive
            datetimes (and strings without a zone) are taken to be UTC.

    Returns:
        The time in UTC as `YYMMDD HHMMSS GMT`.

    Raises:
        NNTPUsageError: If the value cannot be understood as a time.
    """
    if isinstance(value, str):
        try:
            value = dateparser.parse(value)
        except (ValueError, OverflowError) as e:
            raise NNTPUsageError(f"Invalid timestamp {value!r}") from e

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = datetime.fromtimestamp(value, tz=timezone.utc)

    if not isinstance(value, datetime):
        raise NNTPUsageError(f"Invalid timestamp {value!r}")

    if value.tzinfo:
        ts = value.astimezone(timezone.utc)
    else:
        ts = value.replace(tzinfo=timezone.utc)

    return "%02d%s GMT" % (ts.year % 100, ts.strftime("%m%d %H%M%S"))


def parse_date(message: str) -> datetime:
    """Parse a date as returned by the `DATE` command.

    Args:
        message: A status message containing a date in the format
            `YYYYMMDDHHMMSS`.

    Returns:
        A datetime object representing the date with timezone set to UTC.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    match = _date_re.search(message)
    if not match:
        raise ValueError(f"No date in {message!r}")
    Y, m, d, H, M, S = (int(g) for g in match.groups())
    return datetime(Y, m, d, H, M, S, tzinfo=timezone.utc)


def parse_msgid(message: str) -> str:
    """Extract the first message-id from a status message.

    Raises:
        ValueError: If there is no message-id in the message.
    """
    match = _msgid_re.search(message)
    if not match:
        raise ValueError(f"No message-id in {message!r}")
    return match.group(0)
