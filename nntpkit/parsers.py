"""
Parsers for multi-line response blocks.
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
from typing import Optional, Union

__all__ = [
    "parse_articlelist",
    "parse_description",
    "parse_fieldlist",
    "parse_grouplist",
]

Token = Union[int, str]

_description_re = re.compile(r"^\s*(\S+)")


def _token(value: str) -> Token:
    return int(value) if value.isdigit() else value


def _chomp(line: str) -> str:
    return line.rstrip("\r\n")


def parse_grouplist(
    lines: Iterable[str],
) -> dict[str, tuple[Optional[Token], Optional[Token], Optional[Token]]]:
    """Parse a group listing (LIST, LIST ACTIVE, NEWGROUPS, ...).

    Args:
        lines: The block lines.

    Returns:
        A dictionary keyed on the first token of each line. Each value is a
        3-tuple of the next three tokens; tokens made only of digits are
        converted to integers and missing tokens are None.

    Note:
        The values are not validated. For LIST this is the last article, the
        first article and the posting flag, for LIST ACTIVE.TIMES it is the
        creation time and the creator.
    """
    groups = {}
    for line in lines:
        parts = line.split()
        if not parts:
            continue
        values = [_token(p) for p in parts[1:4]]
        values += [None] * (3 - len(values))
        groups[parts[0]] = tuple(values)
    return groups


def parse_fieldlist(lines: Iterable[str]) -> dict[Token, list[str]]:
    """Parse tab separated records (XOVER).

    Returns:
        A dictionary keyed on the first field (an integer for article
        numbers) with the list of remaining fields as the value.
    """
    fields: dict[Token, list[str]] = {}
    for line in lines:
        parts = _chomp(line).split("\t")
        if not parts[0]:
            continue
        fields[_token(parts[0])] = parts[1:]
    return fields


def parse_articlelist(lines: Iterable[str]) -> list[str]:
    """Strip the line terminators, nothing more."""
    return [_chomp(line) for line in lines]


def parse_description(lines: Iterable[str]) -> dict[str, str]:
    """Parse name/description lines (LIST NEWSGROUPS, XGTITLE, XHDR, ...).

    The first whitespace delimited token of each line is used as the key, the
    value is the whole line. Lines without a token are skipped.
    """
    descriptions = {}
    for line in lines:
        line = _chomp(line)
        match = _description_re.match(line)
        if match:
            descriptions[match.group(1)] = line
    return descriptions
