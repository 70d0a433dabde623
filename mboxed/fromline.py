# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Recognition of mbox From_ lines.

A body line may start with "From " too, so a separator must also carry a
parseable sender address right after "From " and end in a four-digit year
followed by CRLF, e.g. b"From a@b 1 Jan 00:00:00 2024\\r\\n".
"""

from email import errors
from email.headerregistry import Address, HeaderRegistry

FROM_PREFIX = b"From "

# Shortest possible match: prefix, one-byte address, space, year, CRLF.
MIN_FROM_LINE_LENGTH = 12

_DIGITS = frozenset(b"0123456789")

_header_factory = HeaderRegistry()


def is_from_line(line: bytes) -> bool:
    """Return whether line, including its line terminator, is a From_ line."""
    if (
        len(line) < MIN_FROM_LINE_LENGTH
        or not line.startswith(FROM_PREFIX)
        or not line.endswith(b"\r\n")
        or line[-7] != 0x20  # space before the year
    ):
        return False

    # year should be ASCII decimal
    if any(c not in _DIGITS for c in line[-6:-2]):
        return False

    return parse_from_address(line) is not None


def parse_from_address(line: bytes) -> Address | None:
    """Return the sender address that follows "From ", or None if invalid."""
    end = line.find(b" ", len(FROM_PREFIX))
    if end < 0:
        return None
    try:
        text = line[len(FROM_PREFIX) : end].decode("utf-8")
    except UnicodeDecodeError:
        return None
    return _parse_address(text)


def _parse_address(text: str) -> Address | None:
    if not text:
        return None
    try:
        header = _header_factory("From", text)
    except (errors.HeaderParseError, IndexError, ValueError):
        # The header parser gives up on some garbage instead of recording a defect.
        return None
    # UTF-8 local parts are valid in internationalized mail
    defects = [
        d for d in header.defects if not isinstance(d, errors.NonASCIILocalPartDefect)
    ]
    if defects or len(header.addresses) != 1:
        return None
    address = header.addresses[0]
    if not address.username or not address.domain:
        return None
    return address
