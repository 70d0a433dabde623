# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Distribution of mbox entries over output files, one mbox file per key."""

from collections.abc import Callable, Sequence
from email.message import EmailMessage
import os
from typing import BinaryIO, TypeAlias

from . import utils
from .reader import MboxEntry

KeyFunc: TypeAlias = Callable[[MboxEntry], str]

# Keys that cannot name a file in the output directory.
_UNUSABLE_KEYS = frozenset(["", ".", ".."])


def trim_token(value: str, pattern: str) -> str:
    """Remove a token from a separated list.

    The first character of pattern is the separator and the rest is the token,
    e.g. trim_token("Inbox,Opened,Important", ",Opened") == "Inbox,Important".
    Tokens match after whitespace stripping. The leading token always stays.
    """
    if not pattern:
        return value
    separator = pattern[:1]
    token = pattern[1:]

    # fast path for token absence
    if token not in value:
        return value

    tokens = value.split(separator)
    for i in range(len(tokens) - 1, 0, -1):
        if tokens[i].strip() == token:
            del tokens[i]
    return separator.join(tokens)


def raw_header(message: EmailMessage, name: str) -> str:
    """Return the first value of header name as written, unfolded.

    Values are not parsed or decoded, so a malformed header cannot fail.
    Empty when the header is absent.
    """
    name = name.lower()
    for field, value in message.raw_items():
        if field.lower() == name:
            return " ".join(part.strip() for part in value.splitlines()).strip()
    return ""


def header_key(header: str, token_trims: Sequence[str] = ()) -> KeyFunc:
    """Return a key function reading one header of each entry."""

    def key(entry: MboxEntry) -> str:
        s = raw_header(entry.message, header)
        for pattern in token_trims:
            s = trim_token(s, pattern)
        return s

    return key


class SplitWriter:
    """Writes entries to <out_dir>/<key>, appending From_ line and raw bytes.

    Output files are opened on first use and stay open until close().
    Use as a context manager so they are flushed and closed on every path.
    """

    def __init__(
        self,
        out_dir: str,
        key_func: KeyFunc,
        escape: str = "_",
        default_key: str | None = None,
    ):
        self.out_dir = out_dir or "."
        self.key_func = key_func
        self.escape = escape
        self.default_key = default_key or None
        self.per_key: dict[str, BinaryIO] = {}
        self.written = 0
        self.skipped = 0

    def __enter__(self) -> "SplitWriter":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def escape_key(self, key: str) -> str:
        # NUL cannot appear in a file name either
        key = key.replace("\0", self.escape)
        key = key.replace(os.sep, self.escape)
        if os.altsep:
            key = key.replace(os.altsep, self.escape)
        return key

    def key_for(self, entry: MboxEntry) -> str | None:
        """Return the output file name for entry, or None to skip it."""
        key = self.escape_key(self.key_func(entry))
        if key in _UNUSABLE_KEYS:
            if self.default_key is None:
                utils.warn(
                    f"{entry.from_line_text!r} skipped on output-file name {key!r}; "
                    "see --default option"
                )
                return None
            key = self.default_key
        return key

    def write(self, entry: MboxEntry) -> None:
        key = self.key_for(entry)
        if key is None:
            self.skipped += 1
            return

        f = self.per_key.get(key)
        if f is None:
            f = open(os.path.join(self.out_dir, key), "wb")
            self.per_key[key] = f
        f.write(entry.from_line)
        f.write(entry.raw)
        self.written += 1

    def close(self) -> int:
        """Flush and close all output files. Returns the number of failures."""
        failures = 0
        per_key, self.per_key = self.per_key, {}
        for f in per_key.values():
            try:
                f.close()
            except OSError as err:
                utils.error(str(err))
                failures += 1
        return failures
