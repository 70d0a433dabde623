# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Streaming mbox reader.

The reader splits a binary stream into entries, one per From_ line, without
loading more than one entry into memory. Each entry keeps the exact bytes of
its From_ line and of everything up to the next From_ line (or EOF).

Usage:

    for entry in iter_file("inbox.mbox"):
        print(entry.from_line_number, entry.message["Subject"])
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from email import errors
from email.message import EmailMessage
from email.parser import BytesParser
import email.policy
from enum import Enum, auto
import os
from typing import BinaryIO, TypeVar

from .errors import (
    EmptyMboxError,
    HeaderParseError,
    MboxIOError,
    NotMboxError,
    SeparatorTooLongError,
    UnexpectedEOFError,
)
from .fromline import FROM_PREFIX, is_from_line

DEFAULT_BUFFER_SIZE = 4096
MIN_BUFFER_SIZE = 16

# The parser recovers from a line without a colon by moving it and the rest
# into the body. These defects leave a header block that cannot be trusted.
_FATAL_DEFECTS = (
    errors.FirstHeaderLineIsContinuationDefect,
    errors.MisplacedEnvelopeHeaderDefect,
    errors.InvalidHeaderDefect,
)

T = TypeVar("T")


@dataclass(frozen=True)
class MboxEntry:
    """One message of an mbox file."""

    from_line: bytes  # Includes the CRLF
    from_line_number: int
    raw: bytes  # Everything between this From_ line and the next
    end_line_number: int  # Last line of raw; from_line_number when raw is empty
    message: EmailMessage

    @property
    def from_line_text(self) -> str:
        return self.from_line[:-2].decode("utf-8", errors="replace")

    @property
    def line_range(self) -> tuple[int, int]:
        return self.from_line_number, self.end_line_number


def parse_entry(raw: bytes) -> EmailMessage:
    """Parse the header block of raw; the body is kept as the unparsed payload.

    Raises the first header defect that makes the entry unusable.
    """
    parser = BytesParser(_class=EmailMessage, policy=email.policy.default)
    message: EmailMessage = parser.parsebytes(raw, headersonly=True)  # type: ignore[assignment]
    for defect in message.defects:
        if isinstance(defect, _FATAL_DEFECTS):
            raise defect
    return message


class _State(Enum):
    AWAITING_FIRST_SEPARATOR = auto()
    ACCUMULATING_BODY = auto()
    DONE = auto()
    FAILED = auto()


class MboxReader:
    """Iterator over the entries of one binary stream.

    Lines are read with at most buffer_size bytes per read. A body line that
    does not fit is read in pieces and counts as one line. The first line
    must fit, or the stream is rejected.

    Any error leaves the reader failed; it yields nothing afterwards.
    """

    def __init__(
        self,
        stream: BinaryIO,
        name: str = "<stream>",
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        if buffer_size < MIN_BUFFER_SIZE:
            raise ValueError(
                f"buffer_size must be at least {MIN_BUFFER_SIZE}, got {buffer_size}"
            )
        self.stream = stream
        self.name = name
        self.buffer_size = buffer_size
        self.line_number = 0  # Last terminated line

        self._state = _State.AWAITING_FIRST_SEPARATOR
        self._from_line = b""
        self._from_line_number = 0
        self._body = bytearray()

    def __iter__(self) -> Iterator[MboxEntry]:
        return self

    def __next__(self) -> MboxEntry:
        entry = self.read_entry()
        if entry is None:
            raise StopIteration
        return entry

    @property
    def done(self) -> bool:
        return self._state is _State.DONE

    def read_entry(self) -> MboxEntry | None:
        """Return the next entry, or None once the stream is exhausted."""
        match self._state:
            case _State.DONE | _State.FAILED:
                return None
            case _State.AWAITING_FIRST_SEPARATOR:
                self._guard(self._read_first_line)

        return self._guard(self._read_body)

    def _guard(self, step: Callable[[], T]) -> T:
        try:
            return step()
        except BaseException:
            self._state = _State.FAILED
            self._body = bytearray()
            raise

    def _readline(self) -> bytes:
        try:
            return self.stream.readline(self.buffer_size)
        except OSError as err:
            raise MboxIOError(self.name, err, self.line_number + 1) from err

    def _is_full(self, chunk: bytes) -> bool:
        return len(chunk) >= self.buffer_size

    def _read_first_line(self) -> None:
        line = self._readline()

        if not line:
            raise EmptyMboxError(self.name)

        if line.endswith(b"\n"):
            if not is_from_line(line):
                raise NotMboxError(self.name)
        elif self._is_full(line):
            if not line.startswith(FROM_PREFIX):
                raise NotMboxError(self.name)
            raise SeparatorTooLongError(self.name, self.buffer_size)
        else:
            # EOF before the line terminator
            if not FROM_PREFIX.startswith(line[: len(FROM_PREFIX)]):
                raise NotMboxError(self.name)
            raise UnexpectedEOFError(self.name, 1, "From_ line")

        self.line_number = 1
        self._from_line = line
        self._from_line_number = 1
        self._state = _State.ACCUMULATING_BODY

    def _read_body(self) -> MboxEntry:
        body = self._body
        while True:
            line_number = self.line_number + 1
            line = self._readline()

            if line.endswith(b"\n"):
                self.line_number = line_number
                if not is_from_line(line):
                    body += line
                    continue  # hot path

                entry = self._complete_entry(line_number - 1)
                self._from_line = line
                self._from_line_number = line_number
                return entry

            if not line:
                entry = self._complete_entry(self.line_number)
                self._state = _State.DONE
                return entry

            if not self._is_full(line):
                raise UnexpectedEOFError(self.name, line_number)

            body += line
            self._copy_line(line_number)
            self.line_number = line_number

    def _copy_line(self, line_number: int) -> None:
        """Append the rest of an oversized line to the entry body."""
        while True:
            chunk = self._readline()
            self._body += chunk
            if chunk.endswith(b"\n"):
                return
            if not self._is_full(chunk):
                raise UnexpectedEOFError(self.name, line_number, "excessive line")

    def _complete_entry(self, end_line_number: int) -> MboxEntry:
        raw = bytes(self._body)
        self._body.clear()
        try:
            message = parse_entry(raw)
        except errors.MessageDefect as err:
            raise HeaderParseError(
                self.name, self._from_line_number, end_line_number, err
            ) from err
        return MboxEntry(
            from_line=self._from_line,
            from_line_number=self._from_line_number,
            raw=raw,
            end_line_number=end_line_number,
            message=message,
        )


def iter_file(
    path: str | os.PathLike[str], buffer_size: int = DEFAULT_BUFFER_SIZE
) -> Iterator[MboxEntry]:
    """Yield the entries of the mbox file at path.

    The file is closed when the iteration ends, fails, or is abandoned.
    """
    name = os.fspath(path)
    try:
        f = open(name, "rb")
    except OSError as err:
        raise MboxIOError(name, err) from err
    with f:
        yield from MboxReader(f, name, buffer_size)


def read_file(
    path: str | os.PathLike[str],
    on_entry: Callable[[MboxEntry], None],
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Call on_entry for each entry of the mbox file at path.

    Returns the number of entries. Exceptions from on_entry propagate.
    """
    count = 0
    for entry in iter_file(path, buffer_size):
        on_entry(entry)
        count += 1
    return count
