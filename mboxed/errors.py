# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Errors raised while reading an mbox stream.

Every error carries the stream name and the offending line (or line range),
so that str(err) reads like "inbox.mbox:12: reason" or "inbox.mbox:3-11: reason".
"""


class MboxError(Exception):
    """Base class for all mbox read failures."""

    def __init__(
        self,
        name: str,
        reason: str,
        line: int | None = None,
        end_line: int | None = None,
    ):
        self.name = name
        self.reason = reason
        self.line = line
        self.end_line = end_line
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line is None:
            return f"{self.name}: {self.reason}"
        if self.end_line is None or self.end_line == self.line:
            return f"{self.name}:{self.line}: {self.reason}"
        return f"{self.name}:{self.line}-{self.end_line}: {self.reason}"


class EmptyMboxError(MboxError):
    """The stream has no content at all."""

    def __init__(self, name: str):
        super().__init__(name, "no content")


class NotMboxError(MboxError):
    """The stream does not start with a From_ line."""

    def __init__(self, name: str, reason: str = "not an mbox", line: int = 1):
        super().__init__(name, reason, line)


class SeparatorTooLongError(NotMboxError):
    """The first line starts like a From_ line but does not fit the buffer."""

    def __init__(self, name: str, buffer_size: int):
        self.buffer_size = buffer_size
        super().__init__(name, f"From_ line exceeds {buffer_size} bytes", 1)


class UnexpectedEOFError(MboxError):
    """The stream ends in the middle of a line."""

    def __init__(self, name: str, line: int, what: str = "line"):
        super().__init__(name, f"{what} got unexpected EOF", line)


class HeaderParseError(MboxError):
    """The header parser rejected the raw bytes of one entry."""

    def __init__(self, name: str, line: int, end_line: int, cause: Exception):
        self.cause = cause
        reason = type(cause).__name__
        detail = str(cause).strip()
        if detail:
            reason = f"{reason}: {detail}"
        super().__init__(name, reason, line, end_line)


class MboxIOError(MboxError):
    """An OSError while opening or reading the stream."""

    def __init__(self, name: str, cause: OSError, line: int | None = None):
        self.cause = cause
        super().__init__(name, cause.strerror or str(cause), line)
