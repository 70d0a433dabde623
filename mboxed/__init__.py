# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Streaming reader for mbox files with strict From_ line recognition."""

from .errors import (
    EmptyMboxError,
    HeaderParseError,
    MboxError,
    MboxIOError,
    NotMboxError,
    SeparatorTooLongError,
    UnexpectedEOFError,
)
from .fromline import is_from_line, parse_from_address
from .reader import (
    DEFAULT_BUFFER_SIZE,
    MboxEntry,
    MboxReader,
    iter_file,
    parse_entry,
    read_file,
)

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "EmptyMboxError",
    "HeaderParseError",
    "MboxEntry",
    "MboxError",
    "MboxIOError",
    "MboxReader",
    "NotMboxError",
    "SeparatorTooLongError",
    "UnexpectedEOFError",
    "is_from_line",
    "iter_file",
    "parse_entry",
    "parse_from_address",
    "read_file",
]
