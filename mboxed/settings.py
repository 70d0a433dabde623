# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Settings for splitting mbox files.

Values come from MBOXED_* environment variables (a '.env' file is honored)
and are overridden by command-line options.
"""

import os

from pydantic import Field, field_validator
from pydantic.dataclasses import dataclass

from . import utils
from .reader import DEFAULT_BUFFER_SIZE, MIN_BUFFER_SIZE

ENV_PREFIX = "MBOXED_"


@dataclass
class MuxSettings:
    header: str
    out_dir: str = "."
    escape: str = "_"
    default_key: str | None = None
    token_trims: list[str] = Field(default_factory=list)
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, ge=MIN_BUFFER_SIZE)

    @field_validator("header")
    @classmethod
    def _check_header(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("no split key defined: use the header option")
        return value

    @field_validator("escape")
    @classmethod
    def _check_escape(cls, value: str) -> str:
        if "\0" in value or os.sep in value or (os.altsep and os.altsep in value):
            raise ValueError(f"escape {value!r} contains a path separator or NUL")
        return value

    @field_validator("out_dir")
    @classmethod
    def _default_out_dir(cls, value: str) -> str:
        return value or "."


def env_defaults() -> dict[str, str]:
    """Collect MuxSettings fields from the environment, keyed by field name."""
    utils.load_dotenv()
    defaults: dict[str, str] = {}
    for field in ("header", "out_dir", "escape", "default_key", "buffer_size"):
        value = os.getenv(ENV_PREFIX + field.upper())
        if value:
            defaults[field] = value
    return defaults
