# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from collections.abc import Callable
import importlib.util
from pathlib import Path
import sys
from types import ModuleType

import pytest

# --- Path utilities ---
_TESTS_DIR = Path(__file__).resolve().parent  # tests/
_REPO_ROOT = _TESTS_DIR.parent
_TOOLS_DIR = _REPO_ROOT / "tools"


def get_repo_root() -> Path:
    """Return the repository root path."""
    return _REPO_ROOT


def load_tool(name: str) -> ModuleType:
    """Import tools/<name>.py as a module (the tools are not a package)."""
    if name in sys.modules:
        return sys.modules[name]
    spec = importlib.util.spec_from_file_location(name, _TOOLS_DIR / f"{name}.py")
    assert spec and spec.loader
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    spec.loader.exec_module(module)
    return module


# --- Sample mbox content ---

FROM_ALICE = b"From alice@example.com Mon Jan  1 10:00:00 2024\r\n"
FROM_BOB = b"From bob@example.com Tue Jan  2 11:30:00 2024\r\n"
FROM_CAROL = b"From carol@example.com Wed Jan  3 12:45:00 2024\r\n"

MESSAGE_ALICE = (
    b"From: Alice <alice@example.com>\r\n"
    b"Subject: Lunch\r\n"
    b"X-Label: Inbox,Opened,Important\r\n"
    b"\r\n"
    b"Shall we meet at noon?\r\n"
    b"From my point of view, yes.\r\n"  # Body text, not a separator
)
MESSAGE_BOB = (
    b"From: Bob <bob@example.com>\r\n"
    b"Subject: Re: Lunch\r\n"
    b"X-Label: Inbox,Opened\r\n"
    b"\r\n"
    b"Noon works.\r\n"
)
MESSAGE_CAROL = (
    b"From: Carol <carol@example.com>\r\n"
    b"Subject: Reports\r\n"
    b"X-Label: Work/Reports\r\n"
    b"\r\n"
    b"See attached.\r\n"
)

SAMPLE_MBOX = (
    FROM_ALICE + MESSAGE_ALICE + FROM_BOB + MESSAGE_BOB + FROM_CAROL + MESSAGE_CAROL
)


@pytest.fixture
def sample_mbox() -> bytes:
    return SAMPLE_MBOX


@pytest.fixture
def write_mbox(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing bytes to a file under tmp_path; returns its path."""

    def write(data: bytes, name: str = "test.mbox") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return write
