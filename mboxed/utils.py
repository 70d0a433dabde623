# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Utilities that are hard to fit in any specific module."""

from contextlib import contextmanager
import os
import sys
import time

import colorama
import dotenv

# Prefix for diagnostics; the tools set this to their own name.
program_name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "mboxed"


@contextmanager
def timelog(label: str, verbose: bool = True):
    """Context manager to log the time taken by a block of code.

    With verbose=False it prints nothing."""
    dim = colorama.Style.DIM
    reset = colorama.Style.RESET_ALL
    if verbose:
        print(
            f"{dim}{label}...{reset}",
            end="",
            flush=True,
            file=sys.stderr,
        )
    start_time = time.time()
    try:
        yield
    finally:
        elapsed_time = time.time() - start_time
        if verbose:
            print(
                f"{dim} {elapsed_time:.3f}s{reset}",
                file=sys.stderr,
                flush=True,
            )


def warn(message: str) -> None:
    print(
        f"{colorama.Fore.YELLOW}{program_name}: {message}{colorama.Style.RESET_ALL}",
        file=sys.stderr,
    )


def error(message: str) -> None:
    print(
        f"{colorama.Fore.RED}{program_name}: {message}{colorama.Style.RESET_ALL}",
        file=sys.stderr,
    )


def load_dotenv() -> None:
    """Load environment variables from the nearest '.env'."""
    # Look for ".env" in current directory and up until root.
    cur_dir = os.path.abspath(os.getcwd())
    while True:
        path = os.path.join(cur_dir, ".env")
        if os.path.exists(path):
            dotenv.load_dotenv(path)
            return
        parent_dir = os.path.dirname(cur_dir)
        if parent_dir == cur_dir:
            break  # Reached filesystem root ('/').
        cur_dir = parent_dir
