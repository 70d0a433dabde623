#!/usr/bin/env python3
# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Mbox Dump Tool

Extract the messages of an mbox file into individual .eml files.
Each message is written as found in the mbox file, without its From_ line,
to a file numbered after its position (000001.eml, 000002.eml, ...).

Usage:
    python tools/mbox_dump.py mailbox.mbox
    python tools/mbox_dump.py mailbox.mbox --output-dir ./emails
"""

import argparse
from pathlib import Path
import sys

from colorama import init as colorama_init

from mboxed import utils
from mboxed.errors import EmptyMboxError, MboxError
from mboxed.reader import DEFAULT_BUFFER_SIZE, iter_file


def dump_mbox(
    mbox_path: str,
    output_dir: str | None = None,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Extract the messages of an mbox file into individual .eml files.

    Args:
        mbox_path: Path to the mbox file.
        output_dir: Directory to write .eml files to. If None, a directory
            with the same name as the mbox file (without extension) is created
            alongside the mbox file.
        buffer_size: Read buffer size, which bounds the From_ line length.

    Returns:
        The number of messages extracted.

    Raises:
        MboxError: The file could not be read as an mbox file. Files written
            before the failure are kept.
    """
    mbox_file = Path(mbox_path)
    if output_dir is None:
        out_path = mbox_file.parent / mbox_file.stem
    else:
        out_path = Path(output_dir)

    out_path.mkdir(parents=True, exist_ok=True)

    count = 0
    for entry in iter_file(mbox_file, buffer_size):
        count += 1
        eml_path = out_path / f"{count:06d}.eml"
        eml_path.write_bytes(entry.raw)

    return count


def main() -> None:
    colorama_init()
    utils.program_name = "mbox_dump"
    parser = argparse.ArgumentParser(
        description="Extract the messages of an mbox file into individual .eml files",
    )
    parser.add_argument(
        "mbox",
        help="Path to the mbox file to extract",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory for .eml files (default: next to the mbox file)",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=DEFAULT_BUFFER_SIZE,
        help=f"Read buffer size in bytes (default: {DEFAULT_BUFFER_SIZE})",
    )
    args = parser.parse_args()

    try:
        count = dump_mbox(args.mbox, args.output_dir, args.buffer_size)
    except EmptyMboxError as err:
        utils.warn(str(err))
        count = 0
    except MboxError as err:
        utils.error(str(err))
        sys.exit(1)

    out_dir = (
        args.output_dir
        if args.output_dir
        else str(Path(args.mbox).parent / Path(args.mbox).stem)
    )
    print(f"Extracted {count} emails to {out_dir}/")


if __name__ == "__main__":
    main()
