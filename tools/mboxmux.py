#!/usr/bin/env python3
# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""
Mbox Split Tool

Distributes the messages of one or more mbox files over output files,
one mbox file per value of a header.

Usage:
    python tools/mboxmux.py --header X-Gmail-Labels -d out/ all.mbox
    python tools/mboxmux.py --header X-Gmail-Labels --tokentrim ,Opened all.mbox
    python tools/mboxmux.py --header List-Id --default unlisted a.mbox b.mbox

The exit status is the number of failures (unreadable input files plus
output files that could not be written).
"""

import argparse
import os
import sys

from colorama import init as colorama_init
from pydantic import ValidationError

from mboxed import utils
from mboxed.errors import EmptyMboxError, MboxError
from mboxed.reader import iter_file
from mboxed.settings import MuxSettings, env_defaults
from mboxed.split import SplitWriter, header_key


def create_arg_parser() -> argparse.ArgumentParser:
    """Create argument parser for the split tool."""
    parser = argparse.ArgumentParser(
        description="Split mbox files into one mbox file per header value",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("files", nargs="*", help="Path to one or more mbox files")

    parser.add_argument(
        "--header",
        metavar="NAME",
        help="Define the header used for file distribution",
    )
    parser.add_argument(
        "-d",
        "--out-dir",
        metavar="DIRECTORY",
        help="Set the directory for output files (default: .)",
    )
    parser.add_argument(
        "--escape",
        metavar="REPLACEMENT",
        help=f"Set the replacement for {os.sep!r} occurrences in output files (default: _)",
    )
    parser.add_argument(
        "--default",
        dest="default_key",
        metavar="FILE_NAME",
        help=(
            "Set a default output file name for messages that would have been "
            "omitted otherwise, which are no name, . and .. specifically"
        ),
    )
    parser.add_argument(
        "--tokentrim",
        dest="token_trims",
        metavar="PATTERN",
        action="append",
        default=[],
        help=(
            "Add a pattern for token omission on the output files. The first "
            "character in the pattern defines the token separator, and the "
            "remainder sets the token to be excluded. E.g., --tokentrim ,Opened "
            "turns Inbox,Opened,Important into Inbox,Important. May be repeated."
        ),
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        metavar="BYTES",
        help="Set the read buffer size, which bounds the From_ line length",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show verbose/debug output"
    )

    return parser


def make_settings(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> MuxSettings:
    """Merge environment defaults with command-line options."""
    values: dict[str, object] = dict(env_defaults())
    for field in ("header", "out_dir", "escape", "default_key", "buffer_size"):
        value = getattr(args, field)
        if value is not None:
            values[field] = value
    values["token_trims"] = args.token_trims
    values.setdefault("header", "")
    try:
        return MuxSettings(**values)  # type: ignore[arg-type]
    except ValidationError as err:
        messages = "; ".join(e["msg"] for e in err.errors())
        parser.error(messages)


def split_files(files: list[str], settings: MuxSettings, verbose: bool = False) -> int:
    """Split the files as configured. Returns the number of failures."""
    failures = 0
    try:
        os.makedirs(settings.out_dir, exist_ok=True)
    except OSError as err:
        utils.error(str(err))
        return 1

    with SplitWriter(
        settings.out_dir,
        header_key(settings.header, settings.token_trims),
        escape=settings.escape,
        default_key=settings.default_key,
    ) as split:
        for path in files:
            count = 0
            try:
                with utils.timelog(path, verbose):
                    for entry in iter_file(path, settings.buffer_size):
                        split.write(entry)
                        count += 1
            except EmptyMboxError as err:
                utils.warn(str(err))
            except MboxError as err:
                utils.error(str(err))
                failures += 1
            except OSError as err:
                # Output could not be created; no point in trying more files.
                utils.error(str(err))
                failures += 1
                break
            if verbose:
                print(f"  {count} messages from {path}", file=sys.stderr)

        failures += split.close()
        if verbose:
            print(
                f"Wrote {split.written} messages, skipped {split.skipped}",
                file=sys.stderr,
            )

    return failures


def main() -> None:
    """Main entry point."""
    colorama_init()
    utils.program_name = "mboxmux"
    parser = create_arg_parser()
    args = parser.parse_args()
    settings = make_settings(parser, args)

    sys.exit(split_files(args.files, settings, args.verbose))


if __name__ == "__main__":
    main()
