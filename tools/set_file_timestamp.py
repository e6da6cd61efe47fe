#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import fnmatch
import os
import sys

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import stamp_filetime
from stamp_errors import StampError
from stamp_options import FileTypes, StampConfig, apply_option, classify_operand

# File Timestamp Setter
# Overwrites creation, access and write times of files and folders.

# --- CONFIGURATION ---
MATCH_ALL_PATTERNS = {"*", "*.*"}
FILE_TAG = "F"
DIRECTORY_TAG = "D"

console = Console(highlight=False, emoji=False)
err_console = Console(stderr=True, highlight=False, emoji=False)

USAGE_OPTIONS = [
    ("/F:types", "file types to process (default: CDS)",
     ["C - file", "D - directory", "S - subfolders and files"]),
    ("/S:options", "timestamp types to set (default: CAW)",
     ["C - creation time", "A - last access time", "W - last write time"]),
    ("/T:dateTime", "date/time to use (default: now)", []),
    ("/C:cultureNameOrLCID", "culture used to parse and display timestamps (default: current)", []),
    ("/P:searchPattern", "file search filter (default: *.*)", []),
    ("/R", "enable recursive folder search (default: disabled)", []),
    ("/V", "enable verbose mode (default: disabled)", []),
]

USAGE_EXAMPLES = [
    ("overwrite dates of specified files", '"README.md" "LICENSE.md"'),
    ("overwrite creation time of specified directory, its subfolders and files",
     '/S:C "/T:5/11/2020 11:54:34 AM" "docs"'),
    ("overwrite dates of text files contained inside specified directory", '/F:C /R "/P:*.txt" "docs"'),
    ("overwrite dates of subfolders contained inside specified directory", '/F:S /R "docs"'),
    ("overwrite dates of specified directory", '/F:D "docs"'),
]


def print_usage():
    console.print(escape("set-file-timestamp [options...] <files or folders...>"), soft_wrap=True)

    opt_table = Table(title="[Options]", box=box.SIMPLE, show_header=False, title_justify="left", title_style="bold cyan")
    opt_table.add_column(no_wrap=True)
    opt_table.add_column()
    for flag, text, choices in USAGE_OPTIONS:
        detail = "\n".join([escape(text)] + [f"  [dim]{escape(c)}[/]" for c in choices])
        opt_table.add_row(f"[bold cyan]{escape(flag)}[/]", detail)

    ex_table = Table(title="[Examples]", box=box.SIMPLE, show_header=False, title_justify="left", title_style="bold green")
    ex_table.add_column(no_wrap=True)
    ex_table.add_column()
    for i, (text, cmd) in enumerate(USAGE_EXAMPLES, 1):
        ex_table.add_row(f"{i}.", f"{escape(text)}:\n  [bold]{escape(cmd)}[/]")

    console.print(opt_table)
    console.print(ex_table)


def notify(message):
    console.print(message, markup=False, soft_wrap=True)


def matches_pattern(name, pattern):
    if pattern in MATCH_ALL_PATTERNS:
        return True
    return fnmatch.fnmatch(name, pattern)


def _abort_walk(error):
    # os.walk ignores unreadable directories by default; a missing or unreadable operand must fail the run
    raise error


def iter_matching(directory, pattern, recursive, directories=False):
    """Yields files (or subfolders) under directory whose name matches pattern."""
    for root, dirs, files in os.walk(directory, onerror=_abort_walk):
        for name in (dirs if directories else files):
            if matches_pattern(name, pattern):
                yield os.path.join(root, name)
        if not recursive:
            break


def stamp_entry(config, path, tag):
    """Writes the selected timestamps of one entry. Returns 1 if a field had to be skipped."""
    full_path = os.path.abspath(path)
    if config.verbose:
        notify(f"{config.culture.format(config.moment)}  {tag}  {full_path}")

    skipped = stamp_filetime.set_timestamps(
        full_path, config.timestamp_types, config.moment, strict=config.timestamp_types_explicit
    )
    return 1 if skipped else 0


def process_directory(config, directory):
    skipped = 0
    if FileTypes.FILE in config.file_types:
        for path in iter_matching(directory, config.search_pattern, config.recursive):
            skipped += stamp_entry(config, path, FILE_TAG)

    if FileTypes.DIRECTORY_CONTENTS in config.file_types:
        for path in iter_matching(directory, config.search_pattern, config.recursive, directories=True):
            skipped += stamp_entry(config, path, DIRECTORY_TAG)

    if FileTypes.DIRECTORY in config.file_types:
        skipped += stamp_entry(config, directory, DIRECTORY_TAG)
    return skipped


def process_file(config, path):
    if FileTypes.FILE not in config.file_types:
        return 0
    return stamp_entry(config, path, FILE_TAG)


def run(args, config=None):
    """
    Walks args left to right. Options update config, paths are processed
    with whatever config is in effect when they are reached.
    Returns the number of entries on which a field was skipped.
    """
    if config is None:
        config = StampConfig()

    skipped = 0
    for index, token in enumerate(args):
        if apply_option(config, token, notify=notify):
            continue
        if classify_operand(token, index) == "directory":
            skipped += process_directory(config, token)
        else:
            skipped += process_file(config, token)
    return skipped


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print_usage()
        return 0

    try:
        skipped = run(args)
    except (StampError, OSError, ValueError, OverflowError) as e:
        err_console.print(str(e), markup=False, soft_wrap=True)
        return 1

    if skipped:
        err_console.print(
            f"⚠️  Creation time cannot be set on this platform, skipped it on {skipped} entries.",
            markup=False, soft_wrap=True,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
