#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import enum
import os
from dataclasses import dataclass, field
from datetime import datetime

import stamp_culture
from stamp_errors import UnrecognizedArgumentError, UnrecognizedOptionError

# --- CONFIGURATION ---
DEFAULT_SEARCH_PATTERN = "*.*"

FILE_TYPE_LETTERS = {"C": "FILE", "D": "DIRECTORY", "S": "DIRECTORY_CONTENTS"}
TIMESTAMP_TYPE_LETTERS = {"C": "CREATION_TIME", "A": "LAST_ACCESS_TIME", "W": "LAST_WRITE_TIME"}


class FileTypes(enum.Flag):
    NONE = 0
    FILE = 1
    DIRECTORY = 2
    DIRECTORY_CONTENTS = 4
    ALL = FILE | DIRECTORY | DIRECTORY_CONTENTS


class TimestampTypes(enum.Flag):
    NONE = 0
    CREATION_TIME = 1
    LAST_ACCESS_TIME = 2
    LAST_WRITE_TIME = 4
    ALL = CREATION_TIME | LAST_ACCESS_TIME | LAST_WRITE_TIME


@dataclass
class StampConfig:
    """Settings in effect while walking the argument list."""
    file_types: FileTypes = FileTypes.ALL
    timestamp_types: TimestampTypes = TimestampTypes.ALL
    moment: datetime = field(default_factory=datetime.now)
    culture: "stamp_culture.Culture" = field(default_factory=stamp_culture.default_culture)
    search_pattern: str = DEFAULT_SEARCH_PATTERN
    recursive: bool = False
    verbose: bool = False
    # set once /S: names the fields, so an unsupported one is an error rather than skipped
    timestamp_types_explicit: bool = False


def _parse_letters(letters, mapping, flag_type, label):
    selected = flag_type.NONE
    for letter in letters:
        if letter not in mapping:
            raise UnrecognizedOptionError(f"Unrecognized {label} '{letter}'.")
        selected |= flag_type[mapping[letter]]
    return selected


def parse_file_types(letters):
    return _parse_letters(letters, FILE_TYPE_LETTERS, FileTypes, "file type")


def parse_timestamp_types(letters):
    return _parse_letters(letters, TIMESTAMP_TYPE_LETTERS, TimestampTypes, "timestamp type")


def apply_option(config, token, notify=None):
    """
    Applies a single option token to config.

    Returns True when the token was an option, False when it should be
    treated as a path operand. `notify` receives the informational lines
    printed for /T: and /C: in verbose mode.
    """
    if token.startswith("/F:"):
        config.file_types = parse_file_types(token[len("/F:"):])
    elif token.startswith("/S:"):
        config.timestamp_types = parse_timestamp_types(token[len("/S:"):])
        config.timestamp_types_explicit = True
    elif token.startswith("/T:"):
        config.moment = config.culture.parse(token[len("/T:"):])
        if config.verbose and notify:
            notify(f"timestamp: {config.culture.format(config.moment)}")
    elif token.startswith("/C:"):
        config.culture = stamp_culture.resolve_culture(token[len("/C:"):])
        if config.verbose and notify:
            notify(f"culture: {config.culture.display_name}")
    elif token.startswith("/P:"):
        config.search_pattern = token[len("/P:"):]
    elif token == "/R":
        config.recursive = True
    elif token == "/V":
        config.verbose = True
    else:
        return False
    return True


def classify_operand(token, index):
    """Returns 'directory' or 'file' for an existing path, raises otherwise."""
    if os.path.isdir(token):
        return "directory"
    if os.path.isfile(token):
        return "file"
    raise UnrecognizedArgumentError(token, index)
