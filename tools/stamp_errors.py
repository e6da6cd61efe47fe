#!/usr/bin/env python3
# -*- coding: utf-8 -*-


class StampError(Exception):
    """Base class for every error the tool reports itself."""


class UnrecognizedOptionError(StampError):
    pass


class DateTimeParseError(StampError):
    pass


class UnknownLocaleError(StampError):
    pass


class UnrecognizedArgumentError(StampError):
    def __init__(self, argument, index):
        super().__init__(f"Unrecognized argument '{argument}' at index {index}.")
        self.argument = argument
        self.index = index
