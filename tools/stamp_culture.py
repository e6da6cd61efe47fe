#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import re
from datetime import datetime
from locale import windows_locale

from babel import Locale, UnknownLocaleError as BabelLocaleError, default_locale
from babel.dates import format_date, format_time, get_datetime_format
from dateutil import parser as date_parser

from stamp_errors import DateTimeParseError, UnknownLocaleError

# --- CONFIGURATION ---
FALLBACK_LOCALE = "en_US"
QUOTED_LITERAL = re.compile(r"'[^']*'")
ISO_DATE = re.compile(r"^\s*\d{4}-\d{1,2}-\d{1,2}")
# Two defaults that differ in year, month and day. A date part missing from
# the input shows up as a difference between the two parses.
DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 2, 2))

# Culture-aware parsing and display of the target timestamp.
# Locale data comes from CLDR through Babel, the parser is dateutil's fed with
# the locale's month/day names and field order.


class LocaleParserInfo(date_parser.parserinfo):
    """dateutil parserinfo seeded with a Babel locale's names and field order."""

    def __init__(self, locale):
        self.MONTHS = _merge_names(date_parser.parserinfo.MONTHS, locale.months, 1)
        months = _names_of(self.MONTHS)
        # dateutil looks weekdays up first, so a short weekday equal to a month name would shadow it
        self.WEEKDAYS = _merge_names(date_parser.parserinfo.WEEKDAYS, locale.days, 0, exclude=months)
        self.AMPM = _merge_day_periods(date_parser.parserinfo.AMPM, locale.day_periods)
        taken = months | _names_of(self.WEEKDAYS) | _names_of(self.AMPM) | _names_of(self.HMS)
        self.JUMP = list(date_parser.parserinfo.JUMP) + sorted(_pattern_words(locale) - taken)
        dayfirst, yearfirst = field_order(locale.date_formats["short"].pattern)
        super().__init__(dayfirst=dayfirst, yearfirst=yearfirst)


def _clean(name):
    return name.strip().rstrip(".")


def _names_of(table):
    return {name.lower() for names in table for name in names}


def _merge_names(defaults, names, offset, exclude=frozenset()):
    fmt = names.get("format", {})
    merged = []
    for i, base in enumerate(defaults):
        found = {name for name in base if name.lower() not in exclude}
        for width in ("wide", "abbreviated"):
            value = fmt.get(width, {}).get(i + offset)
            if value and _clean(value) and _clean(value).lower() not in exclude:
                found.add(_clean(value))
        merged.append(tuple(sorted(found)))
    return merged


def _merge_day_periods(defaults, periods):
    abbreviated = periods.get("format", {}).get("abbreviated", {})
    merged = []
    for base, key in zip(defaults, ("am", "pm")):
        found = set(base)
        value = abbreviated.get(key)
        if value and _clean(value):
            found.add(_clean(value))
        merged.append(tuple(sorted(found)))
    return merged


def _pattern_words(locale):
    """Words quoted in the locale's long date patterns, e.g. es 'de' in "d 'de' MMMM 'de' y"."""
    patterns = [locale.date_formats[width].pattern for width in ("full", "long", "medium")]
    patterns += [str(locale.datetime_formats.get(width, "")) for width in ("full", "long")]
    words = set()
    for pattern in patterns:
        for literal in QUOTED_LITERAL.findall(pattern):
            words.update(w.lower() for w in literal.strip("'").split() if w.isalpha())
    return words


def field_order(pattern):
    r"""
    Derives dateutil's (dayfirst, yearfirst) from a CLDR short date pattern.
    Example: 'M/d/yy' -> (False, False), 'dd.MM.yy' -> (True, False),
    'y/MM/dd' -> (False, True)
    """
    pattern = QUOTED_LITERAL.sub("", pattern)
    month = _first_index(pattern, "ML")
    day = _first_index(pattern, "d")
    year = _first_index(pattern, "yY")
    return day < month, year < month


def _first_index(pattern, letters):
    hits = [pattern.find(c) for c in letters if c in pattern]
    return min(hits) if hits else len(pattern)


class Culture:
    """Parses and formats timestamps under one locale."""

    def __init__(self, locale):
        self.locale = locale
        self._parserinfo = LocaleParserInfo(locale)

    @property
    def name(self):
        return str(self.locale)

    @property
    def display_name(self):
        return self.locale.display_name or self.name

    def parse(self, text):
        """
        Parses text in this culture. A day, a month and a year are required;
        a missing time means midnight. ISO dates (2020-05-11) are always
        read year-month-day, whatever the culture's field order.
        """
        options = {"dayfirst": False, "yearfirst": True} if ISO_DATE.match(text) else {}
        try:
            first, second = [
                date_parser.parse(text, parserinfo=self._parserinfo, default=default, **options)
                for default in DATE_DEFAULTS
            ]
        except (ValueError, OverflowError) as e:
            raise self._parse_error(text) from e

        if first.date() != second.date():
            raise self._parse_error(text)
        return first

    def _parse_error(self, text):
        return DateTimeParseError(
            f"String '{text}' was not recognized as a valid DateTime for culture {self.name}."
        )

    def format(self, moment):
        # Full date + medium time: the long form without a time zone name.
        combined = get_datetime_format("full", locale=self.locale).replace("'", "")
        return (combined
                .replace("{0}", format_time(moment, "medium", locale=self.locale))
                .replace("{1}", format_date(moment, "full", locale=self.locale)))

    def __repr__(self):
        return f"Culture({self.name!r})"


def _load(identifier):
    return Culture(Locale.parse(identifier.replace("-", "_")))


def resolve_culture(value):
    """Looks up a culture by Windows locale id (LCID) or by name."""
    try:
        lcid = int(value)
    except ValueError:
        name = value
    else:
        name = windows_locale.get(lcid)
        if name is None:
            raise UnknownLocaleError(f"Culture is not supported. {lcid} is an invalid culture identifier.")

    try:
        return _load(name)
    except (BabelLocaleError, ValueError) as e:
        raise UnknownLocaleError(f"Culture is not supported. '{value}' is an invalid culture identifier.") from e


def default_culture():
    """Culture of the running process (LC_TIME and friends), en_US when unset."""
    name = default_locale("LC_TIME") or FALLBACK_LOCALE
    try:
        return _load(name)
    except (BabelLocaleError, ValueError):
        return _load(FALLBACK_LOCALE)
