#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import errno
import os
from datetime import datetime, timezone

from stamp_options import TimestampTypes

# --- CONFIGURATION ---
FIELD_ORDER = (
    TimestampTypes.CREATION_TIME,
    TimestampTypes.LAST_ACCESS_TIME,
    TimestampTypes.LAST_WRITE_TIME,
)
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SUPPORTS_CREATION_TIME = os.name == "nt"


class UnsupportedTimestampError(OSError):
    """The host API has no way to write this timestamp field."""


def _as_utc(moment):
    # Naive datetimes are local time.
    return moment.astimezone(timezone.utc)


def to_ns(moment):
    delta = _as_utc(moment) - UNIX_EPOCH
    return (delta.days * 86400 + delta.seconds) * 10**9 + delta.microseconds * 1000


# ==========================================================
# WINDOWS FILETIME HELPERS
# ==========================================================
if os.name == "nt":
    import pywintypes
    import win32con
    import win32file

    def _open_handle(path):
        # SetFileTime only needs FILE_WRITE_ATTRIBUTES, which read-only files grant.
        # FILE_FLAG_BACKUP_SEMANTICS is required to open directories.
        return win32file.CreateFile(
            str(path),
            win32con.FILE_WRITE_ATTRIBUTES,
            win32con.FILE_SHARE_READ | win32con.FILE_SHARE_WRITE | win32con.FILE_SHARE_DELETE,
            None,
            win32con.OPEN_EXISTING,
            win32con.FILE_FLAG_BACKUP_SEMANTICS,
            None,
        )

    def set_timestamp(path, timestamp_type, moment):
        """Sets one of creation/access/write time through SetFileTime."""
        when = pywintypes.Time(_as_utc(moment))
        creation = when if timestamp_type is TimestampTypes.CREATION_TIME else None
        access = when if timestamp_type is TimestampTypes.LAST_ACCESS_TIME else None
        write = when if timestamp_type is TimestampTypes.LAST_WRITE_TIME else None
        try:
            handle = _open_handle(path)
            try:
                win32file.SetFileTime(handle, creation, access, write, True)
            finally:
                handle.Close()
        except pywintypes.error as e:
            raise OSError(e.winerror, e.strerror, str(path)) from e
else:
    def set_timestamp(path, timestamp_type, moment):
        """Sets access or write time with os.utime, leaving the other one as it was."""
        if timestamp_type is TimestampTypes.CREATION_TIME:
            raise UnsupportedTimestampError(
                errno.ENOTSUP, "Creation time cannot be set on this platform", str(path)
            )
        stamp = to_ns(moment)
        current = os.stat(path)
        if timestamp_type is TimestampTypes.LAST_ACCESS_TIME:
            os.utime(path, ns=(stamp, current.st_mtime_ns))
        else:
            os.utime(path, ns=(current.st_atime_ns, stamp))


def set_timestamps(path, timestamp_types, moment, strict=False):
    """
    Writes every selected field of `path`, each one on its own.

    A field the platform rejects does not stop the remaining ones; the first
    failure is raised once all fields were attempted. Fields the platform
    cannot write at all are skipped and returned, unless `strict` is set, in
    which case they count as failures.
    """
    skipped = TimestampTypes.NONE
    failures = []
    for timestamp_type in FIELD_ORDER:
        if timestamp_type not in timestamp_types:
            continue
        try:
            set_timestamp(path, timestamp_type, moment)
        except UnsupportedTimestampError as e:
            if strict:
                failures.append(e)
            else:
                skipped |= timestamp_type
        except OSError as e:
            failures.append(e)

    if failures:
        raise failures[0]
    return skipped
