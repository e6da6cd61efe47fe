import unittest
from unittest.mock import patch
import os
import stat
import sys
import tempfile
from datetime import datetime, timedelta, timezone

# Add parent dir to path so we can import stamp_filetime
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import stamp_filetime
from stamp_options import TimestampTypes

BASELINE = 1_000_000_000 * 10**9


class TestToNs(unittest.TestCase):

    def test_epoch(self):
        self.assertEqual(stamp_filetime.to_ns(datetime(1970, 1, 1, tzinfo=timezone.utc)), 0)

    def test_sub_second(self):
        moment = datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)
        self.assertEqual(stamp_filetime.to_ns(moment), 1_500_000_000)

    def test_naive_is_local_time(self):
        moment = datetime(2020, 5, 11, 11, 54, 34)
        self.assertEqual(stamp_filetime.to_ns(moment), int(moment.timestamp()) * 10**9)

    def test_offset(self):
        moment = datetime(1970, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(stamp_filetime.to_ns(moment), 0)


class TestSetTimestamps(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "target.bin")
        with open(self.path, "wb") as f:
            f.write(b"\x00")
        os.utime(self.path, ns=(BASELINE, BASELINE))
        self.moment = datetime(2020, 5, 11, 11, 54, 34)
        self.expected = stamp_filetime.to_ns(self.moment)

    def tearDown(self):
        self.tmp.cleanup()

    def test_write_time_only(self):
        stamp_filetime.set_timestamps(self.path, TimestampTypes.LAST_WRITE_TIME, self.moment)
        st = os.stat(self.path)
        self.assertEqual(st.st_mtime_ns, self.expected)
        self.assertEqual(st.st_atime_ns, BASELINE)

    def test_access_time_only(self):
        stamp_filetime.set_timestamps(self.path, TimestampTypes.LAST_ACCESS_TIME, self.moment)
        st = os.stat(self.path)
        self.assertEqual(st.st_atime_ns, self.expected)
        self.assertEqual(st.st_mtime_ns, BASELINE)

    def test_directory(self):
        stamp_filetime.set_timestamps(self.tmp.name, TimestampTypes.LAST_WRITE_TIME, self.moment)
        self.assertEqual(os.stat(self.tmp.name).st_mtime_ns, self.expected)

    def test_nothing_selected(self):
        skipped = stamp_filetime.set_timestamps(self.path, TimestampTypes.NONE, self.moment)
        self.assertEqual(skipped, TimestampTypes.NONE)
        self.assertEqual(os.stat(self.path).st_mtime_ns, BASELINE)

    @unittest.skipIf(os.name == "nt", "creation time is settable on Windows")
    def test_creation_time_is_skipped_on_posix(self):
        skipped = stamp_filetime.set_timestamps(self.path, TimestampTypes.ALL, self.moment)
        self.assertEqual(skipped, TimestampTypes.CREATION_TIME)
        st = os.stat(self.path)
        self.assertEqual(st.st_atime_ns, self.expected)
        self.assertEqual(st.st_mtime_ns, self.expected)

    @unittest.skipIf(os.name == "nt", "creation time is settable on Windows")
    def test_strict_creation_time_is_an_error_on_posix(self):
        with self.assertRaises(stamp_filetime.UnsupportedTimestampError):
            stamp_filetime.set_timestamps(self.path, TimestampTypes.ALL, self.moment, strict=True)
        # The other fields are still written before the error surfaces
        st = os.stat(self.path)
        self.assertEqual(st.st_atime_ns, self.expected)
        self.assertEqual(st.st_mtime_ns, self.expected)

    def test_read_only_file(self):
        os.chmod(self.path, stat.S_IREAD)
        try:
            stamp_filetime.set_timestamps(self.path, TimestampTypes.LAST_WRITE_TIME, self.moment)
        finally:
            os.chmod(self.path, stat.S_IREAD | stat.S_IWRITE)
        self.assertEqual(os.stat(self.path).st_mtime_ns, self.expected)

    @patch("stamp_filetime.set_timestamp")
    def test_fields_fail_independently(self, mock_set):
        # First field fails, the remaining ones are still written
        mock_set.side_effect = [PermissionError(13, "Permission denied"), None, None]
        with self.assertRaises(PermissionError):
            stamp_filetime.set_timestamps(self.path, TimestampTypes.ALL, self.moment)
        self.assertEqual(mock_set.call_count, 3)
        fields = [c[0][1] for c in mock_set.call_args_list]
        self.assertEqual(fields, list(stamp_filetime.FIELD_ORDER))

    @patch("stamp_filetime.set_timestamp")
    def test_first_failure_is_raised(self, mock_set):
        first = OSError(22, "first")
        mock_set.side_effect = [None, first, OSError(22, "second")]
        with self.assertRaises(OSError) as ctx:
            stamp_filetime.set_timestamps(self.path, TimestampTypes.ALL, self.moment)
        self.assertIs(ctx.exception, first)

    def test_missing_path(self):
        with self.assertRaises(OSError):
            stamp_filetime.set_timestamps(os.path.join(self.tmp.name, "gone"), TimestampTypes.LAST_WRITE_TIME, self.moment)


if __name__ == "__main__":
    unittest.main()
