"""
Tests for formatting helpers used in reports and prompts.
"""
from deldup.utils.convert_utils import ConvertUtils


class TestBytesToHuman:

    def test_bytes(self):
        assert ConvertUtils.bytes_to_human(500) == "500.00B"

    def test_kilobytes_and_megabytes(self):
        assert ConvertUtils.bytes_to_human(1024) == "1.00KB"
        assert ConvertUtils.bytes_to_human(1536) == "1.50KB"
        assert ConvertUtils.bytes_to_human(5 * 1024 * 1024) == "5.00MB"

    def test_negative_is_zero(self):
        assert ConvertUtils.bytes_to_human(-1) == "0B"


class TestPlural:

    def test_singular(self):
        assert ConvertUtils.plural(1, "file") == "1 file"

    def test_zero_and_many_are_plural(self):
        assert ConvertUtils.plural(0, "error") == "0 errors"
        assert ConvertUtils.plural(2, "checksum") == "2 checksums"

    def test_digit_grouping(self):
        assert ConvertUtils.plural(1234567, "byte") == "1,234,567 bytes"
        assert ConvertUtils.group_digits(999) == "999"


class TestTimestampToHuman:

    def test_custom_format(self):
        assert ConvertUtils.timestamp_to_human(0, fmt="%Y") in ("1969", "1970")

    def test_invalid_timestamp(self):
        assert ConvertUtils.timestamp_to_human(1e20) == "Invalid timestamp"
