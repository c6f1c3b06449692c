"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import time


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.5KB, 3.2MB).
        """
        if size_bytes < 0:
            return "0B"

        units = ["B", "KB", "MB", "GB", "TB", "PB"]
        for unit in units:
            if size_bytes < 1024:
                return f"{size_bytes:.2f}{unit}"
            size_bytes /= 1024
        return f"{size_bytes:.2f}EB"

    @staticmethod
    def group_digits(value: int) -> str:
        """Format an integer with comma digit grouping (1234567 -> '1,234,567')."""
        return f"{value:,}"

    @staticmethod
    def plural(count: int, noun: str) -> str:
        """
        Count followed by a noun in singular or plural form.
        plural(1, "file") -> "1 file", plural(1500, "byte") -> "1,500 bytes"
        """
        suffix = "" if count == 1 else "s"
        return f"{ConvertUtils.group_digits(count)} {noun}{suffix}"

    @staticmethod
    def timestamp_to_human(timestamp: float, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """
        Convert a Unix timestamp to a human-readable string.
        Uses local time by default.
        """
        try:
            return time.strftime(fmt, time.localtime(timestamp))
        except (OverflowError, OSError, ValueError):
            return "Invalid timestamp"
