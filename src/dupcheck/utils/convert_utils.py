"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size strings for --limit and the report, and hex rendering of content hashes.
"""
import re

# Binary units: 1KB == 1024 bytes
SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]
UNIT_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4, "P": 1024 ** 5}
SIZE_PATTERN = re.compile(r"^(-?\d*\.?\d+)\s*([KMGTP]?)B?$")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Render a byte count with two decimals in the largest fitting unit, e.g. 1.50KB.
        """
        if size_bytes < 0:
            return "0B"
        exponent = min((int(size_bytes).bit_length() - 1) // 10, len(SIZE_UNITS) - 1) if size_bytes else 0
        return f"{size_bytes / 1024 ** exponent:.2f}{SIZE_UNITS[exponent]}"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Parse '100KB', '1.5M', '4096' and similar into a byte count.
        Case and surrounding whitespace are ignored.

        Raises:
            ValueError: for negative sizes or strings that are not a size.
        """
        text = size_str.strip().upper()
        match = SIZE_PATTERN.match(text)
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 100KB, 1.5MB, 1G, 4096"
            )

        number, unit = match.groups()
        value = float(number) if "." in number else int(number)
        if value < 0:
            raise ValueError(f"Negative size not allowed: '{text}'")
        return int(value * UNIT_MULTIPLIERS[unit])

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        try:
            ConvertUtils.human_to_bytes(size_str)
        except ValueError:
            return False
        return True

    @staticmethod
    def hash_to_hex(digest: bytes) -> str:
        """Render a content hash as uppercase hex, two characters per byte."""
        return digest.hex().upper()
