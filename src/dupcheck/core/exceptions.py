"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Error types raised by the duplicate scan engine.

ConfigError and PathError are raised before any scanning begins.
ScanIOError wraps an OSError raised while walking or hashing and always
names the path that failed.
"""


class DupCheckError(Exception):
    """Base class for all dupcheck errors."""


class ConfigError(DupCheckError, ValueError):
    """Invalid scan parameters (concurrency bound, limits, algorithm)."""


class PathError(ConfigError):
    """Starting path is missing or is not a directory."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class ScanIOError(DupCheckError):
    """A file or directory could not be read during the scan."""

    def __init__(self, path: str, error: OSError):
        reason = error.strerror or str(error)
        super().__init__(f"Error reading {path}: {reason}")
        self.path = path
        self.reason = reason
