"""Conversion helpers shared by the engine and the CLI."""

from .convert_utils import ConvertUtils

__all__ = ["ConvertUtils"]
