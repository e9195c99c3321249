#!/usr/bin/env python3
"""
dupcheck CLI: command line interface for duplicate file detection.
Scans a directory tree and reports every group of files with identical content.
The scan is read-only: files are never moved, linked or deleted.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import threading
import time
from typing import Optional, NoReturn

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

# === EARLY DEPENDENCY VALIDATION ===
try:
    import xxhash  # noqa: F401
except ImportError:
    print("❌ Missing required dependency: xxhash", file=sys.stderr)
    print("   pip install xxhash", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupcheck import __version__
from dupcheck.commands import DuplicateScanCommand
from dupcheck.core.exceptions import ConfigError, ScanIOError
from dupcheck.core.models import ErrorPolicy, ScanParams, ScanResult
from dupcheck.utils.convert_utils import ConvertUtils
from dupcheck.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    IGNORE_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop_event = threading.Event()

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupcheck",
            description="dupcheck: find groups of files with identical content",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--path", "-p",
            default=".",
            type=str,
            help="Directory to check for duplicates. Default: current directory"
        )
        parser.add_argument(
            "--threads", "-t",
            default=1,
            type=int,
            metavar='',
            help="Number of worker threads (maximum concurrent scan units). Default: 1"
        )
        parser.add_argument(
            "--ignore", "-i",
            default="",
            type=str,
            metavar='',
            help=IGNORE_HELP_TEXT
        )
        parser.add_argument(
            "--full", "-f",
            action="store_true",
            help="Confirm every candidate group by hashing whole files"
        )
        parser.add_argument(
            "--limit", "-l",
            default="100KB",
            type=str,
            metavar='',
            help="Bytes hashed per file in the first pass (e.g., 64KB, 1MB). Default: 100KB"
        )
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="xxh128",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Abort the scan on the first unreadable file or directory\n"
                 "(default: skip it and report how many paths were skipped)"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress, skipped paths and detailed statistics"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        """Route engine log records to stderr at a level matching the output flags."""
        if os.environ.get("DEBUG"):
            level = logging.DEBUG
        elif self.quiet:
            level = logging.ERROR
        elif self.verbose:
            level = logging.INFO
        else:
            level = logging.WARNING
        logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before any scanning."""
        if args.threads < 1:
            self.error_exit(f"Number of threads must be at least 1, got {args.threads}")

        if not os.path.exists(args.path):
            self.error_exit(f"Directory not found: {args.path}")
        if not os.path.isdir(args.path):
            self.error_exit(f"Path is not a directory: {args.path}")

        if not ConvertUtils.is_valid_size_format(args.limit):
            self.error_exit(f"Invalid size format for --limit: {args.limit}")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams.from_human_readable(
                root_dir=os.path.abspath(args.path),
                threads=args.threads,
                ignore_str=args.ignore,
                full=args.full,
                limit_str=args.limit,
                algorithm=ALGORITHM_ALIASES[args.algorithm],
                error_policy=ErrorPolicy.ABORT if args.strict else ErrorPolicy.SKIP,
            )
        except ConfigError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} processed...")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """True once the user has interrupted the scan."""
        return self._stop_event.is_set()

    def run_scan(self, params: ScanParams) -> ScanResult:
        """Execute the scan workflow."""
        command = DuplicateScanCommand()
        if self.verbose:
            mode = "prefix + full verification" if params.full_verification else "prefix only"
            print(f"Finding duplicates ({mode}, {params.algorithm.display_name}, {params.max_concurrency} threads)...")

        try:
            result = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except KeyboardInterrupt:
            self._stop_event.set()
            raise
        except (ConfigError, ScanIOError) as e:
            self.error_exit(f"Scan failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print(result.stats.print_summary())

        return result

    def output_results(self, result: ScanResult) -> None:
        """Print each group's hash and paths, then the group count."""
        for group in result.groups:
            print(group.hex_hash)
            for file in group.files:
                print(f"\t{file.path}")
        print(f"Duplicated files: {result.group_count}")

        if self.verbose and result.groups:
            wasted = sum(group.wasted_bytes for group in result.groups)
            print(f"Space held by extra copies: {ConvertUtils.bytes_to_human(wasted)}")

        if result.skipped:
            print(f"Skipped paths: {len(result.skipped)}")
            if self.verbose:
                for skipped in result.skipped:
                    print(f"   {skipped.path}: {skipped.reason}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            print(f"Scanning directory: {params.root_dir}")

        result = self.run_scan(params)
        self.output_results(result)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
