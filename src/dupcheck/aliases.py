from dupcheck.core.models import HashAlgorithmName

ALGORITHM_ALIASES = {
    "xxh128": HashAlgorithmName.XXH128,
    "xxhash": HashAlgorithmName.XXH128,
    "md5": HashAlgorithmName.MD5,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content hash algorithm (both produce 128-bit digests):\n"
    "  xxh128 : xxHash 128, fast non-cryptographic hash. Default\n"
    "  md5    : MD5, slower, matches digests from md5sum\n"
)

IGNORE_HELP_TEXT = (
    "Ignore extensions, separated by ';' or ',' (e.g. \".exe;.class\").\n"
    "Files with these extensions are never hashed or reported.\n"
    "Matching ignores case: \".tmp\" also skips \"report.TMP\""
)

EPILOG_TEXT = """
Examples:
  Find duplicates in the current directory
  %(prog)s

  Scan Downloads with 8 worker threads
  %(prog)s -p ~/Downloads -t 8

  Same as above, confirm every group byte-for-byte and skip build artifacts
  %(prog)s -p ~/Downloads -t 8 --full -i ".exe;.class"

  Fail on the first unreadable file instead of skipping it
  %(prog)s -p ~/Downloads --strict
"""
