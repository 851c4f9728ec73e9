"""
Helpers shared by CLI commands.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def read_values(args: Namespace) -> list[bytes]:
    """
    Collect leaf values from positional arguments and/or --from-file.

    File values come first, one per line. Lines are split on LF only
    and lose one trailing CR; form feeds and other control characters
    stay part of the value. Empty lines are kept since the empty byte string is a
    valid leaf value, but a final newline does not add one.
    """
    values: list[bytes] = []
    if args.from_file:
        text = Path(args.from_file).read_bytes().decode("utf-8")
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        values.extend(line.removesuffix("\r").encode("utf-8") for line in lines)
    values.extend(v.encode("utf-8") for v in args.values)
    return values
