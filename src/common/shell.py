"""Command-line splitting and joining helpers."""

import shlex
from typing import List, Optional, Sequence


def shlex_split(text: Optional[str]) -> List[str]:
    """Split ``text`` the way a POSIX shell would; blank input gives []."""
    if not text or not text.strip():
        return []
    return shlex.split(text.strip())


def command_arglist_to_string(args: Sequence[str]) -> str:
    """Join arguments into a command string, double-quoting each one."""
    return " ".join(f'"{s}"' for s in args)
