"""Subprocess execution with an explicit environment overlay.

Variables set while preparing a build (e.g. PATH for a downloaded Ninja) are
kept in the executor instead of being written into ``os.environ``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Union

from common.logging_utils import redact

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


@dataclass
class Executor:
    """Runs commands with ``base_env`` (default: the process environment) plus ``overlay``."""

    overlay: Dict[str, str] = field(default_factory=dict)
    base_env: Optional[Mapping[str, str]] = None

    def environment(self) -> Dict[str, str]:
        """Return the effective environment for child processes."""
        env = dict(os.environ if self.base_env is None else self.base_env)
        env.update(self.overlay)
        return env

    def getenv(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.environment().get(name, default)

    def set_env(self, name: str, value: str) -> None:
        self.overlay[name] = value

    def prepend_path(self, directory: str) -> None:
        """Put ``directory`` in front of PATH for subsequent commands."""
        current = self.getenv("PATH", "")
        self.overlay["PATH"] = directory + (os.pathsep + current if current else "")

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name, path=self.getenv("PATH"))

    def run(self, command: Command, *, cwd: Optional[str] = None, capture: bool = False) -> str:
        """Run ``command``, raising CalledProcessError on a non-zero exit.

        String commands go through the shell; sequences are executed directly.

        Returns:
            Captured stdout when ``capture`` is set, otherwise an empty string.
        """
        shell = isinstance(command, str)
        printable = command if shell else " ".join(command)
        logger.info('Executing "%s"', redact(printable))
        result = subprocess.run(
            command,
            shell=shell,
            cwd=cwd,
            env=self.environment(),
            check=True,
            text=True,
            stdout=subprocess.PIPE if capture else None,
        )
        return result.stdout if capture and result.stdout else ""
