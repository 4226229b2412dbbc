"""Publishing step outputs and exported variables to the calling pipeline.

Values go to the files named by GITHUB_OUTPUT and GITHUB_ENV when the
pipeline provides them, and are printed otherwise.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Mapping, Optional

from constants import Constants

logger = logging.getLogger(__name__)


def _append_file_command(path: str, name: str, value: str) -> None:
    with open(path, "a", encoding="utf-8") as fh:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            fh.write(f"{name}={value}\n")


class OutputPublisher:
    """Writes outputs and environment exports for later pipeline steps."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        environ = os.environ if environ is None else environ
        self.output_file = environ.get(Constants.ENV_GITHUB_OUTPUT)
        self.env_file = environ.get(Constants.ENV_GITHUB_ENV)

    def set_output(self, name: str, value: str) -> None:
        logger.info("output %s=%s", name, value)
        if self.output_file:
            _append_file_command(self.output_file, name, value)
        else:
            print(f"{name}={value}")

    def export_variable(self, name: str, value: str) -> None:
        logger.info("export %s=%s", name, value)
        if self.env_file:
            _append_file_command(self.env_file, name, value)
        else:
            print(f"export {name}={value}")
