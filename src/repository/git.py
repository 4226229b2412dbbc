"""Shallow git checkout of a single revision."""
from __future__ import annotations

import logging
import os
import shutil

from common.executor import Executor

logger = logging.getLogger(__name__)


def checkout_git_hash(executor: Executor, git_url: str, git_hash: str, directory: str) -> None:
    """Fetch ``git_hash`` from ``git_url`` into ``directory`` with depth 1."""
    if os.path.isdir(directory):
        shutil.rmtree(directory)
    os.makedirs(directory)
    logger.info("Checking out %s into %s", git_hash, directory)
    for command in (
        ["git", "init"],
        ["git", "remote", "add", "origin", git_url],
        ["git", "fetch", "--depth", "1", "origin", git_hash],
        ["git", "checkout", "FETCH_HEAD"],
    ):
        executor.run(command, cwd=directory)
