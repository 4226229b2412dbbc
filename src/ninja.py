"""Provision the Ninja build tool."""

from __future__ import annotations

import logging
import os
import stat
import zipfile

from common.executor import Executor
from common.http_client import download_file
from constants import BuildPlatform, Constants

logger = logging.getLogger(__name__)

_ZIP_FILENAMES = {
    BuildPlatform.LINUX: "ninja-linux.zip",
    BuildPlatform.MACOS: "ninja-mac.zip",
    BuildPlatform.WINDOWS: "ninja-win.zip",
}


def get_ninja_download_url(build_platform: BuildPlatform, version: str = Constants.NINJA_VERSION) -> str:
    return Constants.NINJA_DOWNLOAD_URL.format(version=version, filename=_ZIP_FILENAMES[build_platform])


def configure_ninja_build_tool(build_platform: BuildPlatform, root: str, executor: Executor,
                               version: str = Constants.NINJA_VERSION) -> str:
    """Make ``ninja`` available on the executor's PATH.

    The release zip is downloaded into ``<root>/ninja/<version>`` once and
    reused by later runs.

    Returns:
        The directory containing the ninja executable.
    """
    ninja_dir = os.path.join(root, "ninja", version)
    exe_name = "ninja.exe" if build_platform == BuildPlatform.WINDOWS else "ninja"
    exe_path = os.path.join(ninja_dir, exe_name)

    if not os.path.isfile(exe_path):
        logger.info("Could not find ninja %s in %s.", version, ninja_dir)
        zip_path = download_file(get_ninja_download_url(build_platform, version),
                                 os.path.join(root, "ninja", f"ninja-{version}.zip"))
        logger.info("Extracting %s.", zip_path)
        with zipfile.ZipFile(zip_path) as archive:
            archive.extractall(ninja_dir)
        os.chmod(exe_path, os.stat(exe_path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        os.remove(zip_path)

    executor.prepend_path(ninja_dir)
    return ninja_dir
