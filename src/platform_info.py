"""Build platform detection."""

import sys
from typing import Optional

from constants import BuildPlatform, Constants
from errors import MissingConfiguration


def get_build_platform(platform: Optional[str] = None) -> BuildPlatform:
    """Map ``sys.platform`` (or ``platform``) onto a BuildPlatform."""
    platform = platform or sys.platform
    if platform.startswith("linux"):
        return BuildPlatform.LINUX
    if platform == "darwin":
        return BuildPlatform.MACOS
    if platform in ("win32", "cygwin", "msys"):
        return BuildPlatform.WINDOWS
    raise MissingConfiguration(f"Unsupported build platform {platform}")


def get_platform_root_directory(build_platform: BuildPlatform, root: Optional[str] = None) -> str:
    """Directory holding sources, builds and installs; ``root`` wins when set."""
    if root:
        return root
    if build_platform == BuildPlatform.WINDOWS:
        return Constants.DEFAULT_ROOT_WINDOWS
    return Constants.DEFAULT_ROOT_POSIX
