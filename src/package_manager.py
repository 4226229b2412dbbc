"""Per-platform package manager dispatch.

Each supported package manager kind maps to a builder producing a
PackageManager with its ``update``/``install`` command templates.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from common.executor import Executor
from constants import BuildPlatform, Constants
from errors import MalformedInput, MissingConfiguration

logger = logging.getLogger(__name__)


class PackageManagerType(Enum):
    """Package managers that can install build dependencies."""

    APK = "apk"
    APT_GET = "apt-get"
    BREW = "brew"
    DNF = "dnf"
    PACMAN = "pacman"
    MSYS2_PACMAN = "msys2-pacman"


_ALIASES: Dict[str, PackageManagerType] = {
    "apk": PackageManagerType.APK,
    "alpine": PackageManagerType.APK,
    "aptget": PackageManagerType.APT_GET,
    "apt-get": PackageManagerType.APT_GET,
    "ubuntu": PackageManagerType.APT_GET,
    "debian": PackageManagerType.APT_GET,
    "brew": PackageManagerType.BREW,
    "homebrew": PackageManagerType.BREW,
    "macos": PackageManagerType.BREW,
    "dnf": PackageManagerType.DNF,
    "fedora": PackageManagerType.DNF,
    "rhel": PackageManagerType.DNF,
    "pacman": PackageManagerType.PACMAN,
    "arch": PackageManagerType.PACMAN,
    "msys2": PackageManagerType.MSYS2_PACMAN,
    "msys2-pacman": PackageManagerType.MSYS2_PACMAN,
}

MSYSTEM_PREFIXES = {
    "mingw32": "mingw-w64-i686-",
    "mingw64": "mingw-w64-x86_64-",
    "clang32": "mingw-w64-clang-i686-",
    "clang64": "mingw-w64-clang-x86_64-",
    "ucrt64": "mingw-w64-ucrt-x86_64-",
}


def package_manager_type_from_string(text: str) -> PackageManagerType:
    """Map a user-supplied name or distribution alias to a PackageManagerType."""
    kind = _ALIASES.get(text.strip().lower())
    if kind is None:
        raise MalformedInput(f'Unknown package manager "{text}"')
    return kind


@dataclass
class PackageManager:
    """A package manager bound to an executor.

    ``install_command`` is a template with a ``{packages}`` placeholder.
    ``update_command`` is None for managers that need no index refresh.
    """

    type: PackageManagerType
    executor: Executor
    install_command: str
    update_command: Optional[str] = None
    sudo: bool = False
    package_prefix: str = ""

    def _execute(self, command: str) -> None:
        if self.sudo:
            command = f"sudo {command}"
        self.executor.run(command)

    def update(self) -> None:
        if self.update_command:
            self._execute(self.update_command)

    def install(self, packages: Sequence[str]) -> None:
        if not packages:
            return
        names = " ".join(f"{self.package_prefix}{p}" for p in packages)
        self._execute(self.install_command.format(packages=names))


@dataclass
class PackageList:
    """Packages a project needs from one package manager."""

    required: List[str] = field(default_factory=list)
    optional: List[str] = field(default_factory=list)


def _build_apt_get(executor: Executor, sudo: bool) -> PackageManager:
    return PackageManager(
        type=PackageManagerType.APT_GET,
        executor=executor,
        update_command="apt-get update -y",
        install_command="apt-get install -y {packages}",
        sudo=sudo,
    )


def _build_dnf(executor: Executor, sudo: bool) -> PackageManager:
    return PackageManager(
        type=PackageManagerType.DNF,
        executor=executor,
        install_command="dnf install -y {packages}",
        sudo=sudo,
    )


def _build_apk(executor: Executor, sudo: bool) -> PackageManager:
    return PackageManager(
        type=PackageManagerType.APK,
        executor=executor,
        install_command="apk add {packages}",
        sudo=sudo,
    )


def _build_brew(executor: Executor, sudo: bool) -> PackageManager:
    # Homebrew refuses to run as root.
    return PackageManager(
        type=PackageManagerType.BREW,
        executor=executor,
        update_command="brew update",
        install_command="brew install {packages}",
        sudo=False,
    )


def _build_pacman(executor: Executor, sudo: bool) -> PackageManager:
    return PackageManager(
        type=PackageManagerType.PACMAN,
        executor=executor,
        update_command="pacman -Sy",
        install_command="pacman --noconfirm -S {packages}",
        sudo=sudo,
    )


def _build_msys2_pacman(executor: Executor, sudo: bool) -> PackageManager:
    msystem = executor.getenv(Constants.ENV_MSYSTEM)
    if not msystem:
        raise MissingConfiguration("msys2-pacman requires MSYSTEM environment variable")
    prefix = MSYSTEM_PREFIXES.get(msystem.lower())
    if prefix is None:
        raise MissingConfiguration(f"Invalid MSYSTEM={msystem}")
    return PackageManager(
        type=PackageManagerType.MSYS2_PACMAN,
        executor=executor,
        update_command="pacman -Sy",
        install_command="pacman --noconfirm -S {packages}",
        sudo=False,
        package_prefix=prefix,
    )


_BUILDERS: Dict[PackageManagerType, Callable[[Executor, bool], PackageManager]] = {
    PackageManagerType.APT_GET: _build_apt_get,
    PackageManagerType.DNF: _build_dnf,
    PackageManagerType.APK: _build_apk,
    PackageManagerType.BREW: _build_brew,
    PackageManagerType.PACMAN: _build_pacman,
    PackageManagerType.MSYS2_PACMAN: _build_msys2_pacman,
}


def create_package_manager(
    kind: PackageManagerType, executor: Executor, sudo: Optional[bool] = None
) -> PackageManager:
    """Build the PackageManager for ``kind``.

    Args:
        kind: Package manager kind.
        executor: Executor used to run the commands.
        sudo: Prefix commands with sudo; detected from PATH when None.
    """
    if sudo is None:
        sudo = executor.which("sudo") is not None
    return _BUILDERS[kind](executor, sudo)


def detect_package_manager(build_platform: BuildPlatform, executor: Executor) -> Optional[PackageManagerType]:
    """Guess the platform's package manager, or None if there is none."""
    if build_platform == BuildPlatform.WINDOWS:
        if executor.getenv(Constants.ENV_MSYSTEM):
            return PackageManagerType.MSYS2_PACMAN
        return None
    if build_platform == BuildPlatform.MACOS:
        return PackageManagerType.BREW
    for kind in (
        PackageManagerType.APT_GET,
        PackageManagerType.APK,
        PackageManagerType.PACMAN,
        PackageManagerType.DNF,
    ):
        if executor.which(kind.value) is not None:
            return kind
    return None


def install_project_packages(pm: PackageManager, packages: PackageList) -> List[str]:
    """Install required packages, then optional ones individually.

    Failures of required packages propagate. A failing optional package is
    logged and skipped.

    Returns:
        The optional packages that could not be installed.
    """
    pm.install(packages.required)
    failed: List[str] = []
    for package in packages.optional:
        try:
            pm.install([package])
        except subprocess.CalledProcessError as exc:
            logger.warning("Optional package %s could not be installed (exit code %s)", package, exc.returncode)
            failed.append(package)
    return failed


def merge_package_lists(lists: Iterable[PackageList]) -> PackageList:
    """Combine package lists, keeping first-seen order and dropping duplicates."""
    merged = PackageList()
    for plist in lists:
        for name in plist.required:
            if name not in merged.required:
                merged.required.append(name)
        for name in plist.optional:
            if name not in merged.optional and name not in merged.required:
                merged.optional.append(name)
    return merged
