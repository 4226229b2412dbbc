"""Microsoft Visual C++ developer environment.

``vcvarsall.bat`` only configures the ``cmd.exe`` session that runs it. It is
therefore run between two ``set`` dumps, and every variable it adds or
changes is copied into the executor's environment for the later CMake steps.
"""

from __future__ import annotations

import logging
import ntpath
import os
import re
import subprocess
from typing import Dict, List, Optional

from common.executor import Executor
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import MalformedInput, MissingConfiguration

logger = logging.getLogger(__name__)

_VCVARSALL = ntpath.join("VC", "Auxiliary", "Build", "vcvarsall.bat")
_VCVARS_ERROR = re.compile(r"^\[ERROR.*\]")
_VCVARS_USAGE = re.compile(r"Error in script usage\. The correct usage is:$")


def vsversion_to_versionnumber(vsversion: str) -> str:
    """'2022' -> '17.0'; version numbers and unknown values pass through."""
    if vsversion in Constants.MSVC_YEAR_VERSIONS.values():
        return vsversion
    return Constants.MSVC_YEAR_VERSIONS.get(vsversion, vsversion)


def vsversion_to_year(vsversion: str) -> str:
    """'17.0' -> '2022'; years and unknown values pass through."""
    if vsversion in Constants.MSVC_YEAR_VERSIONS:
        return vsversion
    for year, number in Constants.MSVC_YEAR_VERSIONS.items():
        if number == vsversion:
            return year
    return vsversion


def _program_files(executor: Executor) -> List[str]:
    dirs = [executor.getenv("ProgramFiles(x86)"), executor.getenv("ProgramFiles")]
    return [d for d in dirs if d]


def vswhere_directory(executor: Executor) -> Optional[str]:
    program_files_x86 = executor.getenv("ProgramFiles(x86)")
    if not program_files_x86:
        return None
    return ntpath.join(program_files_x86, "Microsoft Visual Studio", "Installer")


def find_with_vswhere(executor: Executor, relative: str, version_pattern: str) -> Optional[str]:
    """Ask vswhere for the installation path and append ``relative`` to it."""
    command = f"vswhere -products * {version_pattern} -prerelease -property installationPath"
    try:
        installation_path = executor.run(command, capture=True).strip()
    except (subprocess.CalledProcessError, OSError) as exc:
        logger.warning("vswhere failed: %s", exc)
        return None
    if not installation_path:
        return None
    return ntpath.join(installation_path, relative)


def find_vcvarsall(executor: Executor, vsversion: str = "") -> str:
    """Locate vcvarsall.bat, newest Visual Studio first.

    Tries vswhere, then the standard installation directories, then the
    Visual C++ 2015 Build Tools.

    Raises:
        MissingConfiguration: No Visual Studio installation was found.
    """
    number = vsversion_to_versionnumber(vsversion)
    if number:
        version_pattern = f'-version "{number},{number.split(".")[0]}.9"'
    else:
        version_pattern = "-latest"

    path = find_with_vswhere(executor, _VCVARSALL, version_pattern)
    if path and os.path.isfile(path):
        logger.info("Found with vswhere: %s", path)
        return path
    logger.info("Not found with vswhere")

    years = [vsversion_to_year(vsversion)] if vsversion else Constants.MSVC_YEARS
    for program_files in _program_files(executor):
        for year in years:
            for edition in Constants.MSVC_EDITIONS:
                path = ntpath.join(program_files, "Microsoft Visual Studio", year, edition, _VCVARSALL)
                logger.debug("Trying standard location: %s", path)
                if os.path.isfile(path):
                    logger.info("Found standard location: %s", path)
                    return path
    logger.info("Not found in standard locations")

    program_files_x86 = executor.getenv("ProgramFiles(x86)")
    if program_files_x86:
        path = ntpath.join(program_files_x86, "Microsoft Visual C++ Build Tools", "vcbuildtools.bat")
        if os.path.isfile(path):
            logger.info("Found VS 2015: %s", path)
            return path
        logger.info("Not found in VS 2015 location: %s", path)

    raise MissingConfiguration("Microsoft Visual Studio not found")


def vcvars_arguments(arch: str, sdk: str = "", toolset: str = "", uwp: bool = False,
                     spectre: bool = False) -> List[str]:
    """Command-line arguments for vcvarsall.bat; common arch aliases are normalized."""
    arch = Constants.MSVC_ARCH_ALIASES.get(arch.lower(), arch)
    args = [arch]
    if uwp:
        args.append("uwp")
    if sdk:
        args.append(sdk)
    if toolset:
        args.append(f"-vcvars_ver={toolset}")
    if spectre:
        args.append("-vcvars_spectre_libs=spectre")
    return args


def _dedupe_path_value(value: str) -> str:
    """Drop repeated ``;`` entries, keeping the first so shadowing still works."""
    return ";".join(dict.fromkeys(value.split(";")))


def _environment_lines(text: str) -> Dict[str, str]:
    env: Dict[str, str] = {}
    for line in text.splitlines():
        name, _, value = line.partition("=")
        env[name] = value
    return env


def parse_vcvars_output(output: str) -> Dict[str, str]:
    """Diff the ``set`` dumps around a vcvarsall.bat call.

    ``output`` is the form-feed separated result of
    ``set && cls && vcvarsall.bat ... && cls && set``.

    Returns:
        Every variable that is new or changed, PATH-like values de-duplicated.

    Raises:
        MalformedInput: vcvarsall.bat rejected its arguments.
    """
    parts = output.split("\f")
    if len(parts) < 3:
        raise MalformedInput("Unexpected output from vcvarsall.bat: missing environment dumps")
    old_text, vcvars_text, new_text = parts[0], parts[1], parts[2]

    # vcvarsall.bat prints errors for bad arguments and still exits 0.
    errors = [
        line for line in vcvars_text.splitlines()
        if _VCVARS_ERROR.match(line) and not _VCVARS_USAGE.search(line)
    ]
    if errors:
        raise MalformedInput("invalid parameters\n" + "\n".join(errors))

    old_env = _environment_lines(old_text)
    changed: Dict[str, str] = {}
    for name, value in _environment_lines(new_text).items():
        if not value or old_env.get(name) == value:
            continue
        if name.upper() in Constants.MSVC_PATH_VARIABLES:
            value = _dedupe_path_value(value)
        changed[name] = value
    return changed


def setup_msvc_environment(
    executor: Executor,
    arch: str = Constants.DEFAULT_MSVC_ARCH,
    sdk: str = "",
    toolset: str = "",
    uwp: bool = False,
    spectre: bool = False,
    vsversion: str = "",
) -> Dict[str, str]:
    """Configure ``executor`` like a Developer Command Prompt for ``arch``.

    Returns:
        The variables that were set.
    """
    vswhere_dir = vswhere_directory(executor)
    if vswhere_dir:
        current = executor.getenv("PATH", "")
        executor.set_env("PATH", current + os.pathsep + vswhere_dir if current else vswhere_dir)

    args = vcvars_arguments(arch, sdk, toolset, uwp, spectre)
    vcvars = f'"{find_vcvarsall(executor, vsversion)}" {" ".join(args)}'
    if is_debug_enabled(logger):
        logger.debug(
            "vcvars command line",
            extra=extra_context(event="msvc_setup", component="msvc", action="vcvars", target=vcvars),
        )

    changed = parse_vcvars_output(executor.run(f"set && cls && {vcvars} && cls && set", capture=True))
    for name, value in changed.items():
        logger.info("Setting %s", name)
        executor.set_env(name, value)
    logger.info("Configured Developer Command Prompt")
    return changed
