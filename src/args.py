"""Argument parsing functionality for setup-sdl."""

import argparse
from typing import Any, Dict, List, Optional

from inputs import INPUT_DEFAULTS


def _dest(input_name: str) -> str:
    return input_name.replace("-", "_").upper()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="setupsdl",
        description=(
            "setup-sdl - Build, cache and expose SDL and its satellite libraries for CI pipelines"
        ),
        add_help=True,
    )

    versions = parser.add_argument_group("versions",
                                         "Version requests: <major>-any, <major>-head, <major>-latest, "
                                         "MAJOR.MINOR.PATCH or a git branch/tag/commit")
    versions.add_argument("--version",
                          dest=_dest("version"),
                          help="SDL version (default: %s)" % INPUT_DEFAULTS["version"],
                          action="store", type=str)
    versions.add_argument("--version-sdl-image",
                          dest=_dest("version-sdl-image"),
                          help="SDL_image version",
                          action="store", type=str)
    versions.add_argument("--version-sdl-mixer",
                          dest=_dest("version-sdl-mixer"),
                          help="SDL_mixer version",
                          action="store", type=str)
    versions.add_argument("--version-sdl-net",
                          dest=_dest("version-sdl-net"),
                          help="SDL_net version",
                          action="store", type=str)
    versions.add_argument("--version-sdl-rtf",
                          dest=_dest("version-sdl-rtf"),
                          help="SDL_rtf version",
                          action="store", type=str)
    versions.add_argument("--version-sdl-ttf",
                          dest=_dest("version-sdl-ttf"),
                          help="SDL_ttf version",
                          action="store", type=str)
    versions.add_argument("--version-sdl2-compat",
                          dest=_dest("version-sdl2-compat"),
                          help="sdl2-compat version",
                          action="store", type=str)
    versions.add_argument("--version-sdl12-compat",
                          dest=_dest("version-sdl12-compat"),
                          help="sdl12-compat version",
                          action="store", type=str)
    versions.add_argument("--pre-release",
                          dest=_dest("pre-release"),
                          help="Allow pre-releases when resolving -any/-latest requests (true/false)",
                          action="store", type=str)
    versions.add_argument("--release-source",
                          dest=_dest("release-source"),
                          help="Where to list releases from",
                          action="store", type=str,
                          choices=["api", "gh"])

    build = parser.add_argument_group("build")
    build.add_argument("--build-type",
                       dest=_dest("build-type"),
                       help="CMake build type",
                       action="store", type=str)
    build.add_argument("--ninja",
                       dest=_dest("ninja"),
                       help="Use Ninja as the CMake generator (true/false)",
                       action="store", type=str)
    build.add_argument("--cmake-generator",
                       dest=_dest("cmake-generator"),
                       help="Explicit CMake generator",
                       action="store", type=str)
    build.add_argument("--cmake-toolchain-file",
                       dest=_dest("cmake-toolchain-file"),
                       help="Path to a CMake toolchain file",
                       action="store", type=str)
    build.add_argument("--cmake-arguments",
                       dest=_dest("cmake-arguments"),
                       help="Extra arguments passed to the CMake configure step",
                       action="store", type=str)
    build.add_argument("--root",
                       dest=_dest("root"),
                       help="Root directory for sources, builds and installs",
                       action="store", type=str)
    build.add_argument("--cache-dir",
                       dest=_dest("cache-dir"),
                       help="Directory of the build cache (default: <root>/cache)",
                       action="store", type=str)
    build.add_argument("--discriminator",
                       dest=_dest("discriminator"),
                       help="Extra string mixed into the cache fingerprint",
                       action="store", type=str)
    build.add_argument("--shell",
                       dest=_dest("shell"),
                       help="Shell or toolset identifier mixed into the cache fingerprint",
                       action="store", type=str)
    build.add_argument("--install-linux-dependencies",
                       dest=_dest("install-linux-dependencies"),
                       help="Install build dependencies with the system package manager (true/false)",
                       action="store", type=str)
    build.add_argument("--package-manager",
                       dest=_dest("package-manager"),
                       help="Package manager to use instead of auto-detection",
                       action="store", type=str)
    build.add_argument("--add-to-environment",
                       dest=_dest("add-to-environment"),
                       help="Export <Package>_ROOT variables for every built project (true/false)",
                       action="store", type=str)

    msvc = parser.add_argument_group("msvc", "Visual C++ developer environment (Windows without MSYS2)")
    msvc.add_argument("--msvc-arch",
                      dest=_dest("msvc-arch"),
                      help="Target architecture passed to vcvarsall.bat (default: %s)" % INPUT_DEFAULTS["msvc-arch"],
                      action="store", type=str)
    msvc.add_argument("--msvc-sdk",
                      dest=_dest("msvc-sdk"),
                      help="Windows SDK version",
                      action="store", type=str)
    msvc.add_argument("--msvc-toolset",
                      dest=_dest("msvc-toolset"),
                      help="VC++ toolset version (-vcvars_ver)",
                      action="store", type=str)
    msvc.add_argument("--msvc-uwp",
                      dest=_dest("msvc-uwp"),
                      help="Configure for Universal Windows Platform (true/false)",
                      action="store", type=str)
    msvc.add_argument("--msvc-spectre",
                      dest=_dest("msvc-spectre"),
                      help="Use Spectre-mitigated libraries (true/false)",
                      action="store", type=str)
    msvc.add_argument("--msvc-vsversion",
                      dest=_dest("msvc-vsversion"),
                      help="Visual Studio year or version number (default: newest installed)",
                      action="store", type=str)

    parser.add_argument("--token",
                        dest=_dest("token"),
                        help="GitHub token (default: $GITHUB_TOKEN)",
                        action="store", type=str)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)


def cli_inputs(args: argparse.Namespace) -> Dict[str, Any]:
    """Map parsed arguments back onto pipeline input names."""
    return {name: getattr(args, _dest(name), None) for name in INPUT_DEFAULTS}
