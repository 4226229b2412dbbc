"""CMake configure, build and install steps."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from common.executor import Executor

logger = logging.getLogger(__name__)


@dataclass
class CMakeOptions:
    """Options shared by every project in one run."""

    build_type: str
    generator: Optional[str] = None
    toolchain_file: Optional[str] = None
    extra_args: List[str] = field(default_factory=list)


def configure_command(source_dir: str, build_dir: str, options: CMakeOptions,
                      prefix_path: Sequence[str] = ()) -> List[str]:
    """Arguments of the ``cmake`` configure step."""
    command = ["cmake", "-S", source_dir, "-B", build_dir, f"-DCMAKE_BUILD_TYPE={options.build_type}"]
    if options.generator:
        command.extend(["-G", options.generator])
    if options.toolchain_file:
        command.append(f"-DCMAKE_TOOLCHAIN_FILE={options.toolchain_file}")
    if prefix_path:
        command.append(f"-DCMAKE_PREFIX_PATH={';'.join(prefix_path)}")
    command.extend(options.extra_args)
    return command


def build_command(build_dir: str, options: CMakeOptions) -> List[str]:
    return ["cmake", "--build", build_dir, "--config", options.build_type, "--verbose"]


def install_command(build_dir: str, prefix_dir: str, options: CMakeOptions) -> List[str]:
    return ["cmake", "--install", build_dir, "--prefix", prefix_dir, "--config", options.build_type]


def configure_build_install(
    executor: Executor,
    project: str,
    source_dir: str,
    build_dir: str,
    prefix_dir: str,
    options: CMakeOptions,
    prefix_path: Sequence[str] = (),
) -> None:
    """Run configure, build and install; a failing step raises CalledProcessError."""
    logger.info("Configuring %s (CMake)", project)
    executor.run(configure_command(source_dir, build_dir, options, prefix_path))
    logger.info("Building %s (CMake)", project)
    executor.run(build_command(build_dir, options))
    logger.info("Installing %s (CMake)", project)
    executor.run(install_command(build_dir, prefix_dir, options))
