"""State fingerprint used to key the build cache.

The canonical state is a list of ``key=value`` strings in three sections
(ENVIRONMENT, INPUTS, MISC) joined with ``##`` and hashed with sha-256.
Changing the order or spelling of any entry invalidates existing caches.
"""

from __future__ import annotations

import hashlib
import logging
import os
from typing import List, Mapping, Optional

from common.logging_utils import redact
from constants import Constants
from errors import MissingConfiguration

logger = logging.getLogger(__name__)


def _env_value(environ: Mapping[str, str], key: str) -> str:
    value = environ.get(key)
    return Constants.STATE_UNDEFINED if value is None else value


def file_sha256(path: str) -> str:
    """Hex sha-256 of a file's bytes."""
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(64 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def environment_state(environ: Mapping[str, str]) -> List[str]:
    """Fixed compiler/linker variables, then every CMAKE_* variable sorted by name."""
    state = [f"{key}={_env_value(environ, key)}" for key in Constants.STATE_ENV_KEYS]
    for key in sorted(k for k in environ if k.startswith(Constants.STATE_ENV_PREFIX)):
        state.append(f"{key}={environ[key]}")
    return state


def inputs_state(inputs: Mapping[str, str]) -> List[str]:
    return [f"{key}={inputs.get(key, '')}" for key in Constants.STATE_INPUT_KEYS]


def build_state(
    git_hash: str,
    build_platform: str,
    shell: Optional[str] = None,
    toolchain_file: Optional[str] = None,
    cmake_arguments: Optional[str] = None,
    package_manager: Optional[str] = None,
    dependency_hashes: Optional[Mapping[str, str]] = None,
    inputs: Optional[Mapping[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """Return the canonical, ordered state entries.

    Raises:
        MissingConfiguration: ``toolchain_file`` is set but does not exist.
    """
    environ = os.environ if environ is None else environ

    misc_state = [
        f"GIT_HASH={git_hash}",
        f"build_platform={build_platform}",
        f"shell={shell or ''}",
    ]
    if package_manager:
        misc_state.append(f"package_manager={package_manager}")
    if toolchain_file:
        if not os.path.isfile(toolchain_file):
            raise MissingConfiguration(f"Toolchain file {toolchain_file} does not exist")
        misc_state.append(f"toolchain-file-hash={file_sha256(toolchain_file)}")
    if cmake_arguments:
        misc_state.append(f"cmake_arguments={cmake_arguments}")
    for name, dep_hash in (dependency_hashes or {}).items():
        misc_state.append(f"dependency_{name}={dep_hash}")

    return [
        "ENVIRONMENT",
        *environment_state(environ),
        "INPUTS",
        *inputs_state(inputs or {}),
        "MISC",
        *misc_state,
    ]


def calculate_state_hash(git_hash: str, build_platform: str, **kwargs) -> str:
    """Hex sha-256 over the canonical state; see ``build_state`` for arguments."""
    state_string = Constants.STATE_DELIMITER.join(build_state(git_hash, build_platform, **kwargs))
    logger.debug("state_string=%s", redact(state_string))
    return hashlib.sha256(state_string.encode("utf-8")).hexdigest()
