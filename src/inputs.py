"""Pipeline input collection.

Inputs are named the way the pipeline declares them (``build-type``,
``version-sdl-ttf``...). Precedence, highest first: command line, the
``inputs`` section of the YAML config file, ``INPUT_<NAME>`` environment
variables, built-in defaults.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from errors import MalformedInput, MissingConfiguration

logger = logging.getLogger(__name__)

INPUT_DEFAULTS: Dict[str, str] = {
    "version": Constants.DEFAULT_SDL_VERSION,
    "version-sdl-image": "",
    "version-sdl-mixer": "",
    "version-sdl-net": "",
    "version-sdl-rtf": "",
    "version-sdl-ttf": "",
    "version-sdl2-compat": "",
    "version-sdl12-compat": "",
    "pre-release": "true",
    "build-type": Constants.DEFAULT_BUILD_TYPE,
    "root": "",
    "ninja": "true",
    "cmake-generator": "",
    "cmake-toolchain-file": "",
    "cmake-arguments": "",
    "discriminator": "",
    "install-linux-dependencies": "false",
    "package-manager": "",
    "shell": "",
    "add-to-environment": "false",
    "msvc-arch": Constants.DEFAULT_MSVC_ARCH,
    "msvc-sdk": "",
    "msvc-toolset": "",
    "msvc-uwp": "false",
    "msvc-spectre": "false",
    "msvc-vsversion": "",
    "cache-dir": "",
    "release-source": "api",
    "token": "",
}

_TRUE = ("true", "True", "TRUE")
_FALSE = ("false", "False", "FALSE")


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the ``inputs`` mapping from a YAML (or JSON) config file.

    Raises:
        MissingConfiguration: The file does not exist or is not a mapping.
    """
    if not config_path:
        return {}
    if not os.path.isfile(config_path):
        raise MissingConfiguration(f"Config file not found: {config_path}")
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise MissingConfiguration(f"Failed to parse config {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise MissingConfiguration(f"Config file {config_path} must contain a mapping")
    section = data.get("inputs", data)
    if not isinstance(section, dict):
        raise MissingConfiguration(f"'inputs' in {config_path} must be a mapping")
    return section


def _env_name(name: str) -> str:
    return Constants.ENV_INPUT_PREFIX + name.replace(" ", "_").upper()


def _as_input_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


class PipelineInputs:
    """Resolved input values, all strings, as the pipeline would supply them."""

    def __init__(self, values: Mapping[str, str]):
        self._values = dict(values)

    @classmethod
    def collect(
        cls,
        cli: Optional[Mapping[str, Any]] = None,
        config: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "PipelineInputs":
        environ = os.environ if environ is None else environ
        cli = cli or {}
        config = config or {}
        values: Dict[str, str] = {}
        for name, default in INPUT_DEFAULTS.items():
            if cli.get(name) is not None:
                values[name] = _as_input_string(cli[name])
            elif name in config:
                values[name] = _as_input_string(config[name])
            elif _env_name(name) in environ:
                values[name] = environ[_env_name(name)]
            else:
                values[name] = default
        unknown = sorted(set(config) - set(INPUT_DEFAULTS))
        if unknown:
            logger.warning("Ignoring unknown config inputs: %s", ", ".join(unknown))
        return cls(values)

    def get(self, name: str) -> str:
        return self._values.get(name, "").strip()

    def get_bool(self, name: str) -> bool:
        """Parse a boolean input the way the pipeline runner does."""
        value = self.get(name)
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise MalformedInput(
            f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        )

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)
