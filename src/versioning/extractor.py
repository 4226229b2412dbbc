"""Detect the version of an installed or checked-out project from its headers."""

from __future__ import annotations

import logging
import os
import re
from typing import Optional, Sequence

from errors import MissingConfiguration, UnresolvableVersion

from .models import Version

logger = logging.getLogger(__name__)


class VersionExtractor:
    """Reads ``#define <NAME> <number>`` version macros from C headers.

    The define names may be regular expressions (e.g.
    ``(?:SDL_PATCHLEVEL|SDL_MICRO_VERSION)``) to cover both SDL2 and SDL3
    spellings.
    """

    def __init__(
        self,
        major_define: str,
        minor_define: str,
        patch_define: str,
        header_paths: Sequence[str],
        header_filenames: Sequence[str],
    ):
        self.major_define = major_define
        self.minor_define = minor_define
        self.patch_define = patch_define
        self.header_paths = list(header_paths)
        self.header_filenames = list(header_filenames)

    @classmethod
    def for_project(cls, descriptor) -> "VersionExtractor":
        """Create an extractor from a ProjectDescriptor."""
        return cls(
            descriptor.major_define,
            descriptor.minor_define,
            descriptor.patch_define,
            descriptor.header_paths,
            descriptor.header_filenames,
        )

    @staticmethod
    def _match_define(define: str, contents: str) -> Optional[int]:
        m = re.search(rf"#define[ \t]+{define}[ \t]+([0-9]+)", contents)
        return int(m.group(1)) if m else None

    def extract_from_header_path(self, path: str) -> Optional[Version]:
        """Return the version defined in ``path``, or None if a define is missing."""
        if not os.path.exists(path):
            raise MissingConfiguration(f"Cannot find {path}")
        with open(path, encoding="utf-8", errors="replace") as fh:
            contents = fh.read()

        numbers = []
        for define in (self.major_define, self.minor_define, self.patch_define):
            value = self._match_define(define, contents)
            if value is None:
                return None
            numbers.append(value)
        return Version(numbers[0], numbers[1], numbers[2])

    def extract_from_install_prefix(self, prefix: str) -> Version:
        """Search the configured header locations below ``prefix``."""
        for infix_path in self.header_paths:
            for header_filename in self.header_filenames:
                hdr_path = os.path.join(prefix, infix_path, header_filename)
                if not os.path.exists(hdr_path):
                    continue
                version = self.extract_from_header_path(hdr_path)
                if version is None:
                    continue
                logger.debug("Found version %s in %s", version, hdr_path)
                return version
        raise UnresolvableVersion(f"Could not extract version from {prefix}.")
