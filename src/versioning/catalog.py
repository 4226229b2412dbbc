"""Release catalog: typed, best-first ordered view of a project's releases."""

from __future__ import annotations

import functools
import logging
import re
from typing import Iterable, Optional, Sequence, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from errors import MalformedInput

from .models import GitHubRelease, Release, ReleaseType, Version

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"^(release-|prerelease-)?([0-9]+(?:\.[0-9]+){0,2})(-RC([0-9]+))?$")


def release_from_github(gh_release: GitHubRelease) -> Release:
    """Convert one listing record into a Release.

    A ``prerelease-`` tag ranks 1, ``release-X.Y.Z-RC<n>`` ranks ``n + 1``.
    A record the listing flags as pre-release whose tag carries no marker
    is ranked 1 as well.
    """
    m = TAG_PATTERN.match(gh_release.tag)
    if m is None:
        raise MalformedInput(f"Invalid tag: {gh_release.tag}")
    prerelease: Optional[int] = None
    if m.group(1) == "prerelease-":
        prerelease = 1
    elif m.group(4) is not None:
        prerelease = int(m.group(4)) + 1
    elif gh_release.prerelease:
        prerelease = 1
    return Release(Version.parse(m.group(2)), prerelease, gh_release.tag)


class ReleaseCatalog:
    """Immutable release list, sorted best-first.

    Higher versions come first; for equal versions the final release comes
    before its prereleases, and higher-ranked (later) prereleases come
    before lower-ranked ones.
    """

    def __init__(self, releases: Iterable[Release]):
        self._releases: Tuple[Release, ...] = tuple(
            sorted(releases, key=functools.cmp_to_key(Release.compare))
        )

    @classmethod
    def create(cls, github_releases: Iterable[GitHubRelease]) -> "ReleaseCatalog":
        """Build a catalog from listing records; raises MalformedInput on a bad tag."""
        return cls(release_from_github(r) for r in github_releases)

    @classmethod
    def from_gh_output(cls, text: str) -> "ReleaseCatalog":
        """Build a catalog straight from ``gh release list`` output."""
        return cls.create(GitHubRelease.from_gh_output(text))

    @property
    def releases(self) -> Sequence[Release]:
        return self._releases

    def __len__(self) -> int:
        return len(self._releases)

    def __iter__(self):
        return iter(self._releases)

    def find(self, version: Version, prerelease: bool, release_type: ReleaseType) -> Optional[Release]:
        """Return the best release matching the request, or None.

        Args:
            version: Requested version; only the major is used for LATEST/ANY.
            prerelease: Whether prereleases may be returned.
            release_type: EXACT, LATEST or ANY.

        Returns:
            The first matching release in best-first order, None otherwise.
        """
        for release in self._releases:
            if release.prerelease is not None and not prerelease:
                continue
            if release_type == ReleaseType.EXACT:
                if release.version == version:
                    return self._found(release, version, release_type)
            elif release_type in (ReleaseType.LATEST, ReleaseType.ANY):
                if release.version.major == version.major:
                    return self._found(release, version, release_type)
        if is_debug_enabled(logger):
            logger.debug(
                "No matching release",
                extra=extra_context(
                    event="release_match",
                    component="catalog",
                    action="find",
                    outcome="not_found",
                    requested=str(version),
                    release_type=release_type.value,
                    candidate_count=len(self._releases),
                ),
            )
        return None

    def _found(self, release: Release, version: Version, release_type: ReleaseType) -> Release:
        if is_debug_enabled(logger):
            logger.debug(
                "Matched release",
                extra=extra_context(
                    event="release_match",
                    component="catalog",
                    action="find",
                    outcome="success",
                    requested=str(version),
                    release_type=release_type.value,
                    tag=release.tag,
                ),
            )
        return release
