"""Data models for versioning and release resolution."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from errors import MalformedInput


@dataclass(frozen=True, order=True)
class Version:
    """Immutable MAJOR.MINOR.PATCH triple.

    Rich comparisons follow the natural numeric order, so ``max()`` yields
    the highest version. ``compare`` is descending-preferred: a higher
    version compares as "less", matching the best-first catalog order.
    """
    major: int
    minor: int = 0
    patch: int = 0

    def __post_init__(self):
        for part in (self.major, self.minor, self.patch):
            if not isinstance(part, int) or isinstance(part, bool) or part < 0:
                raise MalformedInput(
                    f"Cannot convert version ({self.major}, {self.minor}, {self.patch}) to MAJOR.MINOR.PATCH"
                )

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``major[.minor[.patch]]``; missing components default to 0."""
        parts = text.split(".")
        if not text or len(parts) > 3 or not all(p.isdigit() and p.isascii() for p in parts):
            raise MalformedInput(f"Cannot convert version ({text}) to MAJOR.MINOR.PATCH")
        numbers = [int(p) for p in parts] + [0] * (3 - len(parts))
        return cls(numbers[0], numbers[1], numbers[2])

    def compare(self, other: "Version") -> int:
        """Return -1 if self is the higher version, 1 if other is, else 0."""
        if self > other:
            return -1
        if other > self:
            return 1
        return 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class ReleaseType(Enum):
    """Kind of version request."""
    ANY = "Any"
    HEAD = "Head"
    LATEST = "Latest"
    EXACT = "Exact"
    COMMIT = "Commit"


@dataclass(frozen=True)
class ParsedVersionRequest:
    """Normalized version request.

    ``version`` is set for every type except COMMIT, which carries the raw
    git ``reference`` instead.
    """
    type: ReleaseType
    version: Optional[Version] = None
    reference: Optional[str] = None

    @property
    def is_commit(self) -> bool:
        return self.type == ReleaseType.COMMIT

    def __str__(self) -> str:
        if self.is_commit:
            return f"{self.type.value}({self.reference})"
        return f"{self.type.value}({self.version})"


@dataclass(frozen=True)
class Release:
    """A published release.

    ``prerelease`` is None for final releases, otherwise a rank: 1 for
    ``prerelease-`` tags and ``n + 1`` for ``-RC<n>`` tags.
    """
    version: Version
    prerelease: Optional[int]
    tag: str

    def compare(self, other: "Release") -> int:
        """Best-first comparator: negative when self should sort first."""
        cmp = self.version.compare(other.version)
        if cmp != 0:
            return cmp
        if self.prerelease is not None and other.prerelease is not None:
            return other.prerelease - self.prerelease
        if self.prerelease is None and other.prerelease is None:
            return 0
        if self.prerelease is not None:
            return 1
        return -1

    def __str__(self) -> str:
        return f"<Release:version={self.version} prerelease={self.prerelease} tag={self.tag}>"


@dataclass(frozen=True)
class GitHubRelease:
    """One record of a project's release listing."""
    name: str
    prerelease: bool
    tag: str
    time: Optional[datetime]

    @classmethod
    def from_gh_output(cls, text: str) -> List["GitHubRelease"]:
        """Parse ``gh release list`` output (tab-separated, one release per line)."""
        releases = []
        for line in text.strip().splitlines():
            if not line.strip():
                continue
            fields = line.split("\t")
            if len(fields) != 4:
                raise MalformedInput(f"Expected 4 tab-separated fields in release line: {line!r}")
            name, classification, tag, timestamp = fields
            releases.append(cls(
                name=name,
                prerelease=classification.strip().lower() == "pre-release",
                tag=tag.strip(),
                time=_parse_timestamp(timestamp),
            ))
        return releases

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "GitHubRelease":
        """Build a record from a GitHub REST ``releases`` item."""
        return cls(
            name=payload.get("name") or payload.get("tag_name") or "",
            prerelease=bool(payload.get("prerelease")),
            tag=payload.get("tag_name") or "",
            time=_parse_timestamp(payload.get("published_at") or payload.get("created_at")),
        )


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, tolerating a trailing ``Z``."""
    if not value:
        return None
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise MalformedInput(f"Invalid release timestamp: {value}") from exc

