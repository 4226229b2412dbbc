"""Version request parsing utilities."""

from typing import Optional

from errors import MalformedInput

from .models import ParsedVersionRequest, ReleaseType, Version

_SUFFIX_TYPES = (
    ("-any", ReleaseType.ANY),
    ("-head", ReleaseType.HEAD),
    ("-latest", ReleaseType.LATEST),
)


def _strip_prefix(request: str, discarded_prefix: Optional[str]) -> str:
    """Lower-case the request and drop the project prefix (e.g. ``sdl``)."""
    stripped = request.lower()
    if discarded_prefix and stripped.startswith(discarded_prefix.lower()):
        stripped = stripped[len(discarded_prefix):]
    return stripped


def _parse_major(text: str) -> Version:
    """Parse a bare major number into ``{major, 0, 0}``."""
    if not text.isdigit() or not text.isascii():
        raise MalformedInput(f"Cannot convert major version ({text}) to an integer")
    return Version(int(text), 0, 0)


def parse_version_request(request: str, discarded_prefix: Optional[str] = None) -> ParsedVersionRequest:
    """Parse a user version request into a ParsedVersionRequest.

    Recognizes ``<major>-any``, ``<major>-head``, ``<major>-latest`` and
    ``MAJOR.MINOR.PATCH``, each optionally preceded by the project's
    discarded prefix (case-insensitive). Anything else is treated as a git
    reference and returned verbatim, since branch and tag names are
    case-sensitive.
    """
    stripped = _strip_prefix(request, discarded_prefix)
    try:
        for suffix, release_type in _SUFFIX_TYPES:
            if stripped.endswith(suffix):
                version = _parse_major(stripped[:-len(suffix)])
                return ParsedVersionRequest(type=release_type, version=version)
        if stripped.count(".") != 2:
            raise MalformedInput(f"Cannot convert version ({stripped}) to MAJOR.MINOR.PATCH")
        return ParsedVersionRequest(type=ReleaseType.EXACT, version=Version.parse(stripped))
    except MalformedInput:
        return ParsedVersionRequest(type=ReleaseType.COMMIT, reference=request)
