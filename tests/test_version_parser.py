"""Tests for version request parsing."""

import pytest

from errors import MalformedInput
from versioning.models import ParsedVersionRequest, ReleaseType, Version
from versioning.parser import parse_version_request


class TestParseVersionRequest:
    """Test parse_version_request with the SDL prefix."""

    @pytest.mark.parametrize("request_text,major", [
        ("2-any", 2),
        ("sdl2-any", 2),
        ("SDL2-any", 2),
        ("3-any", 3),
        ("SDL3-any", 3),
    ])
    def test_any(self, request_text, major):
        parsed = parse_version_request(request_text, "sdl")
        assert parsed == ParsedVersionRequest(type=ReleaseType.ANY, version=Version(major, 0, 0))

    @pytest.mark.parametrize("request_text,major", [
        ("2-head", 2),
        ("sdl2-head", 2),
        ("SDL3-head", 3),
    ])
    def test_head(self, request_text, major):
        parsed = parse_version_request(request_text, "sdl")
        assert parsed.type == ReleaseType.HEAD
        assert parsed.version == Version(major, 0, 0)

    @pytest.mark.parametrize("request_text,major", [
        ("2-latest", 2),
        ("sdl2-latest", 2),
        ("SDL3-latest", 3),
    ])
    def test_latest(self, request_text, major):
        parsed = parse_version_request(request_text, "sdl")
        assert parsed.type == ReleaseType.LATEST
        assert parsed.version == Version(major, 0, 0)

    @pytest.mark.parametrize("request_text,expected", [
        ("2.22.1", Version(2, 22, 1)),
        ("SDL2.0.18", Version(2, 0, 18)),
        ("sdl2.24.0", Version(2, 24, 0)),
        ("SDL3.2.2", Version(3, 2, 2)),
    ])
    def test_exact(self, request_text, expected):
        parsed = parse_version_request(request_text, "sdl")
        assert parsed.type == ReleaseType.EXACT
        assert parsed.version == expected

    @pytest.mark.parametrize("request_text", [
        "f168f9c81326ad374aade49d1dc46f245b20d07a",
        "main",
        "SDL2",
        "release-2.26.0",
    ])
    def test_commit_keeps_original_text(self, request_text):
        parsed = parse_version_request(request_text, "sdl")
        assert parsed.type == ReleaseType.COMMIT
        assert parsed.reference == request_text
        assert parsed.version is None
        assert parsed.is_commit

    @pytest.mark.parametrize("request_text", ["2", "2.26", "SDL3.2"])
    def test_partial_version_is_commit(self, request_text):
        assert parse_version_request(request_text, "sdl").type == ReleaseType.COMMIT

    def test_without_prefix(self):
        assert parse_version_request("2-any").version == Version(2)
        assert parse_version_request("sdl2-any").type == ReleaseType.COMMIT

    def test_non_numeric_major_is_commit(self):
        parsed = parse_version_request("x-any", "sdl")
        assert parsed.type == ReleaseType.COMMIT
        assert parsed.reference == "x-any"


class TestVersion:
    """Test the Version value type."""

    def test_parse_full(self):
        assert Version.parse("2.26.1") == Version(2, 26, 1)

    def test_parse_pads_missing_components(self):
        assert Version.parse("3") == Version(3, 0, 0)
        assert Version.parse("3.1") == Version(3, 1, 0)

    @pytest.mark.parametrize("text", ["", "2.x.1", "1.2.3.4", "-1.0.0", "2..1", "main"])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(MalformedInput):
            Version.parse(text)

    def test_malformed_input_is_value_error(self):
        with pytest.raises(ValueError):
            Version.parse("abc")

    def test_negative_component_rejected(self):
        with pytest.raises(MalformedInput):
            Version(2, -1, 0)

    def test_compare_is_best_first(self):
        assert Version(2, 26, 1).compare(Version(2, 24, 0)) == -1
        assert Version(2, 24, 0).compare(Version(2, 26, 1)) == 1
        assert Version(2, 0, 8).compare(Version(2, 0, 8)) == 0

    def test_natural_ordering(self):
        assert max([Version(2, 0, 22), Version(3, 0, 0), Version(2, 26, 5)]) == Version(3, 0, 0)
        assert Version(2, 0, 9) < Version(2, 0, 10)

    def test_str(self):
        assert str(Version(2, 0, 18)) == "2.0.18"

    @pytest.mark.parametrize("version", [
        Version(0, 0, 0),
        Version(1, 2, 15),
        Version(2, 0, 8),
        Version(2, 0, 22),
        Version(2, 26, 5),
        Version(2, 28, 0),
        Version(3, 1, 1),
        Version(10, 100, 1000),
    ])
    def test_parse_str_round_trip(self, version):
        assert Version.parse(str(version)) == version
