"""Tests for the GitHub client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from common import http_client
from common.http_client import clear_cache
from errors import UnresolvableReference
from repository.github import GitHubClient, fetch_gh_release_output

SHA = "f168f9c81326ad374aade49d1dc46f245b20d07a"


class TestGitHubClient:
    """Test REST lookups with get_json mocked."""

    def test_token_header(self):
        client = GitHubClient(token="abc")
        assert client._get_headers()["Authorization"] == "Bearer abc"

    def test_no_token_header(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        assert "Authorization" not in GitHubClient()._get_headers()

    @patch("repository.github.get_json")
    def test_get_releases_follows_pagination(self, mock_get_json):
        page1 = [{"name": "2.28.0", "tag_name": "release-2.28.0", "prerelease": False,
                  "published_at": "2023-06-20T18:45:17Z"}]
        page2 = [{"name": "3.1.1", "tag_name": "prerelease-3.1.1", "prerelease": True,
                  "published_at": "2023-12-25T18:45:17Z"}]
        mock_get_json.side_effect = [
            (200, {"Link": '<https://api.github.com/repositories/1/releases?page=2>; rel="next"'}, page1),
            (200, {}, page2),
        ]
        releases = GitHubClient(token="t").get_releases("libsdl-org", "SDL")
        assert [r.tag for r in releases] == ["release-2.28.0", "prerelease-3.1.1"]
        assert releases[1].prerelease is True
        second_url = mock_get_json.call_args_list[1].args[0]
        assert second_url.endswith("page=2")

    @patch("repository.github.get_json")
    def test_get_releases_raises_on_http_error(self, mock_get_json):
        mock_get_json.return_value = (404, {}, None)
        with pytest.raises(requests.HTTPError, match="HTTP 404"):
            GitHubClient(token="t").get_releases("libsdl-org", "missing")

    @patch("repository.github.get_json")
    def test_get_releases_raises_on_error_after_first_page(self, mock_get_json):
        page1 = [{"name": "2.28.0", "tag_name": "release-2.28.0", "prerelease": False,
                  "published_at": "2023-06-20T18:45:17Z"}]
        mock_get_json.side_effect = [
            (200, {"Link": '<https://api.github.com/repositories/1/releases?page=2>; rel="next"'}, page1),
            (502, {}, None),
        ]
        with pytest.raises(requests.HTTPError):
            GitHubClient(token="t").get_releases("libsdl-org", "SDL")

    @patch("repository.github.get_json")
    def test_get_releases_empty_repository(self, mock_get_json):
        mock_get_json.return_value = (200, {}, [])
        assert GitHubClient(token="t").get_releases("libsdl-org", "empty") == []

    @patch("common.http_client.requests.get")
    def test_get_releases_unreachable(self, mock_get, monkeypatch):
        monkeypatch.setattr(http_client.Constants, "HTTP_RETRY_BASE_DELAY_SEC", 0)
        clear_cache()
        mock_get.side_effect = requests.ConnectionError("down")
        with pytest.raises(requests.ConnectionError):
            GitHubClient(token="t").get_releases("libsdl-org", "SDL")
        clear_cache()

    @patch("repository.github.get_json")
    def test_resolve_unreachable(self, mock_get_json):
        mock_get_json.return_value = (0, {}, None)
        with pytest.raises(requests.ConnectionError):
            GitHubClient(token="t").resolve_ref("libsdl-org", "SDL", "main")

    @patch("repository.github.get_json")
    def test_resolve_branch(self, mock_get_json):
        mock_get_json.return_value = (200, {}, {"name": "SDL2", "commit": {"sha": SHA}})
        assert GitHubClient(token="t").resolve_ref("libsdl-org", "SDL", "SDL2") == SHA
        assert mock_get_json.call_count == 1

    @patch("repository.github.get_json")
    def test_resolve_falls_back_to_commit(self, mock_get_json):
        mock_get_json.side_effect = [(404, {}, None), (200, {}, {"sha": SHA})]
        assert GitHubClient(token="t").resolve_ref("libsdl-org", "SDL", "release-2.28.0") == SHA
        assert "/commits/release-2.28.0" in mock_get_json.call_args_list[1].args[0]

    @patch("repository.github.get_json")
    def test_resolve_unknown_ref(self, mock_get_json):
        mock_get_json.return_value = (404, {}, None)
        with pytest.raises(UnresolvableReference):
            GitHubClient(token="t").resolve_ref("libsdl-org", "SDL", "nope")

    @patch("repository.github.get_json")
    def test_branch_name_is_quoted(self, mock_get_json):
        mock_get_json.return_value = (200, {}, {"commit": {"sha": SHA}})
        GitHubClient(token="t").get_branch_sha("libsdl-org", "SDL", "feature/x")
        assert mock_get_json.call_args.args[0].endswith("/branches/feature%2Fx")


@patch("repository.github.subprocess.run")
def test_fetch_gh_release_output(mock_run):
    mock_run.return_value = MagicMock(stdout="2.28.0\tLatest\trelease-2.28.0\t2023-06-20T18:45:17Z\n")
    output = fetch_gh_release_output("libsdl-org/SDL")
    assert output.startswith("2.28.0")
    command = mock_run.call_args.args[0]
    assert command == ["gh", "release", "list", "-R", "libsdl-org/SDL", "-L", "1000"]
