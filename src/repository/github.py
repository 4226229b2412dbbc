"""GitHub API client for release listings and git reference resolution.

Provides a lightweight REST client plus a wrapper around the ``gh`` CLI,
whose ``release list`` output is the tab-separated listing format.
"""
from __future__ import annotations

import logging
import os
import re
import subprocess
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from constants import Constants
from common.http_client import get_json
from common.logging_utils import safe_url
from errors import UnresolvableReference
from versioning.models import GitHubRelease

logger = logging.getLogger(__name__)

_LINK_NEXT = re.compile(r'<([^>]+)>;\s*rel="next"')


def _raise_for_transport_failure(status: int, url: str) -> None:
    """Status 0 means every attempt in robust_get failed at the transport level."""
    if status == 0:
        raise requests.ConnectionError(f"GET {safe_url(url)} failed: no response from GitHub")


class GitHubClient:
    """Lightweight REST client for GitHub API operations.

    Supports optional authentication via GITHUB_TOKEN environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize GitHub client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub token (defaults to GITHUB_TOKEN env var)
        """
        self.base_url = (base_url or Constants.GITHUB_API_BASE).rstrip("/")
        self.token = token or os.environ.get(Constants.ENV_GITHUB_TOKEN)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_releases(self, owner: str, repo: str) -> List[GitHubRelease]:
        """Fetch all releases of a repository.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            List of GitHubRelease records, newest first as returned by the API
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/releases"
        return [GitHubRelease.from_api(item) for item in self._get_paginated_results(url)]

    def get_branch_sha(self, owner: str, repo: str, branch: str) -> Optional[str]:
        """Return the head commit SHA of ``branch``, or None if there is no such branch."""
        url = f"{self.base_url}/repos/{owner}/{repo}/branches/{quote(branch, safe='')}"
        status, _, data = get_json(url, headers=self._get_headers())
        _raise_for_transport_failure(status, url)
        if status == 200 and isinstance(data, dict):
            return (data.get("commit") or {}).get("sha")
        return None

    def get_commit_sha(self, owner: str, repo: str, ref: str) -> Optional[str]:
        """Return the commit SHA ``ref`` (commit, tag or branch) points at, or None."""
        url = f"{self.base_url}/repos/{owner}/{repo}/commits/{quote(ref, safe='')}"
        status, _, data = get_json(url, headers=self._get_headers())
        _raise_for_transport_failure(status, url)
        if status == 200 and isinstance(data, dict):
            return data.get("sha")
        return None

    def resolve_ref(self, owner: str, repo: str, ref: str) -> str:
        """Convert a branch, tag or commit into a full commit SHA.

        Raises:
            UnresolvableReference: Neither lookup succeeded.
        """
        logger.info("Calculating git hash of %s/%s:%s", owner, repo, ref)
        logger.debug('Look for a branch named "%s"...', ref)
        sha = self.get_branch_sha(owner, repo, ref)
        if sha is None:
            logger.debug('Look for a commit named "%s"...', ref)
            sha = self.get_commit_sha(owner, repo, ref)
        if sha is None:
            raise UnresolvableReference(f"Unable to convert {ref} into a git hash.")
        logger.info("git hash = %s", sha)
        return sha

    def _get_paginated_results(self, url: str) -> List[Dict[str, Any]]:
        """Follow ``Link: rel="next"`` headers and concatenate all pages.

        Raises:
            requests.ConnectionError: GitHub could not be reached.
            requests.HTTPError: A page answered with a non-200 status.
        """
        results: List[Dict[str, Any]] = []
        current_url: Optional[str] = f"{url}?per_page={Constants.REPO_API_PER_PAGE}"

        while current_url:
            status, headers, data = get_json(current_url, headers=self._get_headers())

            _raise_for_transport_failure(status, current_url)
            if status != 200:
                raise requests.HTTPError(f"GET {safe_url(current_url)} returned HTTP {status}")
            if not data:
                break

            results.extend(data)
            current_url = self._get_next_page(headers)

        return results

    @staticmethod
    def _get_next_page(headers: Dict[str, str]) -> Optional[str]:
        link = headers.get("Link") or headers.get("link")
        if not link:
            return None
        m = _LINK_NEXT.search(link)
        return m.group(1) if m else None


def fetch_gh_release_output(repository: str, limit: int = Constants.GH_RELEASE_LIST_LIMIT) -> str:
    """Run ``gh release list`` for ``owner/repo`` and return its raw output."""
    command = ["gh", "release", "list", "-R", repository, "-L", str(limit)]
    logger.info('Executing "%s"', " ".join(command))
    result = subprocess.run(command, check=True, capture_output=True, text=True)
    return result.stdout
