"""Tests for logging helpers and Ninja provisioning."""

import logging
import os
import zipfile
from unittest.mock import patch

from common.executor import Executor
from common.logging_utils import Timer, configure_logging, extra_context, redact, safe_url
from constants import BuildPlatform
from ninja import configure_ninja_build_tool, get_ninja_download_url


class TestLoggingUtils:
    """Test redaction and structured context."""

    def test_redact_tokens(self):
        text = "Authorization: Bearer abcdefgh12345 ghp_" + "a" * 36
        redacted = redact(text)
        assert "abcdefgh12345" not in redacted
        assert "ghp_" not in redacted

    def test_redact_empty(self):
        assert redact("") == ""

    def test_safe_url_drops_credentials_and_query(self):
        assert safe_url("https://user:pw@api.github.com:443/repos/a?token=x") == "https://api.github.com:443/repos/a"

    def test_extra_context_drops_none(self):
        assert extra_context(event="e", target=None) == {"_setupsdl_context": {"event": "e"}}

    def test_configure_logging_is_idempotent(self):
        root = logging.getLogger()
        configure_logging("DEBUG")
        configure_logging("WARNING")
        tagged = [h for h in root.handlers if getattr(h, "_setupsdl", False)]
        assert len(tagged) == 1
        assert root.level == logging.WARNING

    def test_timer(self):
        with Timer() as t:
            pass
        assert t.duration_ms() >= 0


class TestNinja:
    """Test Ninja download and PATH setup."""

    def test_download_url(self):
        assert get_ninja_download_url(BuildPlatform.LINUX, "1.11.1") == (
            "https://github.com/ninja-build/ninja/releases/download/v1.11.1/ninja-linux.zip"
        )
        assert get_ninja_download_url(BuildPlatform.WINDOWS).endswith("/ninja-win.zip")

    @patch("ninja.download_file")
    def test_downloads_and_extracts(self, mock_download, tmp_path):
        def fake_download(url, destination):
            os.makedirs(os.path.dirname(destination), exist_ok=True)
            with zipfile.ZipFile(destination, "w") as archive:
                archive.writestr("ninja", "#!/bin/sh\n")
            return destination

        mock_download.side_effect = fake_download
        executor = Executor(base_env={"PATH": "/usr/bin"})
        ninja_dir = configure_ninja_build_tool(BuildPlatform.LINUX, str(tmp_path), executor, "1.11.1")

        assert ninja_dir == os.path.join(str(tmp_path), "ninja", "1.11.1")
        assert os.access(os.path.join(ninja_dir, "ninja"), os.X_OK)
        assert executor.getenv("PATH").startswith(ninja_dir + os.pathsep)
        assert not os.path.exists(os.path.join(str(tmp_path), "ninja", "ninja-1.11.1.zip"))

    @patch("ninja.download_file")
    def test_reuses_existing_binary(self, mock_download, tmp_path):
        ninja_dir = tmp_path / "ninja" / "1.11.1"
        ninja_dir.mkdir(parents=True)
        (ninja_dir / "ninja").write_text("")
        executor = Executor(base_env={})
        configure_ninja_build_tool(BuildPlatform.LINUX, str(tmp_path), executor, "1.11.1")
        mock_download.assert_not_called()
        assert executor.getenv("PATH") == str(ninja_dir)
