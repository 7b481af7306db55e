"""Tests for ComposerConfig validation and environment loading."""

from pathlib import Path

import pytest

from skycompose.config import (
    DEFAULT_IMAGE_MIMES,
    DEFAULT_SERVICE_URL,
    ComposerConfig,
    default_session_file,
)


class TestDefaults:
    def test_defaults(self):
        config = ComposerConfig()
        assert config.section_separator == "---"
        assert config.clipboard_marker == "[clipboard]"
        assert config.max_images == 4
        assert config.allowed_mimes == DEFAULT_IMAGE_MIMES
        assert config.service_url == DEFAULT_SERVICE_URL
        assert config.user_agent.startswith("skycompose/")

    def test_allowed_mimes_not_shared(self):
        ComposerConfig().allowed_mimes.append("image/gif")
        assert "image/gif" not in ComposerConfig().allowed_mimes

    def test_default_session_file(self):
        assert default_session_file() == Path.home() / ".local/share/skycompose/session.json"


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"service_url": "ftp://bsky.social"},
            {"service_url": "http://pds.example.com"},
            {"section_separator": ""},
            {"clipboard_marker": ""},
            {"max_images": 0},
            {"max_images": 5},
            {"image_max_concurrent": 0},
            {"allowed_mimes": []},
            {"fetch_timeout_seconds": 0},
        ],
    )
    def test_rejected(self, kwargs):
        with pytest.raises(ValueError):
            ComposerConfig(**kwargs)

    def test_plain_http_allowed_for_localhost(self):
        assert ComposerConfig(service_url="http://localhost:2583").service_url == "http://localhost:2583"


class TestRepr:
    def test_password_masked(self):
        text = repr(ComposerConfig(handle="a.test", password="super-secret"))
        assert "super-secret" not in text
        assert "password='****'" in text
        assert "handle='a.test'" in text

    def test_empty_password_shown_empty(self):
        assert "password=''" in repr(ComposerConfig())


class TestFromEnv:
    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SKYCOMPOSE_HANDLE", "env.test")
        monkeypatch.setenv("SKYCOMPOSE_PASSWORD", "pw")
        monkeypatch.setenv("SKYCOMPOSE_SERVICE_URL", "https://pds.example")
        monkeypatch.setenv("SKYCOMPOSE_SESSION_FILE", str(tmp_path / "s.json"))
        monkeypatch.setenv("EDITOR", "vim -u NONE")

        config = ComposerConfig.from_env()

        assert config.handle == "env.test"
        assert config.password == "pw"
        assert config.service_url == "https://pds.example"
        assert config.session_file == str(tmp_path / "s.json")
        assert config.editor == "vim -u NONE"

    def test_overrides_win(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SKYCOMPOSE_HANDLE", "env.test")
        assert ComposerConfig.from_env(handle="kw.test").handle == "kw.test"

    def test_dotenv_file_loaded(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("SKYCOMPOSE_HANDLE", raising=False)
        (tmp_path / ".env").write_text("SKYCOMPOSE_HANDLE=dotenv.test\n")
        try:
            assert ComposerConfig.from_env().handle == "dotenv.test"
        finally:
            monkeypatch.delenv("SKYCOMPOSE_HANDLE", raising=False)

    def test_default_session_file_used(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("SKYCOMPOSE_SESSION_FILE", raising=False)
        assert ComposerConfig.from_env().session_file == str(default_session_file())
