"""Tests for the skycompose command line."""

import io
import json
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from skycompose.cli import main, read_post_lines, serve
from skycompose.compose.handoff import decode_handoff, encode_handoff
from skycompose.config import ComposerConfig
from skycompose.errors import SkyComposePublishError
from skycompose.models import ComposedPost, ExternalLinkIntent


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("SKYCOMPOSE_HANDLE", "SKYCOMPOSE_PASSWORD", "SKYCOMPOSE_SERVICE_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SKYCOMPOSE_SESSION_FILE", str(tmp_path / "session.json"))
    monkeypatch.setenv("EDITOR", "fake-editor --wait")


def write_post(tmp_path: Path, text: str) -> str:
    path = tmp_path / "draft.txt"
    path.write_text(text)
    return str(path)


class FakeComposer:
    """Stands in for a logged-in AsyncComposer."""

    def __init__(self, fail_on_text=None):
        self.published = []
        self.closed = False
        self._fail_on_text = fail_on_text

    async def publish(self, post):
        if post.text == self._fail_on_text:
            raise SkyComposePublishError("rejected")
        self.published.append(post)
        return SimpleNamespace(uri=f"at://did:plc:a/app.bsky.feed.post/{len(self.published)}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        self.closed = True


class TestReadPostLines:
    def test_from_file(self, tmp_path):
        path = write_post(tmp_path, "a\nb\n")
        assert read_post_lines(ComposerConfig(), path) == ["a", "b"]

    def test_from_editor(self):
        def fake_editor(argv, check):
            assert argv[:2] == ["fake-editor", "--wait"]
            Path(argv[-1]).write_text("written in editor\n---\n[clipboard]\n")

        with patch("skycompose.cli.subprocess.run", side_effect=fake_editor) as run:
            lines = read_post_lines(ComposerConfig(editor="fake-editor --wait"))
        assert lines == ["written in editor", "---", "[clipboard]"]
        run.assert_called_once()


class TestComposeCommand:
    def test_writes_nul_terminated_frame(self, tmp_path, capsysbinary):
        path = write_post(tmp_path, "see https://example.com\n")
        assert main(["compose", "--file", path]) == 0
        out = capsysbinary.readouterr().out
        assert out.endswith(b"\0")
        post = decode_handoff(out)
        assert post == ComposedPost("see https://example.com", ExternalLinkIntent("https://example.com"))

    def test_invalid_attachment_reports_error(self, tmp_path, capsys):
        path = write_post(tmp_path, "hi\n---\nmissing.png\n")
        assert main(["compose", "--file", path]) == 1
        assert "missing.png" in capsys.readouterr().err

    def test_invalid_configuration(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("SKYCOMPOSE_SERVICE_URL", "ftp://nope")
        path = write_post(tmp_path, "hi\n")
        assert main(["compose", "--file", path]) == 2
        assert "service_url" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        assert main(["compose", "--file", str(tmp_path / "absent.txt")]) == 1


class TestPostCommand:
    def test_dry_run_prints_payload(self, tmp_path, capsys):
        path = write_post(tmp_path, "just text\n")
        assert main(["post", "--file", path, "--dry-run"]) == 0
        assert json.loads(capsys.readouterr().out) == {"text": "just text", "embed": None}

    def test_publishes_and_prints_uri(self, tmp_path, capsys):
        path = write_post(tmp_path, "just text\n")
        composer = FakeComposer()

        async def fake_login(config):
            return composer

        with patch("skycompose.cli.AsyncComposer.login", side_effect=fake_login):
            assert main(["post", "--file", path]) == 0
        assert capsys.readouterr().out.strip() == "at://did:plc:a/app.bsky.feed.post/1"
        assert composer.closed

    def test_no_credentials(self, tmp_path, capsys):
        path = write_post(tmp_path, "just text\n")
        assert main(["post", "--file", path]) == 1
        assert "handle" in capsys.readouterr().err


class TestServe:
    @pytest.mark.asyncio
    async def test_publishes_each_frame(self, capsys):
        frames = b"".join(
            encode_handoff(ComposedPost(text)).encode() + b"\0" for text in ("one", "two")
        )
        composer = FakeComposer()
        status = await serve(ComposerConfig(), io.BytesIO(frames), composer)
        assert status == 0
        assert [p.text for p in composer.published] == ["one", "two"]
        assert capsys.readouterr().out.splitlines() == [
            "at://did:plc:a/app.bsky.feed.post/1",
            "at://did:plc:a/app.bsky.feed.post/2",
        ]
        assert composer.closed

    @pytest.mark.asyncio
    async def test_failures_are_skipped(self, capsys):
        stream = io.BytesIO(
            b"\0"
            + b"not json\0"
            + encode_handoff(ComposedPost("bad")).encode() + b"\0"
            + encode_handoff(ComposedPost("good")).encode()
        )
        composer = FakeComposer(fail_on_text="bad")
        status = await serve(ComposerConfig(), stream, composer)
        assert status == 1
        assert [p.text for p in composer.published] == ["good"]
        err = capsys.readouterr().err
        assert "not valid JSON" in err
        assert "rejected" in err


class TestParser:
    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            main([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert "skycompose" in capsys.readouterr().out
