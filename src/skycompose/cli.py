"""Command-line entry point.

Three subcommands::

    skycompose compose [--file F]            write one hand-off frame to stdout
    skycompose post [--file F] [--dry-run]   compose and publish
    skycompose serve                         publish every frame read from stdin

``compose | serve`` reproduces the editor-plus-daemon workflow: the editor
side runs without credentials, and the long-lived side logs in once.
"""

from __future__ import annotations

import argparse
import asyncio
import shlex
import subprocess
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from skycompose._version import __version__
from skycompose.async_client import AsyncComposer
from skycompose.compose import compose_post, decode_handoff, encode_handoff, read_frame, write_frame
from skycompose.config import ComposerConfig
from skycompose.errors import SkyComposeError
from skycompose.models import ComposedPost
from skycompose.observability import get_logger
from skycompose.observability.logger import set_level

log = get_logger("skycompose.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skycompose")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Minimum level for the JSON logs on stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    compose = subparsers.add_parser(
        "compose",
        help="Write a post in the editor and emit the hand-off payload.",
    )
    compose.add_argument("--file", help="Read the post from this file instead of the editor.")
    compose.set_defaults(_handler=_cmd_compose)

    post = subparsers.add_parser("post", help="Write a post and publish it.")
    post.add_argument("--file", help="Read the post from this file instead of the editor.")
    post.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the hand-off payload instead of publishing.",
    )
    post.set_defaults(_handler=_cmd_post)

    serve = subparsers.add_parser(
        "serve",
        help="Log in once and publish every hand-off frame read from stdin.",
    )
    serve.set_defaults(_handler=_cmd_serve)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def read_post_lines(config: ComposerConfig, path: str | None = None) -> list[str]:
    """Return the lines of *path*, or of a temp file edited in ``config.editor``."""
    if path is not None:
        return Path(path).read_text(encoding="utf-8").splitlines()

    with tempfile.TemporaryDirectory(prefix="skycompose-") as tmp:
        draft = Path(tmp) / "post.txt"
        draft.touch()
        subprocess.run([*shlex.split(config.editor), str(draft)], check=True)
        return draft.read_text(encoding="utf-8").splitlines()


def _compose_from_args(args: argparse.Namespace, config: ComposerConfig) -> ComposedPost:
    return compose_post(read_post_lines(config, args.file), config)


def _cmd_compose(args: argparse.Namespace) -> int:
    config = ComposerConfig.from_env()
    post = _compose_from_args(args, config)
    write_frame(sys.stdout.buffer, post)
    return 0


def _cmd_post(args: argparse.Namespace) -> int:
    config = ComposerConfig.from_env()
    post = _compose_from_args(args, config)
    if args.dry_run:
        print(encode_handoff(post))
        return 0
    result = asyncio.run(_publish_one(config, post))
    print(result)
    return 0


async def _publish_one(config: ComposerConfig, post: ComposedPost) -> str:
    async with await AsyncComposer.login(config) as composer:
        result = await composer.publish(post)
    return result.uri


def _cmd_serve(args: argparse.Namespace) -> int:
    config = ComposerConfig.from_env()
    return asyncio.run(serve(config, sys.stdin.buffer))


async def serve(
    config: ComposerConfig,
    stream: BinaryIO,
    composer: AsyncComposer | None = None,
) -> int:
    """Publish every frame in *stream* until EOF.

    A failing post is logged and skipped.  Returns the number of posts
    that failed, capped at 1 for use as an exit status.
    """
    if composer is None:
        composer = await AsyncComposer.login(config)
    failures = 0
    loop = asyncio.get_running_loop()
    async with composer:
        while True:
            frame = await loop.run_in_executor(None, read_frame, stream)
            if frame is None:
                break
            if not frame.strip():
                continue
            try:
                post = decode_handoff(frame)
                result = await composer.publish(post)
            except SkyComposeError as exc:
                failures += 1
                log.error(
                    "Post failed",
                    extra={"extra_fields": {"op": "serve", "code": exc.code, "error": exc.message}},
                )
                _eprint(f"error: {exc.message}")
                continue
            print(result.uri, flush=True)
    return min(failures, 1)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    set_level(args.log_level)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except SkyComposeError as e:
        _eprint(f"error: {e.message}")
        return 1
    except (OSError, subprocess.CalledProcessError) as e:
        _eprint(f"error: {e}")
        return 1
    except ValueError as e:
        # configuration validation
        _eprint(f"error: {e}")
        return 2
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
