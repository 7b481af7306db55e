"""Logging in to the remote service.

A saved session string is tried first; when there is none (or it is no
longer accepted) the handle and app password from the configuration are
used and the new session is saved for next time.
"""

from __future__ import annotations

import os
from pathlib import Path

from atproto import AsyncClient
from atproto_client.exceptions import AtProtocolError

from skycompose.config import ComposerConfig
from skycompose.errors import SkyComposeAuthError
from skycompose.observability import get_logger

log = get_logger("skycompose.session")


def xrpc_url(service_url: str) -> str:
    """Return the XRPC endpoint of *service_url*."""
    return f"{service_url.rstrip('/')}/xrpc"


def save_session(client: AsyncClient, path: Path) -> None:
    """Persist the client's session string to *path* (mode 0600)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(client.export_session_string(), encoding="utf-8")
    os.chmod(path, 0o600)


async def login(config: ComposerConfig, client: AsyncClient | None = None) -> AsyncClient:
    """Return an authenticated :class:`atproto.AsyncClient`.

    Raises
    ------
    SkyComposeAuthError
        If neither a saved session nor the configured credentials work.
    """
    client = client if client is not None else AsyncClient(base_url=xrpc_url(config.service_url))
    session_path = Path(config.session_file).expanduser() if config.session_file else None

    if session_path is not None and session_path.is_file():
        try:
            await client.login(session_string=session_path.read_text(encoding="utf-8").strip())
        except (AtProtocolError, ValueError) as exc:
            log.warning(
                "Saved session rejected, falling back to credentials",
                extra={"extra_fields": {"op": "login", "session_file": str(session_path), "error": str(exc)}},
            )
        else:
            log.info("Logged in from saved session", extra={"extra_fields": {"op": "login"}})
            return client

    if not config.handle or not config.password:
        raise SkyComposeAuthError(
            message="No saved session and no handle/password configured",
            context={"session_file": str(session_path) if session_path else None},
        )

    try:
        await client.login(config.handle, config.password)
    except AtProtocolError as exc:
        raise SkyComposeAuthError(
            message=f"Cannot log in as {config.handle}: {exc}",
            context={"handle": config.handle},
            cause=exc,
        ) from exc

    log.info("Logged in with credentials", extra={"extra_fields": {"op": "login", "handle": config.handle}})
    if session_path is not None:
        try:
            save_session(client, session_path)
        except OSError as exc:
            raise SkyComposeAuthError(
                message=f"Cannot save session file {session_path}: {exc}",
                context={"session_file": str(session_path)},
                cause=exc,
            ) from exc
    return client
