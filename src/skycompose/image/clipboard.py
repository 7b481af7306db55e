"""Clipboard collaborator.

The pipeline only needs two questions answered: which MIME types the
clipboard currently offers, and the bytes for one of them.
:class:`WaylandClipboard` answers them with the ``wl-paste`` tool from
wl-clipboard.
"""

from __future__ import annotations

import subprocess
from typing import Protocol

from skycompose.errors import (
    SkyComposeClipboardUnavailableError,
    SkyComposeEmptyClipboardError,
    SkyComposeUnsupportedMimeTypeError,
)


class Clipboard(Protocol):
    """Clipboard collaborator used for ``[clipboard]`` attachment lines.

    Implementations raise :class:`SkyComposeClipboardUnavailableError`
    when no clipboard/seat can be reached, :class:`SkyComposeEmptyClipboardError`
    when nothing is copied and :class:`SkyComposeUnsupportedMimeTypeError`
    when the requested type is not offered.
    """

    def list_mime_types(self) -> set[str]:
        ...

    def read_bytes(self, mime_type: str) -> bytes:
        ...


class WaylandClipboard:
    """:class:`Clipboard` implemented on top of ``wl-paste``.

    Parameters
    ----------
    command:
        Name or path of the ``wl-paste`` executable.
    primary:
        Read the primary selection instead of the regular clipboard.
    """

    def __init__(self, command: str = "wl-paste", primary: bool = False) -> None:
        self._command = command
        self._primary = primary

    def list_mime_types(self) -> set[str]:
        output = self._run("--list-types")
        return {line.strip() for line in output.decode("utf-8", "replace").splitlines() if line.strip()}

    def read_bytes(self, mime_type: str) -> bytes:
        return self._run("--no-newline", "--type", mime_type)

    def _run(self, *args: str) -> bytes:
        argv = [self._command, *args]
        if self._primary:
            argv.append("--primary")
        try:
            proc = subprocess.run(argv, capture_output=True, check=False)
        except OSError as exc:
            raise SkyComposeClipboardUnavailableError(
                message=f"Cannot run {self._command}: {exc}",
                context={"reason": "command_failed", "command": self._command},
                cause=exc,
            ) from exc

        if proc.returncode == 0:
            return proc.stdout

        stderr = proc.stderr.decode("utf-8", "replace").strip()
        lowered = stderr.lower()
        if "nothing is copied" in lowered or "no selection" in lowered:
            raise SkyComposeEmptyClipboardError(
                message="Clipboard is empty",
                context={"reason": stderr},
            )
        if "no suitable type" in lowered:
            raise SkyComposeUnsupportedMimeTypeError(
                message=f"Clipboard does not offer the requested type: {stderr}",
                context={"reason": stderr, "requested": list(args)},
            )
        raise SkyComposeClipboardUnavailableError(
            message=f"Clipboard unavailable: {stderr or 'wl-paste exited with ' + str(proc.returncode)}",
            context={"reason": stderr, "command": self._command},
        )
