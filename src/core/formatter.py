"""Best-effort code formatting for relayed snippets."""

from __future__ import annotations

import abc
import logging
import subprocess
from typing import Sequence

from .errors import FormatError

LOGGER = logging.getLogger(__name__)

DEFAULT_FORMATTER_COMMAND = ("rustfmt", "--config", "newline_style=Unix")
DEFAULT_FORMATTER_TIMEOUT = 5.0


class SnippetFormatter(abc.ABC):
    """Turns raw snippet text into formatted text."""

    @abc.abstractmethod
    def format(self, raw: str) -> str:
        """Return formatted text or raise FormatError."""


class SubprocessFormatter(SnippetFormatter):
    """Pipes the snippet through an external formatter process."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_FORMATTER_COMMAND,
        timeout: float = DEFAULT_FORMATTER_TIMEOUT,
    ) -> None:
        if not command:
            raise ValueError("formatter command must not be empty")
        self._command = list(command)
        self._timeout = timeout

    @property
    def command(self) -> list[str]:
        return list(self._command)

    def format(self, raw: str) -> str:
        try:
            data = raw.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise FormatError("Snippet is not valid UTF-8 text") from exc

        try:
            result = subprocess.run(
                self._command,
                input=data,
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise FormatError(f"{self._command[0]} timed out after {self._timeout}s") from exc
        except OSError as exc:
            raise FormatError(f"Failed to start {self._command[0]}: {exc}") from exc

        if result.returncode != 0:
            detail = (result.stderr or result.stdout).decode("utf-8", errors="replace").strip()
            raise FormatError(f"{self._command[0]} exited with {result.returncode}: {detail}")

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError(f"{self._command[0]} produced invalid UTF-8") from exc


def render_code_block(text: str, language: str = "") -> str:
    body = text.rstrip("\n")
    return f"```{language}\n{body}\n```"
