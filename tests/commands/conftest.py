"""Shared fixtures for command tests."""

from __future__ import annotations

import pytest

from src.core.errors import FormatError
from src.core.executor import CommandExecutor
from src.core.formatter import SnippetFormatter
from src.core.models import ChatEvent
from src.core.queue_manager import QueueManager


class FakeFormatter(SnippetFormatter):
    """Records inputs and returns a canned result or raises FormatError."""

    def __init__(self, result: str | None = None) -> None:
        self.result = result
        self.calls: list[str] = []

    def format(self, raw: str) -> str:
        self.calls.append(raw)
        if self.result is None:
            raise FormatError("formatter unavailable")
        return self.result


@pytest.fixture
def make_event():
    """Build ChatEvents sent to #streamer."""

    def _make(text: str, sender: str = "viewer", display_name: str | None = None, badges=()):
        return ChatEvent(
            sender_identity=sender,
            sender_display_name=display_name or sender.capitalize(),
            channel="streamer",
            text=text,
            badges=frozenset(badges),
        )

    return _make


@pytest.fixture
def queue():
    return QueueManager()


@pytest.fixture
def make_formatter():
    return FakeFormatter


@pytest.fixture
def formatter(make_formatter):
    return make_formatter(result="fn main() {}\n")


@pytest.fixture
def executor(formatter):
    return CommandExecutor(
        secondary_channel_id="C999",
        formatter=formatter,
        snippet_language="rs",
        privileged_badges={"subscriber", "vip"},
    )
