"""Twitch chat adapter built on twitchio."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Optional

import twitchio

from .i_chat_adapter import IChatAdapter
from ..core.errors import SendError
from ..core.models import ChatEvent

LOGGER = logging.getLogger(__name__)

_STOP = object()


class _StreamClient(twitchio.Client):
    """twitchio client forwarding chat messages to the adapter."""

    def __init__(self, adapter: "TwitchAdapter", token: str, channel: str) -> None:
        super().__init__(token=token, initial_channels=[channel])
        self._bridge_adapter = adapter

    async def event_ready(self) -> None:
        LOGGER.info("Connected to Twitch chat as %s", self.nick)
        self._bridge_adapter._ready.set()

    async def event_message(self, message) -> None:
        if message.echo or message.author is None:
            return
        self._bridge_adapter._enqueue(to_chat_event(message))


def to_chat_event(message) -> ChatEvent:
    """Convert a twitchio message into a ChatEvent."""
    author = message.author
    badges = getattr(author, "badges", None) or {}
    return ChatEvent(
        sender_identity=author.name,
        sender_display_name=author.display_name or author.name,
        channel=message.channel.name,
        text=message.content or "",
        badges=frozenset(str(name).lower() for name in badges),
    )


class TwitchAdapter(IChatAdapter):
    def __init__(self, token: str, channel: str) -> None:
        self._channel = channel
        self._client = _StreamClient(self, token=token, channel=channel)
        self._events: asyncio.Queue = asyncio.Queue()
        self._ready = asyncio.Event()
        self._stop_event = asyncio.Event()

    async def send_message(self, channel: str, text: str) -> None:
        target = self._client.get_channel(channel)
        if target is None:
            raise SendError(f"Not joined to Twitch channel {channel}")
        try:
            await target.send(text)
        except Exception as exc:
            raise SendError(f"Failed to send Twitch message: {exc}") from exc

    async def events(self) -> AsyncIterator[ChatEvent]:
        while True:
            item = await self._events.get()
            if item is _STOP:
                return
            yield item

    async def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        try:
            await asyncio.wait_for(self._ready.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def start(self) -> None:
        LOGGER.info("Connecting to Twitch channel %s", self._channel)
        await self._client.connect()
        await self._stop_event.wait()

    async def stop(self) -> None:
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        self._events.put_nowait(_STOP)
        await self._client.close()

    def _enqueue(self, event: ChatEvent) -> None:
        if self._stop_event.is_set():
            return
        self._events.put_nowait(event)
