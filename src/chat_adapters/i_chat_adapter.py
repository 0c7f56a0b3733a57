"""Chat adapter abstractions."""

from __future__ import annotations

import abc
from typing import AsyncIterator

from ..core.models import ChatEvent


class IChatAdapter(abc.ABC):
    """Abstraction for the live stream chat the bot listens to."""

    @abc.abstractmethod
    async def send_message(self, channel: str, text: str) -> None:
        """Send a message to the whole channel.

        Raises:
            SendError: if the message could not be delivered.
        """

    async def send_reply(self, channel: str, user: str, text: str) -> None:
        """Send a message addressed to a single user in the channel."""
        if not user:
            await self.send_message(channel, text)
            return
        await self.send_message(channel, f"@{user}: {text}")

    @abc.abstractmethod
    def events(self) -> AsyncIterator[ChatEvent]:
        """Yield inbound chat events until the adapter stops."""

    @abc.abstractmethod
    async def start(self) -> None:
        """Connect and begin receiving events."""

    @abc.abstractmethod
    async def stop(self) -> None:
        """Shutdown the adapter."""


class ISecondaryChat(abc.ABC):
    """Abstraction for the community chat snippets are relayed to."""

    @abc.abstractmethod
    async def post_message(self, channel_id: str, text: str) -> None:
        """Post text to a channel.

        Raises:
            SendError: if the message could not be delivered.
        """
