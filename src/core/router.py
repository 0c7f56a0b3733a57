"""Routes inbound chat events through the command pipeline."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, List, Optional

from ..chat_adapters.i_chat_adapter import IChatAdapter, ISecondaryChat
from .commands.parser import classify
from .commands.registry import CommandTable, default_command_table
from .config import DEFAULT_SEND_TIMEOUT
from .errors import SendError
from .executor import CommandExecutor
from .models import ChatEvent, EffectTarget, OutboundEffect
from .queue_manager import QueueManager

LOGGER = logging.getLogger(__name__)


class Router:
    """Central dispatch loop translating chat lines into outbound messages.

    Events are processed one at a time in arrival order. A failing command
    or send is logged and never stops the loop.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        queue: QueueManager,
        chat_adapter: IChatAdapter,
        secondary_adapter: ISecondaryChat,
        table: Optional[CommandTable] = None,
        send_timeout: float = DEFAULT_SEND_TIMEOUT,
    ) -> None:
        self._executor = executor
        self._queue = queue
        self._chat_adapter = chat_adapter
        self._secondary_adapter = secondary_adapter
        self._table = table or default_command_table()
        self._send_timeout = send_timeout

    async def run(self, events: AsyncIterator[ChatEvent]) -> None:
        LOGGER.info("Dispatch loop started")
        async for event in events:
            await self.handle_message(event)
        LOGGER.info("Inbound event stream ended")

    async def handle_message(self, event: ChatEvent) -> None:
        command = classify(event.text, self._table)
        if command is None:
            LOGGER.debug("Ignoring chat line from %s in %s", event.sender_identity, event.channel)
            return

        LOGGER.info("Received %s from %s in %s", type(command).__name__, event.sender_identity, event.channel)
        try:
            # The formatter may run a subprocess; keep it off the event loop.
            effects: List[OutboundEffect] = await asyncio.to_thread(
                self._executor.execute, command, event, self._queue
            )
        except Exception:
            LOGGER.exception("Command %r from %s failed", command, event.sender_identity)
            return

        for effect in effects:
            await self.deliver(effect)

    async def deliver(self, effect: OutboundEffect) -> bool:
        """Perform one outbound effect; return False when it was dropped."""
        try:
            await asyncio.wait_for(self._send(effect), timeout=self._send_timeout)
        except SendError as exc:
            LOGGER.warning("Dropping %s message to %s: %s", effect.target.value, effect.destination, exc)
            return False
        except asyncio.TimeoutError:
            LOGGER.warning(
                "Dropping %s message to %s: no response after %ss",
                effect.target.value,
                effect.destination,
                self._send_timeout,
            )
            return False
        except Exception:
            LOGGER.exception("Unexpected failure sending %s message to %s", effect.target.value, effect.destination)
            return False
        return True

    def _send(self, effect: OutboundEffect) -> Awaitable[None]:
        if effect.target == EffectTarget.REPLY:
            return self._chat_adapter.send_reply(effect.destination, effect.recipient or "", effect.text)
        if effect.target == EffectTarget.BROADCAST:
            return self._chat_adapter.send_message(effect.destination, effect.text)
        return self._secondary_adapter.post_message(effect.destination, effect.text)
