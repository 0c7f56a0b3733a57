"""Executes classified commands and describes the messages they produce."""

from __future__ import annotations

import logging
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional

from .commands.registry import CommandTable, default_command_table
from .commands.types import (
    Broadcast,
    Command,
    Help,
    Join,
    Leave,
    ListQueue,
    Next,
    NoOp,
    RelaySnippet,
    StaticReply,
)
from .errors import AlreadyQueued, FormatError, NotQueued, QueueEmpty
from .formatter import SnippetFormatter, render_code_block
from .models import ChatEvent, EffectTarget, OutboundEffect, Role
from .queue_manager import QueueManager

LOGGER = logging.getLogger(__name__)

NOTHING_TEXT = "This does nothing"

CommandHandler = Callable[[Command, ChatEvent, QueueManager], List[OutboundEffect]]


class CommandExecutor:
    """Turns a command plus its chat context into outbound effects.

    The executor never talks to a transport and never raises: failures of
    the queue or the formatter become a fallback reply or post.
    """

    def __init__(
        self,
        secondary_channel_id: str,
        formatter: Optional[SnippetFormatter] = None,
        snippet_language: str = "rs",
        privileged_badges: Iterable[str] = (),
        table: Optional[CommandTable] = None,
    ) -> None:
        self._secondary_channel_id = secondary_channel_id
        self._formatter = formatter
        self._snippet_language = snippet_language
        self._privileged_badges: FrozenSet[str] = frozenset(privileged_badges)
        self._table = table or default_command_table()
        self._handlers: Dict[type, CommandHandler] = {
            Join: self._handle_join,
            Leave: self._handle_leave,
            Next: self._handle_next,
            ListQueue: self._handle_list_queue,
            StaticReply: self._handle_static_reply,
            Broadcast: self._handle_broadcast,
            NoOp: self._handle_nothing,
            RelaySnippet: self._handle_snippet,
            Help: self._handle_help,
        }

    def role_for(self, event: ChatEvent) -> Role:
        if event.badges & self._privileged_badges:
            return Role.PRIVILEGED
        return Role.DEFAULT

    def execute(self, command: Command, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        handler = self._handlers.get(type(command))
        if handler is None:
            LOGGER.error("No handler registered for command %r", command)
            return []
        LOGGER.debug("Executing %s for %s in %s", type(command).__name__, event.sender_identity, event.channel)
        return handler(command, event, queue)

    def _handle_join(self, command: Join, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        try:
            position = queue.join(event.sender_identity, self.role_for(event))
        except AlreadyQueued:
            try:
                position = queue.position(event.sender_identity)
            except NotQueued:
                return [_reply(event, "You are already in the queue")]
            return [_reply(event, f"You are already in the queue (position {position})")]
        return [_reply(event, f"Join requested (position {position})")]

    def _handle_leave(self, command: Leave, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        try:
            queue.leave(event.sender_identity)
        except NotQueued:
            return [_reply(event, "You are not in the queue")]
        return [_reply(event, "You left the queue")]

    def _handle_next(self, command: Next, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        if event.sender_identity.lower() != event.channel.lstrip("#").lower():
            return [_reply(event, "Only the broadcaster can call the next person")]
        try:
            participant = queue.pop_next()
        except QueueEmpty:
            return [_reply(event, "The queue is empty")]
        return [_broadcast(event, f"@{participant.identity}, you're up!")]

    def _handle_list_queue(self, command: ListQueue, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        identities = queue.snapshot()
        if not identities:
            return [_reply(event, "The queue is empty")]
        return [_reply(event, f"Current queue: {', '.join(identities)}")]

    def _handle_static_reply(self, command: StaticReply, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        return [_reply(event, command.text)]

    def _handle_broadcast(self, command: Broadcast, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        return [_broadcast(event, command.text)]

    def _handle_nothing(self, command: NoOp, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        LOGGER.debug("nothing received from %s", event.sender_identity)
        return [self._post(NOTHING_TEXT)]

    def _handle_snippet(self, command: RelaySnippet, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        if not command.raw.strip():
            return [_reply(event, f"Usage: {self._table.trigger}code <snippet>")]
        formatted = command.raw
        if self._formatter is not None:
            try:
                formatted = self._formatter.format(command.raw)
            except FormatError as exc:
                LOGGER.warning("Snippet formatting failed, relaying raw text: %s", exc)
                formatted = command.raw
            except Exception:
                LOGGER.exception("Snippet formatter crashed, relaying raw text")
                formatted = command.raw
        return [self._post(render_code_block(formatted, self._snippet_language))]

    def _handle_help(self, command: Help, event: ChatEvent, queue: QueueManager) -> List[OutboundEffect]:
        return [_reply(event, " ".join(self._table.build_help_lines()))]

    def _post(self, text: str) -> OutboundEffect:
        return OutboundEffect(
            target=EffectTarget.SECONDARY,
            destination=self._secondary_channel_id,
            text=text,
        )


def _reply(event: ChatEvent, text: str) -> OutboundEffect:
    return OutboundEffect(
        target=EffectTarget.REPLY,
        destination=event.channel,
        text=text,
        recipient=event.sender_display_name or event.sender_identity,
    )


def _broadcast(event: ChatEvent, text: str) -> OutboundEffect:
    return OutboundEffect(target=EffectTarget.BROADCAST, destination=event.channel, text=text)
