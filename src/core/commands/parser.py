"""Classifier turning raw chat lines into commands."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .registry import CommandSpec, CommandTable, default_command_table
from .types import (
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

CommandFactory = Callable[[CommandSpec, str], Command]

COMMAND_FACTORIES: Dict[str, CommandFactory] = {
    "join": lambda spec, payload: Join(),
    "leave": lambda spec, payload: Leave(),
    "next": lambda spec, payload: Next(),
    "queue": lambda spec, payload: ListQueue(),
    "reply": lambda spec, payload: StaticReply(spec.text or ""),
    "broadcast": lambda spec, payload: Broadcast(spec.text or ""),
    "nothing": lambda spec, payload: NoOp(),
    "code": lambda spec, payload: RelaySnippet(payload),
    "help": lambda spec, payload: Help(),
}


def classify(text: str, table: Optional[CommandTable] = None) -> Optional[Command]:
    """Map a chat line to a command.

    Only lines starting with the table's trigger are considered. The first
    whitespace-separated token must match a known command exactly; anything
    after it is passed on verbatim as the payload.
    """

    table = table or default_command_table()
    if not text.startswith(table.trigger):
        return None

    parts = text.split(None, 1)
    if not parts:
        return None
    spec = table.get_spec(parts[0])
    if spec is None:
        return None
    # drop only the separator after the token so indentation survives
    payload = text[len(parts[0]) + 1 :]
    return COMMAND_FACTORIES[spec.kind](spec, payload)
