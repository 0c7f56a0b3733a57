"""Chat command table, classifier, and command types."""

from .parser import classify
from .registry import CommandSpec, CommandTable, default_command_table, load_command_table
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

__all__ = [
    "classify",
    "CommandSpec",
    "CommandTable",
    "default_command_table",
    "load_command_table",
    "Command",
    "Join",
    "Leave",
    "Next",
    "ListQueue",
    "StaticReply",
    "Broadcast",
    "NoOp",
    "RelaySnippet",
    "Help",
]
