"""Core domain logic for Stuck-Bot."""

from .commands import (
    Command,
    CommandSpec,
    CommandTable,
    classify,
    default_command_table,
    load_command_table,
)
from .config import Config, load_config
from .errors import (
    AlreadyQueued,
    CommandTableError,
    ConfigError,
    FormatError,
    NotQueued,
    QueueEmpty,
    SendError,
    StuckBotError,
)
from .executor import CommandExecutor
from .formatter import SnippetFormatter, SubprocessFormatter, render_code_block
from .models import ChatEvent, EffectTarget, OutboundEffect, Participant, Role
from .queue_manager import QueueManager
from .router import Router

__all__ = [
    "Command",
    "CommandSpec",
    "CommandTable",
    "classify",
    "default_command_table",
    "load_command_table",
    "Config",
    "load_config",
    "StuckBotError",
    "AlreadyQueued",
    "NotQueued",
    "QueueEmpty",
    "FormatError",
    "SendError",
    "ConfigError",
    "CommandTableError",
    "CommandExecutor",
    "SnippetFormatter",
    "SubprocessFormatter",
    "render_code_block",
    "ChatEvent",
    "EffectTarget",
    "OutboundEffect",
    "Participant",
    "Role",
    "QueueManager",
    "Router",
]
