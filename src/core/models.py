"""Domain models for Stuck-Bot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional


class Role(str, Enum):
    DEFAULT = "default"
    PRIVILEGED = "privileged"


@dataclass(frozen=True)
class Participant:
    identity: str
    role: Role = Role.DEFAULT


@dataclass(frozen=True)
class ChatEvent:
    """A single inbound chat line, already split into sender and text."""

    sender_identity: str
    sender_display_name: str
    channel: str
    text: str
    badges: FrozenSet[str] = field(default_factory=frozenset)


class EffectTarget(str, Enum):
    REPLY = "reply"
    BROADCAST = "broadcast"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class OutboundEffect:
    """A send action the router performs on behalf of a command."""

    target: EffectTarget
    destination: str
    text: str
    recipient: Optional[str] = None
