"""Closed set of commands recognized in chat."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Join:
    pass


@dataclass(frozen=True)
class Leave:
    pass


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class ListQueue:
    pass


@dataclass(frozen=True)
class StaticReply:
    text: str


@dataclass(frozen=True)
class Broadcast:
    text: str


@dataclass(frozen=True)
class NoOp:
    pass


@dataclass(frozen=True)
class RelaySnippet:
    raw: str


@dataclass(frozen=True)
class Help:
    pass


Command = Union[Join, Leave, Next, ListQueue, StaticReply, Broadcast, NoOp, RelaySnippet, Help]
