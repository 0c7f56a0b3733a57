"""Participant queue shared between chat commands."""

from __future__ import annotations

import logging
from threading import RLock
from typing import List, Tuple

from .errors import AlreadyQueued, NotQueued, QueueEmpty
from .models import Participant, Role

LOGGER = logging.getLogger(__name__)


class QueueManager:
    """Thread-safe in-memory participant queue.

    Default participants are served strictly in arrival order. Privileged
    participants are inserted after the last privileged entry and before the
    first default entry, so they keep FIFO order among themselves.
    """

    def __init__(self) -> None:
        self._entries: List[Participant] = []
        self._lock = RLock()

    def join(self, identity: str, role: Role = Role.DEFAULT) -> int:
        """Add ``identity`` to the queue and return its 1-based position."""
        key = _normalize(identity)
        with self._lock:
            if self._index_of(key) is not None:
                raise AlreadyQueued(key)
            participant = Participant(identity=key, role=role)
            if role == Role.PRIVILEGED:
                index = self._privileged_count()
                self._entries.insert(index, participant)
            else:
                self._entries.append(participant)
                index = len(self._entries) - 1
        LOGGER.info("%s joined the queue as %s at position %s", key, role.value, index + 1)
        return index + 1

    def leave(self, identity: str) -> None:
        key = _normalize(identity)
        with self._lock:
            index = self._index_of(key)
            if index is None:
                raise NotQueued(key)
            del self._entries[index]
        LOGGER.info("%s left the queue", key)

    def pop_next(self) -> Participant:
        with self._lock:
            if not self._entries:
                raise QueueEmpty("queue is empty")
            participant = self._entries.pop(0)
        LOGGER.info("%s dequeued", participant.identity)
        return participant

    def position(self, identity: str) -> int:
        """Return the 1-based position of ``identity``."""
        key = _normalize(identity)
        with self._lock:
            index = self._index_of(key)
        if index is None:
            raise NotQueued(key)
        return index + 1

    def snapshot(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(entry.identity for entry in self._entries)

    def participants(self) -> Tuple[Participant, ...]:
        with self._lock:
            return tuple(self._entries)

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        LOGGER.info("Cleared %s participant(s) from the queue", removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, str):
            return False
        with self._lock:
            return self._index_of(_normalize(identity)) is not None

    def _index_of(self, key: str) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.identity == key:
                return index
        return None

    def _privileged_count(self) -> int:
        count = 0
        for entry in self._entries:
            if entry.role != Role.PRIVILEGED:
                break
            count += 1
        return count


def _normalize(identity: str) -> str:
    return identity.strip().lower()
