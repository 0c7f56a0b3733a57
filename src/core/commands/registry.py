"""Command table loaded from YAML data."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import yaml

from ..errors import CommandTableError

LOGGER = logging.getLogger(__name__)

DEFAULT_TRIGGER = "!"
DEFAULT_TABLE_PATH = Path(__file__).with_name("commands.yaml")

KINDS_WITH_TEXT = frozenset({"reply", "broadcast"})
KNOWN_KINDS = frozenset(
    {"join", "leave", "next", "queue", "reply", "broadcast", "nothing", "code", "help"}
)


@dataclass(frozen=True)
class CommandSpec:
    """Metadata describing a single supported chat command."""

    name: str
    kind: str
    usage: str
    description: str
    text: Optional[str] = None
    aliases: Tuple[str, ...] = ()

    @property
    def all_names(self) -> Tuple[str, ...]:
        return (self.name, *self.aliases)


class CommandTable:
    """Maps trigger tokens such as ``!join`` to their command spec."""

    def __init__(self, specs: Sequence[CommandSpec], trigger: str = DEFAULT_TRIGGER) -> None:
        if not trigger:
            raise CommandTableError("trigger must be a non-empty string")
        self._trigger = trigger
        self._specs: Tuple[CommandSpec, ...] = tuple(specs)
        self._lookup: Dict[str, CommandSpec] = {}
        for spec in self._specs:
            for name in spec.all_names:
                token = f"{trigger}{name}"
                if token in self._lookup:
                    raise CommandTableError(f"Duplicate command token {token}")
                self._lookup[token] = spec

    @property
    def trigger(self) -> str:
        return self._trigger

    @property
    def specs(self) -> Tuple[CommandSpec, ...]:
        return self._specs

    def get_spec(self, token: str) -> Optional[CommandSpec]:
        return self._lookup.get(token)

    def tokens(self) -> Tuple[str, ...]:
        return tuple(self._lookup)

    def build_help_lines(self) -> list[str]:
        """Render help text for all commands, one entry per line."""

        lines = ["Available commands:"]
        for spec in self._specs:
            lines.append(f"{self._trigger}{spec.name}")
        return lines


def load_command_table(path: Path) -> CommandTable:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CommandTableError(f"Command table not found at {path}") from exc
    except (OSError, yaml.YAMLError) as exc:
        raise CommandTableError(f"Failed to read {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise CommandTableError(f"Invalid command table structure at {path}")

    trigger = data.get("trigger", DEFAULT_TRIGGER)
    if not isinstance(trigger, str):
        raise CommandTableError("trigger must be a string")

    entries = data.get("commands") or []
    if not isinstance(entries, list):
        raise CommandTableError("commands must be a list")

    specs = [_parse_spec(entry, path.parent, trigger) for entry in entries]
    if not specs:
        LOGGER.warning("No commands configured in %s", path)
    table = CommandTable(specs, trigger=trigger)
    LOGGER.debug("Loaded %s command(s) from %s", len(specs), path)
    return table


@lru_cache(maxsize=1)
def default_command_table() -> CommandTable:
    """Return the command table bundled with the package."""
    return load_command_table(DEFAULT_TABLE_PATH)


def _parse_spec(entry, base_dir: Path, trigger: str) -> CommandSpec:
    if not isinstance(entry, dict):
        raise CommandTableError(f"Command entry must be a mapping: {entry!r}")

    name = entry.get("name")
    if not isinstance(name, str) or not name or any(ch.isspace() for ch in name):
        raise CommandTableError(f"Command entry has an invalid name: {name!r}")

    kind = entry.get("kind")
    if kind not in KNOWN_KINDS:
        raise CommandTableError(f"Unsupported kind {kind!r} for command {name}")

    text = entry.get("text")
    text_file = entry.get("text_file")
    if text_file:
        file_path = (base_dir / text_file).resolve()
        try:
            text = file_path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise CommandTableError(f"Failed to read text for {name} from {file_path}: {exc}") from exc
    if kind in KINDS_WITH_TEXT and not text:
        raise CommandTableError(f"Command {name} requires text or text_file")

    aliases = entry.get("aliases") or ()
    if isinstance(aliases, str):
        aliases = (aliases,)

    return CommandSpec(
        name=name,
        kind=kind,
        usage=entry.get("usage") or f"{trigger}{name}",
        description=entry.get("description") or "",
        text=text,
        aliases=tuple(aliases),
    )
