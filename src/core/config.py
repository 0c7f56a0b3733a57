"""Configuration loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Tuple

import yaml
from dotenv import load_dotenv

from .commands.registry import DEFAULT_TABLE_PATH
from .errors import ConfigError
from .formatter import DEFAULT_FORMATTER_COMMAND, DEFAULT_FORMATTER_TIMEOUT

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("~/.stuck-bot").expanduser()
ENV_FILE_NAME = ".env"
SETTINGS_FILE = "stuckbot.yaml"
DEFAULT_GREETING = "Hello! I am the Stuck-Bot, How may I unstick you?"
DEFAULT_SEND_TIMEOUT = 10.0


@dataclass
class Config:
    twitch_token: str
    twitch_channel: str
    slack_bot_token: str
    secondary_channel_id: str
    config_dir: Path
    commands_file: Path = DEFAULT_TABLE_PATH
    greeting: str | None = DEFAULT_GREETING
    formatter_command: Tuple[str, ...] = DEFAULT_FORMATTER_COMMAND
    formatter_timeout: float = DEFAULT_FORMATTER_TIMEOUT
    snippet_language: str = "rs"
    privileged_badges: FrozenSet[str] = field(default_factory=frozenset)
    send_timeout: float = DEFAULT_SEND_TIMEOUT


def resolve_config_dir(config_dir: Path | str | None) -> Path:
    """Resolve and validate the directory containing .env + stuckbot.yaml."""
    target = (
        Path(config_dir).expanduser() if config_dir else DEFAULT_CONFIG_DIR
    ).resolve()
    if not target.exists():
        raise ConfigError(
            f"Config directory {target} does not exist. "
            f"Create it and add {ENV_FILE_NAME} and {SETTINGS_FILE}."
        )
    if not target.is_dir():
        raise ConfigError(f"Config directory {target} is not a directory")
    return target


def load_config(config_dir: Path | str | None = None) -> Config:
    """Load Stuck-Bot configuration from the provided or default directory."""
    root = resolve_config_dir(config_dir)
    _load_env_file(root / ENV_FILE_NAME)
    settings = _load_settings(root / SETTINGS_FILE)

    twitch = _section(settings, "twitch")
    slack = _section(settings, "slack")
    formatter = _section(settings, "formatter")
    queue = _section(settings, "queue")

    twitch_channel = twitch.get("channel")
    if not twitch_channel:
        raise ConfigError(f"{SETTINGS_FILE} must define twitch.channel")

    channel_id = slack.get("channel_id")
    if not channel_id:
        raise ConfigError(f"{SETTINGS_FILE} must define slack.channel_id")

    return Config(
        twitch_token=_require_env("TWITCH_OAUTH_TOKEN"),
        twitch_channel=str(twitch_channel).lstrip("#").lower(),
        slack_bot_token=_require_env("SLACK_BOT_TOKEN"),
        secondary_channel_id=str(channel_id),
        config_dir=root,
        commands_file=_resolve_commands_file(root, settings.get("commands_file")),
        greeting=twitch.get("greeting", DEFAULT_GREETING) or None,
        formatter_command=_parse_formatter_command(formatter.get("command", DEFAULT_FORMATTER_COMMAND)),
        formatter_timeout=_parse_positive_float(formatter.get("timeout", DEFAULT_FORMATTER_TIMEOUT), "formatter.timeout"),
        snippet_language=str(formatter.get("language", "rs") or ""),
        privileged_badges=_parse_badges(queue.get("privileged_badges")),
        send_timeout=_parse_positive_float(settings.get("send_timeout", DEFAULT_SEND_TIMEOUT), "send_timeout"),
    )


def _load_env_file(path: Path) -> None:
    if not path.exists():
        LOGGER.warning("No .env file found at %s; relying on shell environment.", path)
        return
    load_dotenv(dotenv_path=path, override=False)


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigError(f"{name} is not set")
    return value


def _load_settings(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"{SETTINGS_FILE} not found at {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {SETTINGS_FILE} structure at {path}")
    return data


def _section(settings: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = settings.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping")
    return value


def _resolve_commands_file(root: Path, value) -> Path:
    if not value:
        return DEFAULT_TABLE_PATH
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def _parse_formatter_command(value) -> Tuple[str, ...]:
    if value in (None, "", []):
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, (list, tuple)) and all(isinstance(part, str) for part in value):
        return tuple(value)
    raise ConfigError(f"Unsupported formatter.command: {value!r}")


def _parse_positive_float(value, name: str) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number") from exc
    if parsed <= 0:
        raise ConfigError(f"{name} must be positive")
    return parsed


def _parse_badges(value) -> FrozenSet[str]:
    if not value:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        raise ConfigError("queue.privileged_badges must be a list")
    return frozenset(str(badge).strip().lower() for badge in value if str(badge).strip())
