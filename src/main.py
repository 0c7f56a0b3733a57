"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from pathlib import Path
from typing import Sequence

from .chat_adapters.slack_adapter import SlackPoster
from .chat_adapters.twitch_adapter import TwitchAdapter
from .core import (
    CommandExecutor,
    Config,
    ConfigError,
    QueueManager,
    Router,
    SendError,
    SubprocessFormatter,
    load_command_table,
    load_config,
)

LOGGER = logging.getLogger(__name__)

READY_TIMEOUT = 30.0


def cli(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="stuck-bot",
        description="Stuck-Bot - Twitch chat queue bot relaying snippets to Slack",
    )
    parser.add_argument(
        "-c",
        "--config-dir",
        default=None,
        help="Directory containing .env and stuckbot.yaml (default: ~/.stuck-bot)",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default=None,
        help="Log level (default: $LOG_LEVEL or INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    try:
        asyncio.run(_run_async(args.config_dir))
    except ConfigError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")
        return 130
    return 0


def _configure_logging(level_name: str | None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    name = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.getLogger().setLevel(getattr(logging, name, logging.INFO))


async def _run_async(config_dir: str | Path | None) -> None:
    config: Config = load_config(config_dir)
    LOGGER.info("Using config directory: %s", config.config_dir)

    table = load_command_table(config.commands_file)
    LOGGER.info("Loaded %s command(s) from %s", len(table.specs), config.commands_file)

    formatter = None
    if config.formatter_command:
        formatter = SubprocessFormatter(config.formatter_command, config.formatter_timeout)

    queue = QueueManager()
    executor = CommandExecutor(
        secondary_channel_id=config.secondary_channel_id,
        formatter=formatter,
        snippet_language=config.snippet_language,
        privileged_badges=config.privileged_badges,
        table=table,
    )
    twitch_adapter = TwitchAdapter(token=config.twitch_token, channel=config.twitch_channel)
    slack_poster = SlackPoster(bot_token=config.slack_bot_token)
    router = Router(
        executor=executor,
        queue=queue,
        chat_adapter=twitch_adapter,
        secondary_adapter=slack_poster,
        table=table,
        send_timeout=config.send_timeout,
    )

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _request_shutdown() -> None:
        LOGGER.info("Shutdown requested")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_shutdown)
        except NotImplementedError:
            # Windows event loops before 3.11 do not support signal handlers.
            pass

    twitch_task = asyncio.create_task(twitch_adapter.start())
    router_task = asyncio.create_task(router.run(twitch_adapter.events()))
    LOGGER.info("Stuck-Bot started")

    if config.greeting and await twitch_adapter.wait_until_ready(READY_TIMEOUT):
        try:
            await twitch_adapter.send_message(config.twitch_channel, config.greeting)
        except SendError as exc:
            LOGGER.warning("Failed to send greeting: %s", exc)

    stop_waiter = asyncio.create_task(stop_event.wait())
    await asyncio.wait({stop_waiter, router_task, twitch_task}, return_when=asyncio.FIRST_COMPLETED)

    router_task.cancel()
    stop_waiter.cancel()
    await twitch_adapter.stop()
    results = await asyncio.gather(router_task, twitch_task, stop_waiter, return_exceptions=True)
    for result in results:
        if isinstance(result, Exception):
            LOGGER.error("Background task failed: %s", result, exc_info=result)
    LOGGER.info("Shutdown complete")


if __name__ == "__main__":
    raise SystemExit(cli())
