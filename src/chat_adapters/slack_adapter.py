"""Slack poster using the official Slack SDK."""

from __future__ import annotations

import logging

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from .i_chat_adapter import ISecondaryChat
from ..core.errors import SendError

LOGGER = logging.getLogger(__name__)


class SlackPoster(ISecondaryChat):
    def __init__(self, bot_token: str, web_client: AsyncWebClient | None = None) -> None:
        self._web_client = web_client or AsyncWebClient(token=bot_token)

    async def post_message(self, channel_id: str, text: str) -> None:
        try:
            await self._web_client.chat_postMessage(channel=channel_id, text=text)
        except SlackApiError as exc:
            raise SendError(f"Failed to send Slack message: {exc}") from exc
        LOGGER.debug("Posted %s characters to Slack channel %s", len(text), channel_id)
