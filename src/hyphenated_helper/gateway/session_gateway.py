"""
Session gateway: the only place that talks to Discord.

Command handlers receive a SessionGateway instead of the py-cord client, so
they can be exercised against an in-memory fake. DiscordSessionGateway is the
production implementation; every failed remote call comes out of it as a
GatewayError naming the operation and the identifiers involved.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Protocol, runtime_checkable

import discord

from hyphenated_helper.datatypes.command_datatypes import RecentMessage
from hyphenated_helper.util.logger import get_logger

logger = get_logger("session_gateway")

# Failures of a single remote call. Anything else is a programming error.
REMOTE_ERRORS = (discord.DiscordException, asyncio.TimeoutError)


class GatewayError(Exception):
    """A remote call to Discord failed.

    Attributes:
        operation: Name of the gateway method that failed
        detail: Identifiers of the targets, for the log line
    """

    def __init__(self, operation: str, detail: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.detail = detail
        self.cause = cause
        message = f"{operation} failed for {detail}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


@runtime_checkable
class SessionGateway(Protocol):
    """Remote operations the command handlers are allowed to use."""

    @property
    def bot_user_id(self) -> Optional[int]: ...

    async def send(self, channel_id: int, text: str) -> None: ...

    async def delete(self, channel_id: int, message_id: int) -> None: ...

    async def fetch_recent(self, channel_id: int, limit: int = 1) -> List[RecentMessage]: ...

    async def fetch_message(self, channel_id: int, message_id: int) -> RecentMessage: ...

    async def open_direct_channel(self, user_id: int) -> int: ...


class DiscordSessionGateway:
    """SessionGateway backed by a connected py-cord client."""

    def __init__(self, bot: discord.Client) -> None:
        self.bot = bot

    @property
    def bot_user_id(self) -> Optional[int]:
        user = self.bot.user
        return user.id if user is not None else None

    async def _resolve_channel(self, operation: str, channel_id: int) -> discord.abc.Messageable:
        """Return the channel from the cache, fetching it when it is not cached."""
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(channel_id)
            except REMOTE_ERRORS as exc:
                raise GatewayError(operation, f"channel {channel_id}", exc) from exc

        if not isinstance(channel, discord.abc.Messageable):
            raise GatewayError(operation, f"channel {channel_id} (not a text channel)")
        return channel

    async def send(self, channel_id: int, text: str) -> None:
        channel = await self._resolve_channel("send", channel_id)
        try:
            await channel.send(text)
        except REMOTE_ERRORS as exc:
            raise GatewayError("send", f"channel {channel_id}", exc) from exc

    async def delete(self, channel_id: int, message_id: int) -> None:
        channel = await self._resolve_channel("delete", channel_id)
        try:
            await channel.get_partial_message(message_id).delete()
        except REMOTE_ERRORS as exc:
            raise GatewayError("delete", f"message {message_id} in channel {channel_id}", exc) from exc

    async def fetch_recent(self, channel_id: int, limit: int = 1) -> List[RecentMessage]:
        """Return up to ``limit`` messages of the channel, newest first."""
        channel = await self._resolve_channel("fetch_recent", channel_id)
        try:
            return [RecentMessage.from_discord(message) async for message in channel.history(limit=limit)]
        except REMOTE_ERRORS as exc:
            raise GatewayError("fetch_recent", f"channel {channel_id}", exc) from exc

    async def fetch_message(self, channel_id: int, message_id: int) -> RecentMessage:
        channel = await self._resolve_channel("fetch_message", channel_id)
        try:
            message = await channel.fetch_message(message_id)
        except REMOTE_ERRORS as exc:
            raise GatewayError("fetch_message", f"message {message_id} in channel {channel_id}", exc) from exc
        return RecentMessage.from_discord(message)

    async def open_direct_channel(self, user_id: int) -> int:
        """Open the DM channel with a user and return its ID.

        py-cord keeps the channel in its cache, so later calls reuse it.
        """
        try:
            user = self.bot.get_user(user_id) or await self.bot.fetch_user(user_id)
            dm_channel = user.dm_channel or await user.create_dm()
        except REMOTE_ERRORS as exc:
            raise GatewayError("open_direct_channel", f"user {user_id}", exc) from exc
        logger.debug("Using DM channel %s for user %s", dm_channel.id, user_id)
        return dm_channel.id
