"""
Data structures passed between the Discord listener, the dispatcher and the
command handlers.

This module defines the InboundMessage and RecentMessage snapshots built from
Discord messages and the CommandInvocation produced by the command parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import discord


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Snapshot of a message received from Discord.

    Attributes:
        message_id: ID of the message itself
        channel_id: ID of the channel the message was posted in
        channel_name: Name of that channel, used for logging
        author_id: ID of the message author
        author_name: Display form of the author, used for logging
        content: Raw text content of the message
        reference_message_id: ID of the message this one replies to, if any
    """
    message_id: int
    channel_id: int
    channel_name: str
    author_id: int
    author_name: str
    content: str
    reference_message_id: int | None = None

    @classmethod
    def from_discord(cls, message: discord.Message) -> "InboundMessage":
        """Build a snapshot from a py-cord message object."""
        reference = message.reference
        # Direct messages have no channel name
        channel_name = getattr(message.channel, "name", None) or "direct-message"
        return cls(
            message_id=message.id,
            channel_id=message.channel.id,
            channel_name=channel_name,
            author_id=message.author.id,
            author_name=str(message.author),
            content=message.content or "",
            reference_message_id=reference.message_id if reference is not None else None,
        )


@dataclass(frozen=True, slots=True)
class RecentMessage:
    """A message read back from a channel's history."""
    message_id: int
    author_id: int
    content: str

    @classmethod
    def from_discord(cls, message: discord.Message) -> "RecentMessage":
        return cls(
            message_id=message.id,
            author_id=message.author.id,
            content=message.content or "",
        )


@dataclass(frozen=True, slots=True)
class CommandInvocation:
    """A parsed command.

    Attributes:
        token: Command name with the marker stripped, lower-cased
        args: Remaining whitespace-separated words, case preserved
    """
    token: str
    args: Tuple[str, ...] = field(default_factory=tuple)
