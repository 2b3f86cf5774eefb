"""Turn raw message text into a CommandInvocation."""

from __future__ import annotations

from typing import Optional

from hyphenated_helper.datatypes.command_datatypes import CommandInvocation


def parse_command(content: str, command_prefix: str) -> Optional[CommandInvocation]:
    """Extract the command token and its arguments from a message.

    The first whitespace-delimited word must start with ``command_prefix``.
    The prefix is stripped and the rest lower-cased, so ``/D1`` and ``/d1``
    produce the same token. A bare prefix is not a command.

    Args:
        content: Message text as received.
        command_prefix: Marker that starts a command, e.g. ``/`` or ``!``.

    Returns:
        CommandInvocation | None: The parsed command, or None when the
        message is not a command.
    """
    words = content.split()
    if not words or not words[0].startswith(command_prefix):
        return None

    token = words[0][len(command_prefix):].lower()
    if not token:
        return None

    return CommandInvocation(token=token, args=tuple(words[1:]))
