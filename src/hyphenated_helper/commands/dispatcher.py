"""
Command dispatcher.

Routes every inbound message to the handler registered for its command
token. Handlers are registered once at startup; the dispatcher itself holds
no per-message state, so concurrent events need no locking.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Dict, List

from hyphenated_helper.commands.parsing import parse_command
from hyphenated_helper.datatypes.command_datatypes import CommandInvocation, InboundMessage
from hyphenated_helper.gateway.session_gateway import GatewayError, SessionGateway
from hyphenated_helper.util.logger import get_logger

logger = get_logger("command_dispatcher")

# Type alias for command handler coroutines
CommandHandler = Callable[[InboundMessage, CommandInvocation], Awaitable[None]]


class CommandDispatcher:
    """Map normalized command tokens to handler coroutines.

    Parameters
    ----------
    gateway:
        Used to recognize the bot's own messages.
    command_prefix:
        Marker that starts every command.
    """

    def __init__(self, gateway: SessionGateway, command_prefix: str) -> None:
        self.gateway = gateway
        self.command_prefix = command_prefix
        self._handlers: Dict[str, CommandHandler] = {}

    def register(self, token: str, handler: CommandHandler) -> None:
        """Register ``handler`` for ``token``.

        Raises
        ------
        ValueError
            If the token is empty or already registered.
        """
        token = token.lower()
        if not token:
            raise ValueError("Command token must not be empty")
        if token in self._handlers:
            raise ValueError(f"Command '{token}' is already registered")
        self._handlers[token] = handler

    def known_tokens(self) -> List[str]:
        return sorted(self._handlers)

    async def dispatch(self, message: InboundMessage) -> bool:
        """Handle one inbound message.

        Messages written by the bot itself are dropped before anything else,
        including the log line. Unknown commands are ignored.

        Returns
        -------
        bool
            True if a handler was invoked.
        """
        if message.author_id == self.gateway.bot_user_id:
            return False

        logger.info("[#%s] <%s> %s", message.channel_name, message.author_name, message.content)

        invocation = parse_command(message.content, self.command_prefix)
        if invocation is None:
            return False

        handler = self._handlers.get(invocation.token)
        if handler is None:
            return False

        try:
            await handler(message, invocation)
        except GatewayError as exc:
            logger.error("Command '%s' in channel %s aborted: %s", invocation.token, message.channel_id, exc)
        except Exception:
            logger.exception("Command '%s' in channel %s raised", invocation.token, message.channel_id)
        return True
