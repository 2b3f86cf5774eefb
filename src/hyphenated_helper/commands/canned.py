"""Fixed informational replies posted to the channel a command came from."""

from __future__ import annotations

from typing import Mapping

from hyphenated_helper.commands.dispatcher import CommandDispatcher
from hyphenated_helper.datatypes.command_datatypes import CommandInvocation, InboundMessage
from hyphenated_helper.gateway.session_gateway import GatewayError, SessionGateway
from hyphenated_helper.util.logger import get_logger

logger = get_logger("canned_responder")


class CannedResponder:
    """Post the literal reply configured for a command token."""

    def __init__(self, gateway: SessionGateway, replies: Mapping[str, str]) -> None:
        self.gateway = gateway
        self.replies = replies

    async def respond(self, message: InboundMessage, invocation: CommandInvocation) -> None:
        reply = self.replies.get(invocation.token)
        if reply is None:
            return

        try:
            await self.gateway.send(message.channel_id, reply)
        except GatewayError as exc:
            # Sends occasionally time out; losing one reply is acceptable
            logger.info("Failed to send \"%s\" to Discord: %s", reply, exc)


def register_canned_replies(dispatcher: CommandDispatcher, responder: CannedResponder) -> None:
    for token in responder.replies:
        dispatcher.register(token, responder.respond)
