"""
Delete-and-notify moderation command.

An allow-listed user posts ``/d`` (or ``/d1`` to ``/d<N>``, or ``/d <N>``)
right after a message that breaks the rules. The bot removes the command and
the offending message, then DMs the offending author the deleted text and the
rule that was broken.

Deletions are never rolled back: if a later step fails, the messages already
removed stay removed and nothing is retried.
"""

from __future__ import annotations

from typing import Optional

from hyphenated_helper.commands.dispatcher import CommandDispatcher, CommandHandler
from hyphenated_helper.configuration.app_configuration import BotSettings
from hyphenated_helper.datatypes.command_datatypes import CommandInvocation, InboundMessage, RecentMessage
from hyphenated_helper.gateway.session_gateway import GatewayError, SessionGateway
from hyphenated_helper.util.logger import get_logger

logger = get_logger("moderation_command")

DELETE_COMMAND = "d"


def format_rule_reference(rule_number: int, generic_phrase: str) -> str:
    """Return ``rule #N`` for a numbered rule, the generic phrase for 0."""
    if rule_number > 0:
        return f"rule #{rule_number}"
    return generic_phrase


def compose_deletion_notice(content: str, rule_number: int, settings: BotSettings) -> str:
    """Build the DM sent to the author of a deleted message.

    The deleted text is quoted verbatim inside a code block.
    """
    rule_text = format_rule_reference(rule_number, settings.generic_rule_phrase)
    return (
        f"You asked the following question in the `#{settings.moderated_channel_label}` channel:\n"
        f"```\n{content}\n```\n"
        f"An administrator thinks that this message might have broken {rule_text}, so it has been deleted.\n"
        f"Please make sure that your message follows the rules: <{settings.rules_url}>"
    )


def parse_rule_argument(invocation: CommandInvocation) -> int:
    """Read an explicit rule number from ``/d <N>``; anything else means 0."""
    if not invocation.args:
        return 0
    try:
        rule_number = int(invocation.args[0])
    except ValueError:
        return 0
    return rule_number if rule_number > 0 else 0


class DeleteAndNotify:
    """The privileged delete-and-notify action.

    Parameters
    ----------
    gateway:
        Remote operations on Discord.
    settings:
        Supplies the allow-list and the wording of the notice.
    """

    def __init__(self, gateway: SessionGateway, settings: BotSettings) -> None:
        self.gateway = gateway
        self.settings = settings

    async def _resolve_target(self, message: InboundMessage) -> Optional[RecentMessage]:
        """Find the message to remove once the command itself is gone.

        A command that replies to a message targets that message. Otherwise
        the newest message left in the channel is used; a message posted by
        someone else in between would be picked up instead.
        """
        if message.reference_message_id is not None:
            try:
                return await self.gateway.fetch_message(message.channel_id, message.reference_message_id)
            except GatewayError as exc:
                logger.error("Failed to get the replied-to message from channel %s: %s", message.channel_id, exc)
                return None

        try:
            messages = await self.gateway.fetch_recent(message.channel_id, limit=1)
        except GatewayError as exc:
            logger.error("Failed to get the last message from channel %s: %s", message.channel_id, exc)
            return None

        if not messages:
            logger.error("Failed to get any messages from channel %s.", message.channel_id)
            return None
        return messages[0]

    async def run(self, message: InboundMessage, rule_number: int) -> None:
        if not self.settings.is_allowed(message.author_id):
            logger.debug("Ignoring delete command from non-privileged user %s", message.author_id)
            return

        try:
            await self.gateway.delete(message.channel_id, message.message_id)
        except GatewayError as exc:
            logger.error("Failed to delete command message %s: %s", message.message_id, exc)
            return

        target = await self._resolve_target(message)
        if target is None:
            return

        try:
            await self.gateway.delete(message.channel_id, target.message_id)
        except GatewayError as exc:
            logger.error("Failed to delete message %s from channel %s: %s", target.message_id, message.channel_id, exc)
            return

        notice = compose_deletion_notice(target.content, rule_number, self.settings)

        try:
            dm_channel_id = await self.gateway.open_direct_channel(target.author_id)
        except GatewayError as exc:
            logger.error("Failed to get the PM channel for user %s: %s", target.author_id, exc)
            return

        try:
            await self.gateway.send(dm_channel_id, notice)
        except GatewayError as exc:
            logger.error("Failed to send deletion notice to user %s: %s", target.author_id, exc)
            return

        logger.info(
            "Deleted message %s by user %s (%s) on request of %s",
            target.message_id,
            target.author_id,
            format_rule_reference(rule_number, self.settings.generic_rule_phrase),
            message.author_name,
        )

    def handler_for(self, rule_number: int) -> CommandHandler:
        """Return a handler that always cites ``rule_number``."""
        async def handler(message: InboundMessage, invocation: CommandInvocation) -> None:
            await self.run(message, rule_number)
        return handler

    async def handle_generic(self, message: InboundMessage, invocation: CommandInvocation) -> None:
        await self.run(message, parse_rule_argument(invocation))


def register_moderation_commands(dispatcher: CommandDispatcher, action: DeleteAndNotify) -> None:
    """Register ``d`` and ``d1`` to ``d<rules_count>``."""
    dispatcher.register(DELETE_COMMAND, action.handle_generic)
    for rule_number in range(1, action.settings.rules_count + 1):
        dispatcher.register(f"{DELETE_COMMAND}{rule_number}", action.handler_for(rule_number))
