"""Message listener Cog.

This cog has exactly ONE responsibility: turn Discord message events into
InboundMessage snapshots and hand them to the CommandDispatcher.

Command parsing, permission checks and remote calls live in the
``commands`` package, NOT here.
"""

import discord
from discord.ext import commands

from hyphenated_helper.commands.dispatcher import CommandDispatcher
from hyphenated_helper.datatypes.command_datatypes import InboundMessage
from hyphenated_helper.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """
    Thin event listener that forwards messages to the dispatcher.

    Parameters
    ----------
    bot:
        Discord bot instance.
    dispatcher:
        Routes each message to its command handler.
    """

    def __init__(self, bot: discord.Bot, dispatcher: CommandDispatcher) -> None:
        self.bot = bot
        self._dispatcher = dispatcher
        logger.info("[MESSAGE LISTENER] Message listener cog loaded")

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message) -> None:
        await self._dispatcher.dispatch(InboundMessage.from_discord(message))


def setup(bot: discord.Bot, dispatcher: CommandDispatcher) -> None:
    """Register the MessageListenerCog with the bot."""
    bot.add_cog(MessageListenerCog(bot, dispatcher))
