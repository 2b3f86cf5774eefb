"""Event listener Cog: bot lifecycle events."""

import discord
from discord.ext import commands

from hyphenated_helper.util.logger import get_logger

logger = get_logger("events_listener")


class EventsListenerCog(commands.Cog):
    """Handles Discord bot lifecycle events."""

    def __init__(self, bot: discord.Bot) -> None:
        self.bot = bot
        logger.info("[EVENTS LISTENER] Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self) -> None:
        if not self.bot.user:
            logger.warning(
                "[EVENTS LISTENER] Bot partially connected; user info not yet available."
            )
            return

        logger.info("Discord bot connected with username: %s (ID: %s)", self.bot.user.name, self.bot.user.id)


def setup(bot: discord.Bot) -> None:
    """Register the EventsListenerCog with the bot."""
    bot.add_cog(EventsListenerCog(bot))
