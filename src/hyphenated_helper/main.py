"""
Hyphen-ated Helper
==================

A Discord bot that helps moderate a question channel: allow-listed users can
delete a rule-breaking message and DM its author an explanation, and anyone
can trigger a few canned informational replies.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. HYPHENATED_HELPER_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("HYPHENATED_HELPER_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()

import asyncio
import discord
from dotenv import load_dotenv

from hyphenated_helper.commands import build_dispatcher
from hyphenated_helper.configuration.app_configuration import AppConfig, BotSettings, ConfigurationError
from hyphenated_helper.gateway.session_gateway import DiscordSessionGateway
from hyphenated_helper.util.lifecycle import ShutdownControl, close_bot_instance
from hyphenated_helper.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    ConfigurationError
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN", "").strip()
    if not token:
        raise ConfigurationError("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
    return token


def resolve_config_path() -> Path:
    """Return the YAML config path, honouring ``HYPHENATED_HELPER_CONFIG``."""
    if env_path := os.getenv("HYPHENATED_HELPER_CONFIG"):
        return Path(env_path).resolve()
    return BASE_DIR / "config" / "app_config.yml"


def load_settings() -> BotSettings:
    return AppConfig(resolve_config_path()).bot_settings()


def build_intents() -> discord.Intents:
    """Construct the intents needed to read message text in guilds and DMs."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.messages = True
    return intents


def load_cogs(discord_bot_instance: discord.Bot, settings: BotSettings) -> None:
    """Wire the gateway and dispatcher and register both listener cogs.

    Raises
    ------
    ValueError
        If two commands share a name.
    """
    from hyphenated_helper.cog.listener import events_listener, message_listener

    gateway = DiscordSessionGateway(discord_bot_instance)
    dispatcher = build_dispatcher(gateway, settings)

    events_listener.setup(discord_bot_instance)
    message_listener.setup(discord_bot_instance, dispatcher)

    logger.info("Registered commands: %s", ", ".join(dispatcher.known_tokens()))


def create_bot(settings: BotSettings) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    load_cogs(bot, settings)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and log around the connection lifetime."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None = None) -> None:
    """Gracefully close the Discord connection."""
    await close_bot_instance(bot, log_close=True)
    logger.info("Shutdown complete.")


async def run_bot_session(bot: discord.Bot, token: str, control: ShutdownControl) -> int:
    """Run the bot until it stops on its own or shutdown is requested."""
    start_task = asyncio.create_task(start_bot(bot, token))
    stop_task = asyncio.create_task(control.wait())
    exit_code = 0

    try:
        await asyncio.wait({start_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stop_task.cancel()
        await shutdown_runtime(bot)

    try:
        await start_task
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1

    return exit_code


async def async_main() -> int:
    """Load configuration, build the bot and run it, returning an exit code."""
    try:
        token = load_environment()
        settings = load_settings()
    except ConfigurationError as exc:
        logger.critical("Invalid configuration: %s", exc)
        return 1

    try:
        bot = create_bot(settings)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    control = ShutdownControl()
    control.install_signal_handlers()
    logger.info("Hyphen-ated helper is now running.")
    return await run_bot_session(bot, token, control)


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting Hyphen-ated helper…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
