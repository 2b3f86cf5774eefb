"""Process lifecycle: shutdown on SIGINT/SIGTERM and closing the bot."""

from __future__ import annotations

import asyncio
import signal

import discord

from hyphenated_helper.util.logger import get_logger

logger = get_logger("lifecycle")

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownControl:
    """Tracks whether the process has been asked to stop."""

    def __init__(self) -> None:
        self.shutdown_event = asyncio.Event()

    def request_shutdown(self) -> None:
        self.shutdown_event.set()

    def is_shutdown_requested(self) -> bool:
        return self.shutdown_event.is_set()

    async def wait(self) -> None:
        await self.shutdown_event.wait()

    def install_signal_handlers(self) -> None:
        """Request shutdown when SIGINT or SIGTERM arrives.

        Must be called from inside the running event loop.
        """
        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
            except NotImplementedError:
                # Windows event loops have no add_signal_handler
                signal.signal(sig, lambda signum, frame: loop.call_soon_threadsafe(self._on_signal, signum))

    def _on_signal(self, signum: int) -> None:
        logger.info("Received %s; shutting down.", signal.Signals(signum).name)
        self.request_shutdown()


async def close_bot_instance(bot: discord.Client | None, *, log_close: bool = False) -> None:
    """Close the Discord bot instance if it is active."""
    if bot is None or bot.is_closed():
        return

    try:
        await bot.close()
        if log_close:
            logger.info("Discord bot connection closed.")
    except Exception as exc:
        logger.exception("Error while closing Discord bot: %s", exc)
