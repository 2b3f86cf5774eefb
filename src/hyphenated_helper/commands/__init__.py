"""
Text commands understood by the helper bot.

- **parsing.py**: Splits message text into a normalized command token and
  its arguments.
- **dispatcher.py**: Registry of token handlers; routes inbound messages.
- **moderation.py**: ``d`` / ``d1``..``dN`` delete-and-notify commands,
  restricted to the configured allow-list.
- **canned.py**: Fixed informational replies.

``build_dispatcher`` wires all of them together.
"""

from hyphenated_helper.commands.canned import CannedResponder, register_canned_replies
from hyphenated_helper.commands.dispatcher import CommandDispatcher
from hyphenated_helper.commands.moderation import DeleteAndNotify, register_moderation_commands
from hyphenated_helper.configuration.app_configuration import BotSettings
from hyphenated_helper.gateway.session_gateway import SessionGateway


def build_dispatcher(gateway: SessionGateway, settings: BotSettings) -> CommandDispatcher:
    """Create a dispatcher with every command registered.

    Raises
    ------
    ValueError
        If a canned reply reuses the name of a moderation command.
    """
    dispatcher = CommandDispatcher(gateway, settings.command_prefix)
    register_moderation_commands(dispatcher, DeleteAndNotify(gateway, settings))
    register_canned_replies(dispatcher, CannedResponder(gateway, settings.canned_replies))
    return dispatcher
