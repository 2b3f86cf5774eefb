"""
Pytest configuration and fixtures for the helper bot tests.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add src directory to path so imports work without installing the package
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from hyphenated_helper.configuration.app_configuration import BotSettings  # noqa: E402
from hyphenated_helper.datatypes.command_datatypes import InboundMessage, RecentMessage  # noqa: E402
from hyphenated_helper.gateway.session_gateway import GatewayError  # noqa: E402

BOT_ID = 999
MODERATOR_ID = 1
CHANNEL_ID = 50
DM_CHANNEL_OFFSET = 10_000


class FakeGateway:
    """In-memory SessionGateway that records every remote call."""

    def __init__(self, bot_user_id: Optional[int] = BOT_ID) -> None:
        self.bot_user_id = bot_user_id
        self.recent: List[RecentMessage] = []
        self.stored: Dict[Tuple[int, int], RecentMessage] = {}
        self.failures: Dict[str, GatewayError] = {}
        self.calls: List[Tuple] = []
        self.sent: List[Tuple[int, str]] = []
        self.deleted: List[Tuple[int, int]] = []

    def fail(self, operation: str) -> None:
        self.failures[operation] = GatewayError(operation, "test target", RuntimeError("boom"))

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.failures:
            raise self.failures[operation]

    async def send(self, channel_id: int, text: str) -> None:
        self._record("send", channel_id, text)
        self.sent.append((channel_id, text))

    async def delete(self, channel_id: int, message_id: int) -> None:
        self._record("delete", channel_id, message_id)
        self.deleted.append((channel_id, message_id))

    async def fetch_recent(self, channel_id: int, limit: int = 1) -> List[RecentMessage]:
        self._record("fetch_recent", channel_id, limit)
        return self.recent[:limit]

    async def fetch_message(self, channel_id: int, message_id: int) -> RecentMessage:
        self._record("fetch_message", channel_id, message_id)
        try:
            return self.stored[(channel_id, message_id)]
        except KeyError:
            raise GatewayError("fetch_message", f"message {message_id}") from None

    async def open_direct_channel(self, user_id: int) -> int:
        self._record("open_direct_channel", user_id)
        return DM_CHANNEL_OFFSET + user_id


def make_message(
    content: str,
    *,
    author_id: int = MODERATOR_ID,
    message_id: int = 100,
    channel_id: int = CHANNEL_ID,
    reference_message_id: Optional[int] = None,
) -> InboundMessage:
    return InboundMessage(
        message_id=message_id,
        channel_id=channel_id,
        channel_name="convention-questions",
        author_id=author_id,
        author_name=f"user{author_id}",
        content=content,
        reference_message_id=reference_message_id,
    )


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def settings() -> BotSettings:
    return BotSettings(allowed_user_ids=frozenset({MODERATOR_ID}))
