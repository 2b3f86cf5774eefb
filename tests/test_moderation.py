"""Tests for the delete-and-notify moderation command."""

import pytest

from conftest import CHANNEL_ID, DM_CHANNEL_OFFSET, MODERATOR_ID, make_message
from hyphenated_helper.commands import build_dispatcher
from hyphenated_helper.commands.moderation import (
    DeleteAndNotify,
    compose_deletion_notice,
    format_rule_reference,
    parse_rule_argument,
)
from hyphenated_helper.configuration.app_configuration import BotSettings
from hyphenated_helper.datatypes.command_datatypes import CommandInvocation, RecentMessage

OFFENDER_ID = 2
OFFENDING_TEXT = "Why would Bob\nnot give a 5 Save here?"


@pytest.fixture()
def offending_message():
    return RecentMessage(message_id=200, author_id=OFFENDER_ID, content=OFFENDING_TEXT)


@pytest.fixture()
def dispatcher(gateway, settings, offending_message):
    gateway.recent = [offending_message]
    return build_dispatcher(gateway, settings)


class TestNotice:

    def test_rule_reference(self):
        assert format_rule_reference(3, "one of the rules") == "rule #3"
        assert format_rule_reference(0, "one of the rules") == "one of the rules"

    def test_notice_quotes_text_and_links_rules(self, settings):
        notice = compose_deletion_notice("some *text*", 0, settings)

        assert "`#convention-questions`" in notice
        assert "```\nsome *text*\n```" in notice
        assert "might have broken one of the rules, so it has been deleted." in notice
        assert notice.endswith(f"<{settings.rules_url}>")

    def test_notice_uses_configured_wording(self):
        settings = BotSettings(
            generic_rule_phrase="one of the 5 rules",
            moderated_channel_label="questions",
            rules_url="https://example.org/rules",
        )
        notice = compose_deletion_notice("hi", 0, settings)

        assert "one of the 5 rules" in notice
        assert "`#questions`" in notice
        assert "<https://example.org/rules>" in notice

    @pytest.mark.parametrize(
        "args, expected",
        [((), 0), (("4",), 4), (("x",), 0), (("-2",), 0), (("0",), 0), (("12", "extra"), 12)],
    )
    def test_rule_argument(self, args, expected):
        assert parse_rule_argument(CommandInvocation(token="d", args=args)) == expected


class TestDeleteAndNotify:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "command, rule_text",
        [
            ("/d", "one of the rules"),
            ("/d1", "rule #1"),
            ("/d3", "rule #3"),
            ("/D5", "rule #5"),
            ("/d 4", "rule #4"),
            ("/d nonsense", "one of the rules"),
        ],
    )
    async def test_deletes_both_messages_and_notifies_author(self, dispatcher, gateway, command, rule_text):
        await dispatcher.dispatch(make_message(command, message_id=100))

        assert gateway.deleted == [(CHANNEL_ID, 100), (CHANNEL_ID, 200)]
        assert len(gateway.sent) == 1
        dm_channel_id, notice = gateway.sent[0]
        assert dm_channel_id == DM_CHANNEL_OFFSET + OFFENDER_ID
        assert OFFENDING_TEXT in notice
        assert f"might have broken {rule_text}," in notice

    @pytest.mark.asyncio
    async def test_command_message_is_deleted_before_fetching(self, dispatcher, gateway):
        await dispatcher.dispatch(make_message("/d2", message_id=100))

        operations = [call[0] for call in gateway.calls]
        assert operations == ["delete", "fetch_recent", "delete", "open_direct_channel", "send"]
        assert gateway.calls[1] == ("fetch_recent", CHANNEL_ID, 1)

    @pytest.mark.asyncio
    async def test_non_privileged_author_is_ignored(self, dispatcher, gateway):
        await dispatcher.dispatch(make_message("/d1", author_id=OFFENDER_ID + 40))

        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_empty_channel_deletes_only_the_command(self, dispatcher, gateway):
        gateway.recent = []

        await dispatcher.dispatch(make_message("/d", message_id=100))

        assert gateway.deleted == [(CHANNEL_ID, 100)]
        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_fetch_failure_aborts_without_notice(self, dispatcher, gateway):
        gateway.fail("fetch_recent")

        await dispatcher.dispatch(make_message("/d", message_id=100))

        assert gateway.deleted == [(CHANNEL_ID, 100)]
        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_failed_command_delete_aborts(self, dispatcher, gateway):
        gateway.fail("delete")

        await dispatcher.dispatch(make_message("/d", message_id=100))

        assert [call[0] for call in gateway.calls] == ["delete"]
        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_direct_channel_failure_keeps_deletions(self, dispatcher, gateway):
        gateway.fail("open_direct_channel")

        await dispatcher.dispatch(make_message("/d", message_id=100))

        assert gateway.deleted == [(CHANNEL_ID, 100), (CHANNEL_ID, 200)]
        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_send_failure_is_not_retried(self, dispatcher, gateway):
        gateway.fail("send")

        await dispatcher.dispatch(make_message("/d", message_id=100))

        assert [call[0] for call in gateway.calls].count("send") == 1

    @pytest.mark.asyncio
    async def test_reply_targets_the_referenced_message(self, dispatcher, gateway, offending_message):
        # The newest message belongs to someone else; the reply picks the right one
        gateway.recent = [RecentMessage(message_id=300, author_id=3, content="innocent")]
        gateway.stored[(CHANNEL_ID, 200)] = offending_message

        await dispatcher.dispatch(make_message("/d3", message_id=100, reference_message_id=200))

        assert gateway.deleted == [(CHANNEL_ID, 100), (CHANNEL_ID, 200)]
        assert gateway.sent[0][0] == DM_CHANNEL_OFFSET + OFFENDER_ID
        assert all(call[0] != "fetch_recent" for call in gateway.calls)

    @pytest.mark.asyncio
    async def test_missing_reply_target_aborts(self, dispatcher, gateway):
        await dispatcher.dispatch(make_message("/d", message_id=100, reference_message_id=12345))

        assert gateway.deleted == [(CHANNEL_ID, 100)]
        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_duplicate_delivery_repeats_the_action(self, dispatcher, gateway):
        message = make_message("/d1", message_id=100)

        await dispatcher.dispatch(message)
        await dispatcher.dispatch(message)

        assert len(gateway.deleted) == 4
        assert len(gateway.sent) == 2

    @pytest.mark.asyncio
    async def test_run_directly(self, gateway, settings, offending_message):
        gateway.recent = [offending_message]
        action = DeleteAndNotify(gateway, settings)

        await action.run(make_message("/anything", author_id=MODERATOR_ID), 2)

        assert "rule #2" in gateway.sent[0][1]
