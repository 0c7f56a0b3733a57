"""Tests for CommandExecutor."""

from __future__ import annotations

from src.core.commands.types import (
    Broadcast,
    Help,
    Join,
    Leave,
    ListQueue,
    Next,
    NoOp,
    RelaySnippet,
    StaticReply,
)
from src.core.executor import NOTHING_TEXT, CommandExecutor
from src.core.models import EffectTarget, OutboundEffect, Participant, Role


class TestQueueCommands:
    """Join, leave, queue and next."""

    def test_join_acknowledges(self, executor, queue, make_event):
        effects = executor.execute(Join(), make_event("!join", sender="alice"), queue)
        print(f"\n OUTPUT: {effects}")
        assert effects == [
            OutboundEffect(
                target=EffectTarget.REPLY,
                destination="streamer",
                text="Join requested (position 1)",
                recipient="Alice",
            )
        ]
        assert queue.snapshot() == ("alice",)

    def test_duplicate_join_gets_distinct_reply(self, executor, queue, make_event):
        event = make_event("!join", sender="alice")
        executor.execute(Join(), event, queue)
        effects = executor.execute(Join(), event, queue)
        assert len(effects) == 1
        assert effects[0].text == "You are already in the queue (position 1)"
        assert queue.snapshot() == ("alice",)

    def test_join_order(self, executor, queue, make_event):
        for name in ("a", "b", "c"):
            executor.execute(Join(), make_event("!join", sender=name), queue)
        assert queue.snapshot() == ("a", "b", "c")

    def test_privileged_badge_fast_tracks(self, executor, queue, make_event):
        executor.execute(Join(), make_event("!join", sender="a"), queue)
        effects = executor.execute(Join(), make_event("!join", sender="sub", badges={"subscriber"}), queue)
        assert effects[0].text == "Join requested (position 1)"
        assert queue.participants()[0] == Participant("sub", Role.PRIVILEGED)

    def test_unlisted_badge_stays_default(self, executor, queue, make_event):
        event = make_event("!join", sender="a", badges={"premium"})
        assert executor.role_for(event) == Role.DEFAULT

    def test_leave(self, executor, queue, make_event):
        event = make_event("!leave", sender="alice")
        queue.join("alice")
        assert executor.execute(Leave(), event, queue)[0].text == "You left the queue"
        assert executor.execute(Leave(), event, queue)[0].text == "You are not in the queue"

    def test_list_queue(self, executor, queue, make_event):
        queue.join("a")
        queue.join("b")
        effects = executor.execute(ListQueue(), make_event("!queue"), queue)
        assert effects[0].target == EffectTarget.REPLY
        assert effects[0].text == "Current queue: a, b"

    def test_list_empty_queue(self, executor, queue, make_event):
        effects = executor.execute(ListQueue(), make_event("!queue"), queue)
        assert effects[0].text == "The queue is empty"

    def test_next_by_broadcaster(self, executor, queue, make_event):
        queue.join("a")
        queue.join("b")
        effects = executor.execute(Next(), make_event("!next", sender="streamer"), queue)
        assert effects == [
            OutboundEffect(target=EffectTarget.BROADCAST, destination="streamer", text="@a, you're up!")
        ]
        assert queue.snapshot() == ("b",)

    def test_next_on_empty_queue(self, executor, queue, make_event):
        effects = executor.execute(Next(), make_event("!next", sender="streamer"), queue)
        assert effects[0].text == "The queue is empty"

    def test_next_by_viewer_refused(self, executor, queue, make_event):
        queue.join("a")
        effects = executor.execute(Next(), make_event("!next", sender="viewer"), queue)
        assert effects[0].target == EffectTarget.REPLY
        assert "broadcaster" in effects[0].text
        assert queue.snapshot() == ("a",)


class TestStaticCommands:
    def test_static_reply_addressed_to_sender(self, executor, queue, make_event):
        effects = executor.execute(StaticReply("segmentation fault"), make_event("!c++", display_name="Viewer42"), queue)
        assert effects == [
            OutboundEffect(
                target=EffectTarget.REPLY,
                destination="streamer",
                text="segmentation fault",
                recipient="Viewer42",
            )
        ]

    def test_broadcast_not_addressed(self, executor, queue, make_event):
        effects = executor.execute(Broadcast("hello chat"), make_event("!dave"), queue)
        assert effects == [
            OutboundEffect(target=EffectTarget.BROADCAST, destination="streamer", text="hello chat")
        ]

    def test_nothing_posts_to_secondary(self, executor, queue, make_event):
        effects = executor.execute(NoOp(), make_event("!nothing"), queue)
        assert effects == [
            OutboundEffect(target=EffectTarget.SECONDARY, destination="C999", text=NOTHING_TEXT)
        ]

    def test_help_lists_commands(self, executor, queue, make_event):
        effects = executor.execute(Help(), make_event("!help"), queue)
        assert effects[0].target == EffectTarget.REPLY
        assert "!join" in effects[0].text
        assert "!code" in effects[0].text


class TestRelaySnippet:
    """Snippets are formatted when possible and always relayed."""

    def test_formatted_snippet(self, executor, queue, make_event, formatter):
        effects = executor.execute(RelaySnippet("fn main(){}"), make_event("!code fn main(){}"), queue)
        assert formatter.calls == ["fn main(){}"]
        assert effects == [
            OutboundEffect(
                target=EffectTarget.SECONDARY,
                destination="C999",
                text="```rs\nfn main() {}\n```",
            )
        ]

    def test_formatter_failure_falls_back_to_raw(self, queue, make_event, make_formatter):
        executor = CommandExecutor(secondary_channel_id="C999", formatter=make_formatter(result=None))
        effects = executor.execute(RelaySnippet("x+y"), make_event("!code x+y"), queue)
        print(f"\n OUTPUT: {effects}")
        assert len(effects) == 1
        assert effects[0].target == EffectTarget.SECONDARY
        assert effects[0].text == "```rs\nx+y\n```"

    def test_without_formatter(self, queue, make_event):
        executor = CommandExecutor(secondary_channel_id="C1", snippet_language="")
        effects = executor.execute(RelaySnippet("a  b"), make_event("!code a  b"), queue)
        assert effects[0].text == "```\na  b\n```"

    def test_empty_snippet_gets_usage(self, executor, queue, make_event, formatter):
        effects = executor.execute(RelaySnippet("   "), make_event("!code"), queue)
        assert effects[0].target == EffectTarget.REPLY
        assert effects[0].text.startswith("Usage:")
        assert formatter.calls == []


class TestUnknownCommand:
    def test_unregistered_command_type_produces_nothing(self, executor, queue, make_event):
        assert executor.execute(object(), make_event("!x"), queue) == []


class TestRelaySnippetResilience:
    """Any formatter failure still relays the raw snippet."""

    def test_unexpected_formatter_exception_falls_back_to_raw(self, queue, make_event, make_formatter):
        class CrashingFormatter(make_formatter):
            def format(self, raw: str) -> str:
                raise RuntimeError("formatter crashed")

        executor = CommandExecutor(secondary_channel_id="C999", formatter=CrashingFormatter())
        effects = executor.execute(RelaySnippet("x+y"), make_event("!code x+y"), queue)
        assert effects == [
            OutboundEffect(target=EffectTarget.SECONDARY, destination="C999", text="```rs\nx+y\n```")
        ]

    def test_unencodable_snippet_falls_back_to_raw(self, queue, make_event):
        from src.core.formatter import SubprocessFormatter

        executor = CommandExecutor(secondary_channel_id="C999", formatter=SubprocessFormatter(["cat"]))
        effects = executor.execute(RelaySnippet("a\ud800b"), make_event("!code a\ud800b"), queue)
        assert len(effects) == 1
        assert effects[0].target == EffectTarget.SECONDARY
        assert effects[0].text == "```rs\na\ud800b\n```"
