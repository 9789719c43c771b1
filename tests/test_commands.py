"""Tests for the !pn and !join command flows."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from pronounbot.shared.commands import (
    JOINED_CHANNEL,
    MISSING_USERNAME,
    USER_NOT_FOUND,
    ChannelJoin,
    ChatUser,
    PronounLookup,
    is_join_command,
    parse_username,
)
from pronounbot.shared.errors import CommandValidationError
from pronounbot.shared.models.pronoun import ProviderResult
from pronounbot.shared.repositories.channel import ChannelRepository
from tests.fakes import FakeNotifier, StaticProvider, make_resolver


class TestParsing:
    def test_strips_at_sign(self):
        assert parse_username("@SomeOne") == "SomeOne"

    def test_uses_first_word(self):
        assert parse_username("someone please") == "someone"

    @pytest.mark.parametrize("argument", [None, "", "   ", "@"])
    def test_missing_username(self, argument):
        with pytest.raises(CommandValidationError, match=MISSING_USERNAME):
            parse_username(argument)

    @pytest.mark.parametrize("text", ["!join", "!JOIN", "  !Join  "])
    def test_join_command(self, text):
        assert is_join_command(text)

    @pytest.mark.parametrize("text", [None, "", "!join now", "join", "!pn"])
    def test_not_join_command(self, text):
        assert not is_join_command(text)


class TestPronounLookup:
    def _lookup(self, cache, notifier, provider, user=None):
        fetch_user = AsyncMock(return_value=user)
        lookup = PronounLookup(make_resolver(cache, notifier, provider), fetch_user, notifier)
        return lookup, fetch_user

    @pytest.mark.asyncio
    async def test_missing_argument_replies_without_lookups(self, cache, notifier):
        provider = StaticProvider("a", ProviderResult.found("a", "tt"))
        lookup, fetch_user = self._lookup(cache, notifier, provider)

        reply = await lookup.respond(None)

        assert reply == MISSING_USERNAME
        fetch_user.assert_not_awaited()
        assert provider.calls == []
        assert cache.size == 0

    @pytest.mark.asyncio
    async def test_found(self, cache, notifier):
        provider = StaticProvider("a", ProviderResult.found("a", "tt"))
        user = ChatUser(id="42", name="someone", display_name="SomeOne")
        lookup, fetch_user = self._lookup(cache, notifier, provider, user)

        reply = await lookup.respond("@someone")

        assert reply == "@SomeOne uses they/them pronouns"
        fetch_user.assert_awaited_once_with("someone")
        assert provider.calls == [("42", "someone")]

    @pytest.mark.asyncio
    async def test_not_found_replies_with_error_only(self, cache, notifier):
        provider = StaticProvider("a", ProviderResult.unspecified("a"))
        user = ChatUser(id="7", name="someone", display_name="SomeOne")
        lookup, _ = self._lookup(cache, notifier, provider, user)

        reply = await lookup.respond("someone")

        assert reply == "pronouns not found for user someone"
        assert "uses" not in reply
        assert len(notifier.whispers) == 1

    @pytest.mark.asyncio
    async def test_unknown_twitch_user(self, cache, notifier):
        provider = StaticProvider("a", ProviderResult.found("a", "tt"))
        lookup, _ = self._lookup(cache, notifier, provider, None)

        assert await lookup.respond("nobody") == USER_NOT_FOUND
        assert provider.calls == []
        assert notifier.whispers == []

    @pytest.mark.asyncio
    async def test_helix_error_reads_as_unknown_user(self, cache, notifier):
        provider = StaticProvider("a", ProviderResult.found("a", "tt"))
        fetch_user = AsyncMock(side_effect=RuntimeError("helix down"))
        lookup = PronounLookup(make_resolver(cache, notifier, provider), fetch_user, notifier)

        assert await lookup.respond("someone") == USER_NOT_FOUND
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_handle_replies_to_triggering_message(self, cache, notifier):
        provider = StaticProvider("a", ProviderResult.found("a", "hehim"))
        user = ChatUser(id="42", name="someone", display_name="SomeOne")
        lookup, _ = self._lookup(cache, notifier, provider, user)

        reply = await lookup.handle("900", "msg-1", "someone")

        assert reply == "@SomeOne uses He/Him pronouns"
        assert notifier.replies == [("900", "msg-1", reply)]

    @pytest.mark.asyncio
    async def test_handle_missing_argument_still_replies(self, cache, notifier):
        provider = StaticProvider("a", ProviderResult.found("a", "tt"))
        lookup, fetch_user = self._lookup(cache, notifier, provider)

        await lookup.handle("900", "msg-2", None)

        assert notifier.replies == [("900", "msg-2", MISSING_USERNAME)]
        fetch_user.assert_not_awaited()
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_handle_failed_reply_is_not_fatal(self, cache):
        notifier = FakeNotifier(fail_replies=True)
        provider = StaticProvider("a", ProviderResult.found("a", "tt"))
        lookup, _ = self._lookup(cache, notifier, provider, None)

        assert await lookup.handle("900", "msg-3", "nobody") == USER_NOT_FOUND
        assert notifier.replies == []


class TestPronounCommands:
    @pytest.mark.asyncio
    async def test_answer_routes_through_lookup_handle(self):
        pytest.importorskip("twitchio")
        from pronounbot.components.pronouns import PronounCommands

        bot = SimpleNamespace(pronoun_lookup=SimpleNamespace(handle=AsyncMock(return_value="ok")))
        ctx = SimpleNamespace(channel=SimpleNamespace(id=900), message=SimpleNamespace(id="msg-4"))

        assert await PronounCommands(bot).answer(ctx, "@someone") == "ok"
        bot.pronoun_lookup.handle.assert_awaited_once_with("900", "msg-4", "@someone")


class TestChannelJoin:
    @pytest.mark.asyncio
    async def test_join_persists_and_confirms(self, tmp_path, notifier):
        repo = ChannelRepository(tmp_path / "config.json")
        join_channel = AsyncMock()
        flow = ChannelJoin(repo, join_channel, notifier)

        assert await flow.join("123", "streamer")

        join_channel.assert_awaited_once_with("123")
        assert (await repo.load()).users == ["123"]
        assert notifier.whispers == [("123", JOINED_CHANNEL)]

    @pytest.mark.asyncio
    async def test_failed_transport_join_still_persists(self, tmp_path, notifier):
        repo = ChannelRepository(tmp_path / "config.json")
        flow = ChannelJoin(repo, AsyncMock(side_effect=RuntimeError("403")), notifier)

        assert await flow.join("123", "streamer")

        assert (await repo.load()).users == ["123"]
        assert notifier.whispers == [("123", JOINED_CHANNEL)]

    @pytest.mark.asyncio
    async def test_repeat_join_appends_again(self, tmp_path, notifier):
        repo = ChannelRepository(tmp_path / "config.json")
        join_channel = AsyncMock()
        flow = ChannelJoin(repo, join_channel, notifier)

        await flow.join("123", "streamer")
        await flow.join("123", "streamer")

        assert (await repo.load()).users == ["123", "123"]
        assert join_channel.await_count == 2

    @pytest.mark.asyncio
    async def test_write_failure_skips_confirmation(self, tmp_path, notifier):
        repo = ChannelRepository(tmp_path / "config.json")
        repo.append = AsyncMock(side_effect=OSError("disk full"))
        flow = ChannelJoin(repo, AsyncMock(), notifier)

        assert not await flow.join("123", "streamer")
        assert notifier.whispers == []

    @pytest.mark.asyncio
    async def test_corrupt_channel_file_skips_confirmation(self, tmp_path, notifier):
        path = tmp_path / "config.json"
        path.write_text('["1"]')
        flow = ChannelJoin(ChannelRepository(path), AsyncMock(), notifier)

        assert not await flow.join("123", "streamer")
        assert notifier.whispers == []
        assert path.read_text() == '["1"]'

    @pytest.mark.asyncio
    async def test_failed_confirmation_is_not_fatal(self, tmp_path):
        repo = ChannelRepository(tmp_path / "config.json")
        flow = ChannelJoin(repo, AsyncMock(), FakeNotifier(fail=True))

        assert await flow.join("123", "streamer")
