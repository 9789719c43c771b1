"""Tests for initial EventSub subscriptions."""

import pytest

pytest.importorskip("twitchio")

from twitchio import eventsub  # noqa: E402

from pronounbot.core.subscriptions import get_initial_subscriptions  # noqa: E402


def test_whisper_plus_one_chat_subscription_per_channel():
    subs = get_initial_subscriptions(["1", "2", "1"], "1000")

    assert isinstance(subs[0], eventsub.WhisperReceivedSubscription)
    chat = [s for s in subs if isinstance(s, eventsub.ChatMessageSubscription)]
    assert len(chat) == 2


def test_no_channels():
    subs = get_initial_subscriptions([], "1000")

    assert len(subs) == 1
