from collections.abc import Iterable

from twitchio import eventsub


def get_channel_subscriptions(
    broadcaster_user_id: str, bot_id: str
) -> list[eventsub.SubscriptionPayload]:
    """EventSub subscriptions needed to read a channel's chat."""
    return [
        eventsub.ChatMessageSubscription(broadcaster_user_id=broadcaster_user_id, user_id=bot_id),
    ]


def get_initial_subscriptions(
    channel_ids: Iterable[str], bot_id: str
) -> list[eventsub.SubscriptionPayload]:
    """Bot whisper subscription plus chat for every distinct joined channel."""
    subs: list[eventsub.SubscriptionPayload] = [
        eventsub.WhisperReceivedSubscription(user_id=bot_id),
    ]
    for channel_id in dict.fromkeys(channel_ids):
        subs.extend(get_channel_subscriptions(channel_id, bot_id))
    return subs
