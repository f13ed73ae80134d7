from twitchio import eventsub


def get_channel_subscriptions(
    broadcaster_user_id: str, bot_id: str
) -> list[eventsub.SubscriptionPayload]:
    """EventSub subscriptions the bot needs on the broadcaster's channel."""
    return [
        eventsub.ChatMessageSubscription(broadcaster_user_id=broadcaster_user_id, user_id=bot_id),
        eventsub.ChannelRaidSubscription(to_broadcaster_user_id=broadcaster_user_id),
        eventsub.ChannelPredictionEndSubscription(broadcaster_user_id=broadcaster_user_id),
        eventsub.ChannelPollEndSubscription(broadcaster_user_id=broadcaster_user_id),
    ]
