"""Fixed data the commands draw on: game presets, exempt chatters, snap quotes."""

import random

# Twitch category ids for the game preset commands
LOL = "21779"
VALORANT = "516575"
TFT = "513143"
OW2 = "515025"

GAME_PRESETS: dict[str, str] = {
    "lol": LOL,
    "valorant": VALORANT,
    "tft": TFT,
    "ow2": OW2,
}

# Known bot accounts: never shouted out, never snapped
EXEMPT_CHATTERS = frozenset(
    {
        "nightbot",
        "streamelements",
        "streamlabs",
        "moobot",
        "fossabot",
        "wizebot",
        "soundalerts",
        "sery_bot",
        "commanderroot",
    }
)

SNAP_TIMEOUT_SECONDS = 15

THANOS_QUOTES = (
    "Perfectly balanced, as all things should be.",
    "I am inevitable.",
    "The hardest choices require the strongest wills.",
    "Dread it. Run from it. Destiny arrives all the same.",
    "Reality is often disappointing.",
    "I used the stones to destroy the stones.",
    "You should have gone for the head.",
)


def random_quote() -> str:
    return random.choice(THANOS_QUOTES)


def clip_edit_url(clip_id: str) -> str:
    return f"https://clips.twitch.tv/{clip_id}/edit"
