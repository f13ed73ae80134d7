import logging

from rich.console import Console
from rich.logging import RichHandler

# Named loggers used across shortybot
APP_LOGGERS = (
    "Bot",
    "ShortyCommands",
    "Orchestrator",
    "ControlSurface",
    "ErrorTranslator",
    "Engagement",
    "Shoutouts",
    "shortybot",
)

# Library levels outside DEBUG: keep EventSub notices, drop HTTP and socket chatter
LIBRARY_LEVELS = {
    "twitchio": logging.INFO,
    "twitchio.eventsub": logging.INFO,
    "twitchio.http": logging.WARNING,
    "twitchio.websockets": logging.WARNING,
    "asyncpg": logging.WARNING,
    "aiohttp": logging.WARNING,
}


def setup_logging(log_level: str = "INFO") -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)

    console = Console(force_terminal=True, width=120)
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        tracebacks_width=120,
    )
    # Logger name leads each line; chat text prints verbatim
    rich_handler.setFormatter(
        logging.Formatter(fmt="[%(name)s] %(message)s", datefmt="[%Y-%m-%d %H:%M:%S]")
    )

    logging.basicConfig(level=level, handlers=[rich_handler], force=True)

    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    for name, quiet_level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(logging.DEBUG if level == logging.DEBUG else quiet_level)

    logging.getLogger("asyncio").setLevel(logging.ERROR)
    logging.getLogger("Bot").debug("Rich logging enabled")
