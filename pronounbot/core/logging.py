import logging
import os

try:
    from rich.console import Console
    from rich.logging import RichHandler

    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False

# logger name -> (level when DEBUG, level otherwise)
_THIRD_PARTY_LEVELS = {
    "twitchio": (logging.DEBUG, logging.INFO),
    "twitchio.eventsub": (logging.DEBUG, logging.INFO),
    "twitchio.http": (logging.DEBUG, logging.WARNING),
    "twitchio.websockets": (logging.DEBUG, logging.WARNING),
    "httpx": (logging.INFO, logging.WARNING),
    "redis": (logging.INFO, logging.WARNING),
    "aiohttp": (logging.WARNING, logging.WARNING),
    "asyncio": (logging.ERROR, logging.ERROR),
}


def _plain_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def setup_logging(log_level: str | None = None) -> None:
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, log_level, logging.INFO)
    logger = logging.getLogger("Bot")

    if RICH_AVAILABLE:
        try:
            rich_handler = RichHandler(
                console=Console(force_terminal=True, width=120),
                show_time=True,
                show_level=True,
                show_path=False,
                markup=True,
                rich_tracebacks=True,
                tracebacks_show_locals=False,
                tracebacks_width=120,
            )
            rich_handler.setFormatter(
                logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]")
            )

            logging.basicConfig(
                level=level,
                format="%(message)s",
                datefmt="[%Y-%m-%d %H:%M:%S]",
                handlers=[rich_handler],
                force=True,
            )
            logger.info("[bold green]✓[/bold green] Rich logging enabled", extra={"markup": True})
        except Exception as e:
            _plain_logging(level)
            logger.warning(f"Failed to setup Rich logging: {e}, using standard logging")
    else:
        _plain_logging(level)
        logger.info("Standard logging enabled (install 'rich' for better output)")

    debug = level == logging.DEBUG
    for name, (debug_level, normal_level) in _THIRD_PARTY_LEVELS.items():
        logging.getLogger(name).setLevel(debug_level if debug else normal_level)
