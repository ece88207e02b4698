"""Discord translation bot launcher.

Loads the configuration file, initializes logging and runs the bot until it is stopped by a signal.
On shutdown and on fatal event loop errors, the translation memory is written to disk before exit.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, NoReturn

import discord

from config.loader import Config, ConfigLoader, ConfigLoaderError
from core.bot import Bot
from core.version import VERSION
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

CFG_FILE: Final[str] = "translator_bot.ini"
LOG_FILE: Final[str] = "translator_bot.log"
TOKEN_ENV: Final[str] = "DISCORD_TOKEN"
API_KEY_ENVS: Final[tuple[str, ...]] = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY")


def check_python_version() -> None:
    """Check if Python version is 3.12 or later.

    Raises:
        RuntimeError: If Python version is below 3.12.
    """
    if sys.version_info < (3, 12):
        msg = "Python 3.12 or later is required"
        raise RuntimeError(msg)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        print(f"\n{message}\n", file=sys.stderr)
        self.print_help(sys.stderr)
        raise SystemExit(2)


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = _ArgumentParser(
        description="Discord translation bot",
        epilog="Example: python translator_bot.py --debug --prefix ?",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--prefix", dest="prefix", metavar="PREFIX", help="Override the command prefix")
    parser.add_argument("--config", dest="config", metavar="FILE", default=CFG_FILE, help="Configuration file")
    return parser.parse_args()


def load_config(args: argparse.Namespace) -> Config:
    """Load the configuration file and apply CLI overrides.

    Raises:
        ConfigLoaderError: If the configuration file cannot be loaded.
    """
    script_name: str = Path(sys.argv[0]).stem
    config: Config = ConfigLoader(
        config_filename=args.config, script_name=script_name, debug=args.debug, prefix=args.prefix
    ).config
    return config


def install_shutdown_handlers(bot: Bot, logger: logging.Logger) -> None:
    """Close the bot on SIGINT/SIGTERM and flush the translation memory on fatal loop errors."""
    loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()

    def _request_shutdown(signame: str) -> None:
        logger.info("Received %s, shutting down", signame)
        asyncio.ensure_future(bot.close())  # noqa: RUF006 - the loop ends with the bot

    for _signal in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(_signal, _request_shutdown, _signal.name)
        except (NotImplementedError, RuntimeError):
            # Not supported on Windows event loops; KeyboardInterrupt still ends asyncio.run().
            logger.debug("Signal handler for %s not installed", _signal.name)

    def _exception_handler(event_loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        logger.critical("Unhandled event loop error: %s", context.get("message"), exc_info=context.get("exception"))
        bot.flush_memory()
        event_loop.default_exception_handler(context)

    loop.set_exception_handler(_exception_handler)


async def main() -> None:
    check_python_version()
    args: argparse.Namespace = parse_arguments()

    logger_utils = LoggerUtils(FileUtils.resolve_path(LOG_FILE))
    logger: logging.Logger = LoggerUtils.get_logger(__name__)

    try:
        config: Config = load_config(args)
    except ConfigLoaderError as err:
        logger.critical("Failed to load configuration: %s", err)
        print(f"\nError: {err}", file=sys.stderr)
        return

    if config.GENERAL.DEBUG:
        logger_utils.set_level("DEBUG")

    token: str | None = os.getenv(TOKEN_ENV)
    if not token:
        logger.critical("%s environment variable is not set", TOKEN_ENV)
        print(f"\nError: {TOKEN_ENV} environment variable is required.", file=sys.stderr)
        return

    missing_keys: list[str] = [env for env in API_KEY_ENVS if not os.getenv(env)]
    if missing_keys:
        logger.warning("Missing API keys (%s); some translation models will not work.", ", ".join(missing_keys))

    logger.info("Starting %s ver.%s", config.GENERAL.SCRIPT_NAME, VERSION)
    bot = Bot(config)
    install_shutdown_handlers(bot, logger)
    try:
        async with bot:
            await bot.start(token)
    except discord.LoginFailure as err:
        logger.critical("Discord login failed: %s", err)
    finally:
        bot.flush_memory()
        logger.info("Bot stopped")
        LoggerUtils.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nStopped by user.", file=sys.stderr)
