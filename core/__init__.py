"""Core bot components and managers for the translator bot.

This package contains the main bot class, shared data management, session and server configuration
stores, components, the translation memory and the translation backends.
"""

from core.bot import Bot
from core.shared_data import SharedData
from core.version import VERSION

__all__: list[str] = [
    "VERSION",
    "Bot",
    "SharedData",
]
