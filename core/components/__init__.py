"""Bot components for event handling and command processing.

This package contains the bot components that handle chat events and commands.

Modules:
- base: Base class for all components
- cache_component: Translation memory lifecycle and statistics
- chat_events: Translation of messages in channels with an active session
- command: Server settings and help commands
- session_component: Session start/end and statistics commands
"""

from core.components.base import ComponentBase, ComponentDescriptor
from core.components.cache_component import MemoryServiceComponent
from core.components.chat_events import ChatEventsManager
from core.components.command import BotCommandManager
from core.components.session_component import SessionCommandManager

__all__: list[str] = [
    "BotCommandManager",
    "ChatEventsManager",
    "ComponentBase",
    "ComponentDescriptor",
    "MemoryServiceComponent",
    "SessionCommandManager",
]
