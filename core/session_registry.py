"""Registry of per-channel translation sessions.

A channel is either without a session or has exactly one active session. Sessions live in memory only.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from models.server_models import StatsDelta
from models.session_models import Session, SessionSummary
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.server_config_store import ServerConfigStore


__all__: list[str] = ["AlreadyActiveError", "NoActiveSessionError", "SessionError", "SessionRegistry"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class SessionRegistry:
    def __init__(self, config_store: ServerConfigStore) -> None:
        self.config_store: ServerConfigStore = config_store
        self._sessions: dict[int, Session] = {}

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    def is_active(self, channel_id: int) -> bool:
        return channel_id in self._sessions

    def get(self, channel_id: int) -> Session | None:
        return self._sessions.get(channel_id)

    def sessions_for_server(self, server_id: int) -> list[Session]:
        return [session for session in self._sessions.values() if session.server_id == server_id]

    def start(self, channel_id: int, server_id: int) -> Session:
        """Start a session in a channel.

        Args:
            channel_id (int): The channel.
            server_id (int): The server owning the channel.

        Returns:
            Session: The new session with zero counters.

        Raises:
            AlreadyActiveError: If the channel already has an active session.
        """
        if channel_id in self._sessions:
            msg: str = f"Translation session already active in channel {channel_id}"
            raise AlreadyActiveError(msg)

        session = Session(channel_id=channel_id, server_id=server_id, started_at=time.monotonic())
        self._sessions[channel_id] = session
        self.config_store.update_stats(server_id, StatsDelta(sessions_started=1))
        logger.info("Translation session started in channel %s (server %s)", channel_id, server_id)
        return session

    def end(self, channel_id: int) -> SessionSummary:
        """End the session of a channel.

        Args:
            channel_id (int): The channel.

        Returns:
            SessionSummary: Duration and counters of the ended session.

        Raises:
            NoActiveSessionError: If the channel has no active session.
        """
        session: Session | None = self._sessions.pop(channel_id, None)
        if session is None:
            msg: str = f"No active translation session in channel {channel_id}"
            raise NoActiveSessionError(msg)

        summary = SessionSummary(
            channel_id=channel_id,
            duration_sec=time.monotonic() - session.started_at,
            translations=session.translations,
            tokens=session.tokens,
        )
        logger.info(
            "Translation session ended in channel %s after %s: %d translations, %d tokens",
            channel_id,
            summary.duration_text,
            summary.translations,
            summary.tokens,
        )
        return summary

    def record_translation(self, channel_id: int, token_count: int) -> None:
        """Count a delivered translation. Ignored when the session has ended in the meantime."""
        session: Session | None = self._sessions.get(channel_id)
        if session is None:
            logger.debug("Session of channel %s ended before the translation was recorded", channel_id)
            return
        session.translations += 1
        session.tokens += token_count


class SessionError(Exception):
    """Base exception for session state errors."""


class AlreadyActiveError(SessionError):
    """Raised when starting a session in a channel that already has one."""


class NoActiveSessionError(SessionError):
    """Raised when ending a session in a channel that has none."""
