"""Models for translation sessions."""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = ["Session", "SessionSummary"]


@dataclass
class Session:
    """An active translation session bound to a channel.

    Attributes:
        channel_id (int): Channel the session is bound to.
        server_id (int): Server owning the channel.
        started_at (float): Monotonic start time in seconds.
        translations (int): Translations recorded during the session.
        tokens (int): Tokens recorded during the session.
    """

    channel_id: int
    server_id: int
    started_at: float
    translations: int = 0
    tokens: int = 0


@dataclass
class SessionSummary:
    """Final figures of an ended session."""

    channel_id: int
    duration_sec: float
    translations: int
    tokens: int

    @property
    def duration_text(self) -> str:
        """Return the duration formatted as '1h 2m 3s' (leading zero units omitted)."""
        total: int = int(self.duration_sec)
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}h {minutes}m {seconds}s"
        if minutes > 0:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"
