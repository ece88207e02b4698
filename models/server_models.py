"""Models for per-server configuration.

Server configuration is persisted as one JSON document per server and is
serialised with dataclasses_json.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, dataclass_json

__all__: list[str] = ["ServerConfig", "ServerStats", "StatsDelta"]


@dataclass_json
@dataclass
class ServerStats(DataClassJsonMixin):
    """Cumulative usage counters of a server.

    Attributes:
        total_translations (int): Translations delivered in the server.
        total_tokens (int): Tokens consumed by those translations.
        sessions_started (int): Number of translation sessions started.
        last_used (str | None): ISO-8601 time of the last statistics update.
    """

    total_translations: int = 0
    total_tokens: int = 0
    sessions_started: int = 0
    last_used: str | None = None


@dataclass_json
@dataclass
class ServerConfig(DataClassJsonMixin):
    """Translation settings of a server.

    Attributes:
        mode (str): Translation mode ('korean' or 'japanese').
        model (str): Backend identifier ('gpt4o', 'claude' or 'gemini').
        auto_translate (bool): Whether messages in active sessions are translated.
        stats (ServerStats): Usage counters.
    """

    mode: str = "korean"
    model: str = "gpt4o"
    auto_translate: bool = True
    stats: ServerStats = field(default_factory=ServerStats)


@dataclass
class StatsDelta:
    """Increments applied to ServerStats by a single update."""

    translations: int = 0
    tokens: int = 0
    sessions_started: int = 0
