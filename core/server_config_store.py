"""Per-server configuration persisted as JSON documents.

Each server has one document at '<DATA_DIR>/servers/<server id>.json'. Documents are created lazily with
the defaults of the TRANSLATION section and written back on every mutation.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from core.trans.const_languages import BACKEND_IDS, MODES
from models.server_models import ServerConfig, ServerStats, StatsDelta
from utils.file_utils import FileMissingError, FileUtils, InvalidFileFormatError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config


__all__: list[str] = ["ServerConfigStore"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SERVERS_DIR_NAME: str = "servers"


class ServerConfigStore:
    """Load, save and update per-server configuration.

    Loaded documents are kept in memory. A failed write is logged and the in-memory state is kept,
    so the bot keeps working with the latest values until the next successful write.
    """

    def __init__(self, config: Config, *, directory: Path | None = None) -> None:
        self.config: Config = config
        self._directory: Path = (
            directory
            if directory is not None
            else FileUtils.resolve_path(Path(config.GENERAL.DATA_DIR) / SERVERS_DIR_NAME)
        )
        self._configs: dict[int, ServerConfig] = {}

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, server_id: int) -> Path:
        return self._directory / f"{server_id}.json"

    def default_config(self) -> ServerConfig:
        return ServerConfig(
            mode=self.config.TRANSLATION.DEFAULT_MODE,
            model=self.config.TRANSLATION.DEFAULT_MODEL,
            auto_translate=self.config.TRANSLATION.AUTO_TRANSLATE,
            stats=ServerStats(),
        )

    def load(self, server_id: int) -> ServerConfig:
        """Return the configuration of a server, creating it with defaults on first access.

        Args:
            server_id (int): The server.

        Returns:
            ServerConfig: The live configuration object of the server.
        """
        cached: ServerConfig | None = self._configs.get(server_id)
        if cached is not None:
            return cached

        server_config: ServerConfig
        path: Path = self.path_for(server_id)
        try:
            server_config = self._from_json(FileUtils.read_json(path))
        except FileMissingError:
            logger.info("Creating default configuration for server %s", server_id)
            server_config = self.default_config()
            self._configs[server_id] = server_config
            self._write(server_id)
            return server_config
        except (InvalidFileFormatError, KeyError, TypeError, ValueError) as err:
            logger.warning("Configuration of server %s is unreadable, using defaults: %s", server_id, err)
            server_config = self.default_config()

        self._configs[server_id] = server_config
        return server_config

    def _from_json(self, payload: Any) -> ServerConfig:
        if not isinstance(payload, dict):
            msg: str = f"Expected a JSON object, got {type(payload).__name__}"
            raise TypeError(msg)
        server_config: ServerConfig = ServerConfig.from_dict(payload)

        if server_config.mode not in MODES:
            logger.warning("Unknown mode '%s' replaced by default", server_config.mode)
            server_config.mode = self.config.TRANSLATION.DEFAULT_MODE
        if server_config.model not in BACKEND_IDS:
            logger.warning("Unknown model '%s' replaced by default", server_config.model)
            server_config.model = self.config.TRANSLATION.DEFAULT_MODEL
        return server_config

    def save(self, server_id: int, server_config: ServerConfig) -> bool:
        """Replace the configuration of a server and persist it.

        Returns:
            bool: True if the document was written.
        """
        self._configs[server_id] = server_config
        return self._write(server_id)

    def update_stats(self, server_id: int, delta: StatsDelta) -> bool:
        """Add the delta to the server statistics, refresh 'last_used' and persist.

        Args:
            server_id (int): The server.
            delta (StatsDelta): Increments to apply.

        Returns:
            bool: True if the document was written.
        """
        stats: ServerStats = self.load(server_id).stats
        stats.total_translations += delta.translations
        stats.total_tokens += delta.tokens
        stats.sessions_started += delta.sessions_started
        stats.last_used = datetime.now(UTC).isoformat()
        return self._write(server_id)

    def _write(self, server_id: int) -> bool:
        path: Path = self.path_for(server_id)
        try:
            FileUtils.write_json_atomic(path, self._configs[server_id].to_dict())
        except (OSError, TypeError, ValueError) as err:
            logger.error("Failed to save configuration of server %s: %s", server_id, err)
            return False
        logger.debug("Configuration of server %s saved to '%s'", server_id, path)
        return True
