"""Shared data management for bot components.

This module defines the SharedData class, which serves as a centralized container for shared resources and services
used across different bot components: configuration, translation memory, backends, the translation pipeline,
the concurrency queue, sessions, per-server configuration and webhook delivery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.cache.manager import TranslationMemory
from core.server_config_store import ServerConfigStore
from core.session_registry import SessionRegistry
from core.trans.manager import BackendManager
from core.trans.pipeline import TranslationPipeline
from handlers.webhook_manager import WebhookManager
from utils.concurrency_queue import ConcurrencyQueue

if TYPE_CHECKING:
    from config.loader import Config
    from models.translation_models import TranslationOutcome


__all__: list[str] = ["SharedData"]


@dataclass
class SharedData:
    _config: Config = field()
    _memory: TranslationMemory = field(init=False)
    _backend_manager: BackendManager = field(init=False)
    _pipeline: TranslationPipeline = field(init=False)
    _queue: ConcurrencyQueue[TranslationOutcome] = field(init=False)
    _config_store: ServerConfigStore = field(init=False)
    _session_registry: SessionRegistry = field(init=False)
    _webhook_manager: WebhookManager = field(init=False)
    _initialized: bool = field(default=False, init=False)

    async def async_init(self) -> None:
        self._memory = TranslationMemory(self.config)
        self._backend_manager = BackendManager(self.config)
        await self._backend_manager.initialize()
        self._pipeline = TranslationPipeline(self.config, self._memory, self._backend_manager)
        self._queue = ConcurrencyQueue(self.config.TRANSLATION.CONCURRENCY_LIMIT)
        self._config_store = ServerConfigStore(self.config)
        self._session_registry = SessionRegistry(self._config_store)
        self._webhook_manager = WebhookManager(self.config)
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def config(self) -> Config:
        return self._config

    @property
    def memory(self) -> TranslationMemory:
        return self._memory

    @property
    def backend_manager(self) -> BackendManager:
        return self._backend_manager

    @property
    def pipeline(self) -> TranslationPipeline:
        return self._pipeline

    @property
    def queue(self) -> ConcurrencyQueue[TranslationOutcome]:
        return self._queue

    @property
    def config_store(self) -> ServerConfigStore:
        return self._config_store

    @property
    def session_registry(self) -> SessionRegistry:
        return self._session_registry

    @property
    def webhook_manager(self) -> WebhookManager:
        return self._webhook_manager
