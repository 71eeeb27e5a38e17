"""Composition root wiring settings, logging, storage and editor sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .core.blocks import TextBlock
from .editor.session import BlockEditorSession
from .services.autosave import AutosaveScheduler
from .services.settings import Settings, SettingsStore
from .services.store import BlockStore, InMemoryBlockStore, RemoteBlockStore
from .ui.events import BlockSaved, EventBus
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)


def configure_logging(settings: Settings, *, force: bool = False) -> Path:
    return logging_utils.setup_logging(settings, force=force)


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings; unreadable files fall back to defaults with a warning."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


@dataclass
class AnnotationRuntime:
    """Shared services for every open editor session."""

    settings: Settings
    store: BlockStore
    event_bus: EventBus
    autosaver: AutosaveScheduler
    sessions: dict[str, BlockEditorSession] = field(default_factory=dict)

    def open_session(self, block: TextBlock) -> BlockEditorSession:
        """Return the session for ``block.id``, creating it on first use."""

        session = self.sessions.get(block.id)
        if session is None:
            session = BlockEditorSession(block, event_bus=self.event_bus, autosaver=self.autosaver)
            self.sessions[block.id] = session
        return session

    def close_session(self, block_id: str) -> None:
        self.sessions.pop(block_id, None)

    async def aclose(self) -> None:
        await self.autosaver.flush()
        await self.autosaver.aclose()
        if isinstance(self.store, RemoteBlockStore):
            await self.store.aclose()

    def _on_block_saved(self, event: BlockSaved) -> None:
        session = self.sessions.get(event.block_id)
        if session is not None and isinstance(event.block, TextBlock):
            session.mark_saved(event.block)


def build_runtime(settings: Settings, *, store: BlockStore | None = None) -> AnnotationRuntime:
    """Create the runtime; without ``store`` and ``store_url`` blocks stay in memory."""

    if store is None:
        if settings.store_url:
            store = RemoteBlockStore(
                settings.store_url,
                token=settings.api_token or None,
                timeout=settings.request_timeout,
                max_retries=settings.max_retries,
                retry_min_seconds=settings.retry_min_seconds,
                retry_max_seconds=settings.retry_max_seconds,
            )
        else:
            store = InMemoryBlockStore()
    bus: EventBus = EventBus()
    autosaver = AutosaveScheduler(store.put, delay=settings.autosave_delay, event_bus=bus)
    runtime = AnnotationRuntime(settings=settings, store=store, event_bus=bus, autosaver=autosaver)
    bus.subscribe(BlockSaved, runtime._on_block_saved)
    _LOGGER.debug("Annotation runtime ready (store=%s)", type(store).__name__)
    return runtime
