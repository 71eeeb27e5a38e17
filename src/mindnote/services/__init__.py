"""Services around the annotation engine: persistence, auto-save and settings."""

from .autosave import AutosaveScheduler
from .settings import SecretVault, Settings, SettingsStore
from .store import BlockStore, BlockStoreError, InMemoryBlockStore, RemoteBlockStore

__all__ = [
    "AutosaveScheduler",
    "BlockStore",
    "BlockStoreError",
    "InMemoryBlockStore",
    "RemoteBlockStore",
    "SecretVault",
    "Settings",
    "SettingsStore",
]
