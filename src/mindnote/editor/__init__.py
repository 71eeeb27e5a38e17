"""Editor surface: block editing sessions and the highlight overlay.

The Qt highlighter is imported lazily so headless callers only need the
session.
"""

from importlib import import_module
from typing import Any

from .session import BlockEditorSession

__all__ = ["BlockEditorSession", "highlighter"]


def __getattr__(name: str) -> Any:
    if name == "highlighter":
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
