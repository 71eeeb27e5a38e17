"""Event bus connecting the annotation callers (editor, search, auto-save).

Handlers for bound methods are held weakly so a closed editor session does not
keep receiving events.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar
from weakref import WeakMethod

from ..core.blocks import ContentBlock
from ..core.levels import ImportanceLevel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all events."""


@dataclass(slots=True)
class RangesPainted(Event):
    """A span of a text block was painted with a level or cleared.

    Attributes:
        block_id: The painted block.
        start: Span start offset.
        end: Span end offset.
        level: The level applied, or ``None`` when the span was cleared.
        range_count: Number of ranges stored after the paint.
    """

    block_id: str
    start: int
    end: int
    level: ImportanceLevel | None
    range_count: int


@dataclass(slots=True)
class BlockContentEdited(Event):
    """The raw content of a text block changed.

    Attributes:
        block_id: The edited block.
        length: Content length after the edit.
    """

    block_id: str
    length: int


@dataclass(slots=True)
class FilterChanged(Event):
    """The importance filter of an editor session changed."""

    block_id: str
    is_default: bool


@dataclass(slots=True)
class BlockSaved(Event):
    """A block was written to the block store by the auto-saver.

    Attributes:
        block_id: The saved block.
        block: The exact snapshot that was written, when known.
    """

    block_id: str
    block: ContentBlock | None = None


@dataclass(slots=True)
class BlockSaveFailed(Event):
    """Persisting a block failed; the block stays dirty in its session."""

    block_id: str
    error: str


# Published on every keystroke; not logged per publish.
_QUIET_EVENT_TYPES: set[type] = {BlockContentEdited}


class EventBus(Generic[E]):
    """Synchronous publish/subscribe bus.

    Handlers run in registration order. A handler that raises is logged and
    the remaining handlers still run. Not thread-safe: publish from the thread
    that owns the editor sessions.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: defaultdict[type[Event], list[_HandlerRef]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Register ``handler`` for events of exactly ``event_type``.

        Subscribing the same handler twice results in two invocations.
        """
        self._handlers[event_type].append(_HandlerRef.create(handler))
        logger.debug("Subscribed handler %s to event type %s", _handler_name(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers is None:
            return
        for index, handler_ref in enumerate(handlers):
            if handler_ref.matches(handler):
                handlers.pop(index)
                logger.debug(
                    "Unsubscribed handler %s from event type %s",
                    _handler_name(handler),
                    event_type.__name__,
                )
                return

    def publish(self, event: E) -> None:
        event_type = type(event)
        handlers = self._handlers.get(event_type)
        is_quiet = event_type in _QUIET_EVENT_TYPES
        if not handlers:
            if not is_quiet:
                logger.debug("No handlers for event type %s", event_type.__name__)
            return
        if not is_quiet:
            logger.debug("Publishing %s to %d handler(s)", event_type.__name__, len(handlers))

        dead_indices: list[int] = []
        for index, handler_ref in enumerate(list(handlers)):
            handler = handler_ref.resolve()
            if handler is None:
                dead_indices.append(index)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s raised exception for event %s",
                    _handler_name(handler),
                    event_type.__name__,
                )

        for index in reversed(dead_indices):
            handlers.pop(index)

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event_type: type[E] | None = None) -> int:
        """Return the handler count for ``event_type``, or across all types."""
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())


class _HandlerRef:
    """Weak reference for bound methods, strong reference for plain callables."""

    __slots__ = ("_ref", "_is_weak")

    def __init__(self, handler_ref: WeakMethod | Handler, is_weak: bool) -> None:
        self._ref = handler_ref
        self._is_weak = is_weak

    @classmethod
    def create(cls, handler: Handler) -> _HandlerRef:
        if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
            try:
                return cls(WeakMethod(handler), is_weak=True)
            except TypeError:
                pass
        return cls(handler, is_weak=False)

    def resolve(self) -> Handler | None:
        if not self._is_weak:
            return self._ref  # type: ignore[return-value]
        return self._ref()  # type: ignore[operator]

    def matches(self, handler: Handler) -> bool:
        resolved = self.resolve()
        if resolved is None:
            return False
        return resolved == handler


def _handler_name(handler: Handler) -> str:
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return f"{type(handler.__self__).__name__}.{handler.__func__.__name__}"
    if hasattr(handler, "__name__"):
        return handler.__name__
    return repr(handler)


__all__ = [
    "BlockContentEdited",
    "BlockSaveFailed",
    "BlockSaved",
    "Event",
    "EventBus",
    "FilterChanged",
    "Handler",
    "RangesPainted",
]
