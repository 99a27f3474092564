"""Typed event bus — one-shot notifications for the presentation layer.

Every user-visible outcome of an engine action is published here as a
frozen dataclass carrying a human-readable ``message``. The presentation
layer subscribes and renders; the engine never formats anything else.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Timer events --------------------------------------------------------

@dataclass(frozen=True)
class SessionCompleted:
    """A focus session counted all the way down to zero."""
    reward: dict[str, int]
    focus_tokens: int
    message: str


# -- Fortress events -----------------------------------------------------

@dataclass(frozen=True)
class StructureBuilt:
    """A structure was upgraded to the next level."""
    kind: str
    level: int
    power_gain: int
    message: str


@dataclass(frozen=True)
class BuildRejected:
    """An upgrade was refused (not enough resources, unknown kind)."""
    kind: str
    cost: dict[str, int]
    message: str


# -- Taming events -------------------------------------------------------

@dataclass(frozen=True)
class CreatureTamed:
    """A wild encounter reached its taming target and joined the stable."""
    creature_id: str
    species: str
    level: int
    power_gain: int
    message: str


@dataclass(frozen=True)
class TamingRejected:
    """A feed/calm/walk action was refused."""
    action: str
    creature_id: str
    message: str


# -- Raid events ---------------------------------------------------------

@dataclass(frozen=True)
class RaidResolved:
    """A raid was fought; ``result`` is "victory" or "breached"."""
    result: str
    daily: bool
    effective_my_power: int
    effective_enemy_power: int
    perk_lines: list[str] = field(default_factory=list)
    message: str = ""


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Simple synchronous event bus with typed events.

    Usage:
        bus = EventBus()
        bus.on(CreatureTamed, lambda e: print(e.message))
        bus.emit(CreatureTamed(creature_id="Raptor-1", species="Raptor",
                               level=1, power_gain=15, message="..."))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)
        self._catch_all: list[Callable[[Any], None]] = []

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for an event type."""
        self._handlers[event_type].append(handler)

    def on_any(self, handler: Callable[[Any], None]) -> None:
        """Register a handler that receives every event."""
        self._catch_all.append(handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unregister a handler."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers."""
        for handler in self._handlers.get(type(event), []):
            handler(event)
        for handler in self._catch_all:
            handler(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        self._catch_all.clear()
