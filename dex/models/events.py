"""Audit records emitted by the pool.

Each successful operation appends exactly one record to the pool's
EventLog. Failed operations append nothing.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class PoolEvent:
    """Base class for pool audit records."""

    name: ClassVar[str] = "PoolEvent"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict with the event name under "event"."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class LiquidityAdded(PoolEvent):
    """A provider deposited both assets and received claims."""

    name: ClassVar[str] = "LiquidityAdded"

    provider: str
    amount_a: int
    amount_b: int
    claims_minted: int


@dataclass(frozen=True)
class LiquidityRemoved(PoolEvent):
    """A provider burned claims and received both assets."""

    name: ClassVar[str] = "LiquidityRemoved"

    provider: str
    amount_a: int
    amount_b: int
    claims_burned: int


@dataclass(frozen=True)
class Swap(PoolEvent):
    """A trader exchanged one pooled asset for the other."""

    name: ClassVar[str] = "Swap"

    trader: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int


class EventLog:
    """Append-only, thread-safe sequence of pool events."""

    def __init__(self) -> None:
        self._events: list[PoolEvent] = []
        self._lock = threading.Lock()

    def append(self, event: PoolEvent) -> None:
        with self._lock:
            self._events.append(event)

    def of_type(self, event_type: type[PoolEvent]) -> list[PoolEvent]:
        """Return all events of the given type, oldest first."""
        with self._lock:
            return [e for e in self._events if isinstance(e, event_type)]

    def last(self) -> PoolEvent | None:
        with self._lock:
            return self._events[-1] if self._events else None

    def snapshot(self) -> tuple[PoolEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[PoolEvent]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"EventLog({len(self)} events)"
