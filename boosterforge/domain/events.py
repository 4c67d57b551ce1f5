"""Domain event dispatch."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, Mapping

EventPayload = Mapping[str, Any]
EventListener = Callable[[EventPayload], Awaitable[None]]


class EventBus:
    """Async pub-sub used to make reward outcomes observable.

    Listeners run sequentially in subscription order; an exception raised by
    a listener propagates to the publisher.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].append(listener)

    async def publish(self, event_name: str, payload: EventPayload) -> None:
        for listener in list(self._listeners.get(event_name, ())):
            await listener(payload)


class EventRecorder:
    """Listener that keeps every payload it receives, grouped by event name."""

    def __init__(self) -> None:
        self.events: DefaultDict[str, list[EventPayload]] = defaultdict(list)

    def attach(self, bus: EventBus, *event_names: str) -> "EventRecorder":
        for name in event_names:
            bus.subscribe(name, self._listener_for(name))
        return self

    def _listener_for(self, name: str) -> EventListener:
        async def listener(payload: EventPayload) -> None:
            self.events[name].append(payload)

        return listener
