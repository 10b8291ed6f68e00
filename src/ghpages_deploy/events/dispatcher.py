from __future__ import annotations

import logging
from typing import Any

from ghpages_deploy.events.observer import EventObserver
from ghpages_deploy.events.types import EVENT_TYPE_MAP, Event

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Turn ``emit(name, **fields)`` calls from the stage hooks into event models.

    Observers are called in registration order. Names with no model in
    ``EVENT_TYPE_MAP`` are dropped.
    """

    def __init__(self, *observers: EventObserver) -> None:
        self._observers: list[EventObserver] = list(observers)

    def add_observer(self, observer: EventObserver) -> None:
        self._observers.append(observer)

    def emit(self, event_type: str, **data: Any) -> None:
        model = EVENT_TYPE_MAP.get(event_type)
        if model is None:
            logger.debug("No event model for '%s'; dropping it", event_type)
            return
        event: Event = model(**data)
        for observer in self._observers:
            observer.on_event(event)
