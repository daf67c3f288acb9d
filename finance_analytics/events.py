import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = ['TRANSACTIONS_CHANGED', 'CATEGORIES_CHANGED', 'Event', 'EventBus', 'Handler']

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )
        logger.debug("publishing %s to %d handler(s)", name, len(self._subscribers[name]))

        # copy so handlers may unsubscribe while being notified
        return [handler(event, payload) for handler in list(self._subscribers[name])]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if name in self._subscribers:
            if handler in self._subscribers[name]:
                self._subscribers[name].remove(handler)

    def subscriber_count(self, name: str) -> int:
        return len(self._subscribers.get(name, []))


TRANSACTIONS_CHANGED = "TRANSACTIONS_CHANGED"
CATEGORIES_CHANGED = "CATEGORIES_CHANGED"
