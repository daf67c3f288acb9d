import logging
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Union

from finance_analytics.buckets import DateLike, as_day
from finance_analytics.config import DEFAULT_USER_ID, STRICT_VALIDATION
from finance_analytics.domain import AnalyticsSnapshot, Category, Transaction, ValidationError
from finance_analytics.events import (
    CATEGORIES_CHANGED,
    TRANSACTIONS_CHANGED,
    Event,
    EventBus,
)
from finance_analytics.functional import ensure_valid, validate_category, validate_transaction
from finance_analytics.memo import compute_snapshot
from finance_analytics.store import DataStore, InMemoryStore, load_seed

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Keeps one user's analytics snapshot in step with the data store.

    The service owns the change subscription; the engine functions it calls
    stay pure. Every TRANSACTIONS_CHANGED / CATEGORIES_CHANGED event for the
    user triggers a refetch and recompute, and so does a change of day.
    """

    def __init__(
        self,
        store: DataStore,
        user_id: str,
        bus: Optional[EventBus] = None,
        strict: bool = STRICT_VALIDATION,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store
        self.user_id = user_id
        if bus is None:
            bus = getattr(store, "bus", None)
        if bus is None:
            bus = EventBus()
        self.bus = bus
        self.strict = strict
        self.clock = clock
        self._snapshot: Optional[AnalyticsSnapshot] = None
        self._snapshot_day: Optional[date] = None
        self._pinned = False
        self._subscribed = False

    @property
    def snapshot(self) -> AnalyticsSnapshot:
        # a snapshot computed for an explicit `now` stays until the next refresh
        if self._snapshot is None or (not self._pinned and self._snapshot_day != self.clock()):
            return self.refresh()
        return self._snapshot

    def start(self) -> AnalyticsSnapshot:
        if not self._subscribed:
            self.bus.subscribe(TRANSACTIONS_CHANGED, self._on_change)
            self.bus.subscribe(CATEGORIES_CHANGED, self._on_change)
            self._subscribed = True
            logger.info("analytics for user %s subscribed to store changes", self.user_id)
        return self.refresh()

    def stop(self) -> None:
        if self._subscribed:
            self.bus.unsubscribe(TRANSACTIONS_CHANGED, self._on_change)
            self.bus.unsubscribe(CATEGORIES_CHANGED, self._on_change)
            self._subscribed = False
            logger.info("analytics for user %s unsubscribed", self.user_id)

    def refresh(self, now: Optional[DateLike] = None) -> AnalyticsSnapshot:
        transactions = tuple(self.store.list_transactions(self.user_id))
        categories = tuple(self.store.list_categories(self.user_id))
        if self.strict:
            self._validate(transactions, categories)

        self._pinned = now is not None
        today = as_day(now) if now is not None else self.clock()
        self._snapshot = compute_snapshot(transactions, categories, today)
        self._snapshot_day = today
        logger.debug(
            "recomputed analytics for user %s on %s: %d transactions, %d categories",
            self.user_id, today, len(transactions), len(categories),
        )
        return self._snapshot

    def _validate(self, transactions: tuple[Transaction, ...], categories: tuple[Category, ...]) -> None:
        try:
            for c in categories:
                ensure_valid(validate_category(c))
            for t in transactions:
                ensure_valid(validate_transaction(t, categories))
        except ValidationError as e:
            logger.warning("rejected data for user %s: %s", self.user_id, e)
            raise

    def _on_change(self, event: Event, payload: dict) -> dict:
        if payload.get("user_id") != self.user_id:
            return {}
        self.refresh()
        return {"refreshed": True, "event": event.name, "user_id": self.user_id}


def open_session(
    seed_path: Optional[Union[str, Path]] = None,
    user_id: str = DEFAULT_USER_ID,
    **service_options,
) -> AnalyticsService:
    """Build an isolated store, bus and started service for one UI session.

    With a seed file the seed's user is used; otherwise the store starts empty.
    """
    bus = EventBus()
    if seed_path is not None and Path(seed_path).exists():
        user_id, store = load_seed(seed_path, bus=bus)
    else:
        store = InMemoryStore(bus=bus)
    service = AnalyticsService(store, user_id, bus=bus, **service_options)
    service.start()
    return service
