# event_planner/services/subscriptions.py
"""
Change subscriptions owned by the caller.

A SubscriptionManager holds the callbacks registered for table changes and
hands back a handle per subscription. Changes reach it either through
dispatch() or from Postgres LISTEN/NOTIFY via listen() and poll(), where each
notification payload is a JSON object with `table`, `type`, `new` and `old`.
"""

from typing import Any, Callable, Dict, List, Optional
from pydantic import ValidationError
from psycopg2 import sql
import itertools
import json
import logging
import select

from event_planner.models.schemas import ChangeEvent

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeEvent], None]


class SubscriptionHandle:
    """Returned by subscribe(); unsubscribing twice is harmless."""

    def __init__(self, manager: "SubscriptionManager", subscription_id: int, table: str):
        self._manager = manager
        self.subscription_id = subscription_id
        self.table = table

    @property
    def active(self) -> bool:
        return self.subscription_id in self._manager._subscriptions

    def unsubscribe(self) -> None:
        self._manager._remove(self.subscription_id)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unsubscribe()


class _Subscription:
    def __init__(self, table: str, callback: ChangeCallback, filters: Dict[str, Any], change_types):
        self.table = table
        self.callback = callback
        self.filters = filters
        self.change_types = change_types

    def matches(self, change: ChangeEvent) -> bool:
        if change.table != self.table:
            return False
        if self.change_types and change.type not in self.change_types:
            return False
        row = change.old if change.type == "DELETE" else change.new
        return all(row.get(column) == value for column, value in self.filters.items())


class SubscriptionManager:
    """Registry of change callbacks; one instance per consumer."""

    def __init__(self):
        self._subscriptions: Dict[int, _Subscription] = {}
        self._ids = itertools.count(1)
        self._connection = None

    def __len__(self):
        return len(self._subscriptions)

    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        filters: Optional[Dict[str, Any]] = None,
        change_types: Optional[List[str]] = None
    ) -> SubscriptionHandle:
        """
        Call `callback` for changes to `table`.

        Args:
            table: Table to watch
            callback: Receives each matching ChangeEvent
            filters: Column equality conditions on the changed row (the old
                row for deletes), e.g. {"user_id": "u1"}
            change_types: Restrict to some of INSERT / UPDATE / DELETE

        Returns:
            Handle used to unsubscribe
        """
        subscription_id = next(self._ids)
        self._subscriptions[subscription_id] = _Subscription(
            table, callback, dict(filters or {}), set(change_types or [])
        )
        logger.debug(f"Subscribed #{subscription_id} to {table}")
        return SubscriptionHandle(self, subscription_id, table)

    def _remove(self, subscription_id: int) -> None:
        if self._subscriptions.pop(subscription_id, None) is not None:
            logger.debug(f"Unsubscribed #{subscription_id}")

    def unsubscribe_all(self) -> None:
        self._subscriptions.clear()

    def dispatch(self, change: ChangeEvent) -> int:
        """Deliver a change to every matching subscription; returns how many were called."""
        delivered = 0
        # Copy: callbacks may unsubscribe while we iterate
        for subscription in list(self._subscriptions.values()):
            if subscription.matches(change):
                subscription.callback(change)
                delivered += 1
        return delivered

    def listen(self, connection, channel: str) -> None:
        """
        Start receiving NOTIFY payloads on `channel`.

        The connection is switched to autocommit so notifications are
        delivered outside transactions; it stays owned by the caller.
        """
        connection.autocommit = True
        with connection.cursor() as cursor:
            cursor.execute(sql.SQL("LISTEN {}").format(sql.Identifier(channel)))
        self._connection = connection
        logger.info(f"Listening for changes on channel '{channel}'")

    def poll(self, timeout: float = 0.0) -> int:
        """
        Dispatch notifications that have arrived, waiting up to `timeout` seconds.

        Returns:
            Number of notifications dispatched
        """
        if self._connection is None:
            raise RuntimeError("poll() called before listen()")

        if timeout > 0:
            select.select([self._connection], [], [], timeout)
        self._connection.poll()

        handled = 0
        while self._connection.notifies:
            notify = self._connection.notifies.pop(0)
            try:
                change = ChangeEvent.model_validate(json.loads(notify.payload))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning(f"Ignoring malformed change notification on '{notify.channel}': {e}")
                continue
            self.dispatch(change)
            handled += 1
        return handled
