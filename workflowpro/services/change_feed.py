"""Row-level change notifications for the five dashboard tables.

Changes are collected from each session flush and published only once the
transaction commits, so subscribers never hear about rolled-back writes.
Route handlers run in worker threads; every subscriber owns an asyncio queue
bound to the loop its WebSocket runs on, and events are handed over with
``call_soon_threadsafe``.
"""
import asyncio
import threading

import structlog
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from workflowpro.config import CHANGE_FEED_SCHEMA
from workflowpro.models import TRACKED_MODELS

logger = structlog.get_logger(__name__)

_PENDING_KEY = "pending_change_events"


class ChangeHub:
    def __init__(self) -> None:
        self._subscribers: dict[asyncio.Queue, asyncio.AbstractEventLoop] = {}
        self._lock = threading.Lock()

    def subscribe(self) -> asyncio.Queue:
        """Register a subscriber. Must be called from inside a running loop."""
        queue: asyncio.Queue = asyncio.Queue()
        with self._lock:
            self._subscribers[queue] = asyncio.get_running_loop()
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        with self._lock:
            self._subscribers.pop(queue, None)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, message: dict) -> None:
        with self._lock:
            targets = list(self._subscribers.items())
        for queue, loop in targets:
            try:
                loop.call_soon_threadsafe(queue.put_nowait, message)
            except RuntimeError:
                # Loop already closed; the subscriber is gone.
                logger.info("change_subscriber_dropped", table=message.get("table"))
                self.unsubscribe(queue)


change_hub = ChangeHub()


def _record_id(instance):
    # Read from the identity key; deleted rows cannot be refreshed
    identity = inspect(instance).identity
    if identity:
        return identity[0]
    return instance.__dict__.get("id")


def _change_message(operation: str, instance) -> dict:
    return {
        "event": operation,
        "schema": CHANGE_FEED_SCHEMA,
        "table": instance.__tablename__,
        "record_id": _record_id(instance),
    }


@event.listens_for(Session, "after_flush")
def _collect_changes(session, flush_context):
    pending = session.info.setdefault(_PENDING_KEY, [])
    for operation, instances in (
        ("INSERT", session.new),
        ("UPDATE", session.dirty),
        ("DELETE", session.deleted),
    ):
        for instance in instances:
            if not isinstance(instance, TRACKED_MODELS):
                continue
            if operation == "UPDATE" and not session.is_modified(instance, include_collections=False):
                continue
            pending.append(_change_message(operation, instance))


@event.listens_for(Session, "after_commit")
def _publish_changes(session):
    pending = session.info.pop(_PENDING_KEY, [])
    for message in pending:
        change_hub.publish(message)
    if pending:
        logger.debug("changes_published", count=len(pending))


@event.listens_for(Session, "after_rollback")
def _discard_changes(session):
    session.info.pop(_PENDING_KEY, None)
