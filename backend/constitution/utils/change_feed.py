# constitution/utils/change_feed.py
"""
Push-based change notification for section collections.

Subscribers register per constitution and receive the full, ordered section
list after every committed transaction that inserted, updated or deleted one
of that constitution's sections, no matter which operation did it.
"""
from __future__ import annotations

from collections import defaultdict
from itertools import chain
from typing import Callable, Dict, List

from flask import current_app
from sqlalchemy import event
from sqlalchemy.orm import Session

from constitution.models.section import ConstitutionSection

PENDING_KEY = "constitution.pending_changes"

Subscriber = Callable[[List[ConstitutionSection]], None]


class SectionChangeFeed:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)

    def subscribe(self, constitution_id: str, callback: Subscriber) -> Callable[[], None]:
        """Register `callback`; returns a function that unsubscribes it."""
        self._subscribers[constitution_id].append(callback)
        return lambda: self.unsubscribe(constitution_id, callback)

    def unsubscribe(self, constitution_id: str, callback: Subscriber) -> None:
        callbacks = self._subscribers.get(constitution_id, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def mark_changed(self, session, constitution_id: str) -> None:
        session.info.setdefault(PENDING_KEY, set()).add(constitution_id)

    def discard(self, session) -> None:
        session.info.pop(PENDING_KEY, None)

    def dispatch(self, session) -> None:
        """Deliver snapshots for everything committed since the last dispatch."""
        pending = session.info.pop(PENDING_KEY, set())

        for constitution_id in sorted(pending):
            callbacks = list(self._subscribers.get(constitution_id, []))
            if not callbacks:
                continue

            snapshot = (
                ConstitutionSection.query
                .filter_by(constitution_id=constitution_id)
                .order_by(
                    ConstitutionSection.order.asc(),
                    ConstitutionSection.created_at.asc(),
                    ConstitutionSection.id.asc(),
                )
                .all()
            )

            for callback in callbacks:
                try:
                    callback(snapshot)
                except Exception:
                    current_app.logger.exception(
                        "Change feed subscriber failed for constitution %s", constitution_id
                    )


change_feed = SectionChangeFeed()


@event.listens_for(Session, "after_flush")
def collect_changed_constitutions(session, flush_context):
    for obj in chain(session.new, session.dirty, session.deleted):
        if isinstance(obj, ConstitutionSection) and obj.constitution_id:
            change_feed.mark_changed(session, obj.constitution_id)
