from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterviewDeleted:
    interview_id: int
    user_id: int


InterviewEventCallback = Callable[[InterviewDeleted], None]


class InterviewEventBridge:
    """
    In-process fan-out of interview delete events.

    Delivery is at-least-once from the subscriber's point of view: consumers are expected to
    refetch their full list on every event rather than patch incrementally.
    """

    def __init__(self) -> None:
        self._subscribers: list[InterviewEventCallback] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: InterviewEventCallback) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                try:
                    self._subscribers.remove(callback)
                except ValueError:
                    pass

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: InterviewDeleted) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception:  # noqa: BLE001
                logger.exception("Interview event subscriber failed for interview_id=%s", event.interview_id)

    def publish_deleted(self, interview_id: int, user_id: int) -> None:
        self.publish(InterviewDeleted(interview_id=interview_id, user_id=user_id))


interview_events = InterviewEventBridge()
