"""
Interview status machine.

    upcoming  -> completed | succeeded | rejected
    completed -> succeeded | rejected
    succeeded, rejected: terminal

Moving a status onto itself is always allowed (no-op).
"""
from __future__ import annotations

from interview_tracker.models.interview import InterviewStatus

ALLOWED_TRANSITIONS: dict[InterviewStatus, frozenset[InterviewStatus]] = {
    InterviewStatus.UPCOMING: frozenset(
        {InterviewStatus.COMPLETED, InterviewStatus.SUCCEEDED, InterviewStatus.REJECTED}
    ),
    InterviewStatus.COMPLETED: frozenset({InterviewStatus.SUCCEEDED, InterviewStatus.REJECTED}),
    InterviewStatus.SUCCEEDED: frozenset(),
    InterviewStatus.REJECTED: frozenset(),
}

OUTCOME_STATUSES = frozenset({InterviewStatus.SUCCEEDED, InterviewStatus.REJECTED})


class IllegalStatusTransition(ValueError):
    def __init__(self, current: InterviewStatus, target: InterviewStatus) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot change interview status from {current.value} to {target.value}")


def coerce_status(value: str | InterviewStatus) -> InterviewStatus:
    if isinstance(value, InterviewStatus):
        return value
    return InterviewStatus(str(value).strip().lower())


def can_transition(current: str | InterviewStatus, target: str | InterviewStatus) -> bool:
    cur = coerce_status(current)
    nxt = coerce_status(target)
    return cur == nxt or nxt in ALLOWED_TRANSITIONS[cur]


def transition(current: str | InterviewStatus, target: str | InterviewStatus) -> InterviewStatus:
    cur = coerce_status(current)
    nxt = coerce_status(target)
    if not can_transition(cur, nxt):
        raise IllegalStatusTransition(cur, nxt)
    return nxt
