from __future__ import annotations

from pydantic import BaseModel


class ReminderCountsOut(BaseModel):
    sent: int = 0
    skipped: int = 0
    failed: int = 0


class SchedulerRunOut(BaseModel):
    stale_interviews_removed: int
    one_day_before: ReminderCountsOut
    one_hour_before: ReminderCountsOut
