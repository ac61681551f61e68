from __future__ import annotations

from datetime import datetime, timedelta, timezone

from interview_tracker.core import config as app_config
from interview_tracker.models.interview import Interview
from interview_tracker.models.interview_notification import InterviewNotification
from interview_tracker.models.interview_rating import RATING_CATEGORIES, InterviewRating
from interview_tracker.services.ratings import create_rating
from interview_tracker.services.realtime import interview_events
from interview_tracker.services.retention import purge_stale_interviews
from interview_tracker.services.scheduler import run_scheduler

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _sender(calls):
    def _send(*, to_email, subject, html):
        calls.append(subject)
        return "msg_test"

    return _send


def test_purge_boundary(db_session, users, make_interview):
    user_a, _ = users
    app_config.settings.STALE_INTERVIEW_RETENTION_HOURS = 24
    old = make_interview(user_a, scheduled_at=NOW - timedelta(hours=24, minutes=1))
    recent = make_interview(user_a, scheduled_at=NOW - timedelta(hours=23, minutes=59))
    future = make_interview(user_a, scheduled_at=NOW + timedelta(days=1))

    assert purge_stale_interviews(db_session, now=NOW) == 1

    remaining = {iv.id for iv in db_session.query(Interview).all()}
    assert remaining == {recent.id, future.id}
    assert old.id not in remaining


def test_purge_cascades_and_publishes_events(db_session, users, make_interview):
    user_a, _ = users
    old = make_interview(user_a, scheduled_at=NOW - timedelta(days=3))
    old_id = old.id
    create_rating(db_session, interview=old, user_id=user_a.id, scores={n: 4 for n in RATING_CATEGORIES})
    db_session.add(InterviewNotification(interview_id=old_id, notification_type="one_day_before", sent_at=NOW))
    db_session.commit()

    seen = []
    unsubscribe = interview_events.subscribe(seen.append)
    try:
        purge_stale_interviews(db_session, now=NOW)
    finally:
        unsubscribe()

    assert db_session.query(InterviewRating).count() == 0
    assert db_session.query(InterviewNotification).count() == 0
    assert [(e.interview_id, e.user_id) for e in seen] == [(old_id, user_a.id)]


def test_run_scheduler_purges_then_dispatches(db_session, users, make_interview):
    user_a, _ = users
    make_interview(user_a, scheduled_at=NOW - timedelta(days=2))
    make_interview(user_a, scheduled_at=NOW + timedelta(hours=1), company_name="Hooli")

    calls: list[str] = []
    report = run_scheduler(db_session, now=NOW, send=_sender(calls))

    assert report.as_dict() == {
        "stale_interviews_removed": 1,
        "one_day_before": {"sent": 0, "skipped": 0, "failed": 0},
        "one_hour_before": {"sent": 1, "skipped": 0, "failed": 0},
    }
    assert calls == ["Interview Reminder: Hooli - in 1 hour"]


def test_internal_scheduler_requires_token(client):
    app_config.settings.SCHEDULER_SHARED_SECRET = "s3cret"

    res = client.post("/internal/scheduler/run")
    assert res.status_code == 401
    assert res.json()["error"] == "UNAUTHORIZED"

    res2 = client.post("/internal/scheduler/run", headers={"X-Internal-Token": "wrong"})
    assert res2.status_code == 401


def test_internal_scheduler_missing_secret_is_500(client):
    app_config.settings.SCHEDULER_SHARED_SECRET = ""
    res = client.post("/internal/scheduler/run", headers={"X-Internal-Token": "anything"})
    assert res.status_code == 500
    assert res.json()["error"] == "INTERNAL_ERROR"


def test_internal_scheduler_runs_with_token(client):
    app_config.settings.SCHEDULER_SHARED_SECRET = "s3cret"
    app_config.settings.EMAIL_ENABLED = False

    res = client.post("/internal/scheduler/run", headers={"X-Internal-Token": "s3cret"})
    assert res.status_code == 200
    body = res.json()
    assert body["stale_interviews_removed"] == 0
    assert body["one_day_before"] == {"sent": 0, "skipped": 0, "failed": 0}
    assert body["one_hour_before"] == {"sent": 0, "skipped": 0, "failed": 0}


def test_internal_scheduler_hidden_from_schema(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert "/internal/scheduler/run" not in paths


def test_celery_tasks_use_their_own_session(db_session, users, make_interview, monkeypatch):
    from interview_tracker.celery_app import celery_app
    from interview_tracker.tasks import scheduler as scheduler_tasks

    user_a, _ = users
    make_interview(user_a, scheduled_at=datetime.now(timezone.utc) - timedelta(hours=1))
    monkeypatch.setattr(scheduler_tasks, "_with_db_session", lambda: db_session)
    app_config.settings.EMAIL_ENABLED = False

    assert scheduler_tasks.complete_expired() == 1
    assert scheduler_tasks.run_interview_scheduler()["stale_interviews_removed"] == 0

    beat = {entry["task"] for entry in celery_app.conf.beat_schedule.values()}
    assert beat == {"scheduler.run", "scheduler.complete_expired_interviews"}
