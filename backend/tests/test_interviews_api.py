from __future__ import annotations

from datetime import datetime, timedelta, timezone

from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.services.realtime import interview_events


def _future(days: int = 2) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _create(client, **overrides):
    payload = {
        "company_name": "Acme",
        "role": "Backend Engineer",
        "salary": "18.5",
        "scheduled_at": _future(),
        "notes": "  bring portfolio  ",
    }
    payload.update(overrides)
    res = client.post("/interviews", json=payload)
    assert res.status_code == 200, res.text
    return res.json()


def test_create_get_list_interview(client):
    iv = _create(client)
    assert iv["status"] == "upcoming"
    assert iv["salary"] == "18.5"
    assert iv["notes"] == "bring portfolio"
    assert iv["has_rating"] is False

    res = client.get(f"/interviews/{iv['id']}")
    assert res.status_code == 200
    assert res.json()["company_name"] == "Acme"

    res2 = client.get("/interviews")
    assert res2.status_code == 200
    assert [x["id"] for x in res2.json()] == [iv["id"]]


def test_create_validates_payload(client):
    res = client.post(
        "/interviews",
        json={"company_name": "   ", "role": "Eng", "salary": "18", "scheduled_at": _future()},
    )
    assert res.status_code == 422
    assert res.json()["error"] == "VALIDATION_ERROR"

    res2 = client.post(
        "/interviews",
        json={"company_name": "Acme", "role": "Eng", "salary": "eighteen", "scheduled_at": _future()},
    )
    assert res2.status_code == 422


def test_list_newest_first_and_status_filter(client):
    early = _create(client, scheduled_at=_future(1))
    late = _create(client, scheduled_at=_future(5))
    done = _create(client, scheduled_at=_future(3), status="completed")

    res = client.get("/interviews")
    assert [x["id"] for x in res.json()] == [late["id"], done["id"], early["id"]]

    res2 = client.get("/interviews", params={"status": "completed"})
    assert [x["id"] for x in res2.json()] == [done["id"]]

    res3 = client.get("/interviews", params=[("status", "upcoming"), ("status", "completed")])
    assert len(res3.json()) == 3


def test_list_sweeps_expired_interviews_first(client, users, make_interview):
    user_a, _ = users
    past = make_interview(user_a, scheduled_at=datetime.now(timezone.utc) - timedelta(hours=2))

    res = client.get("/interviews")
    assert res.status_code == 200
    by_id = {x["id"]: x for x in res.json()}
    assert by_id[past.id]["status"] == "completed"


def test_patch_partial_update(client):
    iv = _create(client)
    res = client.patch(f"/interviews/{iv['id']}", json={"role": "Staff Engineer", "salary": "25"})
    assert res.status_code == 200
    body = res.json()
    assert body["role"] == "Staff Engineer"
    assert body["salary"] == "25"
    assert body["company_name"] == "Acme"


def test_patch_enforces_status_machine(client):
    iv = _create(client)

    res = client.patch(f"/interviews/{iv['id']}", json={"status": "succeeded"})
    assert res.status_code == 200
    assert res.json()["status"] == "succeeded"

    res2 = client.patch(f"/interviews/{iv['id']}", json={"status": "upcoming"})
    assert res2.status_code == 409
    assert res2.json()["error"] == "CONFLICT"

    # same-status write is a no-op
    res3 = client.patch(f"/interviews/{iv['id']}", json={"status": "succeeded"})
    assert res3.status_code == 200


def test_outcome_from_completed_and_terminal(client):
    iv = _create(client, status="completed")

    res = client.post(f"/interviews/{iv['id']}/outcome", json={"outcome": "rejected"})
    assert res.status_code == 200
    assert res.json()["status"] == "rejected"

    res2 = client.post(f"/interviews/{iv['id']}/outcome", json={"outcome": "succeeded"})
    assert res2.status_code == 409

    res3 = client.post(f"/interviews/{iv['id']}/outcome", json={"outcome": "upcoming"})
    assert res3.status_code == 422


def test_delete_removes_and_publishes_event(client, db_session, users):
    user_a, _ = users
    iv = _create(client)
    seen = []
    unsubscribe = interview_events.subscribe(seen.append)
    try:
        res = client.delete(f"/interviews/{iv['id']}")
    finally:
        unsubscribe()

    assert res.status_code == 200
    assert db_session.get(Interview, iv["id"]) is None
    assert [(e.interview_id, e.user_id) for e in seen] == [(iv["id"], user_a.id)]

    res2 = client.get(f"/interviews/{iv['id']}")
    assert res2.status_code == 404
    assert res2.json()["error"] == "NOT_FOUND"


def test_interviews_are_isolated_per_user(client, client_for, users, make_interview):
    _, user_b = users
    iv = _create(client)
    other = make_interview(user_b, status=InterviewStatus.UPCOMING)

    assert client.get(f"/interviews/{other.id}").status_code == 404

    with client_for(user_b) as c:
        assert c.get(f"/interviews/{iv['id']}").status_code == 404
        assert c.patch(f"/interviews/{iv['id']}", json={"role": "x"}).status_code == 404
        assert c.delete(f"/interviews/{iv['id']}").status_code == 404
        assert [x["id"] for x in c.get("/interviews").json()] == [other.id]
