from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from interview_tracker.models.interview import Interview, InterviewStatus
from interview_tracker.models.interview_rating import RATING_CATEGORIES
from interview_tracker.services.ratings import compute_overall_rating, suggestion_for, summarize_ratings

MIXED_SCORES = {
    "technical": 1,
    "managerial": 2,
    "projects": 3,
    "self_introduction": 4,
    "hr_round": 5,
    "dressup": 3,
    "communication": 3,
    "body_language": 3,
    "punctuality": 3,
}


def _scores(value: int) -> dict:
    return {name: value for name in RATING_CATEGORIES}


def test_rate_upcoming_interview_completes_it(client, db_session, users, make_interview):
    user_a, _ = users
    iv = make_interview(user_a, scheduled_at=datetime.now(timezone.utc) + timedelta(days=1))

    res = client.post(f"/interviews/{iv.id}/rating", json={**MIXED_SCORES, "feedback": " Went well "})
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["overall_rating"] == 3.0
    assert body["feedback"] == "Went well"

    db_session.expire_all()
    assert db_session.get(Interview, iv.id).status == "completed"

    res2 = client.get(f"/interviews/{iv.id}")
    assert res2.json()["has_rating"] is True

    res3 = client.get(f"/interviews/{iv.id}/rating")
    assert res3.status_code == 200
    assert res3.json()["technical"] == 1


def test_rating_keeps_outcome_status(client, db_session, users, make_interview):
    user_a, _ = users
    iv = make_interview(user_a, status=InterviewStatus.SUCCEEDED)

    res = client.post(f"/interviews/{iv.id}/rating", json=_scores(5))
    assert res.status_code == 200

    db_session.expire_all()
    assert db_session.get(Interview, iv.id).status == "succeeded"


def test_second_rating_is_409(client, users, make_interview):
    user_a, _ = users
    iv = make_interview(user_a)

    assert client.post(f"/interviews/{iv.id}/rating", json=_scores(4)).status_code == 200
    res = client.post(f"/interviews/{iv.id}/rating", json=_scores(2))
    assert res.status_code == 409
    assert res.json()["error"] == "CONFLICT"


@pytest.mark.parametrize("bad", [0, 6])
def test_scores_outside_range_are_422(client, users, make_interview, bad):
    user_a, _ = users
    iv = make_interview(user_a)
    res = client.post(f"/interviews/{iv.id}/rating", json={**_scores(3), "technical": bad})
    assert res.status_code == 422


def test_missing_rating_is_404(client, users, make_interview):
    user_a, _ = users
    iv = make_interview(user_a)
    res = client.get(f"/interviews/{iv.id}/rating")
    assert res.status_code == 404


def test_cannot_rate_someone_elses_interview(client, users, make_interview):
    _, user_b = users
    iv = make_interview(user_b)
    assert client.post(f"/interviews/{iv.id}/rating", json=_scores(3)).status_code == 404


def test_list_and_summary(client, users, make_interview):
    user_a, _ = users
    first = make_interview(user_a)
    second = make_interview(user_a)
    client.post(f"/interviews/{first.id}/rating", json=_scores(5))
    client.post(f"/interviews/{second.id}/rating", json=_scores(3))

    res = client.get("/ratings")
    assert res.status_code == 200
    assert len(res.json()) == 2

    res2 = client.get("/ratings/summary")
    assert res2.status_code == 200
    body = res2.json()
    assert body["count"] == 2
    assert body["overall_average"] == 4.0
    assert all(v == 4.0 for v in body["category_averages"].values())
    assert len(body["strengths"]) == 3
    assert all(item["suggestion"] for item in body["improvements"])


def test_compute_overall_rating_rounds_to_two_places():
    assert compute_overall_rating(MIXED_SCORES) == 3.0
    assert compute_overall_rating({**_scores(4), "technical": 5}) == 4.11


def test_summarize_two_ratings():
    summary = summarize_ratings(
        [
            {**_scores(5), "overall_rating": 5.0, "feedback": "great"},
            {**_scores(3), "overall_rating": 3.0},
        ]
    )
    assert summary.count == 2
    assert summary.overall_average == 4.0
    assert summary.category_averages == {name: 4.0 for name in RATING_CATEGORIES}


def test_summarize_empty_input():
    summary = summarize_ratings([])
    assert summary.count == 0
    assert summary.overall_average == 0.0
    assert set(summary.category_averages.values()) == {0.0}
    assert summary.strengths == []
    assert summary.improvements == []


def test_summarize_skips_missing_and_non_numeric_values():
    summary = summarize_ratings(
        [
            {"technical": 4, "overall_rating": 4.0, "feedback": "x"},
            {"technical": 2, "communication": 5, "managerial": None, "overall_rating": 3.0},
        ]
    )
    assert summary.category_averages["technical"] == 3.0
    assert summary.category_averages["communication"] == 2.5
    assert summary.category_averages["managerial"] == 0.0
    assert summary.overall_average == 3.5
    assert [c.category for c in summary.strengths] == ["technical", "communication", "managerial"]
    assert [c.category for c in summary.improvements] == ["managerial", "projects", "self_introduction"]


def test_suggestions_cover_every_category():
    assert "LeetCode" in suggestion_for("technical")
    assert suggestion_for("punctuality") == "Focus on improving your punctuality skills through targeted practice."
