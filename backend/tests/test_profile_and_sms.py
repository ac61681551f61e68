from __future__ import annotations

import pytest

from interview_tracker.models.user_profile import UserProfile


def test_profile_defaults_to_no_phone(client):
    res = client.get("/profile")
    assert res.status_code == 200
    assert res.json() == {"phone": None}


def test_profile_upsert(client, db_session, users):
    user_a, _ = users
    res = client.put("/profile", json={"phone": " +1 (555) 123-4567 "})
    assert res.status_code == 200
    assert res.json() == {"phone": "+1 (555) 123-4567"}

    res2 = client.put("/profile", json={"phone": "555 987 6543"})
    assert res2.status_code == 200

    assert db_session.query(UserProfile).count() == 1
    assert client.get("/profile").json() == {"phone": "555 987 6543"}


@pytest.mark.parametrize("phone", ["12345", "call me maybe", "+1-555-CALL-NOW"])
def test_profile_rejects_invalid_phone(client, phone):
    res = client.put("/profile", json={"phone": phone})
    assert res.status_code == 422
    assert res.json()["error"] == "VALIDATION_ERROR"


def test_sms_rejects_blank_message(client):
    res = client.post("/notifications/sms", json={"message": "   ", "phone": "+15551234567"})
    assert res.status_code == 422
    assert res.json()["error"] == "VALIDATION_ERROR"


def test_sms_without_any_phone_is_400(client):
    res = client.post("/notifications/sms", json={"message": "Interview tomorrow"})
    assert res.status_code == 400
    assert res.json()["message"] == "No phone number on file"


def test_sms_uses_profile_phone(client, caplog):
    client.put("/profile", json={"phone": "+15551234567"})
    with caplog.at_level("INFO", logger="interview_tracker.services.sms"):
        res = client.post("/notifications/sms", json={"message": "Interview tomorrow"})
    assert res.status_code == 200
    assert res.json()["success"] is True
    # phone number is masked in logs
    assert "+15551234567" not in caplog.text
    assert "4567" in caplog.text


def test_sms_with_explicit_phone_and_foreign_interview(client, users, make_interview):
    _, user_b = users
    res = client.post("/notifications/sms", json={"message": "hi", "phone": "+44 20 7946 0958"})
    assert res.status_code == 200

    theirs = make_interview(user_b)
    res2 = client.post(
        "/notifications/sms",
        json={"message": "hi", "phone": "+44 20 7946 0958", "interview_id": theirs.id},
    )
    assert res2.status_code == 404
