from __future__ import annotations

import asyncio

from interview_tracker.routes.interviews import format_sse, stream_interview_events
from interview_tracker.services.realtime import InterviewDeleted, InterviewEventBridge, interview_events


def test_publish_reaches_every_subscriber_until_unsubscribed():
    bridge = InterviewEventBridge()
    a, b = [], []
    unsubscribe_a = bridge.subscribe(a.append)
    bridge.subscribe(b.append)
    assert bridge.subscriber_count == 2

    bridge.publish_deleted(1, 10)
    unsubscribe_a()
    unsubscribe_a()  # second call is harmless
    bridge.publish_deleted(2, 10)

    assert a == [InterviewDeleted(1, 10)]
    assert b == [InterviewDeleted(1, 10), InterviewDeleted(2, 10)]
    assert bridge.subscriber_count == 1


def test_failing_subscriber_does_not_block_others():
    bridge = InterviewEventBridge()
    seen = []

    def _broken(event):
        raise RuntimeError("socket closed")

    bridge.subscribe(_broken)
    bridge.subscribe(seen.append)
    bridge.publish(InterviewDeleted(interview_id=5, user_id=1))

    assert seen == [InterviewDeleted(5, 1)]


def test_format_sse():
    assert format_sse(InterviewDeleted(7, 1)) == 'event: interview_deleted\ndata: {"interview_id": 7}\n\n'


class _ConnectedRequest:
    async def is_disconnected(self) -> bool:
        return False


def test_event_stream_only_carries_callers_deletions(users):
    user_a, user_b = users
    baseline = interview_events.subscriber_count

    async def _run():
        response = await stream_interview_events(_ConnectedRequest(), user=user_a)
        assert response.media_type == "text/event-stream"
        body = response.body_iterator
        assert await body.__anext__() == ": connected\n\n"
        assert interview_events.subscriber_count == baseline + 1

        interview_events.publish_deleted(99, user_b.id)
        interview_events.publish_deleted(42, user_a.id)
        chunk = await asyncio.wait_for(body.__anext__(), timeout=2)

        await body.aclose()
        return chunk

    chunk = asyncio.run(_run())
    assert chunk == 'event: interview_deleted\ndata: {"interview_id": 42}\n\n'
    assert interview_events.subscriber_count == baseline
