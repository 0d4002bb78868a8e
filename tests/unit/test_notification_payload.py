"""Notification building and push payload shape."""

from datetime import datetime, timezone

import pytest

from pact.notifications.service import build_notification, push_notification, to_ws_payload
from tests.conftest import RecordingPublisher


class TestBuildNotification:
    def test_rejects_unknown_type(self):
        with pytest.raises(ValueError, match="Invalid notification type"):
            build_notification(1, "mining", "x", "t")

    def test_defaults(self):
        n = build_notification(1, "gamification", "badge_earned", "Badge Earned")
        assert n.read is False
        assert n.created_at is not None
        assert n.created_at.tzinfo is not None


class TestWsPayload:
    def test_payload_fields(self):
        n = build_notification(5, "goal", "goal_completed", "Done", "desc", "/goals")
        n.id = 11
        n.created_at = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        payload = to_ws_payload(n)
        assert payload["event"] == "notification"
        assert payload["data"] == {
            "id": "11",
            "type": "goal",
            "subtype": "goal_completed",
            "title": "Done",
            "description": "desc",
            "timestamp": "2026-03-01T12:00:00+00:00",
            "read": False,
            "actionUrl": "/goals",
        }

    @pytest.mark.asyncio
    async def test_push_goes_to_user_channel(self):
        publisher = RecordingPublisher()
        n = build_notification(5, "system", "streak_reset", "Streak Reset")
        n.id = 1
        await push_notification(publisher, n)
        assert publisher.topics() == ["ws:user:5"]
