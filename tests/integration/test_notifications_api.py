"""Integration tests for notification endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from pact.db.models import User
from pact.notifications.service import create_notification
from tests.conftest import RecordingPublisher, auth_headers, create_user

pytestmark = pytest.mark.asyncio


async def _notify(db: AsyncSession, publisher: RecordingPublisher, user_id: int, title: str = "Hello") -> int:
    n = await create_notification(db, publisher, user_id, "social", "mention", title, "Someone mentioned you")
    return n.id


class TestNotificationService:
    async def test_create_pushes_to_user_channel(
        self, db_session: AsyncSession, publisher: RecordingPublisher, user: User
    ):
        await _notify(db_session, publisher, user.id)
        topic, payload = publisher.events[0]
        assert topic == f"ws:user:{user.id}"
        assert payload["data"]["title"] == "Hello"
        assert payload["data"]["read"] is False

    async def test_invalid_type_rejected(self, db_session: AsyncSession, publisher: RecordingPublisher, user: User):
        with pytest.raises(ValueError, match="Invalid notification type"):
            await create_notification(db_session, publisher, user.id, "marketing", "promo", "Buy now")
        assert publisher.events == []


class TestNotificationsAPI:
    async def test_requires_auth(self, client: AsyncClient):
        resp = await client.get("/api/v1/notifications")
        assert resp.status_code == 401

    async def test_empty(self, authed_client: AsyncClient):
        resp = await authed_client.get("/api/v1/notifications")
        assert resp.status_code == 200
        data = resp.json()
        assert data["notifications"] == []
        assert data["total"] == 0
        assert data["page"] == 1

    async def test_list_newest_first(
        self, authed_client: AsyncClient, db_session: AsyncSession, publisher: RecordingPublisher, user: User
    ):
        await _notify(db_session, publisher, user.id, "First")
        await _notify(db_session, publisher, user.id, "Second")

        resp = await authed_client.get("/api/v1/notifications")
        titles = [n["title"] for n in resp.json()["notifications"]]
        assert titles == ["Second", "First"]

    async def test_pagination(
        self, authed_client: AsyncClient, db_session: AsyncSession, publisher: RecordingPublisher, user: User
    ):
        for i in range(3):
            await _notify(db_session, publisher, user.id, f"N{i}")

        resp = await authed_client.get("/api/v1/notifications", params={"page": 2, "per_page": 2})
        data = resp.json()
        assert data["total"] == 3
        assert len(data["notifications"]) == 1

    async def test_only_own_notifications(
        self, authed_client: AsyncClient, db_session: AsyncSession, publisher: RecordingPublisher
    ):
        other = await create_user(db_session, "eve")
        await _notify(db_session, publisher, other.id)

        resp = await authed_client.get("/api/v1/notifications")
        assert resp.json()["total"] == 0

    async def test_mark_read(
        self, authed_client: AsyncClient, db_session: AsyncSession, publisher: RecordingPublisher, user: User
    ):
        nid = await _notify(db_session, publisher, user.id)
        await _notify(db_session, publisher, user.id)

        resp = await authed_client.get("/api/v1/notifications/unread-count")
        assert resp.json()["count"] == 2

        resp = await authed_client.post(f"/api/v1/notifications/{nid}/read")
        assert resp.status_code == 200
        assert resp.json()["read"] is True

        resp = await authed_client.get("/api/v1/notifications/unread-count")
        assert resp.json()["count"] == 1

    async def test_mark_read_not_found(self, authed_client: AsyncClient):
        resp = await authed_client.post("/api/v1/notifications/999/read")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Notification not found"

    async def test_cannot_mark_foreign_notification(
        self, client: AsyncClient, db_session: AsyncSession, publisher: RecordingPublisher, user: User
    ):
        other = await create_user(db_session, "eve")
        nid = await _notify(db_session, publisher, other.id)

        resp = await client.post(f"/api/v1/notifications/{nid}/read", headers=auth_headers(user))
        assert resp.status_code == 404

    async def test_mark_all_read(
        self, authed_client: AsyncClient, db_session: AsyncSession, publisher: RecordingPublisher, user: User
    ):
        for _ in range(3):
            await _notify(db_session, publisher, user.id)

        resp = await authed_client.post("/api/v1/notifications/read-all")
        assert resp.status_code == 200
        assert resp.json() == {"updated": 3}

        resp = await authed_client.get("/api/v1/notifications/unread-count")
        assert resp.json()["count"] == 0

    async def test_unread_only_filter(
        self, authed_client: AsyncClient, db_session: AsyncSession, publisher: RecordingPublisher, user: User
    ):
        nid = await _notify(db_session, publisher, user.id, "Seen")
        await _notify(db_session, publisher, user.id, "Unseen")
        await authed_client.post(f"/api/v1/notifications/{nid}/read")

        resp = await authed_client.get("/api/v1/notifications", params={"unread_only": "true"})
        data = resp.json()
        assert data["total"] == 1
        assert [n["title"] for n in data["notifications"]] == ["Unseen"]
