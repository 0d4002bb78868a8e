"""User notifications: persisted rows plus a realtime push.

A notification is written to the database first; the push to
``ws:user:<id>`` only happens once the row is committed, so a client that
receives a push can always fetch the notification afterwards.

Types: goal, gamification, social, system
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pact.db.models import Notification
from pact.events import EventPublisher, user_channel

logger = logging.getLogger(__name__)

VALID_TYPES = frozenset({"goal", "gamification", "social", "system"})


def build_notification(
    user_id: int,
    type_: str,
    subtype: str,
    title: str,
    description: str | None = None,
    action_url: str | None = None,
) -> Notification:
    """Validate and build an unsaved notification row.

    Callers that need the notification in a larger transaction (goal
    completion) add it to their own session; everyone else should use
    ``create_notification``.
    """
    if type_ not in VALID_TYPES:
        raise ValueError(f"Invalid notification type: {type_}. Must be one of {sorted(VALID_TYPES)}")

    return Notification(
        user_id=user_id,
        type=type_,
        subtype=subtype,
        title=title,
        description=description,
        action_url=action_url,
        read=False,
        created_at=datetime.now(timezone.utc),
    )


def to_ws_payload(notification: Notification) -> dict:
    """Shape sent to connected clients (camelCase, matching the web client)."""
    created = notification.created_at
    return {
        "event": "notification",
        "data": {
            "id": str(notification.id),
            "type": notification.type,
            "subtype": notification.subtype,
            "title": notification.title,
            "description": notification.description,
            "timestamp": created.isoformat() if created else None,
            "read": notification.read,
            "actionUrl": notification.action_url,
        },
    }


async def push_notification(publisher: EventPublisher, notification: Notification) -> None:
    """Push a committed notification to its owner's channel."""
    await publisher.publish(user_channel(notification.user_id), to_ws_payload(notification))


async def create_notification(
    db: AsyncSession,
    publisher: EventPublisher,
    user_id: int,
    type_: str,
    subtype: str,
    title: str,
    description: str | None = None,
    action_url: str | None = None,
) -> Notification:
    """Persist a notification, commit, then push it."""
    notification = build_notification(user_id, type_, subtype, title, description, action_url)
    db.add(notification)
    await db.commit()
    logger.info("Notification %d (%s/%s) for user %d", notification.id, type_, subtype, user_id)

    await push_notification(publisher, notification)
    return notification


def _owned_by(user_id: int, unread_only: bool = False):
    conditions = [Notification.user_id == user_id]
    if unread_only:
        conditions.append(Notification.read.is_(False))
    return conditions


async def get_notifications(
    db: AsyncSession,
    user_id: int,
    page: int = 1,
    per_page: int = 20,
    unread_only: bool = False,
) -> tuple[list[Notification], int]:
    """One page of a user's notifications, newest first, plus the total count."""
    conditions = _owned_by(user_id, unread_only)

    total = (
        await db.execute(select(func.count()).select_from(Notification).where(*conditions))
    ).scalar_one()

    rows = await db.execute(
        select(Notification)
        .where(*conditions)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return list(rows.scalars().all()), total


async def get_unread_count(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Notification).where(*_owned_by(user_id, unread_only=True))
    )
    return result.scalar_one()


async def mark_as_read(db: AsyncSession, user_id: int, notification_id: int) -> Notification | None:
    """Mark one of the user's notifications read. None if missing or not theirs."""
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id, *_owned_by(user_id))
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        return None

    if not notification.read:
        notification.read = True
        await db.commit()
    return notification


async def mark_all_as_read(db: AsyncSession, user_id: int) -> int:
    """Mark every unread notification of the user read. Returns how many changed."""
    result = await db.execute(
        update(Notification)
        .where(*_owned_by(user_id, unread_only=True))
        .values(read=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount
