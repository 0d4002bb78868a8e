"""Notification endpoints for the signed-in user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pact.auth.dependencies import get_current_user
from pact.database import get_session
from pact.db.models import Notification, User
from pact.notifications import service
from pact.notifications.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


def _to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=str(n.id),
        type=n.type,
        subtype=n.subtype,
        title=n.title,
        description=n.description,
        timestamp=n.created_at,
        read=n.read,
        action_url=n.action_url,
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    unread_only: bool = False,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    notifications, total = await service.get_notifications(db, user.id, page, per_page, unread_only)
    return NotificationListResponse(
        notifications=[_to_response(n) for n in notifications],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return UnreadCountResponse(count=await service.get_unread_count(db, user.id))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return MarkAllReadResponse(updated=await service.mark_all_as_read(db, user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Mark one notification read; 404 for unknown ids and other users' notifications."""
    notification = await service.mark_as_read(db, user.id, notification_id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return _to_response(notification)
