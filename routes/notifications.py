"""
API endpoints for the caller's notification inbox.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status

from config.dependencies import get_inbox
from config.security import get_current_user
from config.settings import NOTIFICATIONS_PAGE_SIZE
from model.user import Users
from schema.notification import NotificationOut, NotificationPage
from src.social.notifications import NotificationInbox

router = APIRouter(prefix="/v1/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationPage)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(NOTIFICATIONS_PAGE_SIZE, ge=1, le=100),
    current_user: Users = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return inbox.get_page(current_user.id, page=page, limit=limit)


@router.get("/unread", response_model=List[NotificationOut])
def unread(current_user: Users = Depends(get_current_user), inbox: NotificationInbox = Depends(get_inbox)):
    return inbox.unread(current_user.id)


@router.get("/count")
def unread_count(current_user: Users = Depends(get_current_user), inbox: NotificationInbox = Depends(get_inbox)):
    return {"count": inbox.unread_count(current_user.id)}


@router.patch("/read-all")
def mark_all_as_read(current_user: Users = Depends(get_current_user), inbox: NotificationInbox = Depends(get_inbox)):
    return {"updated": inbox.mark_all_as_read(current_user.id)}


@router.patch("/{notification_id}/read", response_model=NotificationOut)
def mark_as_read(
    notification_id: int,
    current_user: Users = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return inbox.mark_as_read(current_user.id, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    current_user: Users = Depends(get_current_user),
    inbox: NotificationInbox = Depends(get_inbox),
):
    """Only read notifications can be deleted."""
    inbox.delete(current_user.id, notification_id)
