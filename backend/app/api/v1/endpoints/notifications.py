"""
Notification API Endpoints.
"""

from fastapi import APIRouter, Depends, Path, Query
from typing import List

from backend.app.core.dependencies import get_current_user, get_workflow
from backend.app.schemas.notification import NotificationRecord, MarkAllReadResponse
from backend.app.schemas.user import UserRecord
from backend.app.services.workflow import WorkflowService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationRecord])
async def list_notifications(
    unread_only: bool = Query(False),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """List current user's notifications, newest first."""
    notifications = await workflow.notifications.list_for_user(current_user)
    if unread_only:
        notifications = [n for n in notifications if not n.read]
    return notifications


@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """Mark all notifications as read."""
    count = await workflow.notifications.mark_all_read(current_user)
    return MarkAllReadResponse(count=count)


@router.patch("/{notification_id}/read", response_model=NotificationRecord)
async def mark_notification_read(
    notification_id: int = Path(...),
    current_user: UserRecord = Depends(get_current_user),
    workflow: WorkflowService = Depends(get_workflow)
):
    """Mark a specific notification as read."""
    return await workflow.notifications.mark_read(notification_id, current_user)
