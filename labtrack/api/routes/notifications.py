"""
Notification endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from labtrack.api.dependencies import get_alert_emitter, require_permission
from labtrack.application.dto.responses import ErrorResponse, NotificationResponse
from labtrack.core.entities.user import Action, Actor
from labtrack.core.services import AlertEmitter

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=list[NotificationResponse],
)
async def list_notifications(
    unread_only: bool = False,
    limit: int = 100,
    alerts: AlertEmitter = Depends(get_alert_emitter),
) -> list[NotificationResponse]:
    """List notifications, newest first."""
    notifications = await alerts.list(unread_only=unread_only, limit=limit)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post(
    "/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def mark_notification_read(
    notification_id: str,
    alerts: AlertEmitter = Depends(get_alert_emitter),
    actor: Actor | None = Depends(require_permission(Action.MANAGE_NOTIFICATIONS)),
) -> None:
    """Mark a notification as read."""
    if not await alerts.mark_read(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification not found: {notification_id}",
        )


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_notification(
    notification_id: str,
    alerts: AlertEmitter = Depends(get_alert_emitter),
    actor: Actor | None = Depends(require_permission(Action.MANAGE_NOTIFICATIONS)),
) -> None:
    """Delete a notification."""
    if not await alerts.delete(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification not found: {notification_id}",
        )
