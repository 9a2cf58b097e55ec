"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from legal_crm.application.use_cases.notifications import (
    NotificationDeliveryService,
    get_unread_count,
    list_notifications as list_notifications_uc,
    mark_as_read as mark_as_read_uc,
    mark_many_as_read as mark_many_as_read_uc,
)
from legal_crm.domain.entities import Notification, User
from legal_crm.infrastructure.database import SessionLocal, get_db
from legal_crm.infrastructure.notifications import notification_manager, serialize_notification
from legal_crm.interfaces.api.dependencies import (
    get_current_active_user,
    require_staff,
    resolve_current_user,
)
from legal_crm.interfaces.api.schemas import (
    MarkReadResult,
    NotificationCreate,
    NotificationMarkReadRequest,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _to_read_model(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the most recent notifications of the authenticated user."""

    notifications = list_notifications_uc(
        db, user_id=current_user.id, unread_only=unread_only, limit=limit
    )
    return [_to_read_model(notification) for notification in notifications]


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> NotificationRead:
    """Create a notification and deliver it over its channels."""

    try:
        notification = NotificationDeliveryService(db).create_and_send(payload.model_dump())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    logger.info(
        "User %s created notification %s for user %s",
        current_user.id,
        notification.id,
        notification.user_id,
    )
    return _to_read_model(notification)


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountRead:
    return UnreadCountRead(count=get_unread_count(db, current_user.id))


@router.post("/read", response_model=MarkReadResult)
def mark_many_as_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkReadResult:
    """Mark a batch of the caller's notifications as read."""

    updated = mark_many_as_read_uc(
        db, user_id=current_user.id, notification_ids=payload.unique_ids()
    )
    return MarkReadResult(updated=updated)


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    notification = mark_as_read_uc(db, notification_id=notification_id, user_id=current_user.id)
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Η ειδοποίηση δεν βρέθηκε",
        )
    return _to_read_model(notification)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ανενεργός χρήστης")
        pending_notifications = list_notifications_uc(
            session, user_id=user.id, unread_only=True
        )
    except HTTPException:
        await websocket.close(code=1008)
        return
    except Exception:
        logger.exception("Could not open notification stream")
        await websocket.close(code=1011)
        return
    finally:
        session.close()

    await notification_manager.connect(user.id, websocket)
    try:
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(n) for n in pending_notifications]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = [item for item in message.get("ids", []) if isinstance(item, int)]
                if ids:
                    ack_session = SessionLocal()
                    try:
                        updated = mark_many_as_read_uc(
                            ack_session, user_id=user.id, notification_ids=ids
                        )
                    finally:
                        ack_session.close()
                    await websocket.send_json({"type": "ack", "data": {"updated": updated}})
    except WebSocketDisconnect:
        notification_manager.disconnect(user.id, websocket)
    except Exception:
        notification_manager.disconnect(user.id, websocket)
        raise
