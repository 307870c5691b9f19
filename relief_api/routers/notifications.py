from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.auth.dependencies import get_current_user, require_capability
from relief_api.auth.permissions import Capability
from relief_api.crud import notifications as crud
from relief_api.database import get_db

router = APIRouter(prefix="/notifications", tags=["notifications"])

can_manage = require_capability(Capability.MANAGE_NOTIFICATIONS)


def _out(notification):
    return schemas.NotificationOut.model_validate(notification)


@router.get("/active")
def active_notifications(user=Depends(get_current_user), db: Session = Depends(get_db)):
    return {"notifications": [_out(n) for n in crud.list_active_notifications(db)]}


@router.get("")
def list_notifications(user=Depends(can_manage), db: Session = Depends(get_db)):
    return {"notifications": [_out(n) for n in crud.list_notifications(db)]}


@router.get("/{notification_id}")
def get_notification(notification_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    return {"notification": _out(crud.get_notification(db, notification_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_notification(payload: schemas.NotificationCreate, user: models.User = Depends(can_manage),
                        db: Session = Depends(get_db)):
    notification = crud.create_notification(db, user, payload)
    return {"message": "Notification created successfully", "notification": _out(notification)}


@router.patch("/{notification_id}")
def update_notification(notification_id: int, payload: schemas.NotificationUpdate, user=Depends(can_manage),
                        db: Session = Depends(get_db)):
    notification = crud.update_notification(db, notification_id, payload)
    return {"message": "Notification updated successfully", "notification": _out(notification)}


@router.delete("/{notification_id}")
def delete_notification(notification_id: int, user=Depends(can_manage), db: Session = Depends(get_db)):
    notification = crud.deactivate_notification(db, notification_id)
    return {"message": "Notification deactivated successfully", "notification": _out(notification)}
