import logging
from typing import List

from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.errors import BadRequest, NotFound
from relief_api.models import utcnow

logger = logging.getLogger(__name__)


def create_notification(db: Session, author: models.User, data: schemas.NotificationCreate) -> models.Notification:
    notification = models.Notification(
        title=data.title,
        message=data.message,
        datetime_sent=utcnow(),
        is_active=True,
        created_by=author.user_id,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.info(f"Notification {notification.notification_id} sent by user {author.user_id}")
    return notification


def get_notification(db: Session, notification_id: int) -> models.Notification:
    notification = db.get(models.Notification, notification_id)
    if not notification:
        raise NotFound("Notification not found")
    return notification


def _newest_first(query):
    return query.order_by(models.Notification.datetime_sent.desc(), models.Notification.notification_id.desc())


def list_notifications(db: Session) -> List[models.Notification]:
    return _newest_first(db.query(models.Notification)).all()


def list_active_notifications(db: Session) -> List[models.Notification]:
    return _newest_first(
        db.query(models.Notification).filter(models.Notification.is_active.is_(True))
    ).all()


def update_notification(db: Session, notification_id: int, data: schemas.NotificationUpdate) -> models.Notification:
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not changes:
        raise BadRequest("No fields to update")
    notification = get_notification(db, notification_id)
    for field, value in changes.items():
        setattr(notification, field, value)
    db.commit()
    db.refresh(notification)
    logger.info(f"Notification {notification_id} updated: {sorted(changes)}")
    return notification


def deactivate_notification(db: Session, notification_id: int) -> models.Notification:
    """Soft delete: the row stays, only ``is_active`` flips."""
    notification = get_notification(db, notification_id)
    notification.is_active = False
    db.commit()
    db.refresh(notification)
    logger.info(f"Notification {notification_id} deactivated")
    return notification
