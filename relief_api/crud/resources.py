import logging
from typing import List

from sqlalchemy import update
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.errors import BadRequest, NotFound
from relief_api.models import ResourceStatus, DistributionStatus, utcnow

logger = logging.getLogger(__name__)

# columns that a partial update may change but never clear
REQUIRED_FIELDS = {"resource_type", "resource_quantity", "resource_availability_status"}


def create_resource(db: Session, owner: models.User, data: schemas.ResourceCreate) -> models.Resource:
    resource = models.Resource(
        resource_type=data.resource_type,
        resource_quantity=data.resource_quantity,
        resource_desc=data.resource_desc,
        resource_expiry_date=data.resource_expiry_date,
        resource_availability_status=ResourceStatus.AVAILABLE,
        distribution_location_address=data.distribution_location_address,
        ngo_id=owner.user_id,
        last_updated=utcnow(),
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)
    logger.info(f"Resource {resource.resource_id} added: {resource.resource_quantity} x {resource.resource_type}")
    return resource


def get_resource(db: Session, resource_id: int) -> models.Resource:
    resource = db.get(models.Resource, resource_id)
    if not resource:
        raise NotFound("Resource not found")
    return resource


def _recent_first(query):
    return query.order_by(models.Resource.last_updated.desc(), models.Resource.resource_id.desc())


def list_resources(db: Session) -> List[models.Resource]:
    return _recent_first(db.query(models.Resource)).all()


def list_available_resources(db: Session) -> List[models.Resource]:
    return _recent_first(
        db.query(models.Resource).filter(
            models.Resource.resource_availability_status == ResourceStatus.AVAILABLE
        )
    ).all()


def update_resource(db: Session, resource_id: int, data: schemas.ResourceUpdate) -> models.Resource:
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise BadRequest("No fields to update")
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise BadRequest(f"{field} cannot be null")

    resource = get_resource(db, resource_id)
    for field, value in changes.items():
        setattr(resource, field, value)
    resource.last_updated = utcnow()
    db.commit()
    db.refresh(resource)
    logger.info(f"Resource {resource_id} updated: {', '.join(sorted(changes))}")
    return resource


def list_distributions(db: Session) -> List[models.ResourceDistribution]:
    return (
        db.query(models.ResourceDistribution)
        .order_by(
            models.ResourceDistribution.date_distributed.desc(),
            models.ResourceDistribution.distribution_id.desc(),
        )
        .all()
    )


def get_distribution(db: Session, distribution_id: int) -> models.ResourceDistribution:
    distribution = db.get(models.ResourceDistribution, distribution_id)
    if not distribution:
        raise NotFound("Distribution not found")
    return distribution


def create_distribution(db: Session, data: schemas.DistributionCreate) -> models.ResourceDistribution:
    """
    Record a distribution and draw its quantity from the source resource.

    The resource row is locked for the duration of the transaction and the
    decrement only applies while enough stock is still available, so the
    distribution row and the stock change commit together or not at all.
    """
    quantity = data.quantity_distributed
    try:
        resource = (
            db.query(models.Resource)
            .filter(models.Resource.resource_id == data.resource_id)
            .with_for_update()
            .first()
        )
        if not resource:
            raise NotFound("Resource not found")
        if resource.resource_availability_status != ResourceStatus.AVAILABLE:
            raise BadRequest("Resource is not available")
        if quantity > resource.resource_quantity:
            raise BadRequest("Insufficient resource quantity")
        if not db.get(models.Shelter, data.shelter_id):
            raise NotFound("Shelter not found")
        if data.assigned_to is not None and not db.get(models.User, data.assigned_to):
            raise NotFound("Assigned user not found")

        now = utcnow()
        drawn = db.execute(
            update(models.Resource)
            .where(
                models.Resource.resource_id == data.resource_id,
                models.Resource.resource_availability_status == ResourceStatus.AVAILABLE,
                models.Resource.resource_quantity >= quantity,
            )
            .values(resource_quantity=models.Resource.resource_quantity - quantity, last_updated=now)
            .execution_options(synchronize_session=False)
        )
        if drawn.rowcount != 1:
            raise BadRequest("Insufficient resource quantity")
        db.execute(
            update(models.Resource)
            .where(models.Resource.resource_id == data.resource_id, models.Resource.resource_quantity == 0)
            .values(resource_availability_status=ResourceStatus.DISTRIBUTED)
            .execution_options(synchronize_session=False)
        )

        distribution = models.ResourceDistribution(
            resource_id=data.resource_id,
            shelter_id=data.shelter_id,
            quantity_distributed=quantity,
            date_distributed=now,
            requested_at=now,
            status=DistributionStatus.REQUESTED.value,
            assigned_to=data.assigned_to,
            remarks=data.remarks,
        )
        db.add(distribution)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(distribution)
    db.refresh(resource)
    logger.info(
        f"Distributed {quantity} of resource {data.resource_id} to shelter {data.shelter_id}; "
        f"{resource.resource_quantity} left ({resource.resource_availability_status.value})"
    )
    return distribution


def update_distribution_status(
    db: Session, distribution_id: int, data: schemas.DistributionStatusUpdate
) -> models.ResourceDistribution:
    distribution = get_distribution(db, distribution_id)
    distribution.status = data.status
    if data.dispatched_at is not None:
        distribution.dispatched_at = data.dispatched_at
    if data.delivered_at is not None:
        distribution.delivered_at = data.delivered_at
    db.commit()
    db.refresh(distribution)
    logger.info(f"Distribution {distribution_id} status set to {data.status}")
    return distribution
