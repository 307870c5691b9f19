import logging
from typing import List

from sqlalchemy import Float, cast, update
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.errors import BadRequest, NotFound
from relief_api.models import utcnow

logger = logging.getLogger(__name__)

OCCUPANCY_TOP_N = 10


def create_shelter(db: Session, data: schemas.ShelterCreate) -> models.Shelter:
    shelter = models.Shelter(
        shelter_name=data.shelter_name,
        managed_by=data.managed_by,
        capacity=data.capacity,
        current_occupancy=0,
        is_active=True,
        street_no=data.street_no,
        street_name=data.street_name,
        shelter_contact=data.shelter_contact,
        last_updated=utcnow(),
    )
    db.add(shelter)
    db.commit()
    db.refresh(shelter)
    logger.info(f"Shelter {shelter.shelter_id} '{shelter.shelter_name}' opened with capacity {shelter.capacity}")
    return shelter


def get_shelter(db: Session, shelter_id: int) -> models.Shelter:
    shelter = db.get(models.Shelter, shelter_id)
    if not shelter:
        raise NotFound("Shelter not found")
    return shelter


def list_shelters(db: Session) -> List[models.Shelter]:
    return (
        db.query(models.Shelter)
        .filter(models.Shelter.is_active.is_(True))
        .order_by(models.Shelter.shelter_name, models.Shelter.shelter_id)
        .all()
    )


def list_available_shelters(db: Session) -> List[models.Shelter]:
    free_slots = models.Shelter.capacity - models.Shelter.current_occupancy
    return (
        db.query(models.Shelter)
        .filter(
            models.Shelter.is_active.is_(True),
            models.Shelter.current_occupancy < models.Shelter.capacity,
        )
        .order_by(free_slots.desc(), models.Shelter.shelter_id)
        .all()
    )


def shelters_by_occupancy(db: Session, limit: int = OCCUPANCY_TOP_N) -> List[models.Shelter]:
    ratio = cast(models.Shelter.current_occupancy, Float) / models.Shelter.capacity
    return (
        db.query(models.Shelter)
        .filter(models.Shelter.is_active.is_(True))
        .order_by(ratio.desc(), models.Shelter.shelter_id)
        .limit(limit)
        .all()
    )


def update_occupancy(db: Session, shelter_id: int, occupancy: int) -> models.Shelter:
    get_shelter(db, shelter_id)
    if occupancy < 0:
        raise BadRequest("Occupancy cannot be negative")

    # capacity is checked in the same statement that writes the occupancy
    result = db.execute(
        update(models.Shelter)
        .where(models.Shelter.shelter_id == shelter_id, models.Shelter.capacity >= occupancy)
        .values(current_occupancy=occupancy, last_updated=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise BadRequest("Occupancy cannot exceed capacity")
    db.commit()

    shelter = get_shelter(db, shelter_id)
    db.refresh(shelter)
    logger.info(f"Shelter {shelter_id} occupancy now {shelter.current_occupancy}/{shelter.capacity}")
    return shelter
