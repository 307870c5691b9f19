from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from relief_api import schemas
from relief_api.auth.dependencies import get_current_user, require_capability
from relief_api.auth.permissions import Capability
from relief_api.crud import shelters as crud
from relief_api.database import get_db

router = APIRouter(prefix="/shelters", tags=["shelters"], dependencies=[Depends(get_current_user)])


def _out(shelter):
    return schemas.ShelterOut.model_validate(shelter)


@router.get("")
def list_shelters(db: Session = Depends(get_db)):
    return {"shelters": [_out(s) for s in crud.list_shelters(db)]}


@router.get("/available")
def available_shelters(db: Session = Depends(get_db)):
    return {"shelters": [_out(s) for s in crud.list_available_shelters(db)]}


@router.get("/analytics/occupancy")
def occupancy_analytics(user=Depends(require_capability(Capability.MANAGE_SHELTERS)), db: Session = Depends(get_db)):
    return {"shelters": [_out(s) for s in crud.shelters_by_occupancy(db)]}


@router.get("/{shelter_id}")
def get_shelter(shelter_id: int, db: Session = Depends(get_db)):
    return {"shelter": _out(crud.get_shelter(db, shelter_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_shelter(payload: schemas.ShelterCreate, user=Depends(require_capability(Capability.MANAGE_SHELTERS)),
                   db: Session = Depends(get_db)):
    shelter = crud.create_shelter(db, payload)
    return {"message": "Shelter created successfully", "shelter": _out(shelter)}


@router.patch("/{shelter_id}/occupancy")
def update_occupancy(shelter_id: int, payload: schemas.OccupancyUpdate,
                     user=Depends(require_capability(Capability.MANAGE_SHELTERS)),
                     db: Session = Depends(get_db)):
    shelter = crud.update_occupancy(db, shelter_id, payload.current_occupancy)
    return {"message": "Shelter occupancy updated successfully", "shelter": _out(shelter)}
