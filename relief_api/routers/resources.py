from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.auth.dependencies import get_current_user, require_capability
from relief_api.auth.permissions import Capability
from relief_api.crud import resources as crud
from relief_api.database import get_db

router = APIRouter(prefix="/resources", tags=["resources"], dependencies=[Depends(get_current_user)])

can_manage = require_capability(Capability.MANAGE_RESOURCES)


@router.get("")
def list_resources(db: Session = Depends(get_db)):
    return {"resources": [schemas.ResourceOut.model_validate(r) for r in crud.list_resources(db)]}


@router.get("/available")
def available_resources(db: Session = Depends(get_db)):
    return {"resources": [schemas.ResourceOut.model_validate(r) for r in crud.list_available_resources(db)]}


@router.get("/distributions")
def list_distributions(db: Session = Depends(get_db)):
    return {"distributions": [schemas.DistributionOut.model_validate(d) for d in crud.list_distributions(db)]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_resource(payload: schemas.ResourceCreate, user: models.User = Depends(can_manage),
                    db: Session = Depends(get_db)):
    resource = crud.create_resource(db, user, payload)
    return {"message": "Resource created successfully", "resource": schemas.ResourceOut.model_validate(resource)}


@router.post("/distribute", status_code=status.HTTP_201_CREATED)
def distribute(payload: schemas.DistributionCreate, user=Depends(can_manage), db: Session = Depends(get_db)):
    distribution = crud.create_distribution(db, payload)
    return {
        "message": "Resource distribution created successfully",
        "distribution": schemas.DistributionOut.model_validate(distribution),
    }


@router.patch("/distributions/{distribution_id}")
def update_distribution(distribution_id: int, payload: schemas.DistributionStatusUpdate,
                        user=Depends(can_manage), db: Session = Depends(get_db)):
    distribution = crud.update_distribution_status(db, distribution_id, payload)
    return {
        "message": "Distribution status updated successfully",
        "distribution": schemas.DistributionOut.model_validate(distribution),
    }


@router.patch("/{resource_id}")
def update_resource(resource_id: int, payload: schemas.ResourceUpdate, user=Depends(can_manage),
                    db: Session = Depends(get_db)):
    resource = crud.update_resource(db, resource_id, payload)
    return {"message": "Resource updated successfully", "resource": schemas.ResourceOut.model_validate(resource)}
