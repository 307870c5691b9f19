from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.auth.dependencies import get_current_user, require_capability
from relief_api.auth.permissions import Capability, has_capability
from relief_api.crud import emergencies as crud
from relief_api.database import get_db
from relief_api.errors import Forbidden

router = APIRouter(prefix="/emergencies", tags=["emergencies"])


def _out(report):
    return schemas.ReportOut.model_validate(report)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_report(payload: schemas.ReportCreate, user: models.User = Depends(get_current_user),
                  db: Session = Depends(get_db)):
    report = crud.create_report(db, user, payload)
    return {"message": "Emergency report created successfully", "report": _out(report)}


@router.get("")
def list_reports(user=Depends(require_capability(Capability.VIEW_ALL_REPORTS)), db: Session = Depends(get_db)):
    return {"reports": [_out(r) for r in crud.list_reports(db)]}


@router.get("/my-reports")
def my_reports(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"reports": [_out(r) for r in crud.list_reports_for_user(db, user.user_id)]}


@router.get("/analytics")
def analytics(user=Depends(require_capability(Capability.VIEW_REPORT_ANALYTICS)), db: Session = Depends(get_db)):
    return {"analytics": crud.report_analytics(db)}


@router.get("/{report_id}")
def get_report(report_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    report = crud.get_report(db, report_id)
    if report.user_id != user.user_id and not has_capability(user.role_names, Capability.VIEW_ALL_REPORTS):
        raise Forbidden("Insufficient permissions")
    return {"report": _out(report)}


@router.patch("/{report_id}/status")
def update_status(report_id: int, payload: schemas.ReportStatusUpdate,
                  user=Depends(require_capability(Capability.UPDATE_REPORT_STATUS)),
                  db: Session = Depends(get_db)):
    report = crud.update_report_status(db, report_id, payload.status)
    return {"message": "Report status updated successfully", "report": _out(report)}
