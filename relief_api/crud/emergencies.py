import logging
from typing import List

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.errors import NotFound
from relief_api.models import ReportStatus

logger = logging.getLogger(__name__)


def create_report(db: Session, reporter: models.User, data: schemas.ReportCreate) -> models.EmergencyReport:
    report = models.EmergencyReport(
        user_id=reporter.user_id,
        disaster_type=data.disaster_type,
        status=ReportStatus.PENDING,
        location_desc=data.location_desc,
        latitude=data.latitude,
        longitude=data.longitude,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(f"Report {report.report_id} ({report.disaster_type}) filed by user {reporter.user_id}")
    return report


def _newest_first(query):
    return query.order_by(models.EmergencyReport.date_time.desc(), models.EmergencyReport.report_id.desc())


def list_reports(db: Session) -> List[models.EmergencyReport]:
    return _newest_first(db.query(models.EmergencyReport)).all()


def list_reports_for_user(db: Session, user_id: int) -> List[models.EmergencyReport]:
    return _newest_first(
        db.query(models.EmergencyReport).filter(models.EmergencyReport.user_id == user_id)
    ).all()


def get_report(db: Session, report_id: int) -> models.EmergencyReport:
    report = db.get(models.EmergencyReport, report_id)
    if not report:
        raise NotFound("Report not found")
    return report


def update_report_status(db: Session, report_id: int, status: ReportStatus) -> models.EmergencyReport:
    report = get_report(db, report_id)
    previous = report.status
    report.status = status
    db.commit()
    db.refresh(report)
    logger.info(f"Report {report_id} status {previous.value} -> {status.value}")
    return report


def _count_status(status: ReportStatus):
    return func.sum(case((models.EmergencyReport.status == status, 1), else_=0))


def report_analytics(db: Session) -> List[dict]:
    rows = (
        db.query(
            models.EmergencyReport.disaster_type,
            func.count(models.EmergencyReport.report_id),
            _count_status(ReportStatus.PENDING),
            _count_status(ReportStatus.IN_PROGRESS),
            _count_status(ReportStatus.RESOLVED),
            _count_status(ReportStatus.CANCELLED),
        )
        .group_by(models.EmergencyReport.disaster_type)
        .order_by(models.EmergencyReport.disaster_type)
        .all()
    )
    return [
        {
            "disaster_type": disaster_type,
            "count": int(count),
            "pending": int(pending or 0),
            "in_progress": int(in_progress or 0),
            "resolved": int(resolved or 0),
            "cancelled": int(cancelled or 0),
        }
        for disaster_type, count, pending, in_progress, resolved, cancelled in rows
    ]
