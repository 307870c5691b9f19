import logging
from typing import List

from sqlalchemy.orm import Session

from relief_api import models, schemas
from relief_api.errors import NotFound
from relief_api.models import ReportStatus, TaskStatus, utcnow

logger = logging.getLogger(__name__)


def _require_worker(db: Session, worker_id: int) -> models.User:
    worker = db.get(models.User, worker_id)
    if not worker:
        raise NotFound("Worker not found")
    return worker


def _cascade_to_report(report: models.EmergencyReport, status: ReportStatus, task_id: int):
    if report.status != status:
        logger.info(f"Task {task_id} moved report {report.report_id} {report.status.value} -> {status.value}")
    report.status = status


def get_task(db: Session, task_id: int) -> models.RescueTask:
    task = db.get(models.RescueTask, task_id)
    if not task:
        raise NotFound("Task not found")
    return task


def _newest_first(query):
    return query.order_by(models.RescueTask.assigned_date.desc(), models.RescueTask.task_id.desc())


def list_tasks(db: Session) -> List[models.RescueTask]:
    return _newest_first(db.query(models.RescueTask)).all()


def list_tasks_for_worker(db: Session, worker_id: int) -> List[models.RescueTask]:
    return _newest_first(
        db.query(models.RescueTask).filter(models.RescueTask.assigned_worker_id == worker_id)
    ).all()


def create_task(db: Session, data: schemas.TaskCreate) -> models.RescueTask:
    report = db.get(models.EmergencyReport, data.report_id)
    if not report:
        raise NotFound("Emergency report not found")
    if data.assigned_worker_id is not None:
        _require_worker(db, data.assigned_worker_id)

    now = utcnow()
    task = models.RescueTask(
        report_id=report.report_id,
        task_description=data.task_description,
        assigned_worker_id=data.assigned_worker_id,
        task_status=TaskStatus.ASSIGNED,
        assigned_date=now,
        last_updated=now,
        remarks=data.remarks,
    )
    db.add(task)
    db.flush()
    if data.assigned_worker_id is not None:
        _cascade_to_report(report, ReportStatus.IN_PROGRESS, task.task_id)
    db.commit()
    db.refresh(task)
    logger.info(f"Task {task.task_id} created for report {report.report_id}")
    return task


def assign_task(db: Session, task_id: int, worker_id: int) -> models.RescueTask:
    task = get_task(db, task_id)
    _require_worker(db, worker_id)

    now = utcnow()
    task.assigned_worker_id = worker_id
    task.task_status = TaskStatus.ASSIGNED
    task.assigned_date = now
    task.last_updated = now
    _cascade_to_report(task.report, ReportStatus.IN_PROGRESS, task.task_id)
    db.commit()
    db.refresh(task)
    logger.info(f"Task {task_id} assigned to worker {worker_id}")
    return task


def update_task_status(db: Session, task_id: int, data: schemas.TaskStatusUpdate) -> models.RescueTask:
    task = get_task(db, task_id)
    task.task_status = data.task_status
    if data.remarks is not None:
        task.remarks = data.remarks
    task.last_updated = utcnow()
    # completion resolves the report; no other task status touches it
    if data.task_status == TaskStatus.COMPLETED:
        _cascade_to_report(task.report, ReportStatus.RESOLVED, task.task_id)
    db.commit()
    db.refresh(task)
    logger.info(f"Task {task_id} status set to {data.task_status.value}")
    return task
