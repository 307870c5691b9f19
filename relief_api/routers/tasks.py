from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from relief_api import schemas
from relief_api.auth.dependencies import require_capability
from relief_api.auth.permissions import Capability
from relief_api.crud import tasks as crud
from relief_api.database import get_db

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _out(task):
    return schemas.TaskOut.model_validate(task)


@router.get("/my-tasks")
def my_tasks(user=Depends(require_capability(Capability.VIEW_OWN_TASKS)), db: Session = Depends(get_db)):
    return {"tasks": [_out(t) for t in crud.list_tasks_for_worker(db, user.user_id)]}


@router.get("")
def list_tasks(user=Depends(require_capability(Capability.VIEW_TASKS)), db: Session = Depends(get_db)):
    return {"tasks": [_out(t) for t in crud.list_tasks(db)]}


@router.get("/{task_id}")
def get_task(task_id: int, user=Depends(require_capability(Capability.VIEW_TASKS)), db: Session = Depends(get_db)):
    return {"task": _out(crud.get_task(db, task_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(payload: schemas.TaskCreate, user=Depends(require_capability(Capability.MANAGE_TASKS)),
                db: Session = Depends(get_db)):
    task = crud.create_task(db, payload)
    return {"message": "Rescue task created successfully", "task": _out(task)}


@router.patch("/{task_id}/assign")
def assign_task(task_id: int, payload: schemas.TaskAssign,
                user=Depends(require_capability(Capability.MANAGE_TASKS)), db: Session = Depends(get_db)):
    task = crud.assign_task(db, task_id, payload.assigned_worker_id)
    return {"message": "Task assigned successfully", "task": _out(task)}


@router.patch("/{task_id}/status")
def update_task_status(task_id: int, payload: schemas.TaskStatusUpdate,
                       user=Depends(require_capability(Capability.UPDATE_TASK_STATUS)),
                       db: Session = Depends(get_db)):
    task = crud.update_task_status(db, task_id, payload)
    return {"message": "Task status updated successfully", "task": _out(task)}
