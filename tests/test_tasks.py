"""
Tests for rescue tasks and the cascades they apply to their reports.
"""

import pytest

from relief_api import models, schemas
from relief_api.crud import tasks as crud
from relief_api.errors import NotFound
from relief_api.models import ReportStatus, TaskStatus
from tests.conftest import auth_headers


@pytest.fixture
def report(db, citizen):
    report = models.EmergencyReport(
        user_id=citizen.user_id, disaster_type="Flood", location_desc="Riverside colony",
        status=ReportStatus.PENDING,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def _report_status(db, report_id):
    db.expire_all()
    return db.get(models.EmergencyReport, report_id).status


def _create(client, government, report_id, **extra):
    payload = {"report_id": report_id, "task_description": "Evacuate families", **extra}
    return client.post("/api/tasks", json=payload, headers=auth_headers(government))


class TestCreateTask:

    def test_with_worker_moves_report_in_progress(self, client, db, report, government, worker):
        response = _create(client, government, report.report_id, assigned_worker_id=worker.user_id)

        assert response.status_code == 201
        task = response.json()["task"]
        assert task["task_status"] == "Assigned"
        assert task["assigned_worker_name"] == "Raj Worker"
        assert task["report_status"] == "In Progress"
        assert _report_status(db, report.report_id) == ReportStatus.IN_PROGRESS

    def test_without_worker_leaves_report_pending(self, client, db, report, government):
        response = _create(client, government, report.report_id, remarks="awaiting crew")

        assert response.status_code == 201
        assert response.json()["task"]["assigned_worker_id"] is None
        assert _report_status(db, report.report_id) == ReportStatus.PENDING

    def test_unknown_report(self, client, government):
        response = _create(client, government, 999)

        assert response.status_code == 404
        assert response.json() == {"error": "Emergency report not found"}

    def test_unknown_worker_creates_nothing(self, client, db, report, government):
        response = _create(client, government, report.report_id, assigned_worker_id=999)

        assert response.status_code == 404
        assert db.query(models.RescueTask).count() == 0
        assert _report_status(db, report.report_id) == ReportStatus.PENDING


class TestAssignTask:

    def test_assign_forces_report_in_progress(self, db, report, worker):
        task = crud.create_task(db, schemas.TaskCreate(report_id=report.report_id, task_description="Search"))
        crud.update_task_status(db, task.task_id, schemas.TaskStatusUpdate(task_status=TaskStatus.IN_PROGRESS))
        crud.update_task_status(db, task.task_id, schemas.TaskStatusUpdate(task_status=TaskStatus.CANCELLED))
        report.status = ReportStatus.CANCELLED
        db.commit()

        assigned = crud.assign_task(db, task.task_id, worker.user_id)

        assert assigned.assigned_worker_id == worker.user_id
        assert assigned.task_status == TaskStatus.ASSIGNED
        assert _report_status(db, report.report_id) == ReportStatus.IN_PROGRESS

    def test_assign_refreshes_assigned_date(self, db, report, worker):
        task = crud.create_task(db, schemas.TaskCreate(report_id=report.report_id, task_description="Search"))
        before = task.assigned_date

        assigned = crud.assign_task(db, task.task_id, worker.user_id)

        assert assigned.assigned_date >= before

    def test_assign_via_api(self, client, report, government, worker):
        task = _create(client, government, report.report_id).json()["task"]

        response = client.patch(f"/api/tasks/{task['task_id']}/assign",
                                json={"assigned_worker_id": worker.user_id}, headers=auth_headers(government))

        assert response.status_code == 200
        assert response.json()["task"]["report_status"] == "In Progress"

    def test_worker_cannot_assign(self, client, report, government, worker):
        task = _create(client, government, report.report_id).json()["task"]

        response = client.patch(f"/api/tasks/{task['task_id']}/assign",
                                json={"assigned_worker_id": worker.user_id}, headers=auth_headers(worker))

        assert response.status_code == 403

    def test_unknown_task(self, db, worker):
        with pytest.raises(NotFound):
            crud.assign_task(db, 12345, worker.user_id)


class TestUpdateTaskStatus:

    @pytest.mark.parametrize("prior", list(ReportStatus))
    def test_completion_resolves_report_from_any_status(self, db, report, prior):
        task = crud.create_task(db, schemas.TaskCreate(report_id=report.report_id, task_description="Rescue"))
        report.status = prior
        db.commit()

        crud.update_task_status(db, task.task_id, schemas.TaskStatusUpdate(task_status=TaskStatus.COMPLETED))

        assert _report_status(db, report.report_id) == ReportStatus.RESOLVED

    def test_reopening_does_not_unresolve_report(self, db, report):
        task = crud.create_task(db, schemas.TaskCreate(report_id=report.report_id, task_description="Rescue"))
        crud.update_task_status(db, task.task_id, schemas.TaskStatusUpdate(task_status=TaskStatus.COMPLETED))

        crud.update_task_status(db, task.task_id, schemas.TaskStatusUpdate(task_status=TaskStatus.IN_PROGRESS))

        assert _report_status(db, report.report_id) == ReportStatus.RESOLVED

    def test_non_completion_statuses_leave_report(self, db, report):
        task = crud.create_task(db, schemas.TaskCreate(report_id=report.report_id, task_description="Rescue"))

        crud.update_task_status(db, task.task_id, schemas.TaskStatusUpdate(task_status=TaskStatus.CANCELLED))

        assert _report_status(db, report.report_id) == ReportStatus.PENDING

    def test_worker_completes_via_api(self, client, db, report, government, worker):
        task = _create(client, government, report.report_id, assigned_worker_id=worker.user_id).json()["task"]

        response = client.patch(f"/api/tasks/{task['task_id']}/status",
                                json={"task_status": "Completed", "remarks": "All safe"},
                                headers=auth_headers(worker))

        assert response.status_code == 200
        body = response.json()["task"]
        assert body["task_status"] == "Completed"
        assert body["remarks"] == "All safe"
        assert _report_status(db, report.report_id) == ReportStatus.RESOLVED

    def test_invalid_status(self, client, report, government):
        task = _create(client, government, report.report_id).json()["task"]

        response = client.patch(f"/api/tasks/{task['task_id']}/status",
                                json={"task_status": "Finished"}, headers=auth_headers(government))

        assert response.status_code == 400

    def test_unknown_task(self, client, government):
        response = client.patch("/api/tasks/31/status", json={"task_status": "Completed"},
                                headers=auth_headers(government))
        assert response.status_code == 404


class TestListTasks:

    def test_my_tasks_only_assigned_to_me(self, client, report, government, worker, make_user):
        other = make_user(models.RoleName.RESCUE_WORKER)
        mine = _create(client, government, report.report_id, assigned_worker_id=worker.user_id).json()["task"]
        _create(client, government, report.report_id, assigned_worker_id=other.user_id)

        tasks = client.get("/api/tasks/my-tasks", headers=auth_headers(worker)).json()["tasks"]

        assert [t["task_id"] for t in tasks] == [mine["task_id"]]
        assert tasks[0]["disaster_type"] == "Flood"
        assert tasks[0]["reporter_name"] == "Ana Citizen"

    def test_government_cannot_use_my_tasks(self, client, government):
        assert client.get("/api/tasks/my-tasks", headers=auth_headers(government)).status_code == 403

    def test_all_tasks_newest_first(self, client, report, government):
        first = _create(client, government, report.report_id).json()["task"]
        second = _create(client, government, report.report_id).json()["task"]

        tasks = client.get("/api/tasks", headers=auth_headers(government)).json()["tasks"]

        assert [t["task_id"] for t in tasks] == [second["task_id"], first["task_id"]]

    def test_get_task(self, client, report, government, worker):
        task = _create(client, government, report.report_id).json()["task"]

        response = client.get(f"/api/tasks/{task['task_id']}", headers=auth_headers(worker))

        assert response.status_code == 200
        assert response.json()["task"]["location_desc"] == "Riverside colony"
        assert client.get("/api/tasks/999", headers=auth_headers(worker)).status_code == 404
