"""
Python client for the relief API.

Each service group wraps one family of endpoints and returns the decoded
JSON envelope, e.g. ``client.shelters.available()["shelters"]``.
"""
import os
from typing import Any, Dict, Optional

import requests

DEFAULT_BASE_URL = os.getenv("RELIEF_API_URL", "http://127.0.0.1:8000/api")
DEFAULT_TIMEOUT = 15


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status: Optional[int], message: str, details: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


class ReliefClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

        self.auth = AuthService(self)
        self.emergencies = EmergencyService(self)
        self.shelters = ShelterService(self)
        self.resources = ResourceService(self)
        self.tasks = TaskService(self)
        self.notifications = NotificationService(self)

    def attach_token(self, token: Optional[str]):
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        try:
            response = self.session.request(method, f"{self.base_url}{path}", json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ApiError(None, str(e) or "Something went wrong") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = None
            if isinstance(body, dict):
                message = body.get("error") or body.get("message")
            raise ApiError(response.status_code, message or response.reason or "Something went wrong", body)
        return body


class _Service:
    def __init__(self, client: ReliefClient):
        self._client = client

    def _get(self, path):
        return self._client.request("GET", path)

    def _post(self, path, payload):
        return self._client.request("POST", path, json=_drop_none(payload))

    def _patch(self, path, payload):
        return self._client.request("PATCH", path, json=_drop_none(payload))

    def _delete(self, path):
        return self._client.request("DELETE", path)


class AuthService(_Service):
    def login(self, email: str, password: str) -> dict:
        data = self._post("/auth/login", {"email": email, "password": password})
        self._client.attach_token(data.get("token"))
        return data

    def register(self, name: str, email: str, password: str, address: Optional[str] = None,
                 phone_number: Optional[str] = None, role_id: Optional[int] = None) -> dict:
        data = self._post("/auth/register", {
            "name": name,
            "email": email,
            "password": password,
            "address": address,
            "phone_number": phone_number,
            "role_id": role_id,
        })
        self._client.attach_token(data.get("token"))
        return data

    def profile(self) -> dict:
        return self._get("/auth/profile")

    def logout(self):
        self._client.attach_token(None)


class EmergencyService(_Service):
    def create(self, disaster_type: str, location_desc: str, latitude: Optional[float] = None,
               longitude: Optional[float] = None) -> dict:
        return self._post("/emergencies", {
            "disaster_type": disaster_type,
            "location_desc": location_desc,
            "latitude": latitude,
            "longitude": longitude,
        })

    def list_mine(self) -> dict:
        return self._get("/emergencies/my-reports")

    def list_all(self) -> dict:
        return self._get("/emergencies")

    def get(self, report_id: int) -> dict:
        return self._get(f"/emergencies/{report_id}")

    def update_status(self, report_id: int, status: str) -> dict:
        return self._patch(f"/emergencies/{report_id}/status", {"status": status})

    def analytics(self) -> dict:
        return self._get("/emergencies/analytics")


class ShelterService(_Service):
    def list(self) -> dict:
        return self._get("/shelters")

    def available(self) -> dict:
        return self._get("/shelters/available")

    def get(self, shelter_id: int) -> dict:
        return self._get(f"/shelters/{shelter_id}")

    def create(self, shelter_name: str, capacity: int, managed_by: Optional[str] = None,
               street_no: Optional[str] = None, street_name: Optional[str] = None,
               shelter_contact: Optional[str] = None) -> dict:
        return self._post("/shelters", {
            "shelter_name": shelter_name,
            "capacity": capacity,
            "managed_by": managed_by,
            "street_no": street_no,
            "street_name": street_name,
            "shelter_contact": shelter_contact,
        })

    def update_occupancy(self, shelter_id: int, current_occupancy: int) -> dict:
        return self._patch(f"/shelters/{shelter_id}/occupancy", {"current_occupancy": current_occupancy})

    def occupancy_analytics(self) -> dict:
        return self._get("/shelters/analytics/occupancy")


class ResourceService(_Service):
    def list(self) -> dict:
        return self._get("/resources")

    def list_available(self) -> dict:
        return self._get("/resources/available")

    def create(self, resource_type: str, resource_quantity: int, resource_desc: Optional[str] = None,
               resource_expiry_date: Optional[str] = None,
               distribution_location_address: Optional[str] = None) -> dict:
        return self._post("/resources", {
            "resource_type": resource_type,
            "resource_quantity": resource_quantity,
            "resource_desc": resource_desc,
            "resource_expiry_date": resource_expiry_date,
            "distribution_location_address": distribution_location_address,
        })

    def update(self, resource_id: int, **fields) -> dict:
        return self._patch(f"/resources/{resource_id}", fields)

    def distributions(self) -> dict:
        return self._get("/resources/distributions")

    def create_distribution(self, resource_id: int, shelter_id: int, quantity_distributed: int,
                            assigned_to: Optional[int] = None, remarks: Optional[str] = None) -> dict:
        return self._post("/resources/distribute", {
            "resource_id": resource_id,
            "shelter_id": shelter_id,
            "quantity_distributed": quantity_distributed,
            "assigned_to": assigned_to,
            "remarks": remarks,
        })

    def update_distribution_status(self, distribution_id: int, status: str, dispatched_at: Optional[str] = None,
                                   delivered_at: Optional[str] = None) -> dict:
        return self._patch(f"/resources/distributions/{distribution_id}", {
            "status": status,
            "dispatched_at": dispatched_at,
            "delivered_at": delivered_at,
        })


class TaskService(_Service):
    def list_mine(self) -> dict:
        return self._get("/tasks/my-tasks")

    def list_all(self) -> dict:
        return self._get("/tasks")

    def get(self, task_id: int) -> dict:
        return self._get(f"/tasks/{task_id}")

    def create(self, report_id: int, task_description: str, assigned_worker_id: Optional[int] = None,
               remarks: Optional[str] = None) -> dict:
        return self._post("/tasks", {
            "report_id": report_id,
            "task_description": task_description,
            "assigned_worker_id": assigned_worker_id,
            "remarks": remarks,
        })

    def assign(self, task_id: int, assigned_worker_id: int) -> dict:
        return self._patch(f"/tasks/{task_id}/assign", {"assigned_worker_id": assigned_worker_id})

    def update_status(self, task_id: int, task_status: str, remarks: Optional[str] = None) -> dict:
        return self._patch(f"/tasks/{task_id}/status", {"task_status": task_status, "remarks": remarks})


class NotificationService(_Service):
    def active(self) -> dict:
        return self._get("/notifications/active")

    def all(self) -> dict:
        return self._get("/notifications")

    def get(self, notification_id: int) -> dict:
        return self._get(f"/notifications/{notification_id}")

    def create(self, title: str, message: str) -> dict:
        return self._post("/notifications", {"title": title, "message": message})

    def update(self, notification_id: int, title: Optional[str] = None, message: Optional[str] = None,
               is_active: Optional[bool] = None) -> dict:
        return self._patch(f"/notifications/{notification_id}", {
            "title": title,
            "message": message,
            "is_active": is_active,
        })

    def remove(self, notification_id: int) -> dict:
        return self._delete(f"/notifications/{notification_id}")
