"""
Tests for the Python client SDK against a mocked HTTP session.
"""

from unittest.mock import MagicMock

import pytest
import requests

from relief_api.client import ApiError, ReliefClient


def _response(status=200, body=None, reason="OK"):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def api(session):
    return ReliefClient("http://relief.local/api/", timeout=5, session=session)


def test_login_attaches_token(api, session):
    session.request.return_value = _response(body={"token": "abc", "user": {"user_id": 1}})

    api.auth.login("a@relief.org", "pw")

    session.request.assert_called_once_with(
        "POST", "http://relief.local/api/auth/login",
        json={"email": "a@relief.org", "password": "pw"}, timeout=5,
    )
    assert session.headers["Authorization"] == "Bearer abc"


def test_logout_clears_token(api, session):
    api.attach_token("abc")
    api.auth.logout()
    assert "Authorization" not in session.headers


def test_optional_fields_are_omitted(api, session):
    session.request.return_value = _response(status=201, body={"task": {}})

    api.tasks.create(report_id=3, task_description="Clear debris")

    _, kwargs = session.request.call_args
    assert kwargs["json"] == {"report_id": 3, "task_description": "Clear debris"}


def test_paths(api, session):
    session.request.return_value = _response(body={})

    api.shelters.update_occupancy(7, 12)
    api.resources.update_distribution_status(4, "Dispatched")
    api.notifications.remove(9)

    calls = [(c.args[0], c.args[1]) for c in session.request.call_args_list]
    assert calls == [
        ("PATCH", "http://relief.local/api/shelters/7/occupancy"),
        ("PATCH", "http://relief.local/api/resources/distributions/4"),
        ("DELETE", "http://relief.local/api/notifications/9"),
    ]


def test_error_message_from_body(api, session):
    session.request.return_value = _response(400, {"error": "Insufficient resource quantity"}, "Bad Request")

    with pytest.raises(ApiError) as excinfo:
        api.resources.create_distribution(1, 2, 99)

    assert excinfo.value.status == 400
    assert excinfo.value.message == "Insufficient resource quantity"
    assert excinfo.value.details == {"error": "Insufficient resource quantity"}


def test_error_falls_back_to_message_then_reason(api, session):
    session.request.return_value = _response(409, {"message": "taken"}, "Conflict")
    with pytest.raises(ApiError, match="taken"):
        api.auth.register("A", "a@relief.org", "secret1")

    session.request.return_value = _response(502, None, "Bad Gateway")
    with pytest.raises(ApiError, match="Bad Gateway"):
        api.emergencies.list_all()


def test_network_failure_has_no_status(api, session):
    session.request.side_effect = requests.exceptions.ConnectTimeout("timed out")

    with pytest.raises(ApiError) as excinfo:
        api.notifications.active()

    assert excinfo.value.status is None
