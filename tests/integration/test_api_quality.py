from sqlalchemy.exc import OperationalError

from app.core.exceptions import PERSISTENCE_FAILURE_DETAIL
from app.services import profile_sync_service
from factories import make_profile, make_specialty, register_and_login


def test_error_response_has_unified_shape(client):
    response = client.get("/users/me")
    assert response.status_code == 401
    body = response.json()
    assert "error" in body
    assert "code" in body["error"]
    assert "message" in body["error"]
    assert "detail" in body
    assert "request_id" in body


def test_health_endpoint_returns_ok_and_request_id(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "x-request-id" in response.headers


def test_persistence_failure_returns_500_with_unified_shape(client, categories, monkeypatch):
    session = register_and_login(client, "broken@example.com", role="professional")
    professional_id = session["user"]["professional_id"]

    def broken_availability_writer(**_):
        raise OperationalError("INSERT INTO availability_schedules", {}, Exception("disk I/O error"))

    monkeypatch.setattr(profile_sync_service, "replace_availability", broken_availability_writer)
    response = client.post(
        f"/professionals/{professional_id}/services",
        headers=session["headers"],
        json=make_profile([make_specialty(categories[0])]),
    )

    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "persistence_error"
    assert body["detail"] == PERSISTENCE_FAILURE_DETAIL
    assert client.get(f"/professionals/{professional_id}/services").json()["configured"] is False
