from factories import register_and_login


def test_register_success(client):
    payload = {
        "email": "user1@example.com",
        "password": "StrongPass123",
        "role": "client",
    }

    response = client.post("/auth/register", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == payload["email"]
    assert data["role"] == payload["role"]
    assert data["is_active"] is True
    assert data["professional_id"] is None


def test_register_professional_creates_profile(client):
    response = client.post(
        "/auth/register",
        json={
            "email": "maria@example.com",
            "password": "StrongPass123",
            "role": "professional",
            "display_name": "Maria Plumbing",
        },
    )

    assert response.status_code == 201
    assert response.json()["professional_id"] is not None


def test_register_admin_is_forbidden(client):
    response = client.post(
        "/auth/register",
        json={"email": "root@example.com", "password": "StrongPass123", "role": "admin"},
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_register_duplicate_email(client):
    payload = {
        "email": "duplicate@example.com",
        "password": "StrongPass123",
        "role": "client",
    }

    first = client.post("/auth/register", json=payload)
    second = client.post("/auth/register", json=payload)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["detail"] == "User with this email already exists"


def test_login_with_wrong_password(client):
    client.post(
        "/auth/register",
        json={"email": "login@example.com", "password": "StrongPass123", "role": "client"},
    )

    response = client.post("/auth/login", json={"email": "login@example.com", "password": "WrongPass123"})

    assert response.status_code == 401


def test_users_me_with_token(client):
    session = register_and_login(client, "me@example.com", role="professional")

    response = client.get("/users/me", headers=session["headers"])

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "me@example.com"
    assert data["role"] == "professional"
    assert data["professional_id"] == session["user"]["professional_id"]


def test_users_me_without_token(client):
    response = client.get("/users/me")
    assert response.status_code == 401


def test_list_users_requires_admin(client, admin_headers):
    session = register_and_login(client, "plain@example.com", role="client")

    forbidden = client.get("/users", headers=session["headers"])
    allowed = client.get("/users?limit=10", headers=admin_headers)

    assert forbidden.status_code == 403
    assert allowed.status_code == 200
    assert {user["email"] for user in allowed.json()} == {"admin@example.com", "plain@example.com"}


def test_list_users_filters_by_role(client, admin_headers):
    register_and_login(client, "filter-pro@example.com", role="professional")
    register_and_login(client, "filter-client@example.com", role="client")

    response = client.get("/users?role=professional", headers=admin_headers)

    assert response.status_code == 200
    assert [user["email"] for user in response.json()] == ["filter-pro@example.com"]
