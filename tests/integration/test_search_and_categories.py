from factories import make_location, make_profile, make_specialty, register_and_login


def _configure(client, email, display_name, profile):
    session = register_and_login(client, email, role="professional", display_name=display_name)
    professional_id = session["user"]["professional_id"]
    response = client.post(f"/professionals/{professional_id}/services", headers=session["headers"], json=profile)
    assert response.status_code == 201
    return professional_id


def test_categories_lists_only_active(client, categories):
    response = client.get("/categories")

    assert response.status_code == 200
    assert [category["name"] for category in response.json()] == ["Carpentry", "Electrical", "Painting", "Plumbing"]


def test_search_filters_by_category_and_location(client, categories):
    lima = _configure(
        client,
        "lima@example.com",
        "Lima Plumbing",
        make_profile(
            [make_specialty(categories[0], service_name="Leak repair")],
            locations=[make_location("Lima", location_type="district", province="Lima", district="Miraflores")],
        ),
    )
    nationwide = _configure(
        client,
        "anywhere@example.com",
        "Anywhere Electric",
        make_profile(
            [make_specialty(categories[1], service_name="Wiring")],
            coverage_area={"nationwide": True, "locations": []},
        ),
    )
    cusco = _configure(
        client,
        "cusco@example.com",
        "Cusco Plumbing",
        make_profile([make_specialty(categories[0])], locations=[make_location("Cusco")]),
    )
    register_and_login(client, "idle@example.com", role="professional")

    everyone = client.get("/professionals").json()
    assert [item["id"] for item in everyone] == [lima, nationwide, cusco]

    plumbers = client.get(f"/professionals?category_id={categories[0]}").json()
    assert [item["id"] for item in plumbers] == [lima, cusco]

    in_miraflores = client.get("/professionals?location=miraflores").json()
    assert [item["id"] for item in in_miraflores] == [lima, nationwide]
    assert in_miraflores[0]["principal_service_name"] == "Leak repair"
    assert in_miraflores[0]["display_name"] == "Lima Plumbing"

    paged = client.get("/professionals?limit=1&offset=1").json()
    assert [item["id"] for item in paged] == [nationwide]


def test_search_rejects_bad_pagination(client):
    response = client.get("/professionals?limit=0")

    assert response.status_code == 422


def test_professional_me_read_and_update(client):
    session = register_and_login(client, "me-pro@example.com", role="professional")

    before = client.get("/professionals/me", headers=session["headers"])
    assert before.status_code == 200
    assert before.json()["display_name"] == "me-pro"

    updated = client.put(
        "/professionals/me",
        headers=session["headers"],
        json={"display_name": "Ana Carpentry", "description": " Custom furniture "},
    )
    assert updated.status_code == 200
    assert updated.json()["display_name"] == "Ana Carpentry"
    assert updated.json()["description"] == "Custom furniture"


def test_professional_me_for_client_returns_404(client):
    session = register_and_login(client, "client@example.com", role="client")

    response = client.get("/professionals/me", headers=session["headers"])

    assert response.status_code == 404


def test_location_wildcards_match_literally(client, categories):
    _configure(
        client,
        "lima@example.com",
        "Lima Plumbing",
        make_profile([make_specialty(categories[0])], locations=[make_location("Lima")]),
    )
    nationwide = _configure(
        client,
        "anywhere@example.com",
        "Anywhere Electric",
        make_profile([make_specialty(categories[1])], coverage_area={"nationwide": True, "locations": []}),
    )

    for term in ("%", "_", "L_ma"):
        response = client.get("/professionals", params={"location": term})
        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [nationwide]
