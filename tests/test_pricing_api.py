def create(client, **body):
    return client.post("/api/pricing", json=body)


def test_catalog_is_public_and_split(client, act_as, users):
    act_as("ada")
    create(client, name="Premium Wedding", category="package", price=2500, duration="8 hours",
           features=["Two photographers", "Album"], display_order=2)
    create(client, name="Basic", category="package", price=900, display_order=1)
    create(client, name="Drone Footage", category="addon", price=300, duration="ignored")
    act_as("nobody")

    catalog = client.get("/api/pricing").json()

    assert [p["slug"] for p in catalog["packages"]] == ["basic", "premium-wedding"]
    assert catalog["packages"][1]["features"] == ["Two photographers", "Album"]
    assert catalog["addons"][0]["slug"] == "drone-footage"
    assert catalog["addons"][0]["duration"] is None


def test_catalog_without_token(client):
    assert client.get("/api/pricing").status_code == 200


def test_create_requires_admin(client, act_as, users):
    act_as("pat")
    response = create(client, name="Basic", category="package", price=900)
    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


def test_create_validation(client, act_as, users):
    act_as("ada")
    assert create(client, name="Basic", category="package").json() == {
        "error": "name, category, and price are required"
    }
    assert create(client, name="Basic", category="bundle", price=10).status_code == 400


def test_duplicate_slug_is_rejected(client, act_as, users):
    act_as("ada")
    assert create(client, name="Basic Package", category="package", price=900).status_code == 201
    response = create(client, name="basic  package!", category="package", price=950)
    assert response.status_code == 400


def test_update_item(client, act_as, users):
    act_as("ada")
    create(client, name="Basic", category="package", price=900)

    response = client.put("/api/pricing/basic", json={"price": 1000})
    assert response.status_code == 200
    assert response.json()["pricing"]["price"] == 1000
    assert response.json()["pricing"]["name"] == "Basic"
    assert response.json()["pricing"]["updated_by"] == "ada"

    assert client.put("/api/pricing/missing", json={"price": 1}).status_code == 404
