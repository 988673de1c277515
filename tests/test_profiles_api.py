from app.models import Profile

from .conftest import make_booking


def test_first_profile_post_creates_client(client, act_as, db):
    act_as("carol", email="carol@example.com")

    response = client.post("/api/auth/profile", json={"displayName": "Carol", "phone": "+1 (555) 010-2030"})

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "client"
    assert body["phone"] == "+15550102030"


def test_profile_post_never_changes_role(client, act_as, users, db):
    act_as("pat")
    response = client.post("/api/auth/profile", json={"displayName": "Pat P", "role": "admin"})
    assert response.json()["role"] == "photographer"
    assert response.json()["display_name"] == "Pat P"


def test_profile_lookup_rules(client, act_as, users):
    act_as("alice")
    assert client.get("/api/auth/profile/alice").status_code == 200
    assert client.get("/api/auth/profile/bob").status_code == 403
    act_as("pat")
    assert client.get("/api/users/alice").json()["email"] == "alice@example.com"
    act_as("ada")
    assert client.get("/api/users/nobody").status_code == 404


def test_role_update(client, act_as, users, db):
    act_as("pat")
    assert client.patch("/api/auth/role/alice", json={"role": "admin"}).status_code == 403

    act_as("ada")
    assert client.patch("/api/auth/role/alice", json={"role": "superuser"}).status_code == 400
    assert client.patch("/api/auth/role/ghost", json={"role": "admin"}).status_code == 404
    assert client.patch("/api/auth/role/alice", json={"role": "photographer"}).status_code == 200

    db.expire_all()
    assert db.get(Profile, "alice").role == "photographer"


def test_role_change_takes_effect_on_next_request(client, act_as, users, db):
    booking = make_booking(db)
    act_as("ada")
    client.patch("/api/auth/role/bob", json={"role": "photographer"})

    act_as("bob")
    response = client.patch(f"/api/bookings/{booking.id}/status", json={"status": "confirmed"})
    assert response.status_code == 200


def test_user_listing_is_admin_only(client, act_as, users):
    act_as("pat")
    assert client.get("/api/users").status_code == 403
    act_as("ada")
    assert len(client.get("/api/users").json()) == 4


def test_admin_user_search_and_detail(client, act_as, users, db):
    make_booking(db, user_id="bob")
    act_as("ada")

    clients = client.get("/api/admin/users", params={"role": "client"}).json()
    assert clients["total"] == 2
    assert {u["id"] for u in clients["users"]} == {"alice", "bob"}

    found = client.get("/api/admin/users", params={"search": "BOB"}).json()
    assert [u["id"] for u in found["users"]] == ["bob"]

    detail = client.get("/api/admin/users/bob").json()
    assert detail["user"]["id"] == "bob"
    assert len(detail["bookings"]) == 1


def test_staff_accounts(client, act_as, users):
    act_as("ada")
    assert {p["id"] for p in client.get("/api/admin/admins").json()} == {"pat", "ada"}

    response = client.post(
        "/api/admin/admins",
        json={"uid": "dan", "email": "Dan@Example.com", "displayName": "Dan", "role": "photographer"},
    )
    assert response.status_code == 201
    assert response.json()["admin"]["role"] == "photographer"
    assert response.json()["admin"]["email"] == "dan@example.com"

    bad_role = client.post(
        "/api/admin/admins",
        json={"uid": "eve", "email": "eve@example.com", "displayName": "Eve", "role": "client"},
    )
    assert bad_role.status_code == 400
