from datetime import date

from app.models import Booking

from .conftest import make_booking

NEW_BOOKING = {
    "eventType": "wedding",
    "packageType": "premium",
    "eventDate": "2024-09-14",
    "eventTime": "15:00",
    "location": "Old Mill",
    "duration": 6,
    "guestCount": 120,
    "additionalServices": ["drone", "album"],
    "totalAmount": 3100,
}


def reload(db, booking_id):
    db.expire_all()
    return db.get(Booking, booking_id)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_requests_without_token_are_rejected(client):
    response = client.get("/api/bookings/1")
    assert response.status_code == 401
    assert response.json() == {"error": "No token provided"}


def test_create_booking_starts_pending(client, act_as, users):
    act_as("alice")
    response = client.post("/api/bookings", json={**NEW_BOOKING, "status": "confirmed"})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Booking created successfully"
    assert body["booking"]["status"] == "pending"
    assert body["booking"]["user_id"] == "alice"
    assert body["booking"]["additional_services"] == ["drone", "album"]
    assert body["booking"]["created_at"] == "2024-06-01T12:00:00"


def test_create_booking_creates_missing_profile(client, act_as, db):
    act_as("newcomer", email="newcomer@example.com")
    response = client.post("/api/bookings", json=NEW_BOOKING)

    assert response.status_code == 201
    assert response.json()["booking"]["user"]["display_name"] == "newcomer"


def test_create_booking_accepts_total_that_does_not_match_catalog(client, act_as, users):
    act_as("alice")
    response = client.post("/api/bookings", json={**NEW_BOOKING, "totalAmount": 1})

    assert response.status_code == 201
    assert response.json()["booking"]["total_amount"] == 1


def test_create_booking_requires_event_fields(client, act_as, users):
    act_as("alice")
    response = client.post("/api/bookings", json={"eventType": "wedding"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_owner_edit_scenario(client, act_as, users, clock, db):
    act_as("alice")
    booking_id = client.post("/api/bookings", json=NEW_BOOKING).json()["bookingId"]

    clock.advance(minutes=2)
    response = client.put(f"/api/bookings/{booking_id}", json={"location": "Harbour Hall"})
    assert response.status_code == 200
    assert response.json()["booking"]["location"] == "Harbour Hall"
    assert response.json()["booking"]["status"] == "pending"
    assert response.json()["booking"]["package_type"] == "premium"

    clock.advance(minutes=88)
    response = client.put(f"/api/bookings/{booking_id}", json={"location": "Somewhere else"})
    assert response.status_code == 403
    assert reload(db, booking_id).location == "Harbour Hall"


def test_edit_rejects_null_required_fields(client, act_as, users, db):
    booking = make_booking(db)
    act_as("alice")

    response = client.put(f"/api/bookings/{booking.id}", json={"eventType": None})
    assert response.status_code == 400
    assert "eventType" in response.json()["error"]

    response = client.put(f"/api/bookings/{booking.id}", json={"eventDate": None})
    assert response.status_code == 400
    assert "eventDate" in response.json()["error"]

    unchanged = reload(db, booking.id)
    assert unchanged.event_type == "wedding"
    assert unchanged.event_date == date(2024, 9, 14)


def test_owner_cannot_edit_confirmed_booking(client, act_as, users, db):
    booking = make_booking(db, status="confirmed")
    act_as("alice")

    response = client.put(f"/api/bookings/{booking.id}", json={"guestCount": 80})
    assert response.status_code == 403
    assert "confirmed" in response.json()["error"]


def test_admin_edits_outside_window(client, act_as, users, clock, db):
    booking = make_booking(db, status="completed")
    clock.advance(days=10)
    act_as("ada")

    response = client.put(f"/api/bookings/{booking.id}", json={"guestCount": 80})
    assert response.status_code == 200
    assert response.json()["booking"]["guest_count"] == 80


def test_photographer_cannot_edit(client, act_as, users, db):
    booking = make_booking(db)
    act_as("pat")

    assert client.put(f"/api/bookings/{booking.id}", json={"guestCount": 80}).status_code == 403


def test_non_numeric_booking_id(client, act_as, users):
    act_as("alice")
    response = client.get("/api/bookings/abc")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid booking ID"}


def test_get_missing_booking(client, act_as, users):
    act_as("ada")
    response = client.get("/api/bookings/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Booking not found"}


def test_view_rules(client, act_as, users, db):
    booking = make_booking(db)

    act_as("bob")
    assert client.get(f"/api/bookings/{booking.id}").status_code == 403
    act_as("pat")
    assert client.get(f"/api/bookings/{booking.id}").status_code == 200
    act_as("alice")
    assert client.get(f"/api/bookings/{booking.id}").json()["user"]["email"] == "alice@example.com"


def test_status_update_is_staff_only(client, act_as, users, db):
    booking = make_booking(db, user_id="alice")
    act_as("alice")

    response = client.patch(f"/api/bookings/{booking.id}/status", json={"status": "confirmed"})
    assert response.status_code == 403
    assert reload(db, booking.id).status == "pending"


def test_photographer_updates_status(client, act_as, users, db, clock):
    booking = make_booking(db)
    clock.advance(hours=3)
    act_as("pat")

    response = client.patch(f"/api/bookings/{booking.id}/status", json={"status": "confirmed"})
    assert response.status_code == 200
    body = response.json()["booking"]
    assert body["status"] == "confirmed"
    assert body["status_updated_by"] == "pat"
    assert body["status_updated_at"] == "2024-06-01T15:00:00"


def test_status_update_rejects_deleted(client, act_as, users, db):
    booking = make_booking(db)
    act_as("ada")

    response = client.patch(f"/api/bookings/{booking.id}/status", json={"status": "deleted"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid status"}


def test_admin_could_not_do_scenario(client, act_as, users, db):
    booking = make_booking(db)
    act_as("ada")

    response = client.patch(
        f"/api/admin/bookings/{booking.id}/status",
        json={"status": "could_not_do", "reason": "availability", "notes": "we're fully booked"},
    )

    assert response.status_code == 200
    body = response.json()["booking"]
    assert body["status"] == "could_not_do"
    assert body["status_reason"] == "availability"
    assert body["status_notes"] == "we're fully booked"
    assert body["status_updated_by"] == "ada"


def test_leaving_could_not_do_clears_reason(client, act_as, users, db):
    booking = make_booking(db)
    act_as("ada")
    client.patch(
        f"/api/admin/bookings/{booking.id}/status",
        json={"status": "could_not_do", "reason": "availability", "notes": "fully booked"},
    )

    response = client.patch(
        f"/api/admin/bookings/{booking.id}/status", json={"status": "confirmed"}
    )

    assert response.status_code == 200
    body = response.json()["booking"]
    assert body["status"] == "confirmed"
    assert body["status_reason"] is None
    assert body["status_notes"] == "fully booked"


def test_soft_delete_twice(client, act_as, users, db, clock):
    booking = make_booking(db)
    act_as("alice")

    first = client.request(
        "DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "Plans changed"}
    )
    assert first.status_code == 200
    deleted = reload(db, booking.id)
    assert deleted.status == "deleted"
    assert deleted.deletion_reason == "Plans changed"
    assert deleted.deleted_by == "alice"
    deleted_at = deleted.deleted_at

    clock.advance(minutes=5)
    second = client.request(
        "DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "Again"}
    )
    assert second.status_code == 400
    again = reload(db, booking.id)
    assert again.deletion_reason == "Plans changed"
    assert again.deleted_at == deleted_at


def test_soft_delete_needs_reason(client, act_as, users, db):
    booking = make_booking(db)
    act_as("alice")

    assert client.delete(f"/api/bookings/{booking.id}").status_code == 400
    response = client.request("DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "  "})
    assert response.status_code == 400
    assert response.json() == {"error": "Deletion reason is required"}
    assert reload(db, booking.id).deleted_at is None


def test_owner_soft_deletes_confirmed_booking_within_window(client, act_as, users, db):
    booking = make_booking(db, status="confirmed")
    act_as("alice")

    response = client.request(
        "DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "Venue closed"}
    )
    assert response.status_code == 200


def test_owner_soft_delete_outside_window(client, act_as, users, db, clock):
    booking = make_booking(db)
    clock.advance(minutes=61)
    act_as("alice")

    response = client.request(
        "DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "Too late"}
    )
    assert response.status_code == 403
    assert reload(db, booking.id).deleted_at is None


def test_photographer_cannot_soft_delete(client, act_as, users, db):
    booking = make_booking(db)
    act_as("pat")

    response = client.request(
        "DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "No"}
    )
    assert response.status_code == 403
    unchanged = reload(db, booking.id)
    assert unchanged.status == "pending"
    assert unchanged.deleted_at is None


def test_admin_soft_deletes_old_booking(client, act_as, users, db, clock):
    booking = make_booking(db)
    clock.advance(days=3)
    act_as("ada")

    response = client.request(
        "DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "Duplicate"}
    )
    assert response.status_code == 200
    assert reload(db, booking.id).deleted_by == "ada"


def test_user_listing_hides_deleted_bookings(client, act_as, users, db, clock):
    kept = make_booking(db)
    make_booking(db, status="deleted", deleted_at=clock(), deletion_reason="gone")

    act_as("alice")
    response = client.get("/api/bookings/user/alice")
    assert response.status_code == 200
    assert [b["id"] for b in response.json()] == [kept.id]

    act_as("bob")
    assert client.get("/api/bookings/user/alice").status_code == 403

    act_as("pat")
    assert client.get("/api/bookings/user/alice").status_code == 200


def test_staff_listing_filters_and_paginates(client, act_as, users, db):
    for _ in range(3):
        make_booking(db, event_type="wedding")
    make_booking(db, event_type="portrait", status="confirmed")

    act_as("alice")
    assert client.get("/api/bookings").status_code == 403

    act_as("pat")
    response = client.get("/api/bookings", params={"eventType": "wedding", "limit": 2})
    body = response.json()
    assert len(body["bookings"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    response = client.get("/api/bookings", params={"status": "confirmed"})
    assert [b["event_type"] for b in response.json()["bookings"]] == ["portrait"]


def test_admin_listing_date_range_and_stats(client, act_as, users, db, clock):
    make_booking(db, event_date=date(2024, 7, 1))
    make_booking(db, event_date=date(2024, 8, 1), status="completed")
    make_booking(db, event_date=date(2024, 9, 1), status="deleted", deleted_at=clock())

    act_as("pat")
    assert client.get("/api/admin/bookings").status_code == 403

    act_as("ada")
    response = client.get(
        "/api/admin/bookings", params={"startDate": "2024-07-15", "endDate": "2024-09-30"}
    )
    body = response.json()
    assert body["total"] == 2
    assert body["totalPages"] == 1
    assert [b["event_date"] for b in body["bookings"]] == ["2024-09-01", "2024-08-01"]

    stats = client.get("/api/admin/stats").json()
    assert stats["total"] == 3
    assert stats["pending"] == 1
    assert stats["completed"] == 1
    assert stats["deleted"] == 1
    assert stats["confirmed"] == 0


def test_admin_booking_detail_names_deleter(client, act_as, users, db):
    booking = make_booking(db)
    act_as("alice")
    client.request("DELETE", f"/api/bookings/{booking.id}", json={"deletionReason": "Moved"})

    act_as("ada")
    detail = client.get(f"/api/admin/bookings/{booking.id}").json()
    assert detail["deleter"]["id"] == "alice"
    assert detail["deletion_reason"] == "Moved"
