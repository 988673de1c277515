from app.domain.settings.repository import MAX_PHOTO_SELECTIONS, SettingsRepository
from app.models import Photo, PhotoSelection

from .conftest import make_booking, make_photos


def select(client, photo_id, **body):
    return client.post(f"/api/photos/{photo_id}/select", json=body or None)


def test_toggle_alternates(client, act_as, users, db):
    booking = make_booking(db)
    photo = make_photos(db, booking.id, 1)[0]
    act_as("alice")

    first = select(client, photo.id, notes="cover shot")
    assert first.status_code == 200
    assert first.json() == {"message": "Photo selected", "selected": True}
    assert select(client, photo.id).json() == {"message": "Photo deselected", "selected": False}
    assert select(client, photo.id).json()["selected"] is True

    db.expire_all()
    assert db.query(PhotoSelection).filter(PhotoSelection.photo_id == photo.id).count() == 1


def test_selection_capacity(client, act_as, users, db):
    SettingsRepository.set_value(db, MAX_PHOTO_SELECTIONS, "20")
    booking = make_booking(db)
    photos = make_photos(db, booking.id, 22)
    act_as("alice")

    for photo in photos[:20]:
        assert select(client, photo.id).json()["selected"] is True

    over = select(client, photos[20].id)
    assert over.status_code == 400
    assert over.json() == {"error": "Maximum 20 photos can be selected"}

    assert select(client, photos[0].id).json()["selected"] is False
    assert select(client, photos[21].id).json()["selected"] is True


def test_capacity_follows_setting(client, act_as, users, db):
    SettingsRepository.set_value(db, MAX_PHOTO_SELECTIONS, "2")
    booking = make_booking(db)
    photos = make_photos(db, booking.id, 3)
    act_as("alice")

    select(client, photos[0].id)
    select(client, photos[1].id)
    assert select(client, photos[2].id).status_code == 400


def test_capacity_is_per_booking(client, act_as, users, db):
    SettingsRepository.set_value(db, MAX_PHOTO_SELECTIONS, "1")
    first = make_booking(db)
    second = make_booking(db)
    photo_a = make_photos(db, first.id, 1)[0]
    photo_b = make_photos(db, second.id, 1)[0]
    act_as("alice")

    assert select(client, photo_a.id).json()["selected"] is True
    assert select(client, photo_b.id).json()["selected"] is True


def test_only_booking_owner_selects(client, act_as, users, db):
    booking = make_booking(db)
    photo = make_photos(db, booking.id, 1)[0]

    for uid in ("bob", "pat", "ada"):
        act_as(uid)
        assert select(client, photo.id).status_code == 403


def test_select_unknown_or_malformed_photo(client, act_as, users):
    act_as("alice")
    assert select(client, 999).status_code == 404
    response = client.post("/api/photos/abc/select")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid photo ID"}


def test_gallery_marks_callers_selections(client, act_as, users, db):
    booking = make_booking(db)
    photos = make_photos(db, booking.id, 3)
    act_as("alice")
    select(client, photos[1].id, notes="print this")

    gallery = client.get(f"/api/photos/booking/{booking.id}").json()
    assert len(gallery) == 3
    marked = {p["id"]: p for p in gallery}
    assert marked[photos[1].id]["selection_id"] is not None
    assert marked[photos[1].id]["notes"] == "print this"
    assert marked[photos[0].id]["selection_id"] is None

    selections = client.get(f"/api/photos/selections/{booking.id}").json()
    assert [p["id"] for p in selections] == [photos[1].id]

    act_as("bob")
    assert client.get(f"/api/photos/booking/{booking.id}").status_code == 403


def test_upload_photos(client, act_as, users, db, storage):
    booking = make_booking(db)
    act_as("pat")

    response = client.post(
        f"/api/photos/upload/{booking.id}",
        files=[
            ("photos", ("first.jpg", b"jpeg-bytes", "image/jpeg")),
            ("photos", ("second.png", b"png-bytes", "image/png")),
        ],
    )

    assert response.status_code == 201
    uploaded = response.json()["photos"]
    assert [p["originalName"] for p in uploaded] == ["first.jpg", "second.png"]
    assert all(p["url"].startswith(f"https://photos.test/bookings/{booking.id}/") for p in uploaded)
    assert len(storage.objects) == 2


def test_upload_rejects_non_images(client, act_as, users, db, storage):
    booking = make_booking(db)
    act_as("pat")

    response = client.post(
        f"/api/photos/upload/{booking.id}",
        files=[("photos", ("notes.txt", b"hello", "text/plain"))],
    )
    assert response.status_code == 400
    assert storage.objects == {}


def test_upload_skips_files_that_fail_to_store(client, act_as, users, db, storage):
    booking = make_booking(db)
    storage.fail_keys.add(".png")
    act_as("ada")

    response = client.post(
        f"/api/photos/upload/{booking.id}",
        files=[
            ("photos", ("good.jpg", b"jpeg-bytes", "image/jpeg")),
            ("photos", ("bad.png", b"png-bytes", "image/png")),
        ],
    )
    assert response.status_code == 201
    assert [p["originalName"] for p in response.json()["photos"]] == ["good.jpg"]


def test_upload_fails_when_nothing_stored(client, act_as, users, db, storage):
    booking = make_booking(db)
    storage.fail_keys.add(".jpg")
    act_as("ada")

    response = client.post(
        f"/api/photos/upload/{booking.id}",
        files=[("photos", ("bad.jpg", b"jpeg-bytes", "image/jpeg"))],
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to upload photos"}


def test_clients_cannot_upload(client, act_as, users, db):
    booking = make_booking(db)
    act_as("alice")

    response = client.post(
        f"/api/photos/upload/{booking.id}",
        files=[("photos", ("a.jpg", b"x", "image/jpeg"))],
    )
    assert response.status_code == 403


def test_delete_photo_removes_selections_and_object(client, act_as, users, db, storage):
    booking = make_booking(db)
    photo = make_photos(db, booking.id, 1)[0]
    storage.objects[photo.file_path] = b"jpeg"
    act_as("alice")
    select(client, photo.id)

    assert client.delete(f"/api/photos/{photo.id}").status_code == 403

    act_as("pat")
    response = client.delete(f"/api/photos/{photo.id}")
    assert response.status_code == 200

    db.expire_all()
    assert db.get(Photo, photo.id) is None
    assert db.query(PhotoSelection).count() == 0
    assert storage.objects == {}
