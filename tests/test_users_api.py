from tests.conftest import STUDENT, TRAINER


def test_get_own_profile(client) -> None:
    response = client.get("/api/users/me", headers=STUDENT)

    assert response.status_code == 200
    assert response.json()["name"] == "Ana Silva"
    assert response.json()["user_type"] == "student"


def test_update_profile_cannot_change_role(client, fake_supabase) -> None:
    response = client.put(
        "/api/users/me",
        json={"name": "Ana S.", "phone": "123", "user_type": "trainer"},
        headers=STUDENT,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Ana S."
    profile = next(p for p in fake_supabase.tables["profiles"] if p["id"] == "student-1")
    assert profile["user_type"] == "student"
    assert profile["phone"] == "123"


def test_only_trainers_list_users(client) -> None:
    assert client.get("/api/users", headers=STUDENT).status_code == 403

    response = client.get("/api/users", params={"user_type": "student"}, headers=TRAINER)

    assert response.status_code == 200
    assert [u["name"] for u in response.json()] == ["Ana Silva", "Pedro Lima"]


def test_upload_avatar_updates_profile(client, fake_supabase) -> None:
    response = client.post(
        "/api/users/me/avatar",
        files={"file": ("me.png", b"\x89PNG fake", "image/png")},
        headers=STUDENT,
    )

    assert response.status_code == 200
    url = response.json()["avatar_url"]
    assert url.startswith("https://storage.test/images/avatars/student-1_")
    assert url.endswith(".png")
    [(bucket, path)] = fake_supabase.storage.files.keys()
    assert bucket == "images"
    assert fake_supabase.storage.files[(bucket, path)][1]["content-type"] == "image/png"


def test_upload_rejects_non_images(client) -> None:
    response = client.post(
        "/api/users/me/avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=STUDENT,
    )

    assert response.status_code == 400


def test_new_avatar_replaces_previous_file(client, fake_supabase) -> None:
    first = client.post("/api/users/me/avatar", files={"file": ("a.png", b"one", "image/png")}, headers=STUDENT)
    second = client.post("/api/users/me/avatar", files={"file": ("b.jpg", b"two", "image/jpeg")}, headers=STUDENT)

    first_key = first.json()["avatar_url"].split("/images/", 1)[1]
    second_key = second.json()["avatar_url"].split("/images/", 1)[1]
    assert first_key.endswith(".png")
    assert list(fake_supabase.storage.files) == [("images", second_key)]


def test_avatar_outside_bucket_is_left_alone(client, fake_supabase) -> None:
    profile = next(p for p in fake_supabase.tables["profiles"] if p["id"] == "student-1")
    profile["avatar_url"] = "https://cdn.example.com/legacy.png"
    fake_supabase.storage.files[("images", "legacy.png")] = (b"old", None)

    response = client.post("/api/users/me/avatar", files={"file": ("me.png", b"new", "image/png")}, headers=STUDENT)

    assert response.status_code == 200
    assert ("images", "legacy.png") in fake_supabase.storage.files
