import pytest

from tests.conftest import OTHER_STUDENT, OTHER_TRAINER, STUDENT, TRAINER


@pytest.fixture
def room(client) -> dict:
    response = client.post("/api/chat/rooms", json={"student_id": "student-1"}, headers=TRAINER)
    assert response.status_code == 201
    return response.json()


def test_trainer_opens_room_with_student(room) -> None:
    assert room["name"] == "Ana Silva"
    assert sorted(p["id"] for p in room["participants"]) == ["student-1", "trainer-1"]


def test_opening_twice_returns_same_room(client, room, fake_supabase) -> None:
    again = client.post("/api/chat/rooms", json={"student_id": "student-1"}, headers=TRAINER).json()

    assert again["id"] == room["id"]
    assert len(fake_supabase.tables["chat_rooms"]) == 1


def test_students_cannot_open_rooms(client) -> None:
    response = client.post("/api/chat/rooms", json={"student_id": "student-2"}, headers=STUDENT)

    assert response.status_code == 403


def test_room_requires_a_student_counterpart(client) -> None:
    assert client.post("/api/chat/rooms", json={"student_id": "trainer-2"}, headers=TRAINER).status_code == 400
    assert client.post("/api/chat/rooms", json={"student_id": "ghost"}, headers=TRAINER).status_code == 404


def test_message_flow_updates_preview_and_unread(client, room) -> None:
    path = f"/api/chat/rooms/{room['id']}/messages"

    sent = client.post(path, json={"content": "  Bora treinar?  "}, headers=TRAINER)
    assert sent.status_code == 201
    assert sent.json()["content"] == "Bora treinar?"
    assert sent.json()["user"]["name"] == "Carla Coach"

    [student_room] = client.get("/api/chat/rooms", headers=STUDENT).json()
    assert student_room["last_message"] == "Bora treinar?"
    assert student_room["unread_count"] == 1

    messages = client.get(path, headers=STUDENT).json()
    assert [m["content"] for m in messages] == ["Bora treinar?"]
    assert client.get("/api/chat/rooms", headers=STUDENT).json()[0]["unread_count"] == 0


def test_empty_message_is_rejected(client, room) -> None:
    response = client.post(f"/api/chat/rooms/{room['id']}/messages", json={"content": "   "}, headers=STUDENT)

    assert response.status_code == 400


def test_outsiders_cannot_read_or_post(client, room) -> None:
    path = f"/api/chat/rooms/{room['id']}/messages"

    for headers in (OTHER_TRAINER, OTHER_STUDENT):
        assert client.get(path, headers=headers).status_code == 403
        assert client.post(path, json={"content": "oi"}, headers=headers).status_code == 403


def test_unknown_room_is_404(client) -> None:
    assert client.get("/api/chat/rooms/missing/messages", headers=STUDENT).status_code == 404


def test_rooms_list_empty_for_new_user(client) -> None:
    assert client.get("/api/chat/rooms", headers=OTHER_STUDENT).json() == []


def test_long_threads_return_latest_messages_in_order(client, room, fake_supabase) -> None:
    for i in range(105):
        fake_supabase.tables["messages"].append({
            "id": f"m-{i}", "room_id": room["id"], "user_id": "student-1",
            "content": f"msg {i}", "created_at": f"2026-01-01T{i // 60:02d}:{i % 60:02d}:00",
        })
    path = f"/api/chat/rooms/{room['id']}/messages"
    client.post(path, json={"content": "newest"}, headers=TRAINER)

    messages = client.get(path, headers=STUDENT).json()

    assert len(messages) == 100
    assert messages[-1]["content"] == "newest"
    assert messages[0]["content"] == "msg 6"
    assert [m["created_at"] for m in messages] == sorted(m["created_at"] for m in messages)
