from datetime import date, timedelta

import pytest

from tests.conftest import STUDENT, TRAINER


@pytest.fixture
def schedule(fake_supabase):
    today = date.today()
    fake_supabase.add_workout("w-legs", "student-1", "trainer-1", name="Pernas")
    fake_supabase.add_workout("w-push", "student-1", "trainer-1", name="Empurrar")
    rows = fake_supabase.tables["student_workouts"]
    rows.append({"id": "s-1", "student_id": "student-1", "workout_id": "w-legs", "status": "pending",
                 "scheduled_date": (today - timedelta(days=2)).isoformat(), "completed_at": None})
    rows.append({"id": "s-2", "student_id": "student-1", "workout_id": "w-push", "status": "pending",
                 "scheduled_date": (today + timedelta(days=3)).isoformat(), "completed_at": None})
    rows.append({"id": "s-3", "student_id": "student-1", "workout_id": "w-legs", "status": "pending",
                 "scheduled_date": (today + timedelta(days=1)).isoformat(), "completed_at": None})
    for day in range(7):
        rows.append({"id": f"c-{day}", "student_id": "student-1", "workout_id": "w-push", "status": "completed",
                     "scheduled_date": None, "completed_at": f"2026-03-0{day + 1}T08:00:00"})
    rows.append({"id": "c-other", "student_id": "student-2", "workout_id": "w-push", "status": "completed",
                 "scheduled_date": None, "completed_at": "2026-03-09T08:00:00"})
    return fake_supabase


def test_student_dashboard(client, schedule) -> None:
    response = client.get("/api/dashboard/student", headers=STUDENT)

    assert response.status_code == 200
    body = response.json()
    assert body["next_workout"]["name"] == "Pernas"
    assert body["next_workout"]["scheduled_date"] == (date.today() + timedelta(days=1)).isoformat()
    assert len(body["recent_workouts"]) == 5
    assert body["recent_workouts"][0]["completed_at"].startswith("2026-03-07")
    assert body["total_completed"] == 7


def test_dashboard_without_history(client) -> None:
    body = client.get("/api/dashboard/student", headers=STUDENT).json()

    assert body == {"next_workout": None, "recent_workouts": [], "total_completed": 0}


def test_trainers_have_no_student_dashboard(client) -> None:
    assert client.get("/api/dashboard/student", headers=TRAINER).status_code == 403
