from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app


class FakeResponse:
    def __init__(self, data: Any, count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    """Subset of the postgrest query builder used by the services."""

    def __init__(self, rows: List[Dict[str, Any]]):
        self.rows = rows
        self.mode = "select"
        self.payload: Any = None
        self.filters: List = []
        self.ordering: List = []
        self._limit: Optional[int] = None
        self._offset = 0
        self._single = False
        self._maybe_single = False
        self._count = False

    def select(self, columns: str = "*", count: Optional[str] = None):
        self._count = count is not None
        return self

    def insert(self, payload):
        self.mode, self.payload = "insert", payload
        return self

    def upsert(self, payload):
        self.mode, self.payload = "upsert", payload
        return self

    def update(self, payload):
        self.mode, self.payload = "update", payload
        return self

    def delete(self):
        self.mode = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda r: r.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) >= value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) < value)
        return self

    def is_(self, column, value):
        self.filters.append(lambda r: r.get(column) is None if value == "null" else r.get(column) == value)
        return self

    def order(self, column, desc: bool = False):
        self.ordering.append((column, desc))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def offset(self, n):
        self._offset = n
        return self

    def single(self):
        self._single = True
        return self

    def maybe_single(self):
        self._maybe_single = True
        return self

    def _matching(self):
        return [r for r in self.rows if all(f(r) for f in self.filters)]

    @staticmethod
    def _new_row(row):
        row = dict(row)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.utcnow().isoformat())
        return row

    def execute(self):
        if self.mode in ("insert", "upsert"):
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            result = []
            for item in payload:
                existing = next((r for r in self.rows if "id" in item and r.get("id") == item["id"]), None)
                if self.mode == "upsert" and existing is not None:
                    existing.update(item)
                    result.append(dict(existing))
                else:
                    row = self._new_row(item)
                    self.rows.append(row)
                    result.append(dict(row))
            return FakeResponse(result)
        if self.mode == "update":
            result = []
            for row in self._matching():
                row.update(self.payload)
                result.append(dict(row))
            return FakeResponse(result)
        if self.mode == "delete":
            removed = self._matching()
            for row in removed:
                self.rows.remove(row)
            return FakeResponse([dict(r) for r in removed])

        rows = [dict(r) for r in self._matching()]
        for column, desc in reversed(self.ordering):
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else ""), reverse=desc)
        total = len(rows)
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        if self._single:
            if len(rows) != 1:
                raise Exception("JSON object requested, multiple (or no) rows returned")
            return FakeResponse(rows[0])
        if self._maybe_single:
            if not rows:
                return None
            return FakeResponse(rows[0])
        return FakeResponse(rows, count=total if self._count else None)


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, SimpleNamespace] = {}
        self.passwords: Dict[str, tuple] = {}
        self.signed_out = 0
        self.reset_emails: List[str] = []
        self.get_user_calls = 0

    def add_user(self, token, user_id, email, user_type, name=None, password="secret"):
        user = SimpleNamespace(
            id=user_id,
            email=email,
            user_metadata={"user_type": user_type, "name": name or user_id},
            app_metadata={},
            created_at="2026-01-01T00:00:00",
            updated_at=None,
        )
        self.tokens[token] = user
        self.passwords[email] = (password, token)
        return user

    def get_user(self, jwt=None):
        self.get_user_calls += 1
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])

    def sign_up(self, credentials):
        if credentials["email"] in self.passwords:
            raise Exception("User already registered")
        user_id = str(uuid.uuid4())
        data = credentials.get("options", {}).get("data", {})
        user = self.add_user(
            f"token-{user_id}", user_id, credentials["email"], data.get("user_type"),
            name=data.get("name"), password=credentials["password"],
        )
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        stored = self.passwords.get(credentials["email"])
        if not stored or stored[0] != credentials["password"]:
            raise Exception("Invalid login credentials")
        password, token = stored
        return SimpleNamespace(user=self.tokens[token], session=SimpleNamespace(access_token=token))

    def sign_out(self):
        self.signed_out += 1

    def reset_password_for_email(self, email, options=None):
        self.reset_emails.append(email)


class FakeBucket:
    def __init__(self, name, files):
        self.name = name
        self.files = files

    def upload(self, path, file, file_options=None):
        self.files[(self.name, path)] = (file, file_options)
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.files.pop((self.name, path), None)


class FakeStorage:
    def __init__(self):
        self.files: Dict[tuple, tuple] = {}

    def from_(self, bucket):
        return FakeBucket(bucket, self.files)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.auth = FakeAuth()
        self.storage = FakeStorage()

    def table(self, name):
        return FakeQuery(self.tables[name])

    def add_user(self, token, user_id, user_type, name=None):
        email = f"{user_id}@example.com"
        self.auth.add_user(token, user_id, email, user_type, name=name)
        self.tables["profiles"].append({
            "id": user_id,
            "name": name or user_id,
            "email": email,
            "user_type": user_type,
            "avatar_url": None,
            "created_at": "2026-01-01T00:00:00",
        })

    def add_workout(self, workout_id, student_id, trainer_id, exercises=(), **fields):
        row = {
            "id": workout_id,
            "name": fields.get("name", "Full Body"),
            "description": fields.get("description"),
            "category": fields.get("category", "strength"),
            "duration": fields.get("duration", 45),
            "difficulty": fields.get("difficulty", "beginner"),
            "user_id": student_id,
            "created_by": trainer_id,
            "created_at": fields.get("created_at", "2026-01-01T00:00:00"),
        }
        self.tables["workouts"].append(row)
        for index, (exercise_id, name) in enumerate(exercises):
            if not any(e["id"] == exercise_id for e in self.tables["exercise"]):
                self.tables["exercise"].append({"id": exercise_id, "name": name})
            self.tables["workout_exercises"].append({
                "id": f"{workout_id}-we-{index}",
                "workout_id": workout_id,
                "exercise_id": exercise_id,
                "sets": 3,
                "reps": 12,
                "rest_seconds": 60,
                "notes": None,
                "order": index,
            })
        return row


TRAINER = {"Authorization": "Bearer trainer-token"}
OTHER_TRAINER = {"Authorization": "Bearer other-trainer-token"}
STUDENT = {"Authorization": "Bearer student-token"}
OTHER_STUDENT = {"Authorization": "Bearer other-student-token"}


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    fake = FakeSupabase()
    fake.add_user("trainer-token", "trainer-1", "trainer", name="Carla Coach")
    fake.add_user("other-trainer-token", "trainer-2", "trainer", name="Bruno Coach")
    fake.add_user("student-token", "student-1", "student", name="Ana Silva")
    fake.add_user("other-student-token", "student-2", "student", name="Pedro Lima")
    return fake


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        supabase_url="",
        supabase_key="",
        stripe_secret_key=None,
        pdf_tmp_dir=str(tmp_path / "pdf"),
        pdf_cleanup_delay_seconds=0,
        environment="test",
    )


@pytest.fixture
def client(settings, fake_supabase) -> TestClient:
    return TestClient(create_app(settings, fake_supabase))
