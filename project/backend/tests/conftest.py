import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from examadmin.main import app
from examadmin.services import store as store_module
from examadmin.utils.database import ensure_indexes, get_database
from examadmin.utils.security import create_access_token


@pytest.fixture
def mock_db():
    client = AsyncMongoMockClient()
    db = client["exam_admin_test"]
    asyncio.run(ensure_indexes(db))
    return db


@pytest.fixture
def store(mock_db):
    return store_module.TestStore(mock_db, use_transactions=False)


@pytest.fixture
def client(mock_db, store):
    app.dependency_overrides[get_database] = lambda: mock_db
    app.dependency_overrides[store_module.get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    return create_access_token({"sub": "65f000000000000000000001", "email": "admin@example.com"})


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def make_questions():
    def _make(count, numbered=False):
        questions = []
        for i in range(1, count + 1):
            question = {
                "questionStatement": f"  Question {i}?  ",
                "options": {
                    "option1": f" A{i} ",
                    "option2": f"B{i}",
                    "option3": f"C{i}",
                    "option4": f"D{i}",
                },
                "correctOption": "option2",
            }
            if numbered:
                question["questionNumber"] = i * 10
            questions.append(question)
        return questions

    return _make


@pytest.fixture
def create_payload(make_questions):
    def _payload(count=75, date="2026-02-10", test_type="free", **overrides):
        payload = {
            "title": "Daily Practice Test",
            "date": date,
            "testType": test_type,
            "questions": make_questions(count),
        }
        payload.update(overrides)
        return payload

    return _payload
