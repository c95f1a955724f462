import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

import controllers.auth_controller as auth_controller
import controllers.user_controller as user_controller
import controllers.quiz_controller as quiz_controller
import controllers.attempt_controller as attempt_controller
from main import app

COLLECTION_MODULES = (auth_controller, user_controller, quiz_controller, attempt_controller)
COLLECTIONS = ("users", "quizzes", "attempts")

PASSWORD = "Passw0rd!"


@pytest.fixture
def db(monkeypatch):
    database = AsyncMongoMockClient()["quizmaster_test"]
    for module in COLLECTION_MODULES:
        for name in COLLECTIONS:
            if hasattr(module, name):
                monkeypatch.setattr(module, name, database[name])
    return database


@pytest.fixture
def client(db):
    return TestClient(app)


def register(client, username, email=None, password=PASSWORD):
    res = client.post("/api/register", json={
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
    })
    assert res.status_code == 201, res.text
    # tests authenticate per request with a bearer header instead
    client.cookies.clear()
    body = res.json()
    return {
        "id": body["id"],
        "email": email or f"{username}@example.com",
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


def quiz_payload(**overrides):
    payload = {
        "title": "Capitals",
        "description": "World capitals",
        "questions": [
            {"questionNumber": 1, "question": "Capital of France?", "options": ["A", "Paris", "Rome"], "answer": "A"},
            {"questionNumber": 2, "question": "Capital of Italy?", "options": ["B", "Rome", "X"], "answer": "B"},
        ],
    }
    payload.update(overrides)
    return payload


def create_quiz(client, owner, **overrides):
    res = client.post("/api/quiz", json=quiz_payload(**overrides), headers=owner["headers"])
    assert res.status_code == 200, res.text
    return res.json()["id"]


@pytest.fixture
def alice(client):
    return register(client, "alice")


@pytest.fixture
def bob(client):
    return register(client, "bob")
