import json
import time
import asyncio

import pytest
from google.api_core.exceptions import ServiceUnavailable, InvalidArgument

from controllers.generation_controller import normalize_generated_quiz
from utils.errors import GenerationFailedError
from utils.gemini_service import GeminiService, clean_ai_json, generate_with_gemini
import utils.text_extraction as text_extraction


GENERATED = {
    "title": "Solar system",
    "description": "Planets",
    "questions": [
        {"questionNumber": 1, "question": "Largest planet?", "options": ["Mars", "Jupiter", "Venus", "Earth"],
         "answer": "Jupiter"},
        {"questionNumber": 2, "question": "Closest to the sun?", "options": ["Mercury", "Pluto", "Saturn", "Mars"],
         "answer": "Mercury"},
    ],
}


def fenced(payload):
    return f"Here you go:\n```json\n{json.dumps(payload)}\n```"


class FakeGemini:
    """Stands in for the blocking model call; plays back queued replies."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def __call__(self, contents):
        self.calls.append(contents)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def gemini(monkeypatch):
    def install(*replies):
        fake = FakeGemini(*replies)
        monkeypatch.setattr(GeminiService, "generate", fake)
        return fake
    return install


def test_clean_ai_json_strips_fences_and_chatter():
    assert clean_ai_json(fenced(GENERATED)) == GENERATED


def test_clean_ai_json_rejects_non_json():
    with pytest.raises(GenerationFailedError):
        clean_ai_json("I could not do that")
    with pytest.raises(GenerationFailedError):
        clean_ai_json("{not json}")
    with pytest.raises(GenerationFailedError):
        clean_ai_json("")


def test_normalize_maps_letters_and_drops_unusable_questions():
    data = {
        "title": "Mixed",
        "questions": [
            {"question": "2 + 2?", "options": ["3", "4", "5"], "answer": "B"},
            {"question": "No answer", "options": ["x", "y"], "answer": "z"},
            {"question": "One option", "options": ["x"], "answer": "x"},
            {"question": "Case", "options": ["Yes", "No"], "answer": "no"},
        ],
    }

    quiz = normalize_generated_quiz(data, difficulty="Medium")

    assert quiz.title == "Mixed"
    assert quiz.difficultyLevel == "Medium"
    assert [q.questionNumber for q in quiz.questions] == [1, 2]
    assert [q.answer for q in quiz.questions] == ["4", "No"]


def test_normalize_without_usable_questions_fails():
    with pytest.raises(GenerationFailedError):
        normalize_generated_quiz({"questions": [{"question": "q", "options": ["a", "b"], "answer": "c"}]})
    with pytest.raises(GenerationFailedError):
        normalize_generated_quiz(["not", "an", "object"])


def test_generate_retries_transient_failure_once(gemini):
    fake = gemini(ServiceUnavailable("busy"), "ok")

    assert asyncio.run(generate_with_gemini("prompt")) == "ok"
    assert len(fake.calls) == 2


def test_generate_gives_up_after_retry(gemini):
    fake = gemini(ServiceUnavailable("busy"), ServiceUnavailable("still busy"), "never reached")

    with pytest.raises(GenerationFailedError):
        asyncio.run(generate_with_gemini("prompt"))
    assert len(fake.calls) == 2


def test_generate_does_not_retry_permanent_failure(gemini):
    fake = gemini(InvalidArgument("bad prompt"), "never reached")

    with pytest.raises(GenerationFailedError):
        asyncio.run(generate_with_gemini("prompt"))
    assert len(fake.calls) == 1


def test_generate_times_out(monkeypatch):
    monkeypatch.setattr(GeminiService, "generate", lambda contents: time.sleep(0.3) or "late")

    with pytest.raises(GenerationFailedError):
        asyncio.run(generate_with_gemini("prompt", retries=0, timeout=0.05))


def test_text_create_quiz(client, alice, gemini):
    fake = gemini(fenced(GENERATED))

    res = client.post("/api/upload/text", json={
        "title": "Planets", "description": "Inner and outer planets", "numQuestions": 2, "difficulty": "Hard",
    }, headers=alice["headers"])

    assert res.status_code == 200, res.text
    assert "exactly 2 questions" in fake.calls[0]

    quiz = client.get(f"/api/quiz/{res.json()['id']}", headers=alice["headers"]).json()["quiz"]
    assert quiz["title"] == "Planets"
    assert quiz["description"] == "Inner and outer planets"
    assert quiz["difficultyLevel"] == "Hard"
    assert quiz["source"] == "generated"
    assert [q["answer"] for q in quiz["questions"]] == ["Jupiter", "Mercury"]


def test_text_create_quiz_upstream_failure(client, alice, gemini):
    gemini(ServiceUnavailable("busy"), ServiceUnavailable("busy"))

    res = client.post("/api/upload/text", json={"title": "Planets"}, headers=alice["headers"])

    assert res.status_code == 502
    assert res.json()["error"] == "GenerationFailedError"
    assert client.get("/api/myQuizzes", headers=alice["headers"]).json()["quizzes"] == []


def test_upload_pdf_creates_quiz(client, alice, gemini, monkeypatch, tmp_path):
    monkeypatch.setattr(text_extraction, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(text_extraction, "extract_pdf_text", lambda content: "1. Largest planet? 2. Closest?")
    fake = gemini(fenced(GENERATED))

    res = client.post("/api/upload", files={"file": ("planets.pdf", b"%PDF-1.4 fake", "application/pdf")},
                      headers=alice["headers"])

    assert res.status_code == 200, res.text
    assert "Largest planet?" in fake.calls[0]
    assert len(list(tmp_path.iterdir())) == 1

    quiz = client.get(f"/api/quiz/{res.json()['id']}", headers=alice["headers"]).json()["quiz"]
    assert quiz["title"] == "Solar system"
    assert len(quiz["questions"]) == 2


def test_upload_image_is_transcribed_then_generated(client, alice, gemini, monkeypatch, tmp_path):
    monkeypatch.setattr(text_extraction, "UPLOAD_DIR", str(tmp_path))
    fake = gemini("Q1 Which planet is largest?", fenced(GENERATED))

    res = client.post("/api/upload/custom", files={"file": ("notes.png", b"\x89PNG fake", "image/png")},
                      data={"numQuestions": "2", "difficulty": "Medium"}, headers=alice["headers"])

    assert res.status_code == 200, res.text
    image_call, quiz_call = fake.calls
    assert image_call[1] == {"mime_type": "image/png", "data": b"\x89PNG fake"}
    assert "Which planet is largest?" in quiz_call
    assert "exactly 2" in quiz_call

    quiz = client.get(f"/api/quiz/{res.json()['id']}", headers=alice["headers"]).json()["quiz"]
    assert quiz["difficultyLevel"] == "Medium"


def test_upload_rejects_unsupported_files(client, alice, monkeypatch, tmp_path):
    monkeypatch.setattr(text_extraction, "UPLOAD_DIR", str(tmp_path))

    res = client.post("/api/upload", files={"file": ("notes.exe", b"MZ", "application/octet-stream")},
                      headers=alice["headers"])

    assert res.status_code == 400
    assert list(tmp_path.iterdir()) == []


def test_failed_generation_discards_the_upload(client, alice, gemini, monkeypatch, tmp_path):
    monkeypatch.setattr(text_extraction, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(text_extraction, "extract_pdf_text", lambda content: "some notes")
    gemini("no json here")

    res = client.post("/api/upload", files={"file": ("notes.pdf", b"%PDF-1.4 fake", "application/pdf")},
                      headers=alice["headers"])

    assert res.status_code == 502
    assert list(tmp_path.iterdir()) == []


def test_deleting_a_generated_quiz_removes_its_upload(client, alice, gemini, monkeypatch, tmp_path):
    monkeypatch.setattr(text_extraction, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(text_extraction, "extract_pdf_text", lambda content: "1. Largest planet?")
    gemini(fenced(GENERATED))

    quiz_id = client.post("/api/upload", files={"file": ("planets.pdf", b"%PDF-1.4 fake", "application/pdf")},
                          headers=alice["headers"]).json()["id"]
    assert len(list(tmp_path.iterdir())) == 1

    assert client.delete(f"/api/quiz/{quiz_id}", headers=alice["headers"]).status_code == 200
    assert list(tmp_path.iterdir()) == []
