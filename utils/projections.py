"""
Read projections for quizzes and attempts.

Owner/grading views carry the answer key; the attempt-facing views never do.
Both build fresh dicts so the stored document is never mutated.
"""
from typing import Dict

from utils.helper import serialize_doc

QUIZ_FIELDS = (
    "title", "description", "time", "difficultyLevel", "isPublic",
    "maxMarks", "source", "createdAt", "updatedAt",
)

ATTEMPT_FIELDS = (
    "title", "description", "time", "maxMarks", "timeTaken", "totalMarks",
    "status", "isCompleted", "createdAt", "updatedAt", "completedAt",
)


def _base(doc: Dict, fields) -> Dict:
    out = {"_id": doc.get("_id")}
    for field in fields:
        if field in doc:
            out[field] = doc[field]
    return out


def owner_view(quiz: Dict) -> Dict:
    out = _base(quiz, QUIZ_FIELDS)
    out["createdBy"] = quiz.get("createdBy")
    out["questions"] = [
        {
            "questionNumber": q.get("questionNumber"),
            "question": q.get("question"),
            "options": list(q.get("options", [])),
            "answer": q.get("answer"),
            "marks": q.get("marks"),
        }
        for q in quiz.get("questions", [])
    ]
    out["attemptedBy"] = list(quiz.get("attemptedBy", []))
    out["attempts"] = list(quiz.get("attempts", []))
    return serialize_doc(out)


def public_view(quiz: Dict) -> Dict:
    out = _base(quiz, QUIZ_FIELDS)
    out["createdBy"] = quiz.get("createdBy")
    out["questions"] = [
        {
            "questionNumber": q.get("questionNumber"),
            "question": q.get("question"),
            "options": list(q.get("options", [])),
            "marks": q.get("marks"),
        }
        for q in quiz.get("questions", [])
    ]
    return serialize_doc(out)


def attempt_taking_view(attempt: Dict) -> Dict:
    out = _base(attempt, ATTEMPT_FIELDS)
    out["user"] = attempt.get("user")
    out["quiz"] = attempt.get("quiz")
    out["questions"] = [
        {
            "questionNumber": q.get("questionNumber"),
            "question": q.get("question"),
            "options": list(q.get("options", [])),
            "markedOption": q.get("markedOption"),
            "marks": q.get("marks"),
        }
        for q in attempt.get("questions", [])
    ]
    return serialize_doc(out)


def attempt_review_view(attempt: Dict) -> Dict:
    out = _base(attempt, ATTEMPT_FIELDS)
    out["user"] = attempt.get("user")
    out["quiz"] = attempt.get("quiz")
    out["questions"] = [dict(q) for q in attempt.get("questions", [])]
    return serialize_doc(out)


def attempt_view(attempt: Dict) -> Dict:
    """Review view once finalized, attempt-taking view before that."""
    if attempt.get("status") == "finalized":
        return attempt_review_view(attempt)
    return attempt_taking_view(attempt)
