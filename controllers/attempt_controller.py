import logging
import os
import tempfile
from datetime import datetime, timezone
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask
from config.database import database
from controllers.quiz_controller import load_quiz, require_public
from utils.helper import parse_object_id
from utils.errors import NotFoundError, ForbiddenError, ConflictError, InvalidInputError, ValidationError
from utils.projections import attempt_taking_view, attempt_review_view, attempt_view
from utils.scoring import grade_by_question_number, grade_positional, max_marks
from utils.pdf_service import generate_attempt_pdf
from models.quiz_model import SaveAnswerRequest, FinalizeAttemptRequest, SubmitQuizRequest

logger = logging.getLogger(__name__)

users = database["users"]
quizzes = database["quizzes"]
attempts = database["attempts"]

IN_PROGRESS = "in_progress"
FINALIZED = "finalized"


async def load_attempt(attempt_id, user) -> dict:
    attempt = await attempts.find_one({"_id": parse_object_id(attempt_id, "attempt")})
    if not attempt:
        raise NotFoundError("Attempt not found")

    if str(attempt.get("user")) != str(user["id"]):
        raise ForbiddenError("Not authorized to access this attempt")
    return attempt


async def _link_attempt(quiz_id, user_id, attempt_id):
    # appended unconditionally: a user retaking a quiz shows up once per attempt
    await quizzes.update_one(
        {"_id": quiz_id},
        {"$push": {"attempts": attempt_id, "attemptedBy": user_id}}
    )
    await users.update_one(
        {"_id": user_id},
        {"$push": {"quizzesAttempted": attempt_id}}
    )


def _snapshot_questions(quiz: dict) -> list:
    return [
        {
            "questionNumber": q.get("questionNumber"),
            "question": q.get("question"),
            "options": list(q.get("options", [])),
            "answer": q.get("answer"),
            "markedOption": None,
            "isCorrect": False,
            "marks": q.get("marks", 1),
            "score": 0,
        }
        for q in quiz.get("questions", [])
    ]


# ---------- Start an attempt ----------
async def create_attempt_service(quiz_id: str, user):
    user_id = parse_object_id(user["id"], "user")
    quiz = await load_quiz(quiz_id)
    require_public(quiz)

    if not await users.find_one({"_id": user_id}, {"_id": 1}):
        raise NotFoundError("User not found")

    now = datetime.now(timezone.utc)
    questions = _snapshot_questions(quiz)

    attempt_doc = {
        "user": user_id,
        "quiz": quiz["_id"],
        "title": quiz.get("title"),
        "description": quiz.get("description", ""),
        "questions": questions,
        "maxMarks": max_marks(questions),
        "time": quiz.get("time"),
        "timeTaken": 0,
        "totalMarks": 0,
        "status": IN_PROGRESS,
        "isCompleted": False,
        "createdAt": now,
        "updatedAt": now,
        "completedAt": None,
    }

    result = await attempts.insert_one(attempt_doc)
    attempt_doc["_id"] = result.inserted_id

    await _link_attempt(quiz["_id"], user_id, result.inserted_id)

    logger.info("Attempt %s started on quiz %s by %s", result.inserted_id, quiz["_id"], user["id"])

    return {
        "success": True,
        "createdAttempt": attempt_taking_view(attempt_doc),
        "time": quiz.get("time"),
    }


# ---------- Save one answer ----------
async def save_answer_service(attempt_id: str, data: SaveAnswerRequest, user):
    attempt = await load_attempt(attempt_id, user)

    if attempt.get("status") == FINALIZED:
        raise ConflictError("Attempt already submitted")

    numbers = {str(q.get("questionNumber")) for q in attempt.get("questions", [])}
    if str(data.questionNumber) not in numbers:
        raise NotFoundError("Question not found in this attempt")

    # positional update so saves to other questions are untouched
    result = await attempts.update_one(
        {
            "_id": attempt["_id"],
            "status": IN_PROGRESS,
            "questions.questionNumber": data.questionNumber,
        },
        {
            "$set": {
                "questions.$.markedOption": data.answer,
                "updatedAt": datetime.now(timezone.utc),
            }
        }
    )

    if result.matched_count == 0:
        raise ConflictError("Attempt already submitted")

    return {"success": True, "message": "Question saved successfully"}


# ---------- Finalize ----------
async def finalize_attempt_service(attempt_id: str, data: FinalizeAttemptRequest, user):
    attempt = await load_attempt(attempt_id, user)

    if attempt.get("status") == FINALIZED:
        raise ConflictError("Attempt already submitted")

    if parse_object_id(data.parentQuizId, "quiz") != attempt.get("quiz"):
        raise ValidationError("Quiz does not match this attempt")

    # grade against the quiz as it is now; a deleted quiz falls back to the snapshot
    quiz = await quizzes.find_one({"_id": attempt["quiz"]})
    answer_key = quiz.get("questions", []) if quiz else attempt.get("questions", [])
    graded, total = grade_by_question_number(attempt.get("questions", []), answer_key)

    time_limit = (quiz or attempt).get("time") or 0
    time_taken = attempt.get("timeTaken", 0)
    if data.timeLeft is not None:
        time_taken = max(0, int(time_limit * 60 - data.timeLeft))

    now = datetime.now(timezone.utc)
    result = await attempts.update_one(
        {"_id": attempt["_id"], "status": IN_PROGRESS},
        {
            "$set": {
                "questions": graded,
                "totalMarks": total,
                "timeTaken": time_taken,
                "status": FINALIZED,
                "isCompleted": True,
                "completedAt": now,
                "updatedAt": now,
            }
        }
    )

    if result.modified_count == 0:
        raise ConflictError("Attempt already submitted")

    logger.info("Attempt %s finalized with %s marks", attempt["_id"], total)

    return {
        "success": True,
        "message": "Total marks calculated and updated successfully",
        "totalMarks": total,
    }


# ---------- Bulk submit ----------
async def submit_quiz_service(quiz_id: str, data: SubmitQuizRequest, user):
    user_id = parse_object_id(user["id"], "user")
    quiz = await load_quiz(quiz_id)
    require_public(quiz)

    quiz_questions = quiz.get("questions", [])
    if len(data.answers) != len(quiz_questions):
        raise InvalidInputError(
            f"Invalid number of answers. Expected {len(quiz_questions)}, got {len(data.answers)}"
        )

    graded, total = grade_positional(quiz_questions, data.answers)

    now = datetime.now(timezone.utc)
    attempt_doc = {
        "user": user_id,
        "quiz": quiz["_id"],
        "title": quiz.get("title"),
        "description": quiz.get("description", ""),
        "questions": graded,
        "maxMarks": max_marks(graded),
        "time": quiz.get("time"),
        "timeTaken": data.timeTaken,
        "totalMarks": total,
        "status": FINALIZED,
        "isCompleted": True,
        "createdAt": now,
        "updatedAt": now,
        "completedAt": now,
    }

    result = await attempts.insert_one(attempt_doc)
    attempt_doc["_id"] = result.inserted_id

    await _link_attempt(quiz["_id"], user_id, result.inserted_id)

    logger.info("Quiz %s submitted by %s with %s marks", quiz["_id"], user["id"], total)

    return {
        "success": True,
        "message": "Quiz attempt submitted successfully",
        "attempt": attempt_review_view(attempt_doc),
        "totalMarks": total,
    }


# ---------- My attempts ----------
async def get_all_attempts_service(user):
    cursor = attempts.find(
        {"user": parse_object_id(user["id"], "user")}
    ).sort("createdAt", -1)

    results = [attempt_view(a) async for a in cursor]
    return {"success": True, "attempts": results}


# ---------- Performance review ----------
async def attempt_performance_service(attempt_id: str, user):
    attempt = await load_attempt(attempt_id, user)
    return {"success": True, "attempt": attempt_view(attempt)}


# ---------- PDF report ----------
async def attempt_report_service(attempt_id: str, user):
    attempt = await load_attempt(attempt_id, user)

    if attempt.get("status") != FINALIZED:
        raise ConflictError("Attempt has not been submitted yet")

    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=".pdf")
    tmp.close()

    try:
        await generate_attempt_pdf(attempt, tmp.name)
    except Exception:
        os.unlink(tmp.name)
        raise

    return FileResponse(
        tmp.name,
        media_type="application/pdf",
        filename=f"{attempt.get('title') or 'quiz'}-report.pdf",
        background=BackgroundTask(os.unlink, tmp.name)
    )


# ---------- Delete attempt ----------
async def delete_attempt_service(attempt_id: str, user):
    attempt = await load_attempt(attempt_id, user)

    await attempts.delete_one({"_id": attempt["_id"]})
    await users.update_one(
        {"_id": attempt["user"]},
        {"$pull": {"quizzesAttempted": attempt["_id"]}}
    )
    if attempt.get("quiz"):
        await quizzes.update_one(
            {"_id": attempt["quiz"]},
            {"$pull": {"attempts": attempt["_id"]}}
        )

    return {"success": True, "message": "Attempt deleted successfully"}
