import logging
from datetime import datetime, timezone
from bson import ObjectId
from config.database import database
from utils.helper import parse_object_id
from utils.errors import NotFoundError, NotPublicError, ForbiddenError, ValidationError
from utils.projections import owner_view, public_view
from utils.scoring import max_marks
from utils.text_extraction import remove_upload
from models.quiz_model import QuizCreate, QuizUpdate

logger = logging.getLogger(__name__)

users = database["users"]
quizzes = database["quizzes"]


async def load_quiz(quiz_id) -> dict:
    quiz = await quizzes.find_one({"_id": parse_object_id(quiz_id, "quiz")})
    if not quiz:
        raise NotFoundError("Quiz not found")
    return quiz


def is_owner(quiz: dict, user) -> bool:
    return str(quiz.get("createdBy")) == str(user["id"])


def require_owner(quiz: dict, user):
    if not is_owner(quiz, user):
        raise ForbiddenError("Not authorized to modify this quiz")


def require_public(quiz: dict, user=None):
    """Owners may always see their own quiz; everyone else needs isPublic."""
    if user is not None and is_owner(quiz, user):
        return
    if not quiz.get("isPublic", False):
        raise NotPublicError()


def _questions_to_docs(questions) -> list:
    return [q.model_dump() for q in questions]


# ---------- Create quiz ----------
async def create_quiz_service(data: QuizCreate, user, source: str = "manual", source_file: str = None):
    user_id = parse_object_id(user["id"], "user")
    owner = await users.find_one({"_id": user_id}, {"_id": 1})
    if not owner:
        raise NotFoundError("User not found")

    now = datetime.now(timezone.utc)
    questions = _questions_to_docs(data.questions)

    quiz_doc = {
        "title": data.title,
        "description": data.description or "",
        "questions": questions,
        "maxMarks": max_marks(questions),
        "time": data.time,
        "difficultyLevel": data.difficultyLevel,
        "isPublic": data.isPublic,
        "createdBy": user_id,
        "attemptedBy": [],
        "attempts": [],
        "source": source,
        "sourceFile": source_file,
        "createdAt": now,
        "updatedAt": now,
    }

    result = await quizzes.insert_one(quiz_doc)

    await users.update_one(
        {"_id": user_id},
        {"$push": {"quizzesCreated": result.inserted_id}}
    )

    logger.info("Quiz %s created by %s (%s)", result.inserted_id, user["id"], source)

    return {
        "success": True,
        "message": "Quiz uploaded successfully",
        "id": str(result.inserted_id),
    }


# ---------- My quizzes (owner view) ----------
async def get_my_quizzes_service(user):
    cursor = quizzes.find(
        {"createdBy": parse_object_id(user["id"], "user")}
    ).sort("createdAt", -1)

    results = [owner_view(q) async for q in cursor]
    return {"success": True, "quizzes": results}


# ---------- Quiz by id ----------
async def get_quiz_service(quiz_id: str, user):
    quiz = await load_quiz(quiz_id)

    if is_owner(quiz, user):
        return {"success": True, "quiz": owner_view(quiz)}

    require_public(quiz)
    return {"success": True, "quiz": public_view(quiz)}


# ---------- Attempt-facing quiz (no answers) ----------
async def attempt_quiz_service(quiz_id: str, user):
    quiz = await load_quiz(quiz_id)
    require_public(quiz)
    return {"success": True, "quiz": public_view(quiz)}


# ---------- Public quizzes ----------
async def list_public_quizzes_service(user):
    cursor = quizzes.find({"isPublic": True}).sort("createdAt", -1)
    results = [public_view(q) async for q in cursor]
    return {"success": True, "quizzes": results}


# ---------- Update quiz ----------
async def update_quiz_service(quiz_id: str, data: QuizUpdate, user):
    quiz = await load_quiz(quiz_id)
    require_owner(quiz, user)

    update_fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if not update_fields:
        raise ValidationError("Nothing to update")

    if "questions" in update_fields:
        # full replace of the question set
        update_fields["questions"] = _questions_to_docs(data.questions)
        update_fields["maxMarks"] = max_marks(update_fields["questions"])

    update_fields["updatedAt"] = datetime.now(timezone.utc)

    await quizzes.update_one(
        {"_id": quiz["_id"]},
        {"$set": update_fields}
    )

    updated = await quizzes.find_one({"_id": quiz["_id"]})
    return {"success": True, "quiz": owner_view(updated)}


# ---------- Delete quiz ----------
async def delete_quiz_service(quiz_id: str, user):
    quiz = await load_quiz(quiz_id)
    require_owner(quiz, user)

    # attempts keep their own copy of the questions, so they are left alone
    await quizzes.delete_one({"_id": quiz["_id"]})
    remove_upload(quiz.get("sourceFile"))
    await users.update_one(
        {"_id": ObjectId(user["id"])},
        {"$pull": {"quizzesCreated": quiz["_id"]}}
    )

    logger.info("Quiz %s deleted by %s", quiz["_id"], user["id"])

    return {"success": True, "message": "Quiz deleted successfully", "id": str(quiz["_id"])}
