import logging
from datetime import datetime, timezone
from bson import ObjectId
from pymongo.errors import DuplicateKeyError
from config.database import database
from controllers.quiz_controller import load_quiz, require_public
from models.user_model import UserUpdate
from models.quiz_model import ShareQuizRequest
from utils.hash import hash_password
from utils.helper import parse_object_id, serialize_doc
from utils.errors import NotFoundError, ForbiddenError, ValidationError

logger = logging.getLogger(__name__)

users = database["users"]

# never sent back to clients
PRIVATE_FIELDS = {"password": 0}


def _require_self(user_id: ObjectId, user):
    if str(user_id) != str(user["id"]):
        raise ForbiddenError("Not authorized to modify this user")


# ---------- Users ----------
async def list_users_service(user):
    cursor = users.find({}, {"password": 0, "announcements": 0}).sort("createdAt", 1)
    return {"success": True, "users": [serialize_doc(u) async for u in cursor]}


async def get_user_service(user_id: str, user):
    found = await users.find_one({"_id": parse_object_id(user_id, "user")}, PRIVATE_FIELDS)
    if not found:
        raise NotFoundError("User not found")

    # another user's inbox is not theirs to read
    if str(found["_id"]) != str(user["id"]):
        found.pop("announcements", None)

    return {"success": True, "user": serialize_doc(found)}


async def update_user_service(user_id: str, data: UserUpdate, user):
    oid = parse_object_id(user_id, "user")
    _require_self(oid, user)

    update_fields = data.model_dump(exclude_none=True)
    if not update_fields:
        raise ValidationError("Nothing to update")

    if "username" in update_fields and await users.find_one(
        {"username": update_fields["username"], "_id": {"$ne": oid}}
    ):
        raise ValidationError("Username already exists")
    if "email" in update_fields and await users.find_one(
        {"email": update_fields["email"], "_id": {"$ne": oid}}
    ):
        raise ValidationError("Email already exists")

    if "password" in update_fields:
        update_fields["password"] = hash_password(update_fields["password"])

    update_fields["updatedAt"] = datetime.now(timezone.utc)

    try:
        result = await users.update_one({"_id": oid}, {"$set": update_fields})
    except DuplicateKeyError:
        raise ValidationError("Username or email already exists")

    if result.matched_count == 0:
        raise NotFoundError("User not found")

    updated = await users.find_one({"_id": oid}, PRIVATE_FIELDS)
    return {"success": True, "user": serialize_doc(updated)}


async def delete_user_service(user_id: str, user):
    oid = parse_object_id(user_id, "user")
    _require_self(oid, user)

    result = await users.delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise NotFoundError("User not found")

    logger.info("User %s deleted", oid)
    return {"success": True, "message": "User deleted successfully"}


# ---------- Announcements ----------
async def mark_announcement_read_service(announcement_id: str, user):
    uid = parse_object_id(user["id"], "user")
    aid = parse_object_id(announcement_id, "announcement")

    result = await users.update_one(
        {"_id": uid, "announcements._id": aid},
        {"$set": {"announcements.$.read": True}}
    )
    if result.matched_count == 0:
        raise NotFoundError("Announcement not found")

    return {"success": True, "message": "Marked as read successfully"}


async def mark_all_read_service(user):
    uid = parse_object_id(user["id"], "user")
    found = await users.find_one({"_id": uid}, {"announcements": 1})
    if not found:
        raise NotFoundError("User not found")

    unread = [a["_id"] for a in found.get("announcements", []) if not a.get("read")]

    # one positional update per entry so concurrently shared quizzes are kept
    for aid in unread:
        await users.update_one(
            {"_id": uid, "announcements._id": aid},
            {"$set": {"announcements.$.read": True}}
        )

    return {"success": True, "message": "All announcements marked as read", "updated": len(unread)}


async def delete_announcement_service(announcement_id: str, user):
    uid = parse_object_id(user["id"], "user")
    aid = parse_object_id(announcement_id, "announcement")

    result = await users.update_one(
        {"_id": uid, "announcements._id": aid},
        {"$pull": {"announcements": {"_id": aid}}}
    )
    if result.matched_count == 0:
        raise NotFoundError("Announcement not found")

    return {"success": True, "message": "Announcement deleted successfully"}


# ---------- Share quiz ----------
async def share_quiz_service(quiz_id: str, data: ShareQuizRequest, user):
    sharer = await users.find_one({"_id": parse_object_id(user["id"], "user")}, {"username": 1})
    if not sharer:
        raise NotFoundError("User not found")

    quiz = await load_quiz(quiz_id)
    require_public(quiz, user)

    recipient = await users.find_one({"email": data.email}, {"_id": 1})
    if not recipient:
        raise NotFoundError("Recipient not found")

    announcement = {
        "_id": ObjectId(),
        "sentBy": sharer["username"],
        "message": str(quiz["_id"]),
        "read": False,
        "createdAt": datetime.now(timezone.utc),
    }

    await users.update_one(
        {"_id": recipient["_id"]},
        {"$push": {"announcements": announcement}}
    )

    logger.info("Quiz %s shared by %s with %s", quiz["_id"], user["id"], recipient["_id"])

    return {
        "success": True,
        "message": "Quiz shared successfully",
        "announcementId": str(announcement["_id"])
    }
