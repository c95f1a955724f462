import logging
from config.database import database
from fastapi import Response, Depends
from pymongo.errors import DuplicateKeyError
from middlewares.auth_middlewares import protect
from models.user_model import UserCreate, UserLogin
from utils.hash import hash_password, verify_password
from utils.auth import generate_token, set_token_cookie, clear_token_cookie
from utils.errors import ValidationError, NotFoundError, AuthError
from utils.helper import parse_object_id, serialize_doc
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

users = database["users"]


# Register User
async def register_user(data: UserCreate, response: Response):
    if await users.find_one({"username": data.username}):
        raise ValidationError("Username already exists")
    if await users.find_one({"email": data.email}):
        raise ValidationError("Email already exists")

    now = datetime.now(timezone.utc)

    new_user = {
        "username": data.username,
        "email": data.email,
        "password": hash_password(data.password),
        "quizzesCreated": [],
        "quizzesAttempted": [],
        "announcements": [],
        "createdAt": now,
        "updatedAt": now
    }

    try:
        result = await users.insert_one(new_user)
    except DuplicateKeyError:
        # lost a race with a concurrent registration
        raise ValidationError("Username or email already exists")

    user_id = str(result.inserted_id)
    token = generate_token(user_id)
    set_token_cookie(response, token)

    logger.info("User %s registered", user_id)

    return {
        "success": True,
        "message": "User created successfully",
        "id": user_id,
        "token": token
    }


# Login User
async def login_user(data: UserLogin, response: Response):
    user = await users.find_one({"email": data.email})
    if not user:
        raise NotFoundError("User not found")

    if not verify_password(data.password, user["password"]):
        raise AuthError("Incorrect password")

    await users.update_one(
        {"_id": user["_id"]},
        {"$set": {"lastLoginAt": datetime.now(timezone.utc)}}
    )

    token = generate_token(str(user["_id"]))
    set_token_cookie(response, token)

    return {"success": True, "id": str(user["_id"]), "token": token}


# Logout User
async def logout_user(response: Response):
    clear_token_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


# Session check
async def is_logged_in(user_data = Depends(protect)):
    user = await users.find_one({"_id": parse_object_id(user_data["id"], "user")}, {"_id": 1})
    if not user:
        raise AuthError("User no longer exists")

    return {"userID": user_data["id"], "final": True}


# Announcements inbox
async def fetch_announcements(user_data = Depends(protect)):
    user = await users.find_one(
        {"_id": parse_object_id(user_data["id"], "user")},
        {"announcements": 1}
    )
    if not user:
        raise NotFoundError("User not found")

    return {
        "success": True,
        "announcements": [serialize_doc(dict(a)) for a in user.get("announcements", [])]
    }
