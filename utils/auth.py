import jwt
from datetime import datetime, timedelta, timezone

from config.settings import JWT_SECRET, JWT_EXPIRES_DAYS, COOKIE_SECURE

ALGORITHM = "HS256"
TOKEN_COOKIE = "token"


def generate_token(user_id: str):
    payload = {
        "id": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(days=JWT_EXPIRES_DAYS)
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str):
    return jwt.decode(token, JWT_SECRET, algorithms=[ALGORITHM])


def set_token_cookie(response, token: str):
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=JWT_EXPIRES_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="strict"
    )


def clear_token_cookie(response):
    response.delete_cookie(
        key=TOKEN_COOKIE,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="strict"
    )
