import jwt
from fastapi import Request

from utils.auth import decode_token, TOKEN_COOKIE
from utils.errors import AuthError


def _extract_token(request: Request):
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token

    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return None


async def protect(request: Request):
    """Dependency guarding every authenticated route."""
    token = _extract_token(request)
    if not token:
        raise AuthError("Access denied")

    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise AuthError("Session expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    if not payload.get("id"):
        raise AuthError("Invalid token")

    user = {"id": payload["id"]}
    request.state.user = user
    return user
