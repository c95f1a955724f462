from fastapi import APIRouter
from controllers.auth_controller import (
    register_user,
    login_user,
    logout_user,
    is_logged_in,
    fetch_announcements,
)

router = APIRouter(prefix="/api", tags=["Auth"])

router.post("/register", status_code=201)(register_user)
router.post("/login")(login_user)
router.post("/logout")(logout_user)
router.get("/islogged")(is_logged_in)
router.get("/fetch")(fetch_announcements)
