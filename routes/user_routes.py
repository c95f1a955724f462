from fastapi import APIRouter, Depends
from middlewares.auth_middlewares import protect
from controllers.user_controller import (
    list_users_service,
    get_user_service,
    update_user_service,
    delete_user_service,
    mark_announcement_read_service,
    mark_all_read_service,
    delete_announcement_service,
    share_quiz_service,
)
from models.user_model import UserUpdate
from models.quiz_model import ShareQuizRequest

router = APIRouter(prefix="/api", tags=["Users"])


@router.get("/user")
async def display_all_users(user = Depends(protect)):
    return await list_users_service(user)

@router.get("/user/{user_id}")
async def get_user(user_id: str, user = Depends(protect)):
    return await get_user_service(user_id, user)

@router.put("/user/{user_id}")
async def update_user(user_id: str, data: UserUpdate, user = Depends(protect)):
    return await update_user_service(user_id, data, user)

@router.delete("/user/{user_id}")
async def delete_user(user_id: str, user = Depends(protect)):
    return await delete_user_service(user_id, user)

@router.patch("/announcements/read-all")
async def mark_all_read(user = Depends(protect)):
    return await mark_all_read_service(user)

@router.patch("/announcements/{announcement_id}/read")
async def mark_as_read(announcement_id: str, user = Depends(protect)):
    return await mark_announcement_read_service(announcement_id, user)

@router.delete("/announcements/{announcement_id}")
async def delete_announcement(announcement_id: str, user = Depends(protect)):
    return await delete_announcement_service(announcement_id, user)

@router.post("/quiz/share/{quiz_id}")
async def share_quiz(quiz_id: str, data: ShareQuizRequest, user = Depends(protect)):
    return await share_quiz_service(quiz_id, data, user)
