from fastapi import APIRouter, Depends
from middlewares.auth_middlewares import protect
from controllers.quiz_controller import (
    create_quiz_service,
    get_my_quizzes_service,
    get_quiz_service,
    attempt_quiz_service,
    list_public_quizzes_service,
    update_quiz_service,
    delete_quiz_service,
)
from models.quiz_model import QuizCreate, QuizUpdate

router = APIRouter(prefix="/api", tags=["Quiz"])


@router.post("/quiz")
async def upload_quiz(data: QuizCreate, user = Depends(protect)):
    return await create_quiz_service(data, user)

@router.get("/quiz")
async def get_all_quizzes(user = Depends(protect)):
    return await get_my_quizzes_service(user)

@router.get("/myQuizzes")
async def get_my_quizzes(user = Depends(protect)):
    return await get_my_quizzes_service(user)

@router.get("/quiz/public/get")
async def get_public_quizzes(user = Depends(protect)):
    return await list_public_quizzes_service(user)

@router.get("/quiz/attempt/{quiz_id}")
async def attempt_quiz(quiz_id: str, user = Depends(protect)):
    return await attempt_quiz_service(quiz_id, user)

@router.get("/quiz/{quiz_id}")
async def get_quiz(quiz_id: str, user = Depends(protect)):
    return await get_quiz_service(quiz_id, user)

@router.patch("/quiz/{quiz_id}")
async def update_quiz(quiz_id: str, data: QuizUpdate, user = Depends(protect)):
    return await update_quiz_service(quiz_id, data, user)

@router.delete("/quiz/{quiz_id}")
async def delete_quiz(quiz_id: str, user = Depends(protect)):
    return await delete_quiz_service(quiz_id, user)
