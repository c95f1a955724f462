from fastapi import APIRouter, Depends
from middlewares.auth_middlewares import protect
from controllers.attempt_controller import (
    create_attempt_service,
    save_answer_service,
    finalize_attempt_service,
    submit_quiz_service,
    get_all_attempts_service,
    attempt_performance_service,
    attempt_report_service,
    delete_attempt_service,
)
from models.quiz_model import SaveAnswerRequest, FinalizeAttemptRequest, SubmitQuizRequest

# mounted before the quiz router so /quiz/attempt is not read as a quiz id
router = APIRouter(prefix="/api/quiz/attempt", tags=["Attempts"])


@router.get("")
async def get_all_attempts(user = Depends(protect)):
    return await get_all_attempts_service(user)

@router.post("/create/{quiz_id}")
async def create_attempt(quiz_id: str, user = Depends(protect)):
    return await create_attempt_service(quiz_id, user)

@router.patch("/save/question/{attempt_id}")
async def save_question(attempt_id: str, data: SaveAnswerRequest, user = Depends(protect)):
    return await save_answer_service(attempt_id, data, user)

@router.patch("/save/{attempt_id}")
async def save_quiz_attempt(attempt_id: str, data: FinalizeAttemptRequest, user = Depends(protect)):
    return await finalize_attempt_service(attempt_id, data, user)

@router.get("/performance/{attempt_id}")
async def attempt_performance(attempt_id: str, user = Depends(protect)):
    return await attempt_performance_service(attempt_id, user)

@router.get("/performance/{attempt_id}/report")
async def attempt_report(attempt_id: str, user = Depends(protect)):
    return await attempt_report_service(attempt_id, user)

@router.post("/{quiz_id}")
async def submit_quiz(quiz_id: str, data: SubmitQuizRequest, user = Depends(protect)):
    return await submit_quiz_service(quiz_id, data, user)

@router.delete("/{attempt_id}")
async def delete_attempt(attempt_id: str, user = Depends(protect)):
    return await delete_attempt_service(attempt_id, user)
