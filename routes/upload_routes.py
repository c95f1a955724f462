from fastapi import APIRouter, Depends, UploadFile, File, Form
from middlewares.auth_middlewares import protect
from controllers.generation_controller import (
    upload_quiz_service,
    upload_custom_quiz_service,
    text_create_quiz_service,
)
from models.quiz_model import TextGenerateRequest, Difficulty

router = APIRouter(prefix="/api/upload", tags=["Upload"])


@router.post("")
async def upload_file(file: UploadFile = File(...), user = Depends(protect)):
    return await upload_quiz_service(file, user)

@router.post("/custom")
async def upload_custom(
    file: UploadFile = File(...),
    numQuestions: int = Form(5, ge=1, le=50),
    difficulty: Difficulty = Form("Easy"),
    user = Depends(protect)
):
    return await upload_custom_quiz_service(file, numQuestions, difficulty, user)

@router.post("/text")
async def text_create(data: TextGenerateRequest, user = Depends(protect)):
    return await text_create_quiz_service(data, user)
