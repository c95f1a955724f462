import logging
from fastapi import UploadFile
from pydantic import ValidationError as SchemaError
from config.settings import DEFAULT_DIFFICULTY
from controllers.quiz_controller import create_quiz_service
from models.quiz_model import QuizCreate, TextGenerateRequest
from utils.errors import GenerationFailedError
from utils.gemini_service import generate_with_gemini, clean_ai_json
from utils.prompt import quiz_from_text_prompt, custom_quiz_prompt, topic_quiz_prompt
from utils.text_extraction import save_upload, extract_text, remove_upload

logger = logging.getLogger(__name__)

OPTION_LETTERS = "abcdefgh"


def _resolve_answer(answer: str, options: list):
    """Map the model's answer onto an option; letters like 'B' are accepted."""
    if answer in options:
        return answer

    lowered = answer.lower()
    for option in options:
        if option.lower() == lowered:
            return option

    letter = lowered.rstrip(").").strip()
    if len(letter) == 1 and letter in OPTION_LETTERS:
        index = OPTION_LETTERS.index(letter)
        if index < len(options):
            return options[index]
    return None


def normalize_generated_quiz(data: dict, title: str = None, description: str = None,
                             difficulty: str = None) -> QuizCreate:
    """
    Turn loosely shaped model output into a valid QuizCreate.

    Questions without a usable answer key are dropped and the remainder is
    renumbered from 1.
    """
    if not isinstance(data, dict):
        raise GenerationFailedError("AI response was not a JSON object")

    questions = []
    for raw in data.get("questions") or []:
        if not isinstance(raw, dict):
            continue

        text = str(raw.get("question") or "").strip()
        options = [str(o).strip() for o in raw.get("options") or [] if str(o).strip()]
        options = list(dict.fromkeys(options))
        answer = _resolve_answer(str(raw.get("answer") or "").strip(), options)

        if not text or len(options) < 2 or answer is None:
            logger.warning("Dropping generated question without a usable answer: %r", text[:80])
            continue

        questions.append({
            "questionNumber": len(questions) + 1,
            "question": text,
            "options": options,
            "answer": answer,
        })

    if not questions:
        raise GenerationFailedError("AI response contained no usable questions")

    try:
        return QuizCreate(
            title=title or str(data.get("title") or "").strip() or "Untitled quiz",
            description=description if description is not None else str(data.get("description") or ""),
            questions=questions,
            difficultyLevel=difficulty or DEFAULT_DIFFICULTY,
        )
    except SchemaError as e:
        raise GenerationFailedError(f"AI response did not form a valid quiz: {e.errors()[0]['msg']}")


async def _generate_quiz(prompt: str, **overrides) -> QuizCreate:
    raw = await generate_with_gemini(prompt)
    return normalize_generated_quiz(clean_ai_json(raw), **overrides)


async def _quiz_from_upload(file: UploadFile, user, prompt_for, **overrides):
    path, content = await save_upload(file)
    try:
        text = await extract_text(file.filename, content)
        quiz = await _generate_quiz(prompt_for(text), **overrides)
        return await create_quiz_service(quiz, user, source="generated", source_file=path)
    except Exception:
        # only files backing a stored quiz are kept
        remove_upload(path)
        raise


# ---------- Upload file -> quiz ----------
async def upload_quiz_service(file: UploadFile, user):
    return await _quiz_from_upload(file, user, quiz_from_text_prompt)


# ---------- Upload file + count/difficulty -> quiz ----------
async def upload_custom_quiz_service(file: UploadFile, num_questions: int, difficulty: str, user):
    return await _quiz_from_upload(
        file, user,
        lambda text: custom_quiz_prompt(text, num_questions, difficulty),
        difficulty=difficulty,
    )


# ---------- Topic description -> quiz ----------
async def text_create_quiz_service(data: TextGenerateRequest, user):
    quiz = await _generate_quiz(
        topic_quiz_prompt(data.title, data.description, data.numQuestions, data.difficulty),
        title=data.title,
        description=data.description,
        difficulty=data.difficulty,
    )
    return await create_quiz_service(quiz, user, source="generated")
