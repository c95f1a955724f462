import re
import json
import asyncio
import logging
import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from config.settings import GEMINI_API_KEY, GEMINI_MODEL, GENERATION_TIMEOUT_SECONDS
from utils.errors import GenerationFailedError

logger = logging.getLogger(__name__)

# worth one more try; anything else fails straight away
TRANSIENT_ERRORS = (
    asyncio.TimeoutError,
    google_exceptions.ServiceUnavailable,
    google_exceptions.ResourceExhausted,
    google_exceptions.InternalServerError,
    google_exceptions.DeadlineExceeded,
)


class GeminiService:
    _model = None

    @classmethod
    def model(cls):
        if cls._model is None:
            genai.configure(api_key=GEMINI_API_KEY)
            cls._model = genai.GenerativeModel(GEMINI_MODEL)
        return cls._model

    @classmethod
    def generate(cls, contents) -> str:
        response = cls.model().generate_content(contents)
        return response.text


async def generate_with_gemini(contents, retries: int = 1, timeout: float = GENERATION_TIMEOUT_SECONDS) -> str:
    """
    Run a blocking Gemini call off the event loop with a timeout.

    Transient failures are retried `retries` times; once exhausted (or on a
    non-transient error) a GenerationFailedError is raised.
    """
    attempt = 0
    while True:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(GeminiService.generate, contents),
                timeout=timeout
            )
        except TRANSIENT_ERRORS as e:
            if attempt >= retries:
                logger.error("Gemini generation failed after %d tries: %r", attempt + 1, e)
                raise GenerationFailedError("Quiz generation failed, please try again")
            attempt += 1
            logger.warning("Gemini transient failure (%r), retrying", e)
        except Exception as e:
            logger.error("Gemini generation failed: %r", e)
            raise GenerationFailedError(f"Quiz generation failed: {e}")


def clean_ai_json(raw_text: str):
    """
    Removes ```json and ``` fences and safely parses the outermost JSON object
    """
    if not raw_text:
        raise GenerationFailedError("Empty AI response")

    cleaned = re.sub(r"```(?:json)?", "", raw_text).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise GenerationFailedError("Invalid JSON response from AI")

    try:
        return json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise GenerationFailedError(f"Could not parse JSON from AI response: {e}")
