import io
import os
import uuid
import asyncio
import logging
from fastapi import UploadFile
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from config.settings import UPLOAD_DIR
from utils.errors import ValidationError, UpstreamError
from utils.gemini_service import generate_with_gemini
from utils.prompt import transcribe_image_prompt

logger = logging.getLogger(__name__)

IMAGE_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}
ALLOWED_EXTENSIONS = {".pdf", *IMAGE_TYPES}
MAX_UPLOAD_SIZE = 10 * 1024 * 1024


def _extension(filename) -> str:
    return os.path.splitext(filename or "")[1].lower()


async def save_upload(file: UploadFile):
    """Store the upload under UPLOAD_DIR; returns (path, raw bytes)."""
    ext = _extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Only PDF and image files are allowed")

    content = await file.read()
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > MAX_UPLOAD_SIZE:
        raise ValidationError("File exceeds the 10MB limit")

    os.makedirs(UPLOAD_DIR, exist_ok=True)
    save_path = os.path.join(UPLOAD_DIR, f"{uuid.uuid4().hex}{ext}")

    with open(save_path, "wb") as f:
        f.write(content)

    return save_path, content


def remove_upload(path):
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning("Upload %s was already removed", path)


def extract_pdf_text(content: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(content))
        text = ""
        for page in reader.pages:
            text += (page.extract_text() or "") + "\n"
        return text.strip()
    except PdfReadError as e:
        raise ValidationError(f"Could not read PDF: {e}")


async def extract_image_text(content: bytes, mime_type: str) -> str:
    text = await generate_with_gemini([
        transcribe_image_prompt(),
        {"mime_type": mime_type, "data": content},
    ])
    return (text or "").strip()


async def extract_text(filename: str, content: bytes) -> str:
    ext = _extension(filename)

    if ext == ".pdf":
        text = await asyncio.to_thread(extract_pdf_text, content)
    else:
        text = await extract_image_text(content, IMAGE_TYPES[ext])

    if not text:
        raise UpstreamError("No text could be extracted from the file")

    logger.info("Extracted %d characters from %s", len(text), filename)
    return text
