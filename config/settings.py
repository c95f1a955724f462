import os
from dotenv import load_dotenv

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "quizmaster")

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", 7))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "*")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", 60))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Quiz defaults
DEFAULT_QUIZ_TIME = 240
DEFAULT_MARKS = 1
DEFAULT_DIFFICULTY = "Easy"
