import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from config.logging_config import setup_logging
from config.database import lifespan
from config.settings import FRONTEND_ORIGIN
from middlewares.request_tracker import request_tracker_middleware
from routes.auth_routes import router as auth_router
from routes.user_routes import router as user_router
from routes.attempt_routes import router as attempt_router
from routes.quiz_routes import router as quiz_router
from routes.upload_routes import router as upload_router
from utils.errors import AppError
from utils.helper import error_response

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="QuizMaster API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(request_tracker_middleware)


# Error handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc.status_code, exc.message, exc.error)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return error_response(400, message, "ValidationError")

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), "HTTPError")

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error", "InternalError")


# Include Routers
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(attempt_router)
app.include_router(quiz_router)
app.include_router(upload_router)


@app.get("/")
async def root():
    return {"message": "API running successfully"}
