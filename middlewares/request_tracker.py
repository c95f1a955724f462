import time
import logging
from fastapi import Request

logger = logging.getLogger("quizmaster.requests")


async def request_tracker_middleware(request: Request, call_next):
    """Log every API request with its status and response time"""
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception:
        response_time_ms = (time.time() - start_time) * 1000
        logger.exception(
            "%s %s failed after %.2fms", request.method, request.url.path, response_time_ms
        )
        raise

    response_time_ms = (time.time() - start_time) * 1000
    logger.info(
        "%s %s -> %d (%.2fms)",
        request.method, request.url.path, response.status_code, response_time_ms
    )

    # Add response time header for debugging
    response.headers["X-Response-Time"] = f"{response_time_ms:.2f}ms"
    return response
