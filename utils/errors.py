from fastapi import HTTPException


class AppError(HTTPException):
    """Base for errors raised by controllers; `error` tags the JSON body."""
    status_code = 500
    error = "AppError"

    def __init__(self, message: str = None, status_code: int = None):
        super().__init__(
            status_code=status_code or self.status_code,
            detail=message or self.error,
        )

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(AppError):
    status_code = 400
    error = "ValidationError"


class InvalidInputError(ValidationError):
    error = "InvalidInputError"


class AuthError(AppError):
    status_code = 401
    error = "AuthError"


class ForbiddenError(AppError):
    status_code = 403
    error = "ForbiddenError"


class NotFoundError(AppError):
    status_code = 404
    error = "NotFoundError"


class NotPublicError(NotFoundError):
    # same message as a missing quiz so existence is not leaked
    error = "NotPublicError"

    def __init__(self, message: str = "Quiz not found"):
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
    error = "ConflictError"


class UpstreamError(AppError):
    status_code = 502
    error = "UpstreamError"


class GenerationFailedError(UpstreamError):
    error = "GenerationFailedError"
