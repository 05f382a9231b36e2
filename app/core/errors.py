from typing import Any, Dict, List, Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors the API turns into an error envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ValidationError(AppError):
    status_code = 422

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors


class BadRequestError(ValidationError):
    """Malformed path/query parameters or out-of-range values."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class DatabaseError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)


class ObjectNotProvisionedError(DatabaseError):
    """A view the query relies on has not been created in the database."""

    def __init__(self, kind: str, name: str):
        super().__init__(
            f'{kind} "{name}" does not exist. Please run: alembic upgrade head '
            f"(or python -m app.scripts.create_db_objects)"
        )
        self.kind = kind
        self.name = name


# Reserved, nothing enforces authentication yet
class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized access", details: Optional[str] = None):
        super().__init__(message, details=details)


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access forbidden"):
        super().__init__(message)


# =========================
# Natural-language adapter
# =========================
class LLMNotConfiguredError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self):
        super().__init__(
            "LLM service not configured. Please set OPENAI_API_KEY in the .env file."
        )


class LLMQuotaExceededError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "API quota exceeded. Please check your OpenAI billing and plan details.",
            details=(
                "A ChatGPT subscription does not include API access. Set up billing "
                "at platform.openai.com/account/billing"
            ),
        )


class LLMAuthenticationError(UnauthorizedError):
    def __init__(self):
        super().__init__(
            "Invalid API key. Please check your OPENAI_API_KEY in the .env file.",
            details='Make sure the API key starts with "sk-" and is valid.',
        )


class LLMServiceError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        super().__init__(
            message or "An error occurred while processing your query.",
            details=details or "Please check your API key and billing status.",
        )
