"""
Error categories and backend error translation.

Every backend failure reaches the client as a generic localized message plus a
category, so callers can tell forbidden from invalid from unreachable without
seeing the raw backend error.
"""

from enum import Enum
from typing import Optional
import logging

import httpx
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    FORBIDDEN = "forbidden"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


STATUS_BY_CATEGORY = {
    ErrorCategory.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCategory.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

MESSAGES = {
    ErrorCategory.FORBIDDEN: "Você não tem permissão para realizar esta ação.",
    ErrorCategory.VALIDATION: "Os dados informados são inválidos.",
    ErrorCategory.CONFLICT: "Já existe um registro com estes dados.",
    ErrorCategory.NOT_FOUND: "Registro não encontrado.",
    ErrorCategory.TRANSIENT: "Serviço temporariamente indisponível. Tente novamente.",
    ErrorCategory.UNAUTHORIZED: "Sessão inválida ou expirada.",
    ErrorCategory.INTERNAL: "Ocorreu um erro inesperado.",
}

# Postgres SQLSTATE / PostgREST codes
_FORBIDDEN_CODES = {"42501"}
_CONFLICT_CODES = {"23505"}
_VALIDATION_CODES = {"23503", "23502", "23514", "22P02", "22007", "22008", "22001", "PGRST100"}
_NOT_FOUND_CODES = {"PGRST116"}


class AppError(HTTPException):
    """HTTPException carrying an error category and a user-facing message."""

    def __init__(self, category: ErrorCategory, detail: Optional[str] = None):
        super().__init__(
            status_code=STATUS_BY_CATEGORY[category],
            detail=detail or MESSAGES[category],
        )
        self.category = category


def forbidden(detail: Optional[str] = None) -> AppError:
    return AppError(ErrorCategory.FORBIDDEN, detail)


def not_found(detail: Optional[str] = None) -> AppError:
    return AppError(ErrorCategory.NOT_FOUND, detail)


def validation_error(detail: Optional[str] = None) -> AppError:
    return AppError(ErrorCategory.VALIDATION, detail)


def unauthorized(detail: Optional[str] = None) -> AppError:
    return AppError(ErrorCategory.UNAUTHORIZED, detail)


def classify(exc: Exception) -> ErrorCategory:
    if isinstance(exc, AppError):
        return exc.category
    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return ErrorCategory.TRANSIENT
    if isinstance(exc, APIError):
        code = str(exc.code or "")
        message = (exc.message or "").lower()
        if code in _FORBIDDEN_CODES or "row-level security" in message:
            return ErrorCategory.FORBIDDEN
        if code in _CONFLICT_CODES:
            return ErrorCategory.CONFLICT
        if code in _VALIDATION_CODES:
            return ErrorCategory.VALIDATION
        if code in _NOT_FOUND_CODES:
            return ErrorCategory.NOT_FOUND
    return ErrorCategory.INTERNAL


def backend_error(exc: Exception, action: str) -> AppError:
    """Log a backend failure and return the AppError to raise for it."""
    if isinstance(exc, AppError):
        return exc
    category = classify(exc)
    logger.error("Backend error while %s [%s]: %s", action, category.value, exc)
    return AppError(category)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "category": exc.category.value},
    )
