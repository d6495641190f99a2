from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException


class CafeError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(CafeError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class NotFoundError(CafeError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(CafeError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StorageError(CafeError):
    default_message = "Storage failure"


async def cafe_error_handler(request: Request, exc: CafeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed with {error_type}. path='{path}', error='{error}'",
            error_type=type(exc).__name__,
            path=request.url.path,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})

    logger.warning(
        "Request rejected with {error_type}. path='{path}', error='{error}'",
        error_type=type(exc).__name__,
        path=request.url.path,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(
        "Request validation failed. path='{path}', errors={count}",
        path=request.url.path,
        count=len(exc.errors()),
    )
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"error": "Validation error", "details": details}),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Route {request.url.path} not found"
        return JSONResponse(status_code=exc.status_code, content={"error": "Not Found", "message": message})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(
        "Database error while handling request. path='{path}'",
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while handling request. path='{path}'",
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong!"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CafeError, cafe_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
