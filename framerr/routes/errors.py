from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from framerr.core.exceptions import AppError
from framerr.core.logging import get_logger

logger = get_logger("errors")


async def handle_app_error(request: Request, error: AppError) -> JSONResponse:
    """Handle custom application errors."""
    logger.warning("AppError: %s", error.message)
    return JSONResponse(error.to_dict(), status_code=error.status_code)


async def handle_validation_error(
    request: Request, error: RequestValidationError
) -> JSONResponse:
    """Return 400 instead of 422 for request validation errors."""
    return JSONResponse(
        {"message": "Validation error", "errors": jsonable_encoder(error.errors())},
        status_code=400,
    )


async def handle_http_error(
    request: Request, error: StarletteHTTPException
) -> JSONResponse:
    """Handle routing errors (unknown path, wrong method)."""
    if error.status_code == 404:
        return JSONResponse({"error": "Resource not found"}, status_code=404)
    return JSONResponse(
        {"error": error.detail}, status_code=error.status_code, headers=error.headers
    )


async def handle_internal_error(request: Request, error: Exception) -> JSONResponse:
    """Handle 500 errors."""
    logger.exception("Internal server error")
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_internal_error)
