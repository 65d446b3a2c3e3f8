from typing import Any, Dict, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from opus_api.core import ApiError, RequestShapeError, log_error, log_warning


def error_body(message: str, status: int) -> Dict[str, Any]:
    return {"error": {"message": message, "status": status}}


def error_response(message: str, status: int) -> JSONResponse:
    return JSONResponse(status_code=status, content=error_body(message, status))


def describe_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Flatten pydantic errors into one readable line, e.g.
      "body.weights.0.weight_pct: Input should be less than or equal to 100"
    """
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status >= 500:
        log_error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        log_warning(f"{request.method} {request.url.path} -> {exc.status}: {exc.message}")
    return error_response(exc.message, exc.status)


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    status = exc.status_code if exc.status_code >= 400 else 500
    response = error_response(str(exc.detail), status)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    err = RequestShapeError(describe_validation_errors(exc.errors()))
    log_warning(f"{request.method} {request.url.path} -> {err.status}: {err.message}")
    return error_response(err.message, err.status)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error(f"{request.method} {request.url.path} crashed: {exc}", exc_info=True)
    return error_response("Internal Server Error", 500)


def register_error_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"error": {"message", "status"}}."""
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
