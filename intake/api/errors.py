from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from intake.cloud_storage.exceptions import (
    CloudStorageNotConfiguredError,
    RemoteFileNotFoundError,
)
from intake.logging.logger import Log
from intake.processor.exceptions import (
    AnalysisNotFoundError,
    CapabilityError,
    DocumentNotFoundError,
    DocumentValidationError,
    ImmutableFieldError,
    InvalidTransitionError,
    ProcessorError,
    ServiceConnectionNotFoundError,
    StageInProgressError,
    UploadTooLargeError,
)

# First match wins, so subclasses come before their bases.
STATUS_CODES: tuple[tuple[type[Exception], int], ...] = (
    (UploadTooLargeError, 413),
    (DocumentValidationError, 400),
    (ImmutableFieldError, 400),
    (DocumentNotFoundError, 404),
    (AnalysisNotFoundError, 404),
    (ServiceConnectionNotFoundError, 404),
    (RemoteFileNotFoundError, 404),
    (InvalidTransitionError, 409),
    (StageInProgressError, 409),
    (CloudStorageNotConfiguredError, 503),
    (CapabilityError, 502),
)


def status_code_for(exc: Exception) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def operation_name(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "name", None) or request.url.path


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "operation": operation_name(request)},
    )


async def processor_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        Log.error(f"{operation_name(request)} failed: {exc}")
    else:
        Log.info(f"{operation_name(request)} rejected ({status_code}): {exc}")
    return error_response(request, status_code, str(exc) or type(exc).__name__)


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in errors
    )
    return error_response(request, 400, f"Invalid request: {details or exc}")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Log.exception(f"{operation_name(request)} failed unexpectedly: {exc}")
    return error_response(request, 500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProcessorError, processor_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
