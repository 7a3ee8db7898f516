"""FastAPI application entry point."""

import asyncio
import time
import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.logging import RequestLog, get_client_ip, log_request
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import (
    goals_router,
    health_router,
    metrics_router,
    reports_router,
    time_entries_router,
    work_hours_router,
)
from core.config import API_DEBUG, API_VERSION, DATA_DIR
from core.errors import TimeEngineError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: verify critical paths exist
    if not DATA_DIR.is_dir():
        warnings.warn(f"Data directory not found at {DATA_DIR}")

    yield


app = FastAPI(
    title="Billable Time API",
    description="REST API for attorney time entries, office-session reconciliation, billable hours and goals",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Record every /v1 request in the SQLite request log."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        user_id=request.query_params.get("userId"),
        timeframe=request.query_params.get("timeframe") or request.query_params.get("timeFrame"),
    )
    request.state.request_log = request_log

    try:
        response = await call_next(request)
        request_log.status_code = response.status_code
        return response
    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise
    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        if request.url.path.startswith("/v1"):
            try:
                await asyncio.to_thread(log_request, request_log)
            except Exception:
                # Don't fail the request if logging fails
                pass


def _record_error(request: Request, code: str | None, message: str, details: list[str]):
    request_log = getattr(request.state, "request_log", None)
    if request_log is None:
        return
    request_log.error_code = code
    request_log.error_message = message
    for detail in details:
        request_log.details.append(("validation_error", detail))


@app.exception_handler(TimeEngineError)
async def time_engine_error_handler(request: Request, exc: TimeEngineError):
    """Bad dates, times, durations and timeframes are client errors."""
    _record_error(request, exc.code, str(exc), [])
    return JSONResponse(
        status_code=400,
        content={"detail": ErrorResponse(error=str(exc), code=exc.code, details=[]).model_dump()},
    )


@app.exception_handler(HTTPException)
async def logged_http_exception_handler(request: Request, exc: HTTPException):
    if isinstance(exc.detail, dict):
        _record_error(request, exc.detail.get("code"), exc.detail.get("error", ""),
                      exc.detail.get("details", []))
    else:
        _record_error(request, None, str(exc.detail), [])
    return await http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    _record_error(request, ErrorCodes.VALIDATION_ERROR, "Request validation failed", details)
    return JSONResponse(
        status_code=422,
        content={
            "detail": ErrorResponse(
                error="Request validation failed",
                code=ErrorCodes.VALIDATION_ERROR,
                details=details,
            ).model_dump()
        },
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(time_entries_router)
app.include_router(work_hours_router)
app.include_router(metrics_router)
app.include_router(goals_router)
app.include_router(reports_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
