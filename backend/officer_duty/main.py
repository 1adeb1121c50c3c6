import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from officer_duty.config import settings
from officer_duty.core.logging_config import setup_logging
from officer_duty.database.base import Base
from officer_duty.database.session import engine
from officer_duty.models.absence_request import AbsenceRequest  # noqa: F401
from officer_duty.models.attendance import Attendance  # noqa: F401
from officer_duty.models.clock_settings import ClockSettings  # noqa: F401
from officer_duty.models.duty_assignment import DutyAssignment  # noqa: F401
from officer_duty.models.notification import Notification  # noqa: F401
from officer_duty.models.user import User  # noqa: F401
from officer_duty.routes import absence_requests, attendance, auth, clock_settings, dashboard
from officer_duty.routes import duty_assignments, notifications, officers

logger = logging.getLogger(__name__)

app = FastAPI(title="Officer Duty & Attendance API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def create_tables():
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready (%s)", engine.url.get_backend_name())


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


def _format_validation_messages(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        loc = [str(v) for v in err.get("loc", []) if str(v) not in {"body", "query", "path"}]
        field = ".".join(loc)
        err_type = str(err.get("type", ""))
        message = str(err.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]

        if err_type in {"missing", "value_error.missing"}:
            messages.append(f"{field or 'field'} is required")
        elif "string_too_short" in err_type:
            messages.append(f"{field or 'field'} cannot be empty")
        elif err_type == "value_error" or not field:
            messages.append(message)
        else:
            messages.append(f"{field}: {message}")

    # Preserve order while de-duplicating.
    return list(dict.fromkeys(messages))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = _format_validation_messages(exc)
    message = messages[0] if len(messages) == 1 else "Validation failed"
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": message,
            "errors": messages,
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(officers.router, prefix=settings.API_PREFIX)
app.include_router(duty_assignments.router, prefix=settings.API_PREFIX)
app.include_router(attendance.router, prefix=settings.API_PREFIX)
app.include_router(absence_requests.router, prefix=settings.API_PREFIX)
app.include_router(clock_settings.router, prefix=settings.API_PREFIX)
app.include_router(dashboard.router, prefix=settings.API_PREFIX)
app.include_router(notifications.router, prefix=settings.API_PREFIX)


@app.get("/health", tags=["Health"])
def health():
    return {"success": True, "message": "Server is running"}


def run():
    import uvicorn

    uvicorn.run("officer_duty.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
