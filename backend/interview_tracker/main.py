import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from interview_tracker.core.config import settings, require_jwt_secret
from interview_tracker.routes.auth import router as auth_router
from interview_tracker.routes.dashboard import router as dashboard_router
from interview_tracker.routes.internal_scheduler import router as internal_scheduler_router
from interview_tracker.routes.interviews import router as interviews_router
from interview_tracker.routes.notifications import router as notifications_router
from interview_tracker.routes.profile import router as profile_router
from interview_tracker.routes.questions import router as questions_router
from interview_tracker.routes.ratings import router as ratings_router
from interview_tracker.routes.users import router as users_router
from interview_tracker.services.expiry import build_expiry_job

logger = logging.getLogger(__name__)

require_jwt_secret()


@asynccontextmanager
async def lifespan(app: FastAPI):
    job = build_expiry_job() if settings.EXPIRY_SWEEP_ENABLED else None
    if job is not None:
        job.start()
    app.state.expiry_job = job
    try:
        yield
    finally:
        if job is not None:
            job.stop()


app = FastAPI(title="Interview Tracker", lifespan=lifespan)
logger.info(
    "Startup config: EMAIL_ENABLED=%s provider=%s EXPIRY_SWEEP_ENABLED=%s OPENAI=%s",
    settings.EMAIL_ENABLED,
    (settings.EMAIL_PROVIDER or "resend"),
    settings.EXPIRY_SWEEP_ENABLED,
    bool(settings.OPENAI_API_KEY),
)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    message: str
    details: dict | None = None

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        det = detail.get("details")
        details = det if isinstance(det, dict) else None
    else:
        message = str(detail) if detail is not None else "Request failed"

    payload: dict = {"error": _error_code(exc.status_code), "message": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "details": {"errors": jsonable_errors(exc)},
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # Pydantic v2 puts the raised exception object in ctx for custom validators.
    out: list[dict] = []
    for err in exc.errors():
        item = dict(err)
        ctx = item.get("ctx")
        if isinstance(ctx, dict):
            item["ctx"] = {k: (v if isinstance(v, (str, int, float, bool)) or v is None else str(v)) for k, v in ctx.items()}
        out.append(item)
    return out


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(interviews_router)
app.include_router(ratings_router)
app.include_router(dashboard_router)
app.include_router(questions_router)
app.include_router(profile_router)
app.include_router(notifications_router)
app.include_router(internal_scheduler_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
