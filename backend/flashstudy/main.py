import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette.middleware.cors import CORSMiddleware

from flashstudy.api.routes import auth, decks, flashcards, statistics, study
from flashstudy.core.config import settings
from flashstudy.core.exceptions import (
    AlreadyCompletedError,
    ConcurrentUpdateError,
    EmptyDeckError,
    FlashStudyError,
    InvalidArgumentError,
    InvalidReferenceError,
    NotFoundError,
    UnavailableError,
    Violation,
)
from flashstudy.core.logging_config import configure_logging
from flashstudy.db.session import init_db

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Flashcards Study API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_status(exc: FlashStudyError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidArgumentError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, (InvalidReferenceError, EmptyDeckError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, (AlreadyCompletedError, ConcurrentUpdateError)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, UnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(exc: FlashStudyError, error_type: str) -> dict:
    return {
        "detail": exc.message,
        "type": error_type,
        "errors": [v.as_dict() for v in exc.violations],
    }


@app.exception_handler(FlashStudyError)
async def flashstudy_exception_handler(request: Request, exc: FlashStudyError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    error_type = type(exc).__name__.removesuffix("Error")
    return JSONResponse(status_code=_error_status(exc), content=_error_body(exc, error_type))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    violations = [
        Violation(
            code="invalid_argument",
            message=err["msg"],
            # drop the "body"/"query"/"path" prefix
            field=".".join(str(part) for part in err["loc"][1:]) or None,
        )
        for err in exc.errors()
    ]
    logger.info("%s %s -> validation failed: %s", request.method, request.url.path, exc.errors())
    error = InvalidArgumentError("Request validation failed", violations)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(error, "InvalidArgument"),
    )


@app.exception_handler(OperationalError)
async def store_unavailable_handler(request: Request, exc: OperationalError):
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    error = UnavailableError("Storage is temporarily unavailable")
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=_error_body(error, "Unavailable"))


app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(decks.router, prefix=f"{settings.API_PREFIX}/decks", tags=["decks"])
app.include_router(flashcards.router, prefix=f"{settings.API_PREFIX}/flashcards", tags=["flashcards"])
app.include_router(study.router, prefix=f"{settings.API_PREFIX}/study", tags=["study"])
app.include_router(statistics.router, prefix=f"{settings.API_PREFIX}/statistics", tags=["statistics"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
