import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from . import models  # noqa: F401 - registers every table on Base
from .auth import NOT_AUTHENTICATED
from .config import API_PREFIX, CORS_ORIGIN, ENVIRONMENT, LOG_LEVEL, UPLOAD_DIR
from .database import Base, engine
from .domain.auth.router import router as auth_router
from .domain.bookings.router import router as bookings_router
from .domain.messages.router import router as messages_router
from .domain.notifications.router import router as notifications_router
from .domain.offers.router import router as offers_router
from .domain.posts.router import router as posts_router
from .domain.provider_profiles.router import router as provider_profiles_router
from .domain.requests.router import router as requests_router
from .domain.reviews.router import router as reviews_router
from .domain.sessions.router import router as sessions_router
from .domain.uploads.router import router as uploads_router
from .domain.users.router import router as users_router
from .shared.dates import utcnow

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Outgoing HTTP client logs are noisy at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

SLOW_REQUEST_SECONDS = 2.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Skilli API starting ({ENVIRONMENT})")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except (OperationalError, ProgrammingError) as e:
        # Several workers booting together can race on CREATE TABLE
        if "already exists" not in str(e) and "duplicate key" not in str(e):
            logger.error(f"❌ Could not create tables: {e}")
            raise
        logger.info("ℹ️ Tables were created by another worker")
    else:
        logger.info("✅ Database tables ready")

    yield
    logger.info("👋 Skilli API shutting down")


app = FastAPI(title="Skilli API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """A malformed Authorization header is an authentication failure, not a 422"""
    errors = exc.errors()
    if any("authorization" in str(error.get("loc", "")).lower() for error in errors):
        logger.info(f"🔒 Bad Authorization header on {request.url.path}")
        return JSONResponse(status_code=401, content={"detail": NOT_AUTHENTICATED})

    logger.info(f"Validation failed for {request.method} {request.url.path}: {len(errors)} error(s)")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Pydantic error dicts may carry exception objects in ctx"""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """
    A unique constraint tripped by a concurrent writer after the service's own
    existence check. The request's session is rolled back when get_db closes it.
    """
    logger.warning(f"⚠️ Integrity conflict on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(status_code=409, content={"detail": "Resource already exists"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} failed: {e}")
        raise

    elapsed = time.perf_counter() - started
    if elapsed > SLOW_REQUEST_SECONDS:
        logger.warning(f"🐌 {request.method} {request.url.path} took {elapsed:.2f}s")
    return response


# CORS Configuration
ALLOWED_ORIGINS = [origin.strip() for origin in CORS_ORIGIN.split(",") if origin.strip()]
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    # Credentials cannot be combined with the "*" wildcard
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
for router in (
    auth_router,
    users_router,
    provider_profiles_router,
    sessions_router,
    bookings_router,
    requests_router,
    offers_router,
    reviews_router,
    posts_router,
    messages_router,
    notifications_router,
    uploads_router,
):
    app.include_router(router, prefix=API_PREFIX)

# Uploaded files are served as-is from disk
Path(UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")


@app.get("/")
def root():
    return {"message": "Skilli API is running", "docs": "/docs", "health": f"{API_PREFIX}/health"}


@app.get(f"{API_PREFIX}/health")
def health():
    return {
        "status": "ok",
        "message": "Skilli API is running",
        "timestamp": utcnow().isoformat() + "Z",
        "environment": ENVIRONMENT,
    }
