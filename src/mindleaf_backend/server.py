import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from mindleaf_backend.api.auth import auth_router
from mindleaf_backend.api.courses import course_router
from mindleaf_backend.api.enrollments import enrollment_router
from mindleaf_backend.api.exceptions import reason_for
from mindleaf_backend.api.lessons import lesson_router
from mindleaf_backend.api.users import user_router
from mindleaf_backend.database import get_db, get_engine
from mindleaf_backend.model.base import Base
from mindleaf_backend.services.user_service import ensure_admin_user
from mindleaf_backend.settings import settings

logger = logging.getLogger(__name__)


def init_admin_user():
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return

    with next(get_db()) as db:
        ensure_admin_user(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


def startup_logic():
    if settings.DEBUG_MODE != "production":
        logger.info("Creating database tables")
        Base.metadata.create_all(bind=get_engine())

    init_admin_user()


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_logic()
    yield

app = FastAPI(title="Mind Leaf API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "reason": reason_for(exc)},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = [{"loc": list(error.get("loc", ())), "msg": error.get("msg")} for error in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid input", "reason": "invalid_input", "fields": fields}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "reason": "internal_error"}
    )


app.include_router(auth_router)
app.include_router(user_router)
app.include_router(course_router)
app.include_router(lesson_router)
app.include_router(enrollment_router)

app.mount("/files", StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False), name="files")


@app.get("/")
def get_status():
    return {"message": "Mind Leaf API is running"}
