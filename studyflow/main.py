import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from studyflow import config
from studyflow.database import Base, SessionLocal, engine
from studyflow.logging_setup import setup_logging
from studyflow.routers import auth, bookings, classes, generate, tasks, user_data
from studyflow.seed import seed_database

# register every table on Base.metadata
import studyflow.models.user  # noqa: F401
import studyflow.models.task  # noqa: F401
import studyflow.models.language_class  # noqa: F401
import studyflow.models.user_data  # noqa: F401

logger = logging.getLogger(__name__)

FRONTEND_DIR = Path(__file__).resolve().parent / "frontend"


def init_db():
    Base.metadata.create_all(bind=engine)
    if config.SEED_DATABASE:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_FILE or None)
    init_db()
    logger.info("StudyFlow started (database=%s)", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(title="StudyFlow", lifespan=lifespan)

# API routers
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(generate.router)
app.include_router(classes.router)
app.include_router(bookings.router)
app.include_router(user_data.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # malformed input is a 400 across the API
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Serve the single-page frontend from / (after the API routes so they win)
app.mount("/", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")
