import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.exceptions import NotFoundError, PersistenceError, ValidationError
from app.db.base import Base, engine
from app.db import models  # noqa: F401  registers every table on Base.metadata
from app.api.routes import schedule as schedule_router
from app.api.routes import workday as workday_router

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Beauty Schedule Platform")

@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)


@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(NotFoundError)
def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(PersistenceError)
def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": "Save failed"})


@app.get("/")
def root():
    return {"message": "Beauty Schedule Platform API running"}


app.include_router(schedule_router.router)
app.include_router(workday_router.router)
