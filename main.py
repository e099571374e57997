import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.config import LOG_LEVEL, REMINDER_ENABLED
from core.errors import AppError, ErrorKind
from core.notifications import build_notifier
from core.reminder_scheduler import ReminderScheduler
from database import init_db
from routers import appointment_router, doctor_router, patient_router

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()

    scheduler = None
    if REMINDER_ENABLED:
        scheduler = ReminderScheduler(build_notifier())
        scheduler.start()

    yield

    logger.info("Application shutting down...")
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(title="Clinic Appointments API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.kind == ErrorKind.INTERNAL:
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/")
def read_root():
    return {"message": "🚀 Clinic appointments API is running"}


@app.get("/health")
def health():
    return {"status": "ok"}


# patients
app.include_router(patient_router.router)

# doctors
app.include_router(doctor_router.router)

# appointments
app.include_router(appointment_router.router)


# uvicorn main:app --reload
