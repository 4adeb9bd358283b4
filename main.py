import importlib
import logging
import os
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from config.database import SessionLocal, init_db
from config.log_config import configure_logging
from config.settings import settings
from api.otp.otp_service import purge_expired_otps

configure_logging()
logger = logging.getLogger(__name__)


def purge_expired_otps_job():
    db = SessionLocal()
    try:
        removed = purge_expired_otps(db)
        if removed:
            logger.info("Purged %d expired OTP(s)", removed)
    except Exception:
        logger.exception("Failed to purge expired OTPs")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    scheduler = None
    if settings.OTP_CLEANUP_ENABLED:
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            purge_expired_otps_job,
            "interval",
            minutes=settings.OTP_CLEANUP_INTERVAL_MINUTES,
            id="purge_expired_otps",
        )
        scheduler.start()
    app.state.scheduler = scheduler
    yield
    if scheduler:
        scheduler.shutdown(wait=False)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
# CORS: use our parsed list
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)

# ─── Error envelope: every failure renders as {success: false, message} ────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = err["loc"][-1] if err.get("loc") else "body"
        messages.append(f"{field}: {err['msg']}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": ", ".join(messages)},
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"},
    )

#load all routes
def load_routes(directory: Path):
    routers = []
    for item in sorted(directory.rglob("*_routes.py")):
        module_name = ".".join(item.relative_to(directory.parent).with_suffix("").parts)
        module = importlib.import_module(module_name)
        if hasattr(module, "router"):
            routers.append(module.router)
    return routers

for router in load_routes(Path(__file__).parent / "api"):
    app.include_router(router, prefix="/api")

@app.get("/health")
def health_check():
    return {"status": "ok"}

@app.get("/")
def home():
    return {"message": f"{settings.APP_NAME} API"}

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", settings.PORT))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=settings.DEBUG)
