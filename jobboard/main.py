# jobboard/main.py
import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .database import get_db
from .middleware import register_middleware
from .rate_limit import RateLimiter
from .routers import api_keys, applications, auth, items, jobs, profiles
from .schemas import ClientErrorReport

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Job Board API", version="1.0.0")

# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    from .database import engine, Base
    # Create tables if they don't exist
    Base.metadata.create_all(bind=engine)


app.state.rate_limiter = (
    RateLimiter(settings.RATE_LIMIT_WINDOW_SECONDS, settings.RATE_LIMIT_MAX_REQUESTS)
    if settings.RATE_LIMIT_ENABLED
    else None
)
register_middleware(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

for module in (auth, profiles, jobs, applications, items, api_keys):
    app.include_router(module.router)


# --- Error envelope ---

def _error(status_code: int, message: str, headers: dict | None = None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error(exc.status_code, message, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return _error(
        status.HTTP_400_BAD_REQUEST,
        "; ".join(parts) or "Invalid request",
        details=jsonable_encoder(errors, exclude={"ctx", "url", "input"}),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


# --- Operational endpoints ---

@app.get("/api/health", tags=["monitoring"])
def health():
    return {
        "success": True,
        "data": {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()},
    }


@app.get("/api/db/health", tags=["monitoring"])
def db_health(db: Session = Depends(get_db)):
    """
    Checks if the database answers a trivial query.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("database health check failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "data": {"status": "unhealthy", "timestamp": timestamp}},
        )
    return {"success": True, "data": {"status": "healthy", "timestamp": timestamp}}


@app.post("/api/client-errors", tags=["monitoring"])
async def client_errors(request: Request):
    """Collects error reports from the browser and writes them to the log."""
    try:
        report = ClientErrorReport.model_validate(await request.json())
    except (ValueError, ValidationError) as exc:
        logger.warning("invalid client error report: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid error report format")

    logger.error(
        "client error: %s at %s (boundary=%s)\n%s",
        report.message,
        report.url,
        report.error_boundary,
        report.stack or "",
    )
    return {"success": True}
