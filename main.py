"""VoiceApp - voice message social feed."""

import logging
import time
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import get_settings
from app.errors import VoiceAppError
from app.rate_limit import limiter
from app.routers import audio_router, auth_router, users_router, voices_router

BASE_DIR = Path(__file__).resolve().parent

# Logging
logger = logging.getLogger("voiceapp")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = get_settings()
for warning in settings.validate():
    logger.warning(warning)

if settings.STORE_BACKEND == "sql":
    from app.database import init_db

    init_db()

app = FastAPI(title="VoiceApp", version="0.1.0")
app.state.limiter = limiter


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' https://unpkg.com; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: blob:; "
            "media-src 'self' blob:; "
            "connect-src 'self'; "
            "font-src 'self'"
        )
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    # Slightly above the upload limit to leave room for multipart framing.
    MAX_BODY_SIZE = (settings.MAX_UPLOAD_SIZE_MB + 1) * 1024 * 1024

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.MAX_BODY_SIZE:
            return JSONResponse(status_code=413, content={"error": "Request body too large"})
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_METHODS = {"POST", "PUT", "DELETE"}

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        # Log mutating API calls
        if request.method in self.AUDIT_METHODS and request.url.path.startswith("/api/"):
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Static files
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")

# Templates
templates = Jinja2Templates(directory=BASE_DIR / "templates")

# Routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(voices_router)
app.include_router(audio_router)


# --- Domain error handler ---
@app.exception_handler(VoiceAppError)
async def voiceapp_error_handler(request: Request, exc: VoiceAppError) -> JSONResponse:
    """Render service errors as ``{"error": message}``."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# --- Rate limit error handler ---
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded."""
    return JSONResponse(status_code=429, content={"error": "Rate limit exceeded. Try again later."})


# --- Validation error handler ---
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors with a readable message."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"error": f"{location}: {message}" if location else message})


# --- HTTP exception handler ---
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP exceptions with the same ``{"error"}`` body as service errors."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


# --- Health check ---
@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "voiceapp", "version": "0.1.0"}


# --- Single page client ---
@app.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    """Render the single page client."""
    return templates.TemplateResponse(request, "index.html", {"poll_interval_ms": 5000})
