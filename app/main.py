# app/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers for the access-control taxonomy,
and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import access, access_logs, gates, health, stats, users, vehicles, visitors
from app.database import SessionLocal, create_tables
from app.config import settings
from app.exceptions import AccessControlError, AccessDenied
from app.services.gate_controller import GateController
from app.services.repository import EntityRepository
from app.services.seed_service import seed_demo_data
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Campus Gate Access API",
    description="Vehicle and visitor access control - QR/RFID scans, gate control, audit log.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the dashboard to call the API) ──────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
# Scanners sit on the gate network without a key; so do login and health.
KEYLESS_PATHS = frozenset({
    "/api/v1/access/scan", "/api/v1/auth/login", "/api/v1/health",
    "/docs", "/redoc", "/openapi.json",
})


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Requires X-API-Key (or ?api_key=) on dashboard endpoints when API_KEY is set."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in KEYLESS_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        supplied = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if supplied == settings.API_KEY:
            return await call_next(request)

        logger.warning(f"Rejected {request.method} {request.url.path}: bad or missing API key")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED,
                            content={"error": "Invalid or missing API key"})


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    # Scan latency is what a driver waits on at the barrier
    log = logger.info if request.url.path.endswith("/access/scan") else logger.debug
    log(f"{request.method} {request.url.path} → {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": exc.credential_type,
            "authorized": False,
            "error": exc.message,
            "message": exc.message,     # older scanner clients read this key
            "reason": exc.reason,
            "logId": exc.log_id,
        },
    )


@app.exception_handler(AccessControlError)
async def access_control_error_handler(request: Request, exc: AccessControlError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(access.router,      prefix="/api/v1", tags=["🔑 Access Scan"])
app.include_router(gates.router,       prefix="/api/v1", tags=["🚧 Gates"])
app.include_router(vehicles.router,    prefix="/api/v1", tags=["🚗 Vehicles"])
app.include_router(visitors.router,    prefix="/api/v1", tags=["🪪 Visitors"])
app.include_router(access_logs.router, prefix="/api/v1", tags=["📜 Access Logs"])
app.include_router(users.router,       prefix="/api/v1", tags=["👤 Users"])
app.include_router(stats.router,       prefix="/api/v1", tags=["📊 Stats"])
app.include_router(health.router,      prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Campus Gate backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    if settings.SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_demo_data(EntityRepository(db))
        finally:
            db.close()

    app.state.gate_controller = GateController(SessionLocal, settings.GATE_AUTO_CLOSE_SECONDS)
    logger.info(f"🚧 Gate auto-close after {settings.GATE_AUTO_CLOSE_SECONDS}s")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Campus Gate backend shutting down...")
    controller = getattr(app.state, "gate_controller", None)
    if controller is not None:
        controller.shutdown()
