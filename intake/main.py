# intake/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from intake.routers import search, intake_forms, clients, vehicles, health
from intake.database import create_tables, SessionLocal
from intake.config import settings
from intake.services.errors import EmptyQuery, SearchFailure
from intake.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Detailing Intake Search API",
    description="Client/vehicle search-and-resolve engine for car-reception forms.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the intake UI runs on a separate origin) ──────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the UI origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Health check and docs stay open. Set API_KEY in .env; leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(EmptyQuery)
async def empty_query_handler(request: Request, exc: EmptyQuery):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "error": "empty_query", "field": exc.field},
    )


@app.exception_handler(SearchFailure)
async def search_failure_handler(request: Request, exc: SearchFailure):
    logger.warning(f"Search failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Search is temporarily unavailable, please retry",
                 "error": "search_failure", "field": exc.field},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(search.router,       prefix="/api/v1", tags=["🔍 Search"])
app.include_router(intake_forms.router, prefix="/api/v1", tags=["📝 Intake forms"])
app.include_router(clients.router,      prefix="/api/v1", tags=["👤 Clients"])
app.include_router(vehicles.router,     prefix="/api/v1", tags=["🚗 Vehicles"])
app.include_router(health.router,       prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Intake backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    if settings.SEED_SAMPLE_DATA:
        from intake.fixtures.sample_fleet import seed_sample_fleet
        db = SessionLocal()
        try:
            seed_sample_fleet(db)
        finally:
            db.close()
    logger.info(f"🗂️  Entity store: {settings.STORE_BACKEND}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Intake backend shutting down...")
