# cybertaxi/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, the error envelope handlers, and all routers.

Run: uvicorn cybertaxi.main:app --host 0.0.0.0 --port 3000
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from cybertaxi.routers import auth, player, vehicles, garages, health, tiles
from cybertaxi.database import create_tables
from cybertaxi.config import settings
from cybertaxi.utils.errors import CyberTaxiError
from cybertaxi.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="CyberTaxi API",
    description="Taxi-fleet management game backend: players, vehicles, garages, map tiles.",
    version="0.4.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the Vite dev server and the PWA call the API cross-origin) ────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGIN_LIST,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error envelope ───────────────────────────────────────────────────────────
@app.exception_handler(CyberTaxiError)
async def cybertaxi_error_handler(request: Request, exc: CyberTaxiError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "Error", "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    logger.info(f"Validation failed on {request.url.path}: {field} {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "status": "Error",
            "message": f"{field}: {message}" if field else message,
            "details": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors],
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "Error", "message": "Internal server error", "details": str(exc)},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,     prefix="/api", tags=["Auth"])
app.include_router(player.router,   prefix="/api", tags=["Player"])
app.include_router(vehicles.router, prefix="/api", tags=["Vehicles"])
app.include_router(garages.router,  prefix="/api", tags=["Garages"])
app.include_router(health.router,   prefix="/api", tags=["Health"])
app.include_router(tiles.router,    prefix="/api", tags=["Tiles"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("CyberTaxi backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Tile server: {settings.TILE_SERVER_URL}")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("CyberTaxi backend shutting down...")
