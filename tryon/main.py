import os
import time
import hashlib
from typing import Dict
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import structlog

from .config import settings
from .routers.avatar import router as avatar_router
from .routers.clothing import router as clothing_router
from .routers.size import router as size_router
from .security import create_jwt, verify_api_key
from .services.avatar_store import AvatarStore
from .services.catalog import Catalog


logger = structlog.get_logger("tryon")


app = FastAPI(title="Virtual Try-On Sizing", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origin.split(",") if o.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.avatar_store = AvatarStore()
app.state.catalog = Catalog.from_file(settings.catalog_path)


# Token-bucket rate limit per client ip
_buckets: Dict[str, tuple[float, float]] = {}
_last_sweep = 0.0
BUCKET_SWEEP_INTERVAL_SECONDS = 60.0


class RateLimited(Exception):
    pass


def _request_id(request: Request) -> str:
    return hashlib.md5(f"{request.client.host if request.client else 'unknown'}{time.time()}".encode()).hexdigest()[:8]


def _sweep_buckets(now: float, refill_rate: float, capacity: float) -> None:
    """Drop buckets that have refilled completely; a full bucket is the same as none."""
    global _last_sweep
    if now - _last_sweep < BUCKET_SWEEP_INTERVAL_SECONDS:
        return
    _last_sweep = now
    stale = [k for k, (tokens, last) in _buckets.items() if tokens + refill_rate * (now - last) >= capacity]
    for k in stale:
        _buckets.pop(k, None)


def _rate_limit(ident: str, requests_per_min: int, burst: int) -> None:
    refill_rate = requests_per_min / 60.0
    capacity = float(burst)
    now = time.time()
    _sweep_buckets(now, refill_rate, capacity)
    tokens, last = _buckets.get(ident, (capacity, now))
    tokens = min(capacity, tokens + refill_rate * (now - last))
    if tokens < 1.0:
        _buckets[ident] = (tokens, now)
        raise RateLimited(ident)
    _buckets[ident] = (tokens - 1.0, now)


def _validate_config() -> None:
    strict = os.getenv("STRICT_CONFIG", "0") == "1"
    errors = []
    if not settings.api_key or settings.api_key == "change-me":
        errors.append("API_KEY must be set to a secure value")
    if not settings.jwt_secret or settings.jwt_secret == "dev-secret":
        errors.append("JWT_SECRET must be set to a secure value")
    if not settings.avatar_api_base:
        errors.append("AVATAR_API_BASE must be set")
    if not settings.avatar_api_key:
        errors.append("AVATAR_API_KEY must be set for avatar generation")
    if errors:
        if strict:
            raise RuntimeError("Configuration error: " + "; ".join(errors))
        for e in errors:
            logger.warning("config_warning", warning=e)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    request_id = _request_id(request)
    client_ip = request.client.host if request.client else "unknown"
    resp = None

    try:
        try:
            _rate_limit(client_ip, settings.rate_limit_per_min, settings.rate_limit_burst)
        except RateLimited:
            logger.warning("rate_limit_exceeded", client_ip=client_ip, request_id=request_id)
            resp = JSONResponse(status_code=429, content={"detail": "Too Many Requests"})
            return resp

        logger.info("request_started",
                    request_id=request_id,
                    path=str(request.url.path),
                    method=request.method,
                    client_ip=client_ip,
                    user_agent=request.headers.get("user-agent", "unknown"))

        resp = await call_next(request)
        return resp

    except Exception as e:
        logger.error("request_failed",
                     request_id=request_id,
                     path=str(request.url.path),
                     method=request.method,
                     error=str(e),
                     duration_ms=int((time.time() - start) * 1000),
                     exc_info=True)
        raise
    finally:
        logger.info("request_completed",
                    request_id=request_id,
                    path=str(request.url.path),
                    method=request.method,
                    status=getattr(resp, "status_code", 0) if resp else 0,
                    duration_ms=int((time.time() - start) * 1000))


@app.exception_handler(Exception)
async def handle_exceptions(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error("unhandled_exception",
                 request_id=request_id,
                 path=str(request.url.path),
                 method=request.method,
                 error=str(exc),
                 error_type=type(exc).__name__,
                 exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "request_id": request_id,
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        },
    )


@app.get("/v1/health")
async def health():
    return {"status": "ok"}


@app.get("/v1/debug/status", dependencies=[Depends(verify_api_key)])
async def debug_status():
    """Storage, avatar store, catalog and rate limiter status."""
    storage_status = "ok"
    try:
        os.makedirs(settings.storage_dir, exist_ok=True)
        test_file = os.path.join(settings.storage_dir, "test_write.tmp")
        with open(test_file, "w") as f:
            f.write("test")
        os.remove(test_file)
    except OSError as e:
        storage_status = f"error: {e}"

    return {
        "status": "ok",
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "storage": {"directory": settings.storage_dir, "status": storage_status},
        "avatars": len(app.state.avatar_store),
        "catalog_items": len(app.state.catalog),
        "rate_limiting": {
            "requests_per_min": settings.rate_limit_per_min,
            "burst_capacity": settings.rate_limit_burst,
            "active_buckets": len(_buckets),
        },
    }


@app.post("/v1/auth/token", dependencies=[Depends(verify_api_key)])
async def issue_token():
    token = create_jwt("tryon-frontend")
    return {"token": token}


# Generated meshes and textures
os.makedirs(settings.storage_dir, exist_ok=True)
app.mount("/files", StaticFiles(directory=settings.storage_dir), name="files")

app.include_router(avatar_router, prefix="/v1")
app.include_router(size_router, prefix="/v1")
app.include_router(clothing_router, prefix="/v1")

# Warnings by default; set STRICT_CONFIG=1 to enforce
_validate_config()
