"""FastAPI pool league API - serves league data and the built web UI."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

import config
from league.models.base import check_connection, init_db

from web.api.routes import router as api_router
from web.api.auth_routes import router as auth_router
from web.api.users_routes import router as users_router

logger = logging.getLogger("poolleague.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await check_connection()
        await init_db()
    except Exception:
        logger.exception("Database unavailable at startup")
        raise
    logger.info("Database ready")
    yield


app = FastAPI(title="Pool League API", lifespan=lifespan)

# SPA fallback: serve index.html for non-API 404s so client-side routes work
_frontend_dist = Path(__file__).resolve().parent.parent / "frontend" / "dist"


class SPAFallbackMiddleware(BaseHTTPMiddleware):
    """Serve index.html for 404s on client routes (/dashboard, /login, etc.)."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        path = request.url.path
        if response.status_code == 404 and not path.startswith(("/api", "/auth")):
            index_path = _frontend_dist / "index.html"
            if index_path.exists():
                return FileResponse(str(index_path), media_type="text/html")
        return response


if _frontend_dist.exists():
    app.add_middleware(SPAFallbackMiddleware)

if config.ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

app.include_router(api_router)
app.include_router(users_router)
app.include_router(auth_router)


# Errors are returned as {"error": "..."} for the client.


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "missing" for e in errors):
        message = "Missing required fields"
    else:
        message = "Invalid request"
    fields = [".".join(str(p) for p in e.get("loc", ()) if p != "body") for e in errors]
    return JSONResponse(status_code=400, content={"error": message, "fields": fields})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


@app.get("/api")
async def api_root():
    return {"message": "API is working!"}


@app.get("/api/health")
async def health():
    """Health check."""
    return {"status": "ok"}
