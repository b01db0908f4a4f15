# usedbooks/main.py
from urllib.parse import urlparse

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from usedbooks.api import include_routers
from usedbooks.data.database import Database
from usedbooks.utils import settings
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)

LOCALHOST_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def normalize_origin(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return ""
    if not value.lower().startswith(("http://", "https://")):
        value = f"https://{value}"
    parsed = urlparse(value)
    if not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"


def allowed_origins() -> list[str]:
    candidates = [*settings.CORS_ORIGINS.split(","), settings.SITE_URL, *LOCALHOST_ORIGINS]
    origins = [normalize_origin(o) for o in candidates]
    return list(dict.fromkeys(o for o in origins if o))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Invalid request body."})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


def create_app(db: Database | None = None) -> FastAPI:
    app = FastAPI(
        title="UsedBooks Store",
        version="1.0.0",
    )

    database = db or Database()
    logger.info(f"Initializing database tables ({database.engine.url.render_as_string(hide_password=True)})")
    database.create_all()
    app.state.db = database

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        session_cookie=settings.SESSION_COOKIE,
        same_site="lax",
        https_only=settings.SESSION_HTTPS_ONLY,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    include_routers(app)
    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
