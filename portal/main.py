"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api.routes import router as api_router
from portal.api.routes import health, pages, webhook
from portal.core.config import settings
from portal.core.database import SessionLocal, engine, init_db
from portal.core.errors import LoginRedirect, PortalError
from portal.services.bootstrap import bootstrap

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database on startup and release the pool on shutdown."""
    logger.info("Starting portal (env=%s)", settings.APP_ENV)
    if settings.DB_AUTO_CREATE:
        init_db(engine)
    db = SessionLocal()
    try:
        bootstrap(db, settings)
    finally:
        db.close()
    logger.info("Portal ready to accept requests")
    yield
    engine.dispose()
    logger.info("Portal stopped")


app = FastAPI(
    title="Citizen Portal Admin API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    if request.method in ("POST", "PUT", "PATCH"):
        logger.info(
            "%s %s (content-type: %s)",
            request.method,
            request.url.path,
            request.headers.get("content-type"),
        )
    else:
        logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


def _error_body(error: str, message: str) -> dict[str, str]:
    return {"error": error, "message": message}


@app.exception_handler(PortalError)
async def handle_portal_error(request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.error, exc.message))


@app.exception_handler(LoginRedirect)
async def handle_login_redirect(request: Request, exc: LoginRedirect) -> RedirectResponse:
    return RedirectResponse(url=exc.location, status_code=302)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=400, content=_error_body("ValidationFailed", message))


@app.exception_handler(SQLAlchemyError)
async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("InternalError", "An internal error occurred"),
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("NotFound" if exc.status_code == 404 else "HTTPError", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    message = "An internal error occurred" if settings.APP_ENV == "prod" else str(exc)
    return JSONResponse(status_code=500, content=_error_body("InternalError", message))


app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(health.router, tags=["health"])
app.include_router(webhook.router, tags=["webhook"])
app.include_router(pages.public_router)
app.include_router(pages.router)
app.include_router(pages.fallback_router)
