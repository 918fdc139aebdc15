"""HTML pages of the portal frontend, gated by restricted-access mode."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from portal.api.gate import (
    check_restricted_access,
    enforce_restricted_access,
    get_session,
    load_user,
)
from portal.core.config import settings
from portal.core.database import get_db
from portal.core.errors import NotFound
from portal.schemas.auth import SessionData

logger = logging.getLogger(__name__)

MAIN_PAGE = "agente-cidadao-bilingual.html"

# Route path -> file under FRONTEND_DIR. /login is served separately so the
# restricted-access redirect never loops.
GATED_PAGES = {
    "/": MAIN_PAGE,
    "/bilingual": MAIN_PAGE,
    "/index": "index.html",
    "/demo": "demo-agente-cidadao.html",
    "/admin": "admin-agente-cidadao.html",
}
LOGIN_PAGE = "login-agente-cidadao.html"
HTML_SUFFIXES = (".html", ".htm")

router = APIRouter(
    dependencies=[Depends(check_restricted_access()), Depends(load_user())],
)
public_router = APIRouter()
# Included last: anything no other route claimed.
fallback_router = APIRouter()


def page_path(filename: str) -> Path:
    return Path(settings.FRONTEND_DIR) / filename


def _page_response(filename: str, status_code: int = 200) -> FileResponse:
    path = page_path(filename)
    if not path.is_file():
        logger.error("Frontend page missing: %s", path)
        raise NotFound("Page not found")
    return FileResponse(path, status_code=status_code, media_type="text/html")


def _make_page_endpoint(filename: str) -> Callable[[Request], FileResponse]:
    def serve_page(request: Request) -> FileResponse:
        user = getattr(request.state, "user", None)
        logger.debug(
            "Serving page",
            extra={"page": filename, "user_id": user.id if user else None},
        )
        return _page_response(filename)

    return serve_page


for _route, _filename in GATED_PAGES.items():
    router.add_api_route(
        _route,
        _make_page_endpoint(_filename),
        methods=["GET"],
        include_in_schema=False,
    )


@public_router.get("/login", include_in_schema=False)
def login_page() -> FileResponse:
    return _page_response(LOGIN_PAGE)


def fallback_page() -> FileResponse | None:
    """Main portal page served with 404 for unknown paths, if the frontend is deployed."""
    path = page_path(MAIN_PAGE)
    if not path.is_file():
        return None
    return FileResponse(path, status_code=404, media_type="text/html")


def frontend_file(relative: str) -> Path | None:
    """A regular file under FRONTEND_DIR named by a request path, or None."""
    if not relative:
        return None
    root = Path(settings.FRONTEND_DIR).resolve()
    candidate = (root / relative).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


def _is_html(path: Path) -> bool:
    return path.suffix.lower() in HTML_SUFFIXES


@fallback_router.api_route(
    "/{full_path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def serve_frontend(
    full_path: str,
    request: Request,
    session: Annotated[SessionData | None, Depends(get_session)],
    db: Annotated[Session, Depends(get_db)],
) -> FileResponse:
    """
    Catch-all behind every other route.

    Assets (css, js, images) are public so the login page can render. HTML
    files and the 404 page go through the restricted-access check like the
    named page routes; only the login page is exempt.
    """
    if request.url.path.startswith(settings.API_PREFIX):
        raise NotFound("Resource not found")

    path = frontend_file(full_path) if request.method in ("GET", "HEAD") else None
    if path is not None and not _is_html(path):
        return FileResponse(path)
    if path is not None and path.name == LOGIN_PAGE:
        return FileResponse(path, media_type="text/html")

    enforce_restricted_access(db, session)
    if path is not None:
        return FileResponse(path, media_type="text/html")
    page = fallback_page()
    if page is None:
        raise NotFound("Page not found")
    return page
