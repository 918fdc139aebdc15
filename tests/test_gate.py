"""Tests for the request gates: require_auth, require_admin, restricted access and load_user."""

import tempfile
import unittest
from pathlib import Path
from typing import Annotated
from unittest.mock import MagicMock, patch

from fastapi import Depends, FastAPI, Request
from fastapi.responses import FileResponse
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from portal.api.gate import (
    StoreErrorPolicy,
    check_restricted_access,
    get_session,
    load_user,
)
from portal.api.routes import pages
from portal.core.config import settings
from portal.core.database import get_db
from portal.core.security import ADMIN_ROLE
from portal.main import app
from portal.schemas.auth import SessionData
from tests.support import ADMIN_EMAIL, ApiTestCase, add_user, set_setting


def _store_down() -> OperationalError:
    return OperationalError("SELECT", {}, Exception("connection refused"))


def _broken_db() -> MagicMock:
    db = MagicMock()
    db.get.side_effect = _store_down()
    db.query.side_effect = _store_down()
    return db


class TestRequireAdmin(ApiTestCase):
    def test_anonymous_gets_401(self) -> None:
        response = self.client.get("/api/users")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(set(response.json()), {"error", "message"})

    def test_non_admin_gets_403(self) -> None:
        add_user(self.db, email="user@x.com", password="secret1")
        self.login("user@x.com", "secret1")
        response = self.client.get("/api/users")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "Forbidden")

    def test_admin_passes(self) -> None:
        self.login_admin()
        self.assertEqual(self.client.get("/api/users").status_code, 200)

    def test_demotion_applies_to_next_request(self) -> None:
        admin = self.login_admin()
        self.assertEqual(self.client.get("/api/users").status_code, 200)
        admin.role = "Usuário"
        self.db.commit()
        self.assertEqual(self.client.get("/api/users").status_code, 403)

    def test_promotion_applies_without_relogin(self) -> None:
        user = add_user(self.db, email="user@x.com", password="secret1")
        self.login("user@x.com", "secret1")
        user.role = ADMIN_ROLE
        self.db.commit()
        self.assertEqual(self.client.get("/api/users").status_code, 200)

    def test_deleted_user_session_is_invalid(self) -> None:
        admin = self.login_admin()
        self.db.delete(admin)
        self.db.commit()
        response = self.client.get("/api/users")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "InvalidSession")

    def test_store_error_is_500(self) -> None:
        app.dependency_overrides[get_session] = lambda: SessionData(
            sid="sid", user_id=1, user_email=ADMIN_EMAIL, user_role=ADMIN_ROLE
        )
        app.dependency_overrides[get_db] = _broken_db
        response = self.client.get("/api/users")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "InternalError")


class TestRestrictedAccessPages(ApiTestCase):
    """check_restricted_access on the HTML pages of the main app."""

    def setUp(self) -> None:
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory()
        frontend = Path(self._tmp.name) / "frontend"
        frontend.mkdir()
        (Path(self._tmp.name) / "secret.txt").write_text("secret", encoding="utf-8")
        for name in (
            "agente-cidadao-bilingual.html",
            "index.html",
            "demo-agente-cidadao.html",
            "admin-agente-cidadao.html",
            "login-agente-cidadao.html",
        ):
            (frontend / name).write_text(f"<html>{name}</html>", encoding="utf-8")
        (frontend / "css").mkdir()
        (frontend / "css" / "portal.css").write_text("body { margin: 0; }", encoding="utf-8")
        patcher = patch.object(settings, "FRONTEND_DIR", str(frontend))
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_open_when_flag_absent(self) -> None:
        response = self.client.get("/demo", follow_redirects=False)
        self.assertEqual(response.status_code, 200)
        self.assertIn("demo-agente-cidadao.html", response.text)

    def test_anonymous_redirected_when_restricted(self) -> None:
        set_setting(self.db, "restricted_access", "true")
        response = self.client.get("/", follow_redirects=False)
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], "/login")

    def test_login_page_never_redirects(self) -> None:
        set_setting(self.db, "restricted_access", "true")
        response = self.client.get("/login", follow_redirects=False)
        self.assertEqual(response.status_code, 200)

    def test_authenticated_passes_when_restricted(self) -> None:
        set_setting(self.db, "restricted_access", "true")
        self.login_admin()
        response = self.client.get("/admin", follow_redirects=False)
        self.assertEqual(response.status_code, 200)

    def test_any_other_value_is_not_restricted(self) -> None:
        for value in ("false", "TRUE", "1", "yes", ""):
            set_setting(self.db, "restricted_access", value)
            response = self.client.get("/index", follow_redirects=False)
            self.assertEqual(response.status_code, 200, value)

    def test_store_error_fails_open(self) -> None:
        broken = _broken_db()
        app.dependency_overrides[get_db] = lambda: broken
        response = self.client.get("/bilingual", follow_redirects=False)
        self.assertEqual(response.status_code, 200)
        broken.rollback.assert_called()

    def test_unknown_page_falls_back_to_main_page(self) -> None:
        response = self.client.get("/no/such/page")
        self.assertEqual(response.status_code, 404)
        self.assertIn("agente-cidadao-bilingual.html", response.text)

    def test_unknown_api_path_is_json(self) -> None:
        response = self.client.get("/api/nothing-here")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "NotFound")

    def test_page_by_file_name_is_gated(self) -> None:
        set_setting(self.db, "restricted_access", "true")
        for name in ("admin-agente-cidadao.html", "demo-agente-cidadao.html", "index.html"):
            response = self.client.get(f"/{name}", follow_redirects=False)
            self.assertEqual(response.status_code, 302, name)
            self.assertEqual(response.headers["location"], "/login")

    def test_page_by_file_name_served_when_open(self) -> None:
        response = self.client.get("/admin-agente-cidadao.html", follow_redirects=False)
        self.assertEqual(response.status_code, 200)
        self.assertIn("admin-agente-cidadao.html", response.text)

    def test_login_page_file_is_public(self) -> None:
        set_setting(self.db, "restricted_access", "true")
        response = self.client.get("/login-agente-cidadao.html", follow_redirects=False)
        self.assertEqual(response.status_code, 200)

    def test_assets_are_public_when_restricted(self) -> None:
        set_setting(self.db, "restricted_access", "true")
        response = self.client.get("/css/portal.css", follow_redirects=False)
        self.assertEqual(response.status_code, 200)
        self.assertIn("body", response.text)

    def test_unknown_page_redirects_when_restricted(self) -> None:
        set_setting(self.db, "restricted_access", "true")
        response = self.client.get("/no/such/page", follow_redirects=False)
        self.assertEqual(response.status_code, 302)

    def test_page_endpoint_serves_its_file(self) -> None:
        serve = pages._make_page_endpoint("index.html")
        request = MagicMock()
        request.state.user = None
        response = serve(request)
        self.assertIsInstance(response, FileResponse)
        self.assertTrue(str(response.path).endswith("index.html"))
        self.assertEqual(response.media_type, "text/html")

    def test_frontend_file_stays_inside_frontend_dir(self) -> None:
        outside = Path(self._tmp.name) / "secret.txt"
        self.assertTrue(outside.is_file())
        self.assertIsNone(pages.frontend_file("../secret.txt"))
        self.assertIsNone(pages.frontend_file(str(outside)))
        self.assertIsNone(pages.frontend_file("css"))
        self.assertIsNotNone(pages.frontend_file("css/portal.css"))


def _gate_app(policy: StoreErrorPolicy, db: MagicMock) -> FastAPI:
    """Minimal app exposing the lenient gates with an explicit store-error policy."""
    gate_app = FastAPI()

    @gate_app.get("/restricted", dependencies=[Depends(check_restricted_access(policy))])
    def restricted() -> dict[str, bool]:
        return {"ok": True}

    @gate_app.get("/whoami")
    def whoami(
        request: Request,
        user: Annotated[object, Depends(load_user(policy))],
    ) -> dict[str, object]:
        state_user = request.state.user
        return {"user": state_user.email if state_user else None}

    gate_app.dependency_overrides[get_db] = lambda: db
    return gate_app


class TestStoreErrorPolicy(unittest.TestCase):
    """The two lenient gates honour FAIL_OPEN and FAIL_CLOSED explicitly."""

    def test_restricted_fail_closed_returns_500(self) -> None:
        client = TestClient(
            _gate_app(StoreErrorPolicy.FAIL_CLOSED, _broken_db()),
            raise_server_exceptions=False,
        )
        self.assertEqual(client.get("/restricted").status_code, 500)

    def test_restricted_fail_open_passes(self) -> None:
        client = TestClient(_gate_app(StoreErrorPolicy.FAIL_OPEN, _broken_db()))
        self.assertEqual(client.get("/restricted").json(), {"ok": True})


class TestLoadUser(ApiTestCase):
    def test_attaches_sanitized_user(self) -> None:
        self.login_admin()
        sid = self.client.cookies.get(settings.SESSION_COOKIE_NAME)
        client = TestClient(
            _gate_app(StoreErrorPolicy.FAIL_OPEN, self.db),
            cookies={settings.SESSION_COOKIE_NAME: sid},
        )
        self.assertEqual(client.get("/whoami").json(), {"user": ADMIN_EMAIL})

    def test_anonymous_leaves_user_empty(self) -> None:
        client = TestClient(_gate_app(StoreErrorPolicy.FAIL_OPEN, self.db))
        self.assertEqual(client.get("/whoami").json(), {"user": None})


class TestLoadUserStoreError(unittest.TestCase):
    """A failed user lookup is swallowed under FAIL_OPEN and propagated under FAIL_CLOSED."""

    def _client(self, policy: StoreErrorPolicy) -> TestClient:
        db = MagicMock()
        db.get.side_effect = _store_down()
        gate_app = _gate_app(policy, db)
        gate_app.dependency_overrides[get_session] = lambda: SessionData(
            sid="sid", user_id=5, user_email="a@b.c", user_role=ADMIN_ROLE
        )
        return TestClient(gate_app, raise_server_exceptions=False)

    def test_fail_open_leaves_user_empty(self) -> None:
        response = self._client(StoreErrorPolicy.FAIL_OPEN).get("/whoami")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"user": None})

    def test_fail_closed_returns_500(self) -> None:
        response = self._client(StoreErrorPolicy.FAIL_CLOSED).get("/whoami")
        self.assertEqual(response.status_code, 500)


if __name__ == "__main__":
    unittest.main()
