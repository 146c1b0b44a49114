"""Tests for role-based view routing."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.roles import AccountRole
from app.views import resolve_view

from .factories import make_admin, make_client, make_super_admin


class TestResolveView:
    def test_anonymous_gets_sign_in(self):
        decision = resolve_view(None, "/admin")
        assert decision.view == "sign_in"
        assert decision.path == "/auth"
        assert decision.redirected is True

    def test_anonymous_on_sign_in_path_not_redirected(self):
        assert resolve_view(None, "/auth").redirected is False

    @pytest.mark.parametrize(
        ("role", "view", "path"),
        [
            (AccountRole.CLIENT, "booking_form", "/booking"),
            (AccountRole.ADMIN, "admin_dashboard", "/admin"),
            (AccountRole.SUPER_ADMIN, "super_admin_dashboard", "/super-admin"),
        ],
    )
    def test_each_role_has_one_home(self, role, view, path):
        decision = resolve_view(role, path)
        assert decision.view == view
        assert decision.path == path
        assert decision.redirected is False

    def test_anonymous_has_no_role_label(self):
        assert resolve_view(None).role_label is None

    def test_root_redirects_to_home(self):
        decision = resolve_view(AccountRole.ADMIN, "/")
        assert decision.path == "/admin"
        assert decision.redirected is True

    def test_other_roles_view_redirects(self):
        decision = resolve_view(AccountRole.CLIENT, "/super-admin")
        assert decision.view == "booking_form"
        assert decision.redirected is True

    def test_admin_cannot_reach_super_admin_dashboard(self):
        decision = resolve_view(AccountRole.ADMIN, "/super-admin")
        assert decision.view == "admin_dashboard"

    def test_unknown_path_redirects(self):
        assert resolve_view(AccountRole.SUPER_ADMIN, "/nowhere").path == "/super-admin"

    def test_trailing_slash_is_same_view(self):
        assert resolve_view(AccountRole.ADMIN, "/admin/").redirected is False


class TestResolveEndpoint:
    def test_anonymous_session(self, anon_app):
        with TestClient(anon_app) as c:
            resp = c.get("/views/resolve", params={"path": "/booking"})
        assert resp.status_code == 200
        assert resp.json()["view"] == "sign_in"

    def test_client_session(self, client_factory):
        resp = client_factory(make_client()).get("/views/resolve")
        assert resp.json() == {
            "view": "booking_form",
            "path": "/booking",
            "redirected": True,
            "role_label": "Client",
        }

    def test_admin_session(self, client_factory):
        resp = client_factory(make_admin()).get(
            "/views/resolve", params={"path": "/admin"}
        )
        assert resp.json()["redirected"] is False

    def test_super_admin_session(self, client_factory):
        resp = client_factory(make_super_admin()).get(
            "/views/resolve", params={"path": "/booking"}
        )
        assert resp.json()["view"] == "super_admin_dashboard"
