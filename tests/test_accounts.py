"""Endpoint tests for /accounts."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from .factories import (
    ADMIN_ID,
    CLIENT_ID,
    SUPER_ADMIN_ID,
    account_response,
)

CRUD_PATH = "app.routers.account.account_crud"


class TestGetMyAccount:
    def test_returns_own_account(self, client_api):
        with patch(CRUD_PATH) as mock_crud:
            mock_crud.get_account = AsyncMock(return_value=account_response())
            resp = client_api.get("/accounts/me")
        assert resp.status_code == 200
        assert resp.json()["id"] == str(CLIENT_ID)
        caller = mock_crud.get_account.call_args[0][0]
        assert caller.id == CLIENT_ID

    def test_missing_row_returns_404(self, client_api):
        with patch(CRUD_PATH) as mock_crud:
            mock_crud.get_account = AsyncMock(return_value=None)
            resp = client_api.get("/accounts/me")
        assert resp.status_code == 404


class TestUpdateMyAccount:
    def test_updates_name_and_phone(self, client_api):
        with patch(CRUD_PATH) as mock_crud:
            mock_crud.update_account = AsyncMock(
                return_value=account_response(name="Jane", phone="5550001111")
            )
            resp = client_api.patch(
                "/accounts/me", json={"name": "Jane", "phone": "5550001111"}
            )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Jane"
        payload = mock_crud.update_account.call_args[0][1]
        assert payload.model_dump(exclude_unset=True) == {
            "name": "Jane",
            "phone": "5550001111",
        }

    def test_role_cannot_be_changed_returns_422(self, client_api):
        with patch(CRUD_PATH) as mock_crud:
            mock_crud.update_account = AsyncMock()
            resp = client_api.patch("/accounts/me", json={"role": "admin"})
        assert resp.status_code == 422
        mock_crud.update_account.assert_not_called()

    def test_admin_color_cannot_be_changed_returns_422(self, admin_api):
        resp = admin_api.patch("/accounts/me", json={"admin_color": "#000000"})
        assert resp.status_code == 422

    def test_short_name_returns_422(self, client_api):
        resp = client_api.patch("/accounts/me", json={"name": "J"})
        assert resp.status_code == 422

    def test_null_name_returns_422(self, client_api):
        with patch(CRUD_PATH) as mock_crud:
            mock_crud.update_account = AsyncMock()
            resp = client_api.patch("/accounts/me", json={"name": None})
        assert resp.status_code == 422
        mock_crud.update_account.assert_not_called()

    def test_phone_can_be_cleared(self, client_api):
        with patch(CRUD_PATH) as mock_crud:
            mock_crud.update_account = AsyncMock(return_value=account_response())
            resp = client_api.patch("/accounts/me", json={"phone": None})
        assert resp.status_code == 200
        payload = mock_crud.update_account.call_args[0][1]
        assert payload.model_dump(exclude_unset=True) == {"phone": None}


class TestListStaff:
    def test_super_admin_lists_staff(self, super_admin_api):
        staff = [
            account_response(ADMIN_ID, role="admin", admin_color="#3B82F6"),
            account_response(SUPER_ADMIN_ID, role="super_admin"),
        ]
        with patch(CRUD_PATH) as mock_crud:
            mock_crud.list_staff = AsyncMock(return_value=staff)
            resp = super_admin_api.get("/accounts/staff")
        assert resp.status_code == 200
        assert {a["role"] for a in resp.json()} == {"admin", "super_admin"}

    def test_admin_cannot_list_staff(self, admin_api):
        resp = admin_api.get("/accounts/staff")
        assert resp.status_code == 403

    def test_client_cannot_list_staff(self, client_api):
        resp = client_api.get("/accounts/staff")
        assert resp.status_code == 403
