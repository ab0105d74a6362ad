"""Tests for the FastAPI authorization dependency."""

import logging

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from canrbac.api.dependencies import RequirePermission
from canrbac.common.config import Settings
from canrbac.core.rbac.abilities import Ability
from canrbac.core.rbac.engine import compare
from canrbac.core.rbac.loader import open_file


def role_from_header(request: Request):
    return request.headers.get("x-role")


def owner_check(request: Request):
    user_id = request.path_params.get("user_id")
    if user_id is None:
        return lambda: True
    return compare(user_id, request.headers.get("x-user-id"))


def build_app(authorize: RequirePermission) -> FastAPI:
    app = FastAPI()

    @app.get("/", dependencies=[Depends(authorize)])
    async def index():
        return {"page": "index"}

    @app.get("/v1/users/{user_id}", dependencies=[Depends(authorize)])
    async def get_user(user_id: str):
        return {"id": user_id}

    @app.delete("/v1/users/{user_id}", dependencies=[Depends(authorize)])
    async def delete_user(user_id: str):
        return {"deleted": user_id}

    @app.get("/v1/users/{user_id}/comments")
    async def list_comments(user_id: str, request: Request, allowed: bool = Depends(authorize)):
        return {"permission": request.state.permission, "ability": str(request.state.ability)}

    @app.options("/v1/health", dependencies=[Depends(authorize)])
    async def health_options():
        return {"ok": True}

    return app


@pytest.fixture
def client(roles_file):
    authorize = RequirePermission(
        open_file(roles_file), role_from_header, compare_getter=owner_check
    )
    return TestClient(build_app(authorize))


class TestRequirePermission:
    """Test request authorization through FastAPI."""

    def test_missing_role(self, client: TestClient):
        """Test requests without a role get 401."""
        response = client.get("/v1/users/42")
        assert response.status_code == 401

    def test_owner_can_read(self, client: TestClient):
        """Test the predicate allows the owner."""
        response = client.get("/v1/users/42", headers={"x-role": "user", "x-user-id": "42"})
        assert response.status_code == 200
        assert response.json() == {"id": "42"}

    def test_non_owner_denied(self, client: TestClient):
        """Test the predicate denies other users."""
        response = client.get("/v1/users/42", headers={"x-role": "user", "x-user-id": "7"})
        assert response.status_code == 403

    def test_ungranted_ability(self, client: TestClient):
        """Test DELETE is denied for a read-only role."""
        response = client.delete("/v1/users/42", headers={"x-role": "user", "x-user-id": "42"})
        assert response.status_code == 403
        assert "users:delete" in response.json()["detail"]

    def test_admin_all(self, client: TestClient):
        """Test ALL allows any ability."""
        response = client.delete("/v1/users/42", headers={"x-role": "admin", "x-user-id": "1"})
        assert response.status_code == 200

    def test_unknown_role(self, client: TestClient):
        response = client.get("/v1/users/42", headers={"x-role": "root", "x-user-id": "42"})
        assert response.status_code == 403

    def test_classification_stored_on_state(self, client: TestClient):
        """Test the classified permission is available to the handler."""
        response = client.get(
            "/v1/users/42/comments", headers={"x-role": "user", "x-user-id": "42"}
        )
        assert response.status_code == 200
        assert response.json() == {"permission": "users_comments", "ability": "read"}

    def test_index(self, client: TestClient):
        """Test the root path maps to the index permission."""
        assert client.get("/", headers={"x-role": "guest"}).status_code == 200
        assert client.get("/", headers={"x-role": "user"}).status_code == 403

    def test_options_skip(self, client: TestClient):
        """Test OPTIONS maps to SKIP, which needs a skip/all grant."""
        assert client.options("/v1/health", headers={"x-role": "user"}).status_code == 200
        assert client.options("/v1/health", headers={"x-role": "guest"}).status_code == 403


class TestFromSettings:
    """Test building the dependency from settings."""

    def test_requires_roles_file(self):
        with pytest.raises(ValueError):
            RequirePermission.from_settings(role_from_header, Settings(_env_file=None, roles_file=None))

    def test_loads_roles_file(self, roles_file):
        settings = Settings(_env_file=None, roles_file=str(roles_file), index_permission="home")
        authorize = RequirePermission.from_settings(role_from_header, settings)

        assert authorize.index == "home"
        assert authorize.checker.can("admin", "users", Ability.DELETE)

    def test_configures_package_logging(self, roles_file):
        """Test the logging settings are applied to the package logger."""
        settings = Settings(_env_file=None, roles_file=str(roles_file), log_level="DEBUG")
        RequirePermission.from_settings(role_from_header, settings)

        assert logging.getLogger("canrbac").level == logging.DEBUG
