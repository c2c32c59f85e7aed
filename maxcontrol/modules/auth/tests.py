"""
Tests para el módulo de Autenticación y Usuarios
"""

import pytest
from uuid import uuid4

from maxcontrol.modules.auth.models import User, UserRole
from maxcontrol.modules.auth.utils import hash_password, verify_password


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = hash_password("segredo1")
        assert hashed != "segredo1"
        assert verify_password("segredo1", hashed)
        assert not verify_password("outra", hashed)


class TestLogin:
    """Tests de /api/auth/login y /api/auth/me"""

    def test_login_success(self, client, admin_user, user_password):
        response = client.post("/api/auth/login", json={"username": "admin", "password": user_password})
        assert response.status_code == 200

        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "admin"
        assert data["user"]["role"] == "admin"
        assert "password" not in data["user"]

    def test_login_wrong_password(self, client, admin_user):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "errada"})
        assert response.status_code == 401

    def test_login_missing_field(self, client):
        response = client.post("/api/auth/login", json={"username": "admin"})
        assert response.status_code == 400

    def test_inactive_user_cannot_login(self, client, admin_user, db_session, user_password):
        admin_user.is_active = False
        db_session.commit()

        response = client.post("/api/auth/login", json={"username": "admin", "password": user_password})
        assert response.status_code == 401

    def test_me(self, client, sales_headers):
        response = client.get("/api/auth/me", headers=sales_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "vendedor"

    def test_invalid_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer token-invalido"})
        assert response.status_code == 401


class TestUsers:
    """Tests de /api/users (solo administradores)"""

    def test_create_and_list(self, client, admin_headers):
        response = client.post("/api/users", json={
            "username": "novo",
            "full_name": "Novo Vendedor",
            "password": "senha123",
            "role": "sales"
        }, headers=admin_headers)
        assert response.status_code == 201
        assert "password" not in response.json()

        usernames = [u["username"] for u in client.get("/api/users", headers=admin_headers).json()]
        assert "novo" in usernames

    def test_duplicate_username(self, client, admin_headers, sales_user):
        response = client.post("/api/users", json={
            "username": "vendedor", "password": "senha123"
        }, headers=admin_headers)
        assert response.status_code == 400

    def test_update_without_password_keeps_it(self, client, admin_headers, sales_user, db_session):
        old_hash = sales_user.password
        response = client.put(f"/api/users/{sales_user.id}", json={
            "username": "vendedor",
            "full_name": "Carla Souza",
            "role": "viewer"
        }, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "viewer"

        db_session.refresh(sales_user)
        assert sales_user.password == old_hash

    def test_cannot_demote_last_admin(self, client, admin_headers, admin_user):
        response = client.put(f"/api/users/{admin_user.id}", json={
            "username": "admin", "role": "sales"
        }, headers=admin_headers)
        assert response.status_code == 400

    def test_can_demote_admin_when_another_exists(self, client, admin_headers, admin_user, db_session):
        db_session.add(User(username="admin2", password=hash_password("x123456"), role=UserRole.ADMIN))
        db_session.commit()

        response = client.put(f"/api/users/{admin_user.id}", json={
            "username": "admin", "role": "sales"
        }, headers=admin_headers)
        assert response.status_code == 200

    def test_cannot_delete_self(self, client, admin_headers, admin_user):
        response = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)
        assert response.status_code == 400

    def test_delete_user(self, client, admin_headers, viewer_user):
        assert client.delete(f"/api/users/{viewer_user.id}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/users/{viewer_user.id}", headers=admin_headers).status_code == 404

    def test_get_unknown_user(self, client, admin_headers):
        assert client.get(f"/api/users/{uuid4()}", headers=admin_headers).status_code == 404

    @pytest.mark.parametrize("headers_fixture", ["sales_headers", "viewer_headers"])
    def test_non_admin_forbidden(self, client, request, headers_fixture):
        headers = request.getfixturevalue(headers_fixture)
        assert client.get("/api/users", headers=headers).status_code == 403
