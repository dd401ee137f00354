"""
员工管理 API 单元测试
"""
from fastapi.testclient import TestClient


class TestUsers:

    def test_create_user_hides_password(self, client: TestClient):
        response = client.post("/api/users", json={
            "full_name": "Carla Mendes",
            "role": "receptionist",
            "username": "carla",
            "password": "123456",
            "permissions": ["reports"]
        })

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "carla"
        assert data["permissions"] == ["reports"]
        assert "password" not in data
        assert "password_hash" not in data

    def test_unknown_permission_rejected(self, client: TestClient):
        response = client.post("/api/users", json={
            "full_name": "X", "role": "staff", "username": "x", "password": "1",
            "permissions": ["superuser"]
        })
        assert response.status_code == 400

    def test_duplicate_username(self, client: TestClient, sample_manager):
        response = client.post("/api/users", json={
            "full_name": "Outro", "role": "staff", "username": "manager", "password": "1"
        })
        assert response.status_code == 400

    def test_list_and_filter(self, client: TestClient, sample_manager):
        client.post("/api/users", json={
            "full_name": "Davi", "role": "staff", "username": "davi", "password": "1"
        })
        assert len(client.get("/api/users").json()) == 2
        staff = client.get("/api/users", params={"role": "staff"}).json()
        assert [u["username"] for u in staff] == ["davi"]

    def test_last_manager_protected(self, client: TestClient, sample_manager):
        response = client.delete(f"/api/users/{sample_manager.id}")
        assert response.status_code == 400

        response = client.put(f"/api/users/{sample_manager.id}", json={"role": "staff"})
        assert response.status_code == 400

    def test_update_missing_user(self, client: TestClient):
        assert client.put("/api/users/999", json={"phone": "1"}).status_code == 404
