"""
房间管理 API 单元测试
覆盖 /api/rooms 端点
"""
from decimal import Decimal
from fastapi.testclient import TestClient

from pousada.models.ontology import RoomStatus


class TestRooms:
    """房间管理测试"""

    def test_create_room(self, client: TestClient):
        response = client.post("/api/rooms", json={
            "number": "201",
            "type": "suite",
            "capacity": 4,
            "daily_rate": "350.00"
        })

        assert response.status_code == 201
        data = response.json()
        assert data["number"] == "201"
        assert data["type"] == "suite"
        assert data["status"] == "available"
        assert Decimal(data["daily_rate"]) == Decimal("350.00")

    def test_create_invalid_room(self, client: TestClient):
        """请求数据校验失败返回 400"""
        response = client.post("/api/rooms", json={
            "number": "202",
            "type": "penthouse",
            "capacity": 0,
            "daily_rate": "-1"
        })

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "数据无效"
        assert len(body["errors"]) >= 3

    def test_create_duplicate_room(self, client: TestClient, sample_room):
        response = client.post("/api/rooms", json={
            "number": "101", "type": "single", "capacity": 1, "daily_rate": "80"
        })
        assert response.status_code == 400
        assert "已存在" in response.json()["message"]

    def test_list_and_available(self, client: TestClient, sample_room, sample_room_102, db_session):
        sample_room_102.status = RoomStatus.MAINTENANCE
        db_session.commit()

        response = client.get("/api/rooms")
        assert [r["number"] for r in response.json()] == ["101", "102"]

        response = client.get("/api/rooms/available")
        assert response.status_code == 200
        assert [r["number"] for r in response.json()] == ["101"]

        response = client.get("/api/rooms", params={"status": "maintenance"})
        assert [r["number"] for r in response.json()] == ["102"]

    def test_partial_update_round_trip(self, client: TestClient, sample_room):
        """只修改提交的字段，其余字段保持不变"""
        response = client.put(f"/api/rooms/{sample_room.id}", json={"notes": "vista mar"})
        assert response.status_code == 200

        data = client.get(f"/api/rooms/{sample_room.id}").json()
        assert data["notes"] == "vista mar"
        assert data["number"] == "101"
        assert data["type"] == "double"
        assert data["capacity"] == 2
        assert Decimal(data["daily_rate"]) == Decimal("100.00")

    def test_get_missing_room(self, client: TestClient):
        response = client.get("/api/rooms/999")
        assert response.status_code == 404
        assert response.json() == {"message": "房间不存在", "errors": []}

    def test_update_missing_room(self, client: TestClient):
        response = client.put("/api/rooms/999", json={"notes": "x"})
        assert response.status_code == 404

    def test_delete_room(self, client: TestClient, sample_room):
        response = client.delete(f"/api/rooms/{sample_room.id}")
        assert response.status_code == 200
        assert "删除成功" in response.json()["message"]
        assert client.get(f"/api/rooms/{sample_room.id}").status_code == 404

    def test_delete_room_with_reservation(self, client: TestClient, active_reservation, sample_room):
        response = client.delete(f"/api/rooms/{sample_room.id}")
        assert response.status_code == 400
