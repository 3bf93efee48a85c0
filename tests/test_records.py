"""
活动记录接口测试
测试 /api/activity-records 的创建、查询、运动明细、更新与删除
"""

import pytest
from fastapi import status


@pytest.fixture
def admin_requester():
    return {"requester_id": "admin", "requester_password": "admin-pass"}


@pytest.fixture
def created_record_id(client, normal_user, alice_auth, sample_record_data):
    response = client.post("/api/activity-records", json={**alice_auth, "record": sample_record_data})
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["id"]


class TestCreateRecordApi:
    """创建记录测试"""

    def test_create_success(self, client, normal_user, alice_auth, sample_record_data):
        response = client.post("/api/activity-records", json={**alice_auth, "record": sample_record_data})

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["user_id"] == "alice"
        assert data["heart_rate"] == 120.0
        assert data["exercises"] == sample_record_data["exercises"]
        assert data["created_at"] is not None

    def test_create_missing_record(self, client, normal_user, alice_auth):
        response = client.post("/api/activity-records", json=alice_auth)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_missing_credentials(self, client, normal_user, sample_record_data):
        response = client.post("/api/activity-records", json={"record": sample_record_data})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_missing_mood(self, client, normal_user, alice_auth, sample_record_data):
        record = {k: v for k, v in sample_record_data.items() if k != "mood"}
        response = client.post("/api/activity-records", json={**alice_auth, "record": record})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_for_other_user_forbidden(self, client, normal_user, other_user, alice_auth, sample_record_data):
        record = {**sample_record_data, "user_id": "bob"}
        response = client.post("/api/activity-records", json={**alice_auth, "record": record})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_for_unknown_user(self, client, admin_user, admin_requester, sample_record_data):
        record = {**sample_record_data, "user_id": "ghost"}
        response = client.post("/api/activity-records", json={**admin_requester, "record": record})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestReadRecordApi:
    """查询记录测试"""

    def test_get_own_record(self, client, created_record_id, alice_auth):
        response = client.get(f"/api/activity-records/{created_record_id}", params=alice_auth)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == created_record_id

    def test_get_record_of_other_user(self, client, created_record_id, other_user):
        params = {"requester_id": "bob", "requester_password": "bob-pass"}
        response = client.get(f"/api/activity-records/{created_record_id}", params=params)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_get_missing_record(self, client, normal_user, alice_auth):
        response = client.get("/api/activity-records/999", params=alice_auth)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Record not found"

    def test_list_all_requires_admin(self, client, admin_user, created_record_id, alice_auth, admin_requester):
        forbidden = client.get("/api/activity-records", params=alice_auth)
        allowed = client.get("/api/activity-records", params=admin_requester)

        assert forbidden.status_code == status.HTTP_403_FORBIDDEN
        assert allowed.status_code == status.HTTP_200_OK
        assert [r["id"] for r in allowed.json()] == [created_record_id]

    def test_list_user_records(self, client, created_record_id, alice_auth):
        response = client.get("/api/activity-records/user/alice", params=alice_auth)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 1

    def test_exercises_grouped_by_name(self, client, created_record_id, alice_auth):
        response = client.get(f"/api/activity-records/{created_record_id}/exercises", params=alice_auth)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["record_id"] == created_record_id
        assert list(data["exercises"]) == ["Pushups", "Squats"]
        assert data["exercises"]["Pushups"] == [
            {"metric": "reps", "value": "20", "unit": "count"},
            {"metric": "sets", "value": "3", "unit": "count"},
        ]


class TestUpdateRecordApi:
    """更新记录测试"""

    def test_update_by_admin(self, client, admin_user, created_record_id, admin_auth):
        payload = {**admin_auth, "record": {"mood": "Tired", "heart_rate": 0}}
        response = client.put(f"/api/activity-records/{created_record_id}", json=payload)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["mood"] == "Tired"
        assert data["heart_rate"] == 120.0

    def test_update_clear_fields(self, client, admin_user, created_record_id, admin_auth, alice_auth):
        payload = {**admin_auth, "record": {"clear_fields": ["heart_rate", "exercises"]}}
        response = client.put(f"/api/activity-records/{created_record_id}", json=payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["heart_rate"] == 0
        exercises = client.get(f"/api/activity-records/{created_record_id}/exercises", params=alice_auth)
        assert exercises.json()["exercises"] == {}

    def test_update_by_owner_rejected(self, client, created_record_id):
        payload = {"admin_id": "alice", "admin_password": "alice-pass", "record": {"mood": "Sad"}}
        response = client.put(f"/api/activity-records/{created_record_id}", json=payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_id_mismatch(self, client, admin_user, created_record_id, admin_auth):
        payload = {**admin_auth, "record": {"id": created_record_id + 1, "mood": "Sad"}}
        response = client.put(f"/api/activity-records/{created_record_id}", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_missing_record(self, client, admin_user, admin_auth):
        response = client.put("/api/activity-records/999", json={**admin_auth, "record": {"mood": "Sad"}})

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteRecordApi:
    """删除记录测试"""

    def test_delete_by_admin(self, client, admin_user, created_record_id, admin_auth, alice_auth):
        response = client.request("DELETE", f"/api/activity-records/{created_record_id}", json=admin_auth)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        follow_up = client.get(f"/api/activity-records/{created_record_id}", params=alice_auth)
        assert follow_up.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_missing_record(self, client, admin_user, admin_auth):
        response = client.request("DELETE", "/api/activity-records/999", json=admin_auth)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_without_credentials(self, client, created_record_id):
        response = client.request("DELETE", f"/api/activity-records/{created_record_id}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
