from fastapi.testclient import TestClient


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_returns_400(client: TestClient):
    response = client.get("/HKPassenger/v1/unknown")
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot GET /HKPassenger/v1/unknown"}


def test_incomplete_data_path_returns_400(client: TestClient):
    response = client.get("/HKPassenger/v1/data/2022/1")
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot GET /HKPassenger/v1/data/2022/1"}


def test_wrong_method_returns_400(client: TestClient):
    response = client.delete("/HKPassenger/v1/data/2022/1/1")
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot DELETE /HKPassenger/v1/data/2022/1/1"}
