from database import get_db
from app import app


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


def test_health_check_unexpected_error_is_500(client):
    class BrokenSession:
        def execute(self, *args, **kwargs):
            raise RuntimeError("boom")

    app.dependency_overrides[get_db] = lambda: BrokenSession()
    response = client.get("/api/health")
    assert response.status_code == 500
    assert response.json()["detail"] == {"status": "unhealthy", "database": "disconnected"}
