from pydantic import BaseModel


def test_404_not_found(client):
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"


def test_validation_error_structure(app, client):
    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0


def test_custom_exception(app, client):
    from app.core.exceptions import ConflictError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ConflictError(message="Already taken")

    response = client.get("/test-custom-error")
    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "CONFLICT"
    assert data["error"] == "Already taken"


def test_database_error_hides_internals(app, client):
    from pymongo.errors import OperationFailure

    @app.get("/test-db-error")
    def trigger_db_error():
        raise OperationFailure("secret internal detail")

    response = client.get("/test-db-error")
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "DEPENDENCY_ERROR"
    assert "secret" not in data["error"]


def test_unhandled_error_hides_internals(app, client):
    @app.get("/test-unhandled-error")
    def trigger_unhandled_error():
        raise RuntimeError("secret internal detail")

    response = client.get("/test-unhandled-error", headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert "secret" not in response.text
    # Still decorated by the rest of the middleware pipeline
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Request-ID" in response.headers
    assert "access-control-allow-origin" in response.headers


def test_security_headers_present(client):
    response = client.get("/live")
    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cross-Origin-Resource-Policy"] == "cross-origin"
    assert "X-Process-Time" in response.headers
    assert "X-Request-ID" in response.headers


def test_cors_preflight(client):
    response = client.options(
        "/posts",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:3000")


def test_health_without_database(settings):
    from fastapi.testclient import TestClient
    from app.main import create_app

    client = TestClient(create_app(settings))
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["checks"]["database"] == "unhealthy"


def test_access_log_written_for_unhandled_error(app, client, caplog):
    @app.get("/test-unhandled-logged")
    def trigger_unhandled_error():
        raise RuntimeError("boom")

    with caplog.at_level("INFO", logger="sociopedia"):
        client.get("/test-unhandled-logged", headers={"X-Request-ID": "req-500"})

    access = [r for r in caplog.records if getattr(r, "status_code", None) == 500]
    assert len(access) == 1
    assert access[0].request_id == "req-500"
