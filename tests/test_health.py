import logging


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_db_ping(client):
    r = client.get("/db-ping")
    assert r.status_code == 200
    body = r.json()
    assert body["db"] == "ok"
    assert body["value"] == 1

def test_domain_errors_render_detail(client):
    r = client.get("/learning-tracks/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"detail": "Learning track not found"}

def test_request_id_is_echoed_and_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="app.request"):
        r = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert r.headers["X-Request-ID"] == "req-123"
    record = next(rec for rec in caplog.records if rec.name == "app.request")
    assert record.request_id == "req-123"
    assert record.path == "/health"
    assert record.status_code == 200

def test_request_id_is_generated_when_missing(client):
    r = client.get("/health")
    assert len(r.headers["X-Request-ID"]) == 32
