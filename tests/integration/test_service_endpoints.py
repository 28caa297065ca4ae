import logging
from datetime import datetime

from storefront.api.main import app
from storefront.api.rate_limit import RateLimiter


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


def test_security_headers(client):
    r = client.get("/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert r.headers["Referrer-Policy"] == "no-referrer"
    assert r.headers["X-DNS-Prefetch-Control"] == "off"


def test_unknown_route(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Route not found"}
    # trailing slashes are not redirected
    assert client.get("/api/products/").status_code == 404


def test_cors_allows_local_frontend(client):
    r = client.options(
        "/api/products",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_rate_limit_applies_to_api_only(client):
    app.state.rate_limiter = RateLimiter(2, 60)
    assert client.get("/api/products").status_code == 200
    assert client.get("/api/products").status_code == 200
    r = client.get("/api/products")
    assert r.status_code == 429
    assert r.json() == {"success": False, "error": "Too many requests, please try again later."}
    assert int(r.headers["Retry-After"]) > 0
    assert r.headers["X-Frame-Options"] == "SAMEORIGIN"
    # health checks are never limited
    assert client.get("/health").status_code == 200


def test_unhandled_error_keeps_headers_and_access_log(client, monkeypatch, caplog):
    def explode(db, *args, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr("storefront.db.repositories.products.featured_products", explode)
    caplog.set_level(logging.INFO, logger="storefront.access")

    r = client.get("/api/products/featured")
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Internal server error"}
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "SAMEORIGIN"
    access = [rec.getMessage() for rec in caplog.records if rec.name == "storefront.access"]
    assert any(line.startswith("GET /api/products/featured 500") for line in access)
