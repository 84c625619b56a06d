from fastapi import status
from sqlalchemy import text

from elkpeak.core.security import origin_matches


def test_origin_matching():
    allowed = ["https://elkpeak.com", "elkpeakconsulting.com"]
    assert origin_matches("https://elkpeak.com", allowed)
    assert origin_matches("https://elkpeak.com/dashboard", allowed)
    assert origin_matches("https://www.elkpeakconsulting.com", allowed)
    assert not origin_matches("https://elkpeak.com.evil.io", allowed)
    assert not origin_matches("https://notelkpeakconsulting.com", allowed)
    assert not origin_matches(None, allowed)


def test_preflight_always_ok(client, set_env):
    set_env(ALLOWED_ORIGINS="https://elkpeak.com")
    resp = client.options("/goals", headers={"Origin": "https://evil.io", "Access-Control-Request-Method": "POST"})
    assert resp.status_code == status.HTTP_200_OK
    assert resp.headers["access-control-allow-origin"] == "null"
    assert "x-admin-password" in resp.headers["access-control-allow-headers"]

    resp = client.options("/goals", headers={"Origin": "https://elkpeak.com"})
    assert resp.status_code == status.HTTP_200_OK
    assert resp.headers["access-control-allow-origin"] == "https://elkpeak.com"
    assert resp.headers["access-control-max-age"] == "86400"


def test_origin_allow_list_enforced(client, set_env, admin_headers):
    set_env(ALLOWED_ORIGINS="https://elkpeak.com")
    body = {"name": "Ada", "email": "ada@example.com", "message": "hi"}

    resp = client.post("/contact", json=body, headers={"Origin": "https://evil.io"})
    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert resp.json() == {"error": "Origin not allowed"}

    # No origin or referer at all is also rejected once a list is configured
    assert client.post("/dashboard/metrics", headers=admin_headers).status_code == status.HTTP_403_FORBIDDEN

    resp = client.post("/contact", json=body, headers={"Origin": "https://elkpeak.com"})
    assert resp.status_code == status.HTTP_200_OK
    assert resp.headers["access-control-allow-origin"] == "https://elkpeak.com"

    resp = client.post(
        "/dashboard/metrics",
        headers={**admin_headers, "Referer": "https://elkpeak.com/dashboard"},
    )
    assert resp.status_code == status.HTTP_200_OK


def test_origin_checked_before_admin_auth(client, set_env):
    set_env(ALLOWED_ORIGINS="https://elkpeak.com")
    resp = client.post("/goals", json={"operation": "list"}, headers={"Origin": "https://evil.io"})
    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert resp.json() == {"error": "Origin not allowed"}


def test_api_key(client, set_env, admin_headers):
    set_env(API_KEY="k-123")
    resp = client.post("/dashboard/metrics", headers=admin_headers)
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    resp = client.post("/dashboard/metrics", headers={**admin_headers, "Authorization": "Bearer wrong"})
    assert resp.status_code == status.HTTP_403_FORBIDDEN

    resp = client.post("/dashboard/metrics", headers={**admin_headers, "Authorization": "Bearer k-123"})
    assert resp.status_code == status.HTTP_200_OK


def test_dashboard_rate_limit_keyed_by_user_agent(client, admin_headers):
    ua_a = {**admin_headers, "User-Agent": "browser-a"}
    ua_b = {**admin_headers, "User-Agent": "browser-b"}
    for _ in range(60):
        assert client.post("/dashboard/metrics", headers=ua_a).status_code == status.HTTP_200_OK
    assert client.post("/dashboard/metrics", headers=ua_a).status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert client.post("/dashboard/metrics", headers=ua_b).status_code == status.HTTP_200_OK


def test_rate_limit_can_be_disabled(client, set_env):
    set_env(RATE_LIMIT_ENABLED="false")
    for _ in range(12):
        assert client.post("/auth/verify", json={"password": "x"}).status_code == status.HTTP_401_UNAUTHORIZED


def test_method_not_allowed_uses_error_body(client):
    resp = client.get("/goals")
    assert resp.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert "error" in resp.json()


def test_malformed_body_is_400(client, admin_headers):
    resp = client.post("/goals", headers={**admin_headers, "Content-Type": "application/json"}, content="{not json")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in resp.json()



def drop_table(db_session, name):
    db_session.execute(text(f"DROP TABLE {name}"))
    db_session.commit()


def test_storage_failure_during_auth_is_generic_500(client, db_session):
    drop_table(db_session, "admin_password")
    resp = client.post("/auth/verify", json={"password": "anything"})
    assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert resp.json() == {"error": "Database operation failed"}
    assert "admin_password" not in resp.text


def test_storage_failure_on_admin_route_is_generic_500(client, db_session, admin_headers):
    drop_table(db_session, "elk_peak_clients")
    resp = client.post("/dashboard/metrics", headers=admin_headers, json={})
    assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert resp.json() == {"error": "Database operation failed"}
    assert "no such table" not in resp.text

def test_security_headers(client):
    resp = client.post("/auth/verify", json={})
    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "DENY"
    assert resp.headers["cache-control"] == "no-store"
    assert resp.headers["x-request-id"]


def test_health_and_prometheus(client):
    for path in ("/", "/health", "/healthz"):
        resp = client.get(path)
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["service"] == "elkpeak-backend"

    client.post("/auth/verify", json={})
    resp = client.get("/metrics")
    assert resp.status_code == status.HTTP_200_OK
    assert "elk_http_requests_total" in resp.text
