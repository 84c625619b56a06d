from fastapi import status

from elkpeak.models.credential import AdminCredential
from elkpeak.services.credentials import hash_password_bcrypt, hash_password_pbkdf2

from conftest import ADMIN_PASSWORD


def verify(client, password):
    return client.post("/auth/verify", json={"password": password})


def test_verify_success(client, admin):
    resp = verify(client, ADMIN_PASSWORD)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"valid": True, "isAdmin": True, "name": "Owner"}


def test_wrong_passwords_get_identical_failure(client, admin):
    """No hint about how close a guess was."""
    a = verify(client, "correct-horse-batter")
    b = verify(client, "something else entirely")
    assert a.status_code == b.status_code == status.HTTP_401_UNAUTHORIZED
    assert a.json() == b.json() == {"valid": False, "error": "Invalid password"}


def test_empty_credential_table_fails_generically(client):
    resp = verify(client, "anything")
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert resp.json() == {"valid": False, "error": "Invalid password"}


def test_missing_password(client, admin):
    resp = client.post("/auth/verify", json={})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "Password is required"}

    resp = client.post("/auth/verify", json={"password": 1234})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


def test_non_admin_match_is_rejected(client, db_session):
    db_session.add(AdminCredential(password_hash=hash_password_bcrypt("viewer-pass", rounds=4), is_admin=False))
    db_session.commit()
    resp = verify(client, "viewer-pass")
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED


def test_first_admin_match_wins_after_non_admin(client, db_session):
    db_session.add(AdminCredential(password_hash=hash_password_bcrypt("shared", rounds=4), is_admin=False, name="viewer"))
    db_session.add(AdminCredential(password_hash=hash_password_bcrypt("shared", rounds=4), is_admin=True, name="admin"))
    db_session.commit()
    resp = verify(client, "shared")
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["name"] == "admin"


def test_legacy_pbkdf2_credential(client, db_session):
    db_session.add(AdminCredential(password_hash=hash_password_pbkdf2("legacy-pass", iterations=1000), is_admin=True))
    db_session.commit()
    assert verify(client, "legacy-pass").status_code == status.HTTP_200_OK
    assert verify(client, "legacy-pas").status_code == status.HTTP_401_UNAUTHORIZED


def test_malformed_hash_is_skipped(client, db_session, admin):
    db_session.add(AdminCredential(password_hash="not-a-hash", is_admin=True))
    db_session.commit()
    assert verify(client, ADMIN_PASSWORD).status_code == status.HTTP_200_OK


def test_verify_rate_limited_after_ten_attempts(client):
    for _ in range(10):
        assert verify(client, "guess").status_code == status.HTTP_401_UNAUTHORIZED
    resp = verify(client, "guess")
    assert resp.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert "error" in resp.json()
    assert int(resp.headers["retry-after"]) > 0


def test_admin_header_missing_and_wrong(client, admin):
    resp = client.post("/dashboard/metrics")
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert resp.json() == {"error": "Admin authentication required"}

    resp = client.post("/dashboard/metrics", headers={"x-admin-password": "nope"})
    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert resp.json() == {"error": "Invalid admin credentials"}
