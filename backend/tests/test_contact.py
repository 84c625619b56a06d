import json
from datetime import datetime

import httpx
from fastapi import status

from elkpeak.models.contact import ContactSubmission
from elkpeak.services.notifier import notify_contact_submission


def submit(client, **overrides):
    body = {"name": "Ada", "email": "ada@example.com", "message": "Hello there"}
    body.update(overrides)
    return client.post("/contact", json=body)


def test_message_length_boundary(client):
    resp = submit(client, message="x" * 1001)
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "Message must be between 1 and 1000 characters"}

    resp = submit(client, message="x" * 999)
    assert resp.status_code == status.HTTP_200_OK
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Message sent successfully"
    assert body["id"]


def test_length_limits_include_surrounding_whitespace(client):
    resp = submit(client, message="x" * 1000 + " ")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "Message must be between 1 and 1000 characters"}

    resp = submit(client, name="n" * 100 + "  ")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "Name must be between 1 and 100 characters"}

    resp = submit(client, company="c" * 100 + " ")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "Company name must be 100 characters or less"}


def test_submission_is_stored_normalized(client, db_session):
    resp = submit(client, name="  Ada Lovelace ", email=" Ada@Example.COM ", company=" Analytical ", message="  hi  ")
    assert resp.status_code == status.HTTP_200_OK
    row = db_session.query(ContactSubmission).one()
    assert row.name == "Ada Lovelace"
    assert row.email == "ada@example.com"
    assert row.company == "Analytical"
    assert row.message == "hi"
    assert row.status == "new"


def test_invalid_fields(client):
    assert submit(client, email="not-an-email").json() == {"error": "Valid email address is required"}
    assert submit(client, name="   ").status_code == status.HTTP_400_BAD_REQUEST
    assert submit(client, name="n" * 101).status_code == status.HTTP_400_BAD_REQUEST
    assert submit(client, message="   ").status_code == status.HTTP_400_BAD_REQUEST
    assert submit(client, company="c" * 101).status_code == status.HTTP_400_BAD_REQUEST


def test_contact_rate_limit(client):
    for _ in range(5):
        assert submit(client).status_code == status.HTTP_200_OK
    resp = submit(client)
    assert resp.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert resp.json() == {"error": "Too many submissions. Please try again later."}


def _submission():
    return ContactSubmission(id="sub-1", name="Ada", email="ada@example.com", company=None, message="Hi")


def test_notifier_skipped_without_config():
    assert notify_contact_submission(_submission()) is False


def test_notifier_posts_to_resend(set_env):
    set_env(RESEND_API_KEY="re_test", RESEND_TO_EMAIL="owner@elkpeak.com")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email_1"})

    with httpx.Client(transport=httpx.MockTransport(handler)) as c:
        assert notify_contact_submission(_submission(), client=c) is True
    assert seen["auth"] == "Bearer re_test"
    assert seen["body"]["to"] == ["owner@elkpeak.com"]
    assert seen["body"]["reply_to"] == "ada@example.com"


def test_notifier_failure_is_swallowed(set_env):
    set_env(RESEND_API_KEY="re_test", RESEND_TO_EMAIL="owner@elkpeak.com")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with httpx.Client(transport=httpx.MockTransport(handler)) as c:
        assert notify_contact_submission(_submission(), client=c) is False


def test_admin_contacts_flow(client, admin_headers, db_session):
    db_session.add_all(
        [
            ContactSubmission(name="Old", email="o@x.io", message="m", submitted_at=datetime(2025, 1, 1)),
            ContactSubmission(name="New", email="n@x.io", message="m", submitted_at=datetime(2025, 2, 1)),
        ]
    )
    db_session.commit()

    def call(operation, data=None):
        return client.post("/admin/contacts", headers=admin_headers, json={"operation": operation, "data": data})

    listed = call("list").json()
    assert [s["name"] for s in listed] == ["New", "Old"]
    assert len(call("list", {"limit": 1}).json()) == 1

    target = listed[1]["id"]
    resp = call("updateStatus", {"id": target, "status": "replied"})
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["status"] == "replied"
    assert call("updateStatus", {"id": target, "status": "spam"}).status_code == status.HTTP_400_BAD_REQUEST

    assert [s["name"] for s in call("list", {"status": "replied"}).json()] == ["Old"]

    resp = call("addNotes", {"id": target, "notes": "called back"})
    assert resp.json()["notes"] == "called back"
    assert call("addNotes", {"id": "missing", "notes": "x"}).status_code == status.HTTP_404_NOT_FOUND

    assert call("delete", {"id": target}).json() == {"success": True}
    assert [s["name"] for s in call("list").json()] == ["New"]
    assert call("purge").status_code == status.HTTP_400_BAD_REQUEST


def test_admin_contacts_requires_admin(client):
    resp = client.post("/admin/contacts", json={"operation": "list"})
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
