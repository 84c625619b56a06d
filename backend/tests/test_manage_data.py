from fastapi import status


def manage(client, headers, **body):
    return client.post("/admin/manage-data", headers=headers, json=body)


def test_crud_cycle(client, admin_headers):
    resp = manage(
        client,
        admin_headers,
        operation="create",
        table="elk_peak_clients",
        data={"name": "Acme", "monthly_revenue": 2500, "start_date": "2025-01-15"},
    )
    assert resp.status_code == status.HTTP_200_OK, resp.text
    created = resp.json()
    assert created["status"] == "active"
    assert created["start_date"] == "2025-01-15"

    manage(client, admin_headers, operation="create", table="elk_peak_clients", data={"name": "Globex", "status": "inactive"})

    rows = manage(client, admin_headers, operation="list", table="elk_peak_clients", filters={"status": "active"}).json()
    assert [r["name"] for r in rows] == ["Acme"]

    resp = manage(client, admin_headers, operation="update", table="elk_peak_clients", id=created["id"], data={"monthly_revenue": 3000})
    assert resp.json()["monthly_revenue"] == 3000

    assert manage(client, admin_headers, operation="delete", table="elk_peak_clients", id=created["id"]).json() == {"success": True}
    rows = manage(client, admin_headers, operation="list", table="elk_peak_clients").json()
    assert [r["name"] for r in rows] == ["Globex"]


def test_date_filters(client, admin_headers):
    for d in ("2025-03-01", "2025-03-02"):
        manage(client, admin_headers, operation="create", table="life_organizer_kdp_sales", data={"date": d, "units": 2, "revenue": 9.98})
    rows = manage(client, admin_headers, operation="list", table="life_organizer_kdp_sales", filters={"date": "2025-03-02"}).json()
    assert len(rows) == 1


def test_table_allow_list(client, admin_headers):
    for table in ("admin_password", "quarter_goal", "business_metrics_overrides", "elk_peak_clients; drop table x", None):
        resp = manage(client, admin_headers, operation="list", table=table)
        assert resp.status_code == status.HTTP_400_BAD_REQUEST, table
        assert resp.json()["error"].startswith("Invalid table")


def test_field_allow_list(client, admin_headers):
    resp = manage(client, admin_headers, operation="create", table="runtime_pm_users", data={"email": "a@b.io", "signup_date": "2025-01-01", "is_admin": True})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert "is_admin" in resp.json()["error"]

    resp = manage(client, admin_headers, operation="list", table="runtime_pm_users", filters={"password_hash": "x"})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


def test_update_and_delete_need_id(client, admin_headers):
    resp = manage(client, admin_headers, operation="update", table="friendly_tech_hoa_clients", data={"name": "x"})
    assert resp.json() == {"error": "Valid ID is required for update"}
    resp = manage(client, admin_headers, operation="delete", table="friendly_tech_hoa_clients")
    assert resp.json() == {"error": "Valid ID is required for delete"}
    resp = manage(client, admin_headers, operation="update", table="friendly_tech_hoa_clients", id="nope", data={"name": "x"})
    assert resp.status_code == status.HTTP_404_NOT_FOUND


def test_required_column_cannot_be_nulled(client, admin_headers):
    created = manage(client, admin_headers, operation="create", table="friendly_tech_hoa_clients", data={"name": "Pines"}).json()
    resp = manage(client, admin_headers, operation="update", table="friendly_tech_hoa_clients", id=created["id"], data={"name": None})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


def test_invalid_operation(client, admin_headers):
    resp = manage(client, admin_headers, operation="truncate", table="elk_peak_clients")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
