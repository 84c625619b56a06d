import pytest
from fastapi import status

from elkpeak.models.elk_peak import ElkPeakClient, ElkPeakMonthlyMRR
from elkpeak.services.goals import compute_progress


def goals(client, headers, operation, data=None):
    return client.post("/goals", headers=headers, json={"operation": operation, "data": data})


def create(client, headers, **data):
    body = {"name": "Goal", "target_value": 100, "quarter": 1, "year": 2025}
    body.update(data)
    resp = goals(client, headers, "create", body)
    assert resp.status_code == status.HTTP_200_OK, resp.text
    return resp.json()


@pytest.mark.parametrize(
    "current,target,expected",
    [(50, 200, 25.0), (300, 100, 100.0), (-5, 100, 0.0), (0, 0, 100.0), (-1, 0, 0.0)],
)
def test_progress_is_clamped(current, target, expected):
    assert compute_progress(current, target) == expected


def test_list_only_returns_requested_quarter(client, admin_headers):
    create(client, admin_headers, name="Q1 goal", quarter=1, year=2025)
    create(client, admin_headers, name="Q2 goal", quarter=2, year=2025)
    create(client, admin_headers, name="Q1 next year", quarter=1, year=2026)

    resp = goals(client, admin_headers, "list", {"quarter": 1, "year": 2025})
    assert resp.status_code == status.HTTP_200_OK
    names = [g["name"] for g in resp.json()]
    assert names == ["Q1 goal"]


def test_list_orders_by_order_field(client, admin_headers):
    create(client, admin_headers, name="second", order=2)
    create(client, admin_headers, name="first", order=1)
    names = [g["name"] for g in goals(client, admin_headers, "list", {"quarter": 1, "year": 2025}).json()]
    assert names == ["first", "second"]


def test_custom_goal_progress(client, admin_headers):
    create(client, admin_headers, name="Blog posts", target_value=200, current_value=50)
    (goal,) = goals(client, admin_headers, "list", {"quarter": 1, "year": 2025}).json()
    assert goal["current_value"] == 50
    assert goal["progress"] == 25.0
    assert goal["completed"] is False


def test_mrr_goal_uses_active_client_fallback(client, admin_headers, db_session):
    db_session.add_all(
        [
            ElkPeakClient(name="A", status="active", monthly_revenue=6000),
            ElkPeakClient(name="B", status="active", monthly_revenue=7000),
            ElkPeakClient(name="C", status="inactive", monthly_revenue=50000),
        ]
    )
    db_session.commit()
    create(client, admin_headers, name="Reach $10K MRR", metric_type="elk_peak_mrr", target_value=10000)

    (goal,) = goals(client, admin_headers, "list", {"quarter": 1, "year": 2025}).json()
    assert goal["current_value"] == 13000
    assert goal["progress"] == 100.0
    assert goal["completed"] is True


def test_auto_value_scope_latest_vs_quarter(client, admin_headers, db_session, set_env):
    db_session.add_all(
        [
            ElkPeakMonthlyMRR(year=2025, month=2, mrr=4000),
            ElkPeakMonthlyMRR(year=2025, month=5, mrr=9000),
        ]
    )
    db_session.commit()
    create(client, admin_headers, name="MRR", metric_type="elk_peak_mrr", target_value=10000)

    (goal,) = goals(client, admin_headers, "list", {"quarter": 1, "year": 2025}).json()
    assert goal["current_value"] == 9000
    assert goal["progress"] == 90.0

    set_env(GOAL_PROGRESS_SCOPE="quarter")
    (goal,) = goals(client, admin_headers, "list", {"quarter": 1, "year": 2025}).json()
    assert goal["current_value"] == 4000
    assert goal["progress"] == 40.0


def test_create_validation(client, admin_headers):
    bad = [
        {"name": "", "target_value": 1, "quarter": 1, "year": 2025},
        {"name": "x" * 201, "target_value": 1, "quarter": 1, "year": 2025},
        {"name": "x", "target_value": -1, "quarter": 1, "year": 2025},
        {"name": "x", "target_value": 1, "quarter": 5, "year": 2025},
        {"name": "x", "target_value": 1, "quarter": 1, "year": 2019},
        {"name": "x", "target_value": 1, "quarter": 1, "year": 2025, "metric_type": "vibes"},
    ]
    for data in bad:
        resp = goals(client, admin_headers, "create", data)
        assert resp.status_code == status.HTTP_400_BAD_REQUEST, data
        assert resp.json()["error"]



def test_quarter_and_year_must_be_integers(client, admin_headers):
    for data in (
        {"name": "x", "target_value": 1, "quarter": 1.0, "year": 2025},
        {"name": "x", "target_value": 1, "quarter": "1", "year": 2025},
    ):
        resp = goals(client, admin_headers, "create", data)
        assert resp.status_code == status.HTTP_400_BAD_REQUEST, data
        assert resp.json()["error"].startswith("quarter:")

    resp = goals(client, admin_headers, "create", {"name": "x", "target_value": 1, "quarter": 1, "year": "2025"})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json()["error"].startswith("year:")

    resp = goals(client, admin_headers, "list", {"quarter": 1.5, "year": 2025})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST

def test_update_rules(client, admin_headers):
    custom = create(client, admin_headers, name="custom")
    auto = create(client, admin_headers, name="auto", metric_type="runtime_pm_users")

    resp = goals(client, admin_headers, "update", {"id": custom["id"], "updates": {"name": "renamed", "current_value": 100}})
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["name"] == "renamed"
    assert resp.json()["completed"] is True

    resp = goals(client, admin_headers, "update", {"id": custom["id"], "updates": {"quarter": 2}})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert "quarter" in resp.json()["error"]

    resp = goals(client, admin_headers, "update", {"id": auto["id"], "updates": {"current_value": 5}})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST

    resp = goals(client, admin_headers, "update", {"id": "missing", "updates": {"name": "x"}})
    assert resp.status_code == status.HTTP_404_NOT_FOUND


def test_delete_goal(client, admin_headers):
    goal = create(client, admin_headers)
    resp = goals(client, admin_headers, "delete", {"id": goal["id"]})
    assert resp.json() == {"success": True}
    assert goals(client, admin_headers, "list", {"quarter": 1, "year": 2025}).json() == []


def test_unknown_operation(client, admin_headers):
    resp = goals(client, admin_headers, "archive", {})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
