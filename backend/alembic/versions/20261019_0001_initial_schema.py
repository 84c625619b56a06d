"""initial_schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19

- Credential table (admin_password)
- Business tables for Elk Peak, Life Organizer, Friendly Tech and Runtime PM
- Monthly log tables, one row per (year, month)
- Metric overrides, quarter goals, contact submissions
"""

from alembic import op
import sqlalchemy as sa

# Alembic's default version table uses VARCHAR(32), so keep revision <= 32 chars.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

MONTHLY_LOG_TABLES = {
    "elk_peak_monthly_revenue": [("revenue", sa.Float())],
    "elk_peak_monthly_mrr": [("mrr", sa.Float())],
    "elk_peak_monthly_engagements": [("count", sa.Integer())],
    "life_organizer_monthly_revenue": [
        ("kdp_revenue", sa.Float()),
        ("notion_revenue", sa.Float()),
        ("etsy_revenue", sa.Float()),
        ("gumroad_revenue", sa.Float()),
    ],
    "friendly_tech_monthly_metrics": [("revenue", sa.Float()), ("tech_days", sa.Integer())],
    "runtime_pm_monthly_metrics": [
        ("active_users", sa.Integer()),
        ("revenue", sa.Float()),
        ("active_subscriptions", sa.Integer()),
    ],
    "organization_monthly_costs": [("cost", sa.Float())],
}


def _id() -> sa.Column:
    return sa.Column("id", sa.String(length=36), primary_key=True)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "admin_password",
        _id(),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("name", sa.String(length=255), nullable=True),
        _created_at(),
    )

    op.create_table(
        "elk_peak_clients",
        _id(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("monthly_revenue", sa.Float(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_elk_peak_clients_status", "elk_peak_clients", ["status"])

    op.create_table(
        "elk_peak_projects",
        _id(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "client_id",
            sa.String(length=36),
            sa.ForeignKey("elk_peak_clients.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("revenue", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_elk_peak_projects_status", "elk_peak_projects", ["status"])

    for table in ("life_organizer_kdp_sales", "life_organizer_notion_sales"):
        op.create_table(
            table,
            _id(),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("units", sa.Integer(), nullable=True),
            sa.Column("revenue", sa.Float(), nullable=True),
            sa.Column("product_name", sa.String(length=255), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            _created_at(),
        )
        op.create_index(f"ix_{table}_date", table, ["date"])

    op.create_table(
        "friendly_tech_hoa_clients",
        _id(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_friendly_tech_hoa_clients_status", "friendly_tech_hoa_clients", ["status"])

    op.create_table(
        "friendly_tech_days",
        _id(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("hoa_client_id", sa.String(length=36), nullable=True),
        sa.Column("revenue", sa.Float(), nullable=True),
        sa.Column("hours", sa.Integer(), nullable=True),
        sa.Column("sessions_count", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_friendly_tech_days_date", "friendly_tech_days", ["date"])

    op.create_table(
        "runtime_pm_users",
        _id(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("signup_date", sa.Date(), nullable=False),
        sa.Column("last_active_date", sa.Date(), nullable=True),
        sa.Column("subscription_tier", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_runtime_pm_users_status", "runtime_pm_users", ["status"])

    op.create_table(
        "runtime_pm_subscriptions",
        _id(),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("runtime_pm_users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("monthly_amount", sa.Float(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_runtime_pm_subscriptions_status", "runtime_pm_subscriptions", ["status"])

    for table, value_cols in MONTHLY_LOG_TABLES.items():
        op.create_table(
            table,
            _id(),
            sa.Column("year", sa.Integer(), nullable=False),
            sa.Column("month", sa.Integer(), nullable=False),
            *[sa.Column(name, type_, nullable=False, server_default="0") for name, type_ in value_cols],
            sa.Column("notes", sa.Text(), nullable=True),
            _created_at(),
            _created_at("updated_at"),
            sa.UniqueConstraint("year", "month", name=f"uq_{table}_period"),
        )

    op.create_table(
        "business_metrics_overrides",
        _id(),
        sa.Column("company", sa.String(length=50), nullable=False),
        sa.Column("metric_key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        _created_at("updated_at"),
        sa.Column("updated_by", sa.String(length=255), nullable=True),
        sa.UniqueConstraint("company", "metric_key", name="uq_business_metrics_overrides_key"),
    )
    op.create_index("ix_business_metrics_overrides_company", "business_metrics_overrides", ["company"])

    op.create_table(
        "quarter_goal",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("target_value", sa.Float(), nullable=False),
        sa.Column("current_value", sa.Float(), nullable=True),
        sa.Column("quarter", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("metric_type", sa.String(length=50), nullable=False, server_default="custom"),
        sa.Column("order", sa.Integer(), nullable=True),
        _created_at(),
        sa.CheckConstraint("quarter >= 1 AND quarter <= 4", name="ck_quarter_goal_quarter"),
    )
    op.create_index("idx_quarter_goal_quarter_year", "quarter_goal", ["quarter", "year"])

    op.create_table(
        "contact_submissions",
        _id(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("company", sa.String(length=100), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="new"),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at("submitted_at"),
    )
    op.create_index("ix_contact_submissions_status", "contact_submissions", ["status"])
    op.create_index("ix_contact_submissions_submitted_at", "contact_submissions", ["submitted_at"])


def downgrade() -> None:
    op.drop_table("contact_submissions")
    op.drop_table("quarter_goal")
    op.drop_table("business_metrics_overrides")
    for table in reversed(list(MONTHLY_LOG_TABLES)):
        op.drop_table(table)
    op.drop_table("runtime_pm_subscriptions")
    op.drop_table("runtime_pm_users")
    op.drop_table("friendly_tech_days")
    op.drop_table("friendly_tech_hoa_clients")
    op.drop_table("life_organizer_notion_sales")
    op.drop_table("life_organizer_kdp_sales")
    op.drop_table("elk_peak_projects")
    op.drop_table("elk_peak_clients")
    op.drop_table("admin_password")
