"""Initial schema with PostGIS extension and all core tables.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Enable PostGIS extension
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    # ── sellers ───────────────────────────────────────────────────────
    op.create_table(
        "sellers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("business_name", sa.String(200), nullable=False),
        sa.Column("owner_name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("street", sa.String(255), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("state", sa.String(120), nullable=False),
        sa.Column("country", sa.String(80), nullable=False),
        sa.Column("pincode", sa.String(10), nullable=False),
        sa.Column("location", Geometry("POINT", srid=4326), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column(
            "business_type",
            sa.Enum("INDIVIDUAL", "REGISTERED", name="businesstype"),
            nullable=False,
        ),
        sa.Column(
            "verification_status",
            sa.Enum("PENDING", "VERIFIED", "REJECTED", name="verificationstatus"),
            nullable=False,
        ),
        sa.Column("languages", sa.JSON, nullable=False),
        sa.Column("negotiation_enabled", sa.Boolean, nullable=False),
        sa.Column("local_delivery", sa.Boolean, nullable=False),
        sa.Column("pickup", sa.Boolean, nullable=False),
        sa.Column("cod", sa.Boolean, nullable=False),
        sa.Column("free_delivery_radius_km", sa.Float, nullable=False),
        sa.Column("working_hours_start", sa.String(5), nullable=False),
        sa.Column("working_hours_end", sa.String(5), nullable=False),
        sa.Column("working_days", sa.JSON, nullable=False),
        sa.Column("product_ids", sa.JSON, nullable=False),
        sa.Column("rating_average", sa.Float, nullable=False),
        sa.Column("rating_count", sa.Integer, nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "INACTIVE", "SUSPENDED", name="sellerstatus"),
            nullable=False,
        ),
        sa.Column("status_history", sa.JSON, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_sellers_location", "sellers", ["location"], postgresql_using="gist"
    )
    op.create_index("idx_sellers_status", "sellers", ["status"])
    op.create_index("idx_sellers_city", "sellers", ["city"])

    # ── seller_documents ──────────────────────────────────────────────
    op.create_table(
        "seller_documents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "seller_id", sa.Integer, sa.ForeignKey("sellers.id"), nullable=False
        ),
        sa.Column(
            "document_type",
            sa.Enum(
                "GSTIN", "AADHAR", "PAN", "BUSINESS_LICENSE", name="documenttype"
            ),
            nullable=False,
        ),
        sa.Column("number", sa.String(64), nullable=False),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_seller_documents_seller", "seller_documents", ["seller_id"])

    # ── seller_reviews ────────────────────────────────────────────────
    op.create_table(
        "seller_reviews",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "seller_id", sa.Integer, sa.ForeignKey("sellers.id"), nullable=False
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_seller_reviews_seller", "seller_reviews", ["seller_id"])

    # ── subscriptions ─────────────────────────────────────────────────
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "type",
            sa.Enum("SELLER", "BUYER", name="subscriptiontype"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("TRIAL", "ACTIVE", "INACTIVE", name="subscriptionstatus"),
            nullable=False,
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_trial", sa.Boolean, nullable=False),
        sa.Column("trial_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("auto_renew", sa.Boolean, nullable=False),
        sa.Column("last_payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("user_id", "type", name="uq_subscriptions_user_type"),
    )
    op.create_index(
        "idx_subscriptions_status_end", "subscriptions", ["status", "end_date"]
    )

    # ── subscription_payments ─────────────────────────────────────────
    op.create_table(
        "subscription_payments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "subscription_id",
            sa.Integer,
            sa.ForeignKey("subscriptions.id"),
            nullable=False,
        ),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("transaction_id", sa.String(128), nullable=False),
        sa.Column(
            "status",
            sa.Enum("SUCCESS", "FAILED", "PENDING", name="paymentstatus"),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_payments_subscription", "subscription_payments", ["subscription_id"]
    )


def downgrade() -> None:
    op.drop_table("subscription_payments")
    op.drop_table("subscriptions")
    op.drop_table("seller_reviews")
    op.drop_table("seller_documents")
    op.drop_table("sellers")
    for enum_name in (
        "paymentstatus",
        "subscriptionstatus",
        "subscriptiontype",
        "documenttype",
        "sellerstatus",
        "verificationstatus",
        "businesstype",
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
