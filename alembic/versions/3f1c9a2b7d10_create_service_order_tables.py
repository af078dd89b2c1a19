"""create service order, payment and order event tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-19 09:12:44.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "customers_profiles",
        sa.Column("customer_id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("contact", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
    )
    op.create_index("ix_customers_profiles_user_id", "customers_profiles", ["user_id"])

    op.create_table(
        "service_orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "customer_id",
            sa.Integer(),
            sa.ForeignKey("customers_profiles.customer_id"),
            nullable=True,
        ),
        sa.Column("service_type", sa.String(), nullable=False),
        sa.Column("pickup_date", sa.String(), nullable=True),
        sa.Column("pickup_time", sa.String(), nullable=True),
        sa.Column("load_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("total_price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("instructions", sa.String(), nullable=True),
        sa.Column("laundry_photos", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("process_stage", sa.String(), nullable=True, server_default="pending"),
        sa.Column("timer_start", sa.DateTime(), nullable=True),
        sa.Column("timer_end", sa.DateTime(), nullable=True),
        sa.Column("current_timer_status", sa.String(), nullable=True),
        sa.Column("auto_advance_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("moved_to_history_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_service_orders_customer_id", "service_orders", ["customer_id"])
    op.create_index("ix_service_orders_status", "service_orders", ["status"])
    op.create_index("ix_service_orders_is_deleted", "service_orders", ["is_deleted"])
    op.create_index("ix_service_orders_moved_to_history_at", "service_orders", ["moved_to_history_at"])
    # timer sweep scans running timers oldest first
    op.create_index("ix_service_orders_timer_start", "service_orders", ["timer_start"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "service_orders_id",
            sa.Integer(),
            sa.ForeignKey("service_orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("payment_method", sa.String(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="unpaid"),
        sa.Column("payment_proof", sa.String(), nullable=True),
        sa.Column("reference_id", sa.String(), nullable=True),
        sa.Column("payment_review_status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_payments_service_orders_id", "payments", ["service_orders_id"], unique=True
    )

    op.create_table(
        "order_event",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("service_orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("meta", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=False, server_default="system"),
    )

    # indexes for fast timeline queries
    op.create_index("ix_order_event_order_id", "order_event", ["order_id"])
    op.create_index("ix_order_event_event_type", "order_event", ["event_type"])


def downgrade():
    op.drop_index("ix_order_event_event_type", table_name="order_event")
    op.drop_index("ix_order_event_order_id", table_name="order_event")
    op.drop_table("order_event")
    op.drop_index("ix_payments_service_orders_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_service_orders_timer_start", table_name="service_orders")
    op.drop_index("ix_service_orders_moved_to_history_at", table_name="service_orders")
    op.drop_index("ix_service_orders_is_deleted", table_name="service_orders")
    op.drop_index("ix_service_orders_status", table_name="service_orders")
    op.drop_index("ix_service_orders_customer_id", table_name="service_orders")
    op.drop_table("service_orders")
    op.drop_index("ix_customers_profiles_user_id", table_name="customers_profiles")
    op.drop_table("customers_profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
