"""initial schema: users, catalog, workers, orders, order events

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 12:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

role_enum = sa.Enum("CUSTOMER", "ADMIN", "WORKER", name="roleenum")
specialty_enum = sa.Enum("TAILOR", "CUTTER", "FINISHER", "PRESSER", name="workerspecialty")
status_enum = sa.Enum("PENDING", "CONFIRMED", "PROCESSING", "READY", "DELIVERED", name="orderstatus")
stage_enum = sa.Enum("CUTTING", "SEWING", "FINISHING", "PRESSING", "DONE", name="workflowstage")
event_kind_enum = sa.Enum("STATUS_CHANGED", "WORKER_ASSIGNED", name="ordereventkind")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "fabrics",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("price_per_meter", sa.Numeric(10, 2), nullable=False),
        sa.Column("image", sa.String(), nullable=True),
    )
    op.create_index("ix_fabrics_id", "fabrics", ["id"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("is_customizable", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_products_id", "products", ["id"])
    op.create_index("ix_products_category", "products", ["category"])

    op.create_table(
        "product_fabrics",
        sa.Column("product_id", sa.String(), sa.ForeignKey("products.id"), primary_key=True),
        sa.Column("fabric_id", sa.String(), sa.ForeignKey("fabrics.id"), primary_key=True),
    )

    op.create_table(
        "workers",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("specialty", specialty_enum, nullable=False),
        sa.Column("performance_rating", sa.Float(), nullable=True),
    )
    op.create_index("ix_workers_id", "workers", ["id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("advance_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", status_enum, nullable=False),
        sa.Column("workflow_stage", stage_enum, nullable=True),
        sa.Column("assigned_worker_id", sa.String(), sa.ForeignKey("workers.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("advance_amount >= 0 AND advance_amount <= total_amount", name="ck_orders_advance"),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    op.create_index("ix_orders_customer_id", "orders", ["customer_id"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("product_id", sa.String(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_at_booking", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_custom", sa.Boolean(), nullable=False),
        sa.Column("selected_fabric", sa.String(), sa.ForeignKey("fabrics.id"), nullable=True),
        sa.Column("selected_size", sa.String(), nullable=True),
        sa.Column("measurements_json", sa.JSON(), nullable=True),
        sa.CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
    )
    op.create_index("ix_order_items_id", "order_items", ["id"])
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "order_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("kind", event_kind_enum, nullable=False),
        sa.Column("from_status", sa.String(), nullable=True),
        sa.Column("to_status", sa.String(), nullable=True),
        sa.Column("from_stage", sa.String(), nullable=True),
        sa.Column("to_stage", sa.String(), nullable=True),
        sa.Column("from_worker_id", sa.String(), nullable=True),
        sa.Column("to_worker_id", sa.String(), nullable=True),
        sa.Column("actor_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_order_events_id", "order_events", ["id"])
    op.create_index("ix_order_events_order_id", "order_events", ["order_id"])


def downgrade() -> None:
    op.drop_table("order_events")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("workers")
    op.drop_table("product_fabrics")
    op.drop_table("products")
    op.drop_table("fabrics")
    op.drop_table("users")
    for enum in (event_kind_enum, stage_enum, status_enum, specialty_enum, role_enum):
        enum.drop(op.get_bind(), checkfirst=True)
