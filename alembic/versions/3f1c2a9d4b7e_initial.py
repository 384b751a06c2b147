"""initial

Revision ID: 3f1c2a9d4b7e
Revises:
Create Date: 2026-10-19 10:12:44.381207

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d4b7e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def timestamps():
    return [
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "cattle",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cattle_name", sa.String(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("breed", sa.String(32), nullable=False),
        sa.Column("health_status", sa.String(32), nullable=False),
        sa.Column("weight", sa.Numeric(10, 2), nullable=False),
        sa.Column("snf", sa.Numeric(5, 2), nullable=True),
        sa.Column("father_insemination", sa.String(32), nullable=True),
        sa.Column("parent", sa.String(32), nullable=True),
        sa.Column("birth_date", sa.DateTime(), nullable=False),
        sa.Column("farm_entry_date", sa.DateTime(), nullable=False),
        sa.Column("purchase_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("vendor_name", sa.String(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("image1", sa.String(), nullable=True),
        sa.Column("image2", sa.String(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cattle_name"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_cattle_users"),
    )
    op.create_index("idx_cattle_type", "cattle", ["type"])
    op.create_index("idx_cattle_farm_entry_date", "cattle", ["farm_entry_date"])

    op.create_table(
        "calves",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("calf_id", sa.String(), nullable=False),
        sa.Column("cattle_id", sa.Integer(), nullable=False),
        sa.Column("birth_date", sa.DateTime(), nullable=False),
        sa.Column("gender", sa.String(32), nullable=False),
        sa.Column("health_status", sa.String(32), nullable=False),
        sa.Column("weight", sa.Numeric(10, 2), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("calf_id"),
        sa.ForeignKeyConstraint(
            ["cattle_id"], ["cattle.id"], name="fk_calves_cattle", ondelete="CASCADE"
        ),
    )
    op.create_index("idx_calves_cattle_id", "calves", ["cattle_id"])

    op.create_table(
        "milk_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cattle_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("morning_milk", sa.Numeric(10, 2), nullable=False),
        sa.Column("afternoon_milk", sa.Numeric(10, 2), nullable=False),
        sa.Column("evening_milk", sa.Numeric(10, 2), nullable=False),
        sa.Column("milk_grade", sa.String(32), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["cattle_id"], ["cattle.id"], name="fk_milk_records_cattle", ondelete="CASCADE"
        ),
    )
    op.create_index("idx_milk_records_cattle_id", "milk_records", ["cattle_id"])
    op.create_index("idx_milk_records_date", "milk_records", ["date"])

    op.create_table(
        "feed_consumptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cattle_id", sa.Integer(), nullable=False),
        sa.Column("feed_name", sa.String(), nullable=False),
        sa.Column("feed_type", sa.String(32), nullable=False),
        sa.Column("session", sa.String(32), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["cattle_id"], ["cattle.id"], name="fk_feed_consumptions_cattle", ondelete="CASCADE"
        ),
    )
    op.create_index(
        "idx_feed_consumptions_cattle_id", "feed_consumptions", ["cattle_id"]
    )
    op.create_index("idx_feed_consumptions_date", "feed_consumptions", ["date"])

    op.create_table(
        "feed_stocks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "unit", name="uq_feed_stocks_name_unit"),
    )

    op.create_table(
        "feed_stock_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("feed_stock_id", sa.Integer(), nullable=False),
        sa.Column("consumption_id", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("new_quantity", sa.Numeric(12, 2), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("consumption_id"),
        sa.ForeignKeyConstraint(
            ["feed_stock_id"], ["feed_stocks.id"], name="fk_feed_stock_history_stock"
        ),
        sa.ForeignKeyConstraint(
            ["consumption_id"],
            ["feed_consumptions.id"],
            name="fk_feed_stock_history_consumption",
            ondelete="SET NULL",
        ),
    )
    op.create_index(
        "idx_feed_stock_history_stock_id", "feed_stock_history", ["feed_stock_id"]
    )

    op.create_table(
        "checkups",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cattle_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("prescription", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("doctor_name", sa.String(), nullable=False),
        sa.Column("doctor_phone", sa.String(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["cattle_id"], ["cattle.id"], name="fk_checkups_cattle", ondelete="CASCADE"
        ),
    )
    op.create_index("idx_checkups_date", "checkups", ["date"])

    op.create_table(
        "vaccinations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cattle_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("notes", sa.String(), nullable=False),
        sa.Column("doctor_name", sa.String(), nullable=False),
        sa.Column("doctor_phone", sa.String(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["cattle_id"], ["cattle.id"], name="fk_vaccinations_cattle", ondelete="CASCADE"
        ),
    )
    op.create_index("idx_vaccinations_date", "vaccinations", ["date"])

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "role_module_access",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("module_name", sa.String(), nullable=False),
        sa.Column("can_view", sa.Boolean(), nullable=False),
        sa.Column("can_edit", sa.Boolean(), nullable=False),
        sa.Column("can_delete", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("role_id", "module_name", name="uq_role_module"),
        sa.ForeignKeyConstraint(
            ["role_id"], ["roles.id"], name="fk_role_module_access_roles"
        ),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("mobile", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], name="fk_employees_roles"),
    )


def downgrade() -> None:
    op.drop_table("employees")
    op.drop_table("role_module_access")
    op.drop_table("roles")
    op.drop_index("idx_vaccinations_date", table_name="vaccinations")
    op.drop_table("vaccinations")
    op.drop_index("idx_checkups_date", table_name="checkups")
    op.drop_table("checkups")
    op.drop_index("idx_feed_stock_history_stock_id", table_name="feed_stock_history")
    op.drop_table("feed_stock_history")
    op.drop_table("feed_stocks")
    op.drop_index("idx_feed_consumptions_date", table_name="feed_consumptions")
    op.drop_index("idx_feed_consumptions_cattle_id", table_name="feed_consumptions")
    op.drop_table("feed_consumptions")
    op.drop_index("idx_milk_records_date", table_name="milk_records")
    op.drop_index("idx_milk_records_cattle_id", table_name="milk_records")
    op.drop_table("milk_records")
    op.drop_index("idx_calves_cattle_id", table_name="calves")
    op.drop_table("calves")
    op.drop_index("idx_cattle_farm_entry_date", table_name="cattle")
    op.drop_index("idx_cattle_type", table_name="cattle")
    op.drop_table("cattle")
    op.drop_table("users")
