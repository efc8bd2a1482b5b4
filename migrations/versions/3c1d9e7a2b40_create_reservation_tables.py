"""create users, equipment and reservations tables

Revision ID: 3c1d9e7a2b40
Revises:
Create Date: 2025-10-01 00:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1d9e7a2b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_index("ix_users_id", "users", ["id"])

    op.create_table(
        "equipment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_equipment_id", "equipment", ["id"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "equipment_id",
            sa.Integer(),
            sa.ForeignKey("equipment.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_reservations_equipment_id", "reservations", ["equipment_id"])
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"])
    op.create_index(
        "ix_reservations_equipment_status_start",
        "reservations",
        ["equipment_id", "status", "start_time"],
    )

    # Double-booking guard: active reservations of one equipment may not
    # overlap on [start_time, end_time). tsrange rejects end < start.
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        "ALTER TABLE reservations ADD CONSTRAINT ex_reservations_active_no_overlap "
        "EXCLUDE USING gist (equipment_id WITH =, tsrange(start_time, end_time, '[)') WITH &&) "
        "WHERE (status = 'active')"
    )


def downgrade() -> None:
    op.execute(
        "ALTER TABLE reservations DROP CONSTRAINT IF EXISTS ex_reservations_active_no_overlap"
    )
    op.drop_index("ix_reservations_equipment_status_start", table_name="reservations")
    op.drop_index("ix_reservations_user_id", table_name="reservations")
    op.drop_index("ix_reservations_equipment_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_equipment_id", table_name="equipment")
    op.drop_table("equipment")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
