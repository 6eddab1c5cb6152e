"""reservation table with active overlap guard

Revision ID: 3c1f9a7d2b40
Revises: 
Create Date: 2026-10-19 09:12:44.201377

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c1f9a7d2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist;")

    op.create_table(
        "reservation",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("resource_id", sa.String(64), nullable=False),
        sa.Column("requester", sa.String(200), nullable=False),
        sa.Column("day", sa.Date, nullable=False),
        sa.Column("start_minute", sa.Integer, nullable=False),
        sa.Column("end_minute", sa.Integer, nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("title", sa.String(100)),
        sa.Column("description", sa.String(500)),
        sa.Column("notes", sa.Text),
        sa.Column("location", sa.String(200)),
        sa.Column("meeting_type", sa.String(16), nullable=False, server_default="in-person"),
        sa.Column("meeting_link", sa.String(500)),
        sa.Column("priority", sa.String(8), nullable=False, server_default="medium"),
        sa.Column("cancelled_by", sa.String(64)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("cancel_reason", sa.String(200)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("end_minute > start_minute", name="ck_reservation_interval"),
        sa.CheckConstraint("start_minute >= 0 AND end_minute < 1440", name="ck_reservation_day_bounds"),
    )
    op.create_index("ix_reservation_resource_day_start", "reservation", ["resource_id", "day", "start_minute"])
    op.create_index("ix_reservation_status_day", "reservation", ["status", "day"])

    # half-open ranges: back-to-back bookings do not collide
    op.execute(
        """
        ALTER TABLE reservation
          ADD CONSTRAINT ex_reservation_active_overlap
          EXCLUDE USING gist (
            resource_id WITH =,
            day WITH =,
            int4range(start_minute, end_minute, '[)') WITH &&
          )
          WHERE (status IN ('pending', 'confirmed'));
        """
    )


def downgrade() -> None:
    op.drop_table("reservation")
    op.execute("DROP EXTENSION IF EXISTS btree_gist;")
