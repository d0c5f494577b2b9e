"""Create room_types, rooms, guests, bookings and booking_guest

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2025-07-21 09:12:04.118532

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f1c2a9b7d10"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA = "pms"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "room_types",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("number", sa.String(), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "guests",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("external_id", sa.String(), nullable=False),
        sa.Column("arrival_date", sa.Date(), nullable=False),
        sa.Column("departure_date", sa.Date(), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("room_type_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )
    op.create_index("ix_pms_bookings_room_id", "bookings", ["room_id"], schema=SCHEMA)
    op.create_index("ix_pms_bookings_room_type_id", "bookings", ["room_type_id"], schema=SCHEMA)

    op.create_table(
        "booking_guest",
        sa.Column("booking_id", sa.Integer(), nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["booking_id"], [f"{SCHEMA}.bookings.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("booking_id", "guest_id"),
        schema=SCHEMA,
    )
    op.create_index("ix_pms_booking_guest_guest_id", "booking_guest", ["guest_id"], schema=SCHEMA)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_pms_booking_guest_guest_id", table_name="booking_guest", schema=SCHEMA)
    op.drop_table("booking_guest", schema=SCHEMA)
    op.drop_index("ix_pms_bookings_room_type_id", table_name="bookings", schema=SCHEMA)
    op.drop_index("ix_pms_bookings_room_id", table_name="bookings", schema=SCHEMA)
    op.drop_table("bookings", schema=SCHEMA)
    op.drop_table("guests", schema=SCHEMA)
    op.drop_table("rooms", schema=SCHEMA)
    op.drop_table("room_types", schema=SCHEMA)
