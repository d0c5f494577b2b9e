from sqlalchemy import Column, Date, ForeignKey, Integer, String, Table, Text

from sync_pms.config import SCHEMA
from sync_pms.models.base import Base, created_at_column, updated_at_column

# Association rows are derived entirely from the booking's guest_ids on every sync.
# guest_id is not a foreign key: a guest that failed to fetch is still linked.
booking_guest = Table(
    "booking_guest",
    Base.metadata,
    Column(
        "booking_id",
        Integer,
        ForeignKey(f"{SCHEMA}.bookings.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("guest_id", Integer, primary_key=True, index=True),  # PMS guest ID
    schema=SCHEMA,
)


class Booking(Base):
    """
    ORM model for PMS bookings.

    A booking references one room and one room type. Guests are linked
    through the booking_guest table. status is kept as an open string;
    the values the PMS is known to send are listed in BookingStatus.

    room_id and room_type_id are stored as reported by the PMS without
    database-level foreign keys, so a booking is kept even when its room
    or room type could not be fetched in the same run.
    """

    __tablename__ = "bookings"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=False)  # PMS booking ID
    external_id = Column(String, nullable=False)
    arrival_date = Column(Date, nullable=False)
    departure_date = Column(Date, nullable=False)
    room_id = Column(Integer, nullable=False, index=True)  # PMS room ID
    room_type_id = Column(Integer, nullable=False, index=True)  # PMS room type ID
    status = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = created_at_column()
    updated_at = updated_at_column()
