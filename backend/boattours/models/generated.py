from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Vessels(Base):
    __tablename__ = 'vessels'

    name = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'active'"))  # active / inactive / maintenance
    rotation_order = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    bookings = relationship('Bookings', back_populates='vessel')


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        Index('ix_bookings_vessel_start', 'vessel_id', 'start_at'),
        # one active private party per vessel departure
        Index(
            'uq_bookings_private_departure', 'vessel_id', 'start_at',
            unique=True,
            sqlite_where=text("is_private = 1 AND status = 'active'"),
            postgresql_where=text("is_private AND status = 'active'"),
        ),
    )

    vessel_id = Column(ForeignKey('vessels.id'), nullable=False)
    # naive UTC
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    language = Column(Text, nullable=False)
    party_size = Column(Integer, nullable=False)
    adults = Column(Integer, nullable=False, server_default=text('0'))
    children = Column(Integer, nullable=False, server_default=text('0'))
    babies = Column(Integer, nullable=False, server_default=text('0'))
    is_private = Column(Boolean, nullable=False, server_default=text('0'))
    status = Column(Text, nullable=False, server_default=text("'active'"))  # active / cancelled
    id = Column(Integer, primary_key=True)
    customer_name = Column(Text)
    customer_email = Column(Text)
    message = Column(Text)
    total_price = Column(Float)
    staff_override = Column(Boolean, nullable=False, server_default=text('0'))
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    cancelled_at = Column(DateTime)

    vessel = relationship('Vessels', back_populates='bookings')


class BlackoutIntervals(Base):
    __tablename__ = 'blackout_intervals'

    scope = Column(Text, nullable=False)  # day / time
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    id = Column(Integer, primary_key=True)
    reason = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
