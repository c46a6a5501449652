"""SQLAlchemy models for chargelog database."""

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class DecimalText(TypeDecorator):
    """Decimal stored as its text form; values read back exactly as written."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, float):
            value = str(value)
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


def new_id() -> str:
    """Generate an opaque entity identifier."""
    return uuid.uuid4().hex


class Vehicle(Base):
    """Vehicle model."""

    __tablename__ = "vehicles"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, unique=True, nullable=False)
    image = Column(Text, nullable=True)
    purchase_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    charging_records = relationship("ChargingRecord", back_populates="vehicle")
    maintenance_records = relationship("MaintenanceRecord", back_populates="vehicle")


class ChargingStation(Base):
    """Charging vendor / station model."""

    __tablename__ = "charging_stations"

    id = Column(String(32), primary_key=True, default=new_id)
    vendor = Column(String, nullable=False)
    name = Column(String, nullable=True)
    specification = Column(String, nullable=True)
    price_per_unit = Column(DecimalText, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class ChargingRecord(Base):
    """Charging session model.

    Start and end are stored as timestamps anchored to the record date; an end
    earlier than the start on the wall clock is stored on the following day.
    """

    __tablename__ = "charging_records"

    id = Column(String(32), primary_key=True, default=new_id)
    vehicle_id = Column(String(32), ForeignKey("vehicles.id"), nullable=True)
    date = Column(Date, nullable=False)
    start_at = Column(DateTime, nullable=True)
    end_at = Column(DateTime, nullable=True)
    duration = Column(Integer, default=0, nullable=False)
    vendor = Column(String, nullable=False, default="")
    station_name = Column(String, nullable=False, default="")
    specification = Column(String, nullable=True)
    power = Column(DecimalText, default=0, nullable=False)
    unit = Column(String, nullable=False, default="kWh")
    price_per_unit = Column(DecimalText, nullable=True)
    price_per_minute = Column(DecimalText, nullable=True)
    charging_fee = Column(DecimalText, default=0, nullable=False)
    parking_fee = Column(DecimalText, default=0, nullable=False)
    current_mileage = Column(DecimalText, nullable=True)
    increased_mileage = Column(DecimalText, default=0, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    vehicle = relationship("Vehicle", back_populates="charging_records")


class MaintenanceRecord(Base):
    """Maintenance / service event model."""

    __tablename__ = "maintenance_records"

    id = Column(String(32), primary_key=True, default=new_id)
    vehicle_id = Column(String(32), ForeignKey("vehicles.id"), nullable=True)
    date = Column(Date, nullable=False)
    mileage = Column(DecimalText, nullable=True)
    type = Column(String, nullable=True)
    location = Column(String, nullable=True)
    description = Column(String, nullable=True)
    total_cost = Column(DecimalText, default=0, nullable=False)
    next_maintenance = Column(DecimalText, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    vehicle = relationship("Vehicle", back_populates="maintenance_records")
    items = relationship(
        "MaintenanceItem",
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="MaintenanceItem.position",
    )


class MaintenanceItem(Base):
    """Maintenance line item model."""

    __tablename__ = "maintenance_items"

    id = Column(Integer, primary_key=True)
    record_id = Column(String(32), ForeignKey("maintenance_records.id"), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    name = Column(String, nullable=False)
    quantity = Column(DecimalText, default=1, nullable=False)
    unit_price = Column(DecimalText, default=0, nullable=False)

    # Relationships
    record = relationship("MaintenanceRecord", back_populates="items")


class Setting(Base):
    """Single-valued application setting (e.g. the default vehicle)."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
