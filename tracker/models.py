import uuid as uuid_module
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Text, create_engine
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy import TypeDecorator

from utils.time_utils import format_datetime_iso


Base = declarative_base()


# Custom UUID type that works with both PostgreSQL and SQLite
class GUID(TypeDecorator):
    """Platform-independent GUID type.

    Uses PostgreSQL's UUID type when available, otherwise stores as String(36).
    """
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(UUID(as_uuid=True))
        else:
            return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if not isinstance(value, uuid_module.UUID):
            value = uuid_module.UUID(str(value))
        if dialect.name == 'postgresql':
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        elif isinstance(value, uuid_module.UUID):
            return value
        else:
            return uuid_module.UUID(value)


class ChargingSession(Base):
    """One charging event, possibly still active."""

    __tablename__ = 'charging_sessions'

    id = Column(GUID(), primary_key=True, default=uuid_module.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    cost = Column(Float)
    start_percent = Column(Integer, nullable=False)
    end_percent = Column(Integer)
    charged_at = Column(DateTime(timezone=True), nullable=False, index=True, default=datetime.utcnow)
    kwh = Column(Float)
    charge_type = Column(String(20))
    odometer = Column(Float)
    currency = Column(String(3))
    status = Column(String(20))
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': str(self.id),
            'cost': self.cost,
            'start_percent': self.start_percent,
            'end_percent': self.end_percent,
            'charged_at': format_datetime_iso(self.charged_at),
            'user_id': self.user_id,
            'kwh': self.kwh,
            'charge_type': self.charge_type,
            'odometer': self.odometer,
            'currency': self.currency,
            'status': self.status,
        }


class VehicleExpense(Base):
    """Maintenance, repair, insurance, tax or other vehicle cost."""

    __tablename__ = 'vehicle_expenses'

    id = Column(GUID(), primary_key=True, default=uuid_module.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    amount = Column(Float, nullable=False)
    expense_date = Column(DateTime(timezone=True), nullable=False, index=True, default=datetime.utcnow)
    category = Column(String(20), nullable=False, default='other')
    description = Column(Text)
    odometer = Column(Float)
    location = Column(String(200))
    currency = Column(String(3))
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': str(self.id),
            'title': self.title,
            'amount': self.amount,
            'expense_date': format_datetime_iso(self.expense_date),
            'category': self.category,
            'description': self.description,
            'odometer': self.odometer,
            'location': self.location,
            'currency': self.currency,
            'user_id': self.user_id,
        }


class Profile(Base):
    """Per-owner settings, one row per user."""

    __tablename__ = 'profiles'

    user_id = Column(String(64), primary_key=True)
    battery_capacity = Column(Float)
    home_rate = Column(Float)
    currency = Column(String(3))
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'battery_capacity': self.battery_capacity,
            'home_rate': self.home_rate,
            'currency': self.currency,
        }


def get_engine(database_url):
    connect_args = {}
    if database_url.startswith('sqlite'):
        connect_args['check_same_thread'] = False
    if database_url in ('sqlite://', 'sqlite:///:memory:'):
        from sqlalchemy.pool import StaticPool
        return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)

