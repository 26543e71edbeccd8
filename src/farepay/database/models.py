"""SQLAlchemy models for the farepay database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    create_engine,
    event,
)
from sqlalchemy.engine import Dialect, Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

from farepay.domain.entities import AMOUNT_PRECISION, AMOUNT_SCALE

Base = declarative_base()


class ExactNumeric(TypeDecorator):
    """Fixed-point column that round-trips ``Decimal`` values exactly.

    SQLite has no decimal type and binds ``Numeric`` through float, which
    rounds beyond 15 significant digits. There the value is stored as its
    decimal string at the column scale instead.
    """

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String())
        return dialect.type_descriptor(self.impl)

    def process_bind_param(self, value, dialect: Dialect):
        if value is None or dialect.name != "sqlite":
            return value
        exponent = Decimal(1).scaleb(-self.impl.scale)
        return str(Decimal(str(value)).quantize(exponent))

    def process_result_value(self, value, dialect: Dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return Decimal(value)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Card(Base):
    """NFC card model."""

    __tablename__ = "cards"

    id = Column(Integer, primary_key=True)
    card_uid = Column(String, unique=True, nullable=False)
    uid_normalized = Column(String, index=True, nullable=False)
    balance = Column(ExactNumeric(AMOUNT_PRECISION, AMOUNT_SCALE), default=0, nullable=False)
    status = Column(String, default="active", nullable=False)
    customer_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="card")


class Vehicle(Base):
    """Vehicle model. Last-known position is a cache overwritten by taps."""

    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True)
    number = Column(String, unique=True, nullable=False)
    transport_type = Column(String, default="bus", nullable=False)
    status = Column(String, default="active", nullable=False)
    owner_id = Column(Integer, nullable=True)
    route_name = Column(String, nullable=True)
    last_latitude = Column(ExactNumeric(10, 7), nullable=True)
    last_longitude = Column(ExactNumeric(10, 7), nullable=True)
    last_location_update = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="vehicle")
    locations = relationship("VehicleLocation", back_populates="vehicle")


class Transaction(Base):
    """Append-only ledger row."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True)
    amount = Column(ExactNumeric(AMOUNT_PRECISION, AMOUNT_SCALE), nullable=False)
    balance_before = Column(ExactNumeric(AMOUNT_PRECISION, AMOUNT_SCALE), nullable=False)
    balance_after = Column(ExactNumeric(AMOUNT_PRECISION, AMOUNT_SCALE), nullable=False)
    transaction_type = Column(String, nullable=False)
    status = Column(String, nullable=False)
    device_timestamp = Column(DateTime(timezone=True), nullable=False)
    synced_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    latitude = Column(ExactNumeric(10, 7), nullable=True)
    longitude = Column(ExactNumeric(10, 7), nullable=True)
    location_accuracy = Column(ExactNumeric(10, 2), nullable=True)

    # Relationships
    card = relationship("Card", back_populates="transactions")
    vehicle = relationship("Vehicle", back_populates="transactions")


class VehicleLocation(Base):
    """Append-only position history row."""

    __tablename__ = "vehicle_locations"

    id = Column(Integer, primary_key=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    latitude = Column(ExactNumeric(10, 7), nullable=False)
    longitude = Column(ExactNumeric(10, 7), nullable=False)
    accuracy = Column(ExactNumeric(10, 2), nullable=True)
    recorded_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationships
    vehicle = relationship("Vehicle", back_populates="locations")


def _serialize_sqlite_writers(engine: Engine) -> None:
    """Open every SQLite transaction with BEGIN IMMEDIATE.

    SQLite ignores SELECT ... FOR UPDATE, so taking the write lock when the
    transaction starts is what serializes concurrent balance updates.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _serialize_sqlite_writers(engine)
    else:
        engine = create_engine(database_url, echo=False, pool_pre_ping=True)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
