"""Shared pytest fixtures for farepay tests."""

import logging
import tempfile
import os
from decimal import Decimal
import pytest

from farepay.database.factories import create_sqlite_database
from farepay.domain.card import CardService
from farepay.domain.fare import FareService
from farepay.domain.ledger import FareLedger
from farepay.domain.resolver import CardResolver
from farepay.domain.vehicle import VehicleService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers the CLI installs on the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def card_service(temp_db):
    """Create a CardService with a temporary database."""
    return CardService(temp_db)


@pytest.fixture
def vehicle_service(temp_db):
    """Create a VehicleService with a temporary database."""
    return VehicleService(temp_db)


@pytest.fixture
def resolver(temp_db):
    """Create a CardResolver with a temporary database."""
    return CardResolver(temp_db)


@pytest.fixture
def ledger(temp_db):
    """Create a FareLedger with a temporary database."""
    return FareLedger(temp_db)


@pytest.fixture
def fare_service(temp_db):
    """Create a FareService with a temporary database."""
    return FareService(temp_db)


@pytest.fixture
def sample_vehicle(vehicle_service):
    """Create an active bus."""
    vehicle_id = vehicle_service.create_vehicle(number="BUS-101", route_name="Town - Airport")
    return vehicle_service.get_vehicle(vehicle_id)


@pytest.fixture
def sample_card(card_service):
    """Register an active card with balance 500."""
    card_id = card_service.register_card("250E8B1B08", initial_balance=Decimal("500"))
    return card_service.get_card(card_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
