"""Tests for card, vehicle and top-up commands."""

import pytest
from decimal import Decimal

from farepay.cli.main import cli


def invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_card_register(cli_runner, temp_db):
    """Test registering a card with an opening balance."""
    result = invoke(cli_runner, temp_db, "card", "register", "25:0E:8B:1B:08", "--balance", "K500")

    assert result.exit_code == 0
    assert "Registered card '25:0E:8B:1B:08'" in result.output
    assert "Balance: 500.00" in result.output


def test_card_register_duplicate(cli_runner, temp_db, sample_card):
    """Test registering a UID that differs only in formatting fails."""
    result = invoke(cli_runner, temp_db, "card", "register", "25:0e:8b:1b:08")

    assert result.exit_code == 1
    assert "already exists" in result.output.lower()


def test_card_register_invalid_balance(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "card", "register", "AABBCCDD", "--balance", "lots")

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_card_list_empty(cli_runner, temp_db):
    """Test listing cards when none exist."""
    result = invoke(cli_runner, temp_db, "card", "list")

    assert result.exit_code == 0
    assert "No cards found" in result.output


def test_card_list_with_status_filter(cli_runner, temp_db, card_service, sample_card):
    blocked = card_service.register_card("AABBCCDD")
    invoke(cli_runner, temp_db, "card", "status", str(blocked), "blocked")

    result = invoke(cli_runner, temp_db, "card", "list", "--status", "blocked")

    assert result.exit_code == 0
    assert "AABBCCDD" in result.output
    assert "250E8B1B08" not in result.output


def test_card_status(cli_runner, temp_db, card_service, sample_card):
    result = invoke(cli_runner, temp_db, "card", "status", str(sample_card.id), "lost")

    assert result.exit_code == 0
    assert f"Card {sample_card.id} is now lost" in result.output
    assert card_service.get_card(sample_card.id).status.value == "lost"


def test_card_status_unknown(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "card", "status", "999", "blocked")

    assert result.exit_code == 1
    assert "Card 999 not found" in result.output


def test_card_show(cli_runner, temp_db, card_service, sample_card):
    card_service.top_up(sample_card.id, Decimal("25"))

    result = invoke(cli_runner, temp_db, "card", "show", str(sample_card.id))

    assert result.exit_code == 0
    assert "Normalized: 250E8B1B08" in result.output
    assert "Balance: 525.00" in result.output
    assert "top_up" in result.output


def test_card_resolve(cli_runner, temp_db, sample_card):
    result = invoke(cli_runner, temp_db, "card", "resolve", "081b8b0e25")

    assert result.exit_code == 0
    assert f"Card {sample_card.id} ('250E8B1B08', active)" in result.output
    assert "Matched by: reversed" in result.output


def test_card_resolve_unknown(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "card", "resolve", "de:ad:be:ef")

    assert result.exit_code == 1
    assert "Register it as 'DEADBEEF'" in result.output


def test_topup(cli_runner, temp_db, card_service, sample_card):
    result = invoke(cli_runner, temp_db, "topup", str(sample_card.id), "1,000")

    assert result.exit_code == 0
    assert f"Topped up card {sample_card.id}" in result.output
    assert "500.00 -> 1,500.00" in result.output
    assert card_service.get_card(sample_card.id).balance == Decimal("1500")


def test_topup_negative(cli_runner, temp_db, sample_card):
    result = invoke(cli_runner, temp_db, "topup", str(sample_card.id), "--", "-5")

    assert result.exit_code == 1
    assert "Amount must be positive" in result.output


def test_vehicle_add_and_list(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "vehicle", "add", "MV Liemba", "--type", "ship", "--route", "Mpulungu")

    assert result.exit_code == 0
    assert "Added ship 'MV Liemba' (ID:" in result.output

    result = invoke(cli_runner, temp_db, "vehicle", "list")
    assert result.exit_code == 0
    assert "MV Liemba" in result.output
    assert "ship" in result.output


def test_vehicle_add_duplicate(cli_runner, temp_db, sample_vehicle):
    result = invoke(cli_runner, temp_db, "vehicle", "add", "BUS-101")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_vehicle_list_empty(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "vehicle", "list")

    assert result.exit_code == 0
    assert "No vehicles found" in result.output


def test_vehicle_status_by_number(cli_runner, temp_db, vehicle_service, sample_vehicle):
    result = invoke(cli_runner, temp_db, "vehicle", "status", "BUS-101", "maintenance")

    assert result.exit_code == 0
    assert "Vehicle 'BUS-101' is now maintenance" in result.output
    assert vehicle_service.get_vehicle(sample_vehicle.id).status.value == "maintenance"


def test_vehicle_status_unknown(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "vehicle", "status", "NOPE", "inactive")

    assert result.exit_code == 1
    assert "Vehicle 'NOPE' not found" in result.output


def test_vehicle_locations(cli_runner, temp_db, sample_vehicle):
    result = invoke(cli_runner, temp_db, "vehicle", "locations", "BUS-101")
    assert result.exit_code == 0
    assert "No locations recorded for 'BUS-101'" in result.output

    temp_db.insert_location_sample(sample_vehicle.id, Decimal("-15.4167"), Decimal("28.2833"), Decimal("5"))

    result = invoke(cli_runner, temp_db, "vehicle", "locations", str(sample_vehicle.id))
    assert result.exit_code == 0
    assert "-15.4167" in result.output
    assert "28.2833" in result.output
