from utils.units import (
    degrees_to_cardinal,
    meters_per_second_to_mph,
    round_percent,
    to_fahrenheit,
)


def test_degrees_to_cardinal_main_points():
    assert degrees_to_cardinal(0) == "N"
    assert degrees_to_cardinal(45) == "NE"
    assert degrees_to_cardinal(90) == "E"
    assert degrees_to_cardinal(180) == "S"
    assert degrees_to_cardinal(270) == "W"


def test_degrees_to_cardinal_wraps_at_360():
    assert degrees_to_cardinal(360) == "N"
    assert degrees_to_cardinal(350) == "N"


def test_degrees_to_cardinal_rounds_halves_up():
    assert degrees_to_cardinal(22.5) == "NE"
    assert degrees_to_cardinal(337.5) == "N"


def test_degrees_to_cardinal_none():
    assert degrees_to_cardinal(None) is None


def test_meters_per_second_to_mph():
    assert meters_per_second_to_mph(10) == 22
    assert meters_per_second_to_mph(0) == 0
    assert meters_per_second_to_mph(None) is None


def test_to_fahrenheit_one_decimal():
    assert to_fahrenheit(0) == "32.0"
    assert to_fahrenheit(100) == "212.0"
    assert to_fahrenheit(-40) == "-40.0"
    assert to_fahrenheit(21.5) == "70.7"


def test_to_fahrenheit_rounds_ties_away_from_zero():
    assert to_fahrenheit(1.25) == "34.3"
    assert to_fahrenheit(-41.25) == "-42.3"


def test_round_percent():
    assert round_percent(65.4) == 65
    assert round_percent(50.5) == 51
    assert round_percent(None) is None
