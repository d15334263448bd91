from decimal import Decimal

import pytest

from app.core.errors import CurrencyMismatchError, InvalidAmountError
from app.core.money import MAX_MINOR_UNITS, Money, format_minor, minor_unit_exponent


@pytest.mark.parametrize("currency,exponent", [("USD", 2), ("jpy", 0), ("KWD", 3), ("EUR", 2)])
def test_exponent(currency, exponent):
    assert minor_unit_exponent(currency) == exponent


def test_parse_and_format():
    assert Money.parse("10.01", "usd") == Money(1001, "USD")
    assert Money.parse(Decimal("1000"), "JPY") == Money(1000, "JPY")
    assert Money.parse("1.5", "KWD") == Money(1500, "KWD")
    assert format_minor(1001, "USD") == "10.01"
    assert format_minor(-1000, "USD") == "-10.00"
    assert format_minor(0, "USD") == "0.00"
    assert format_minor(1500, "JPY") == "1500"


def test_parse_rejects_extra_precision():
    with pytest.raises(InvalidAmountError):
        Money.parse("10.015", "USD")
    with pytest.raises(InvalidAmountError):
        Money.parse("10.5", "JPY")


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity"])
def test_parse_rejects_garbage(value):
    with pytest.raises(InvalidAmountError):
        Money.parse(value, "USD")


def test_invalid_currency():
    with pytest.raises(InvalidAmountError):
        Money.parse("1", "US")


def test_arithmetic():
    assert Money(100, "USD") + Money(50, "USD") == Money(150, "USD")
    assert Money(100, "USD") - Money(150, "USD") == Money(-50, "USD")
    assert -Money(5, "USD") == Money(-5, "USD")

    with pytest.raises(CurrencyMismatchError):
        Money(1, "USD") + Money(1, "EUR")


def test_parse_rejects_amounts_beyond_64_bits():
    with pytest.raises(InvalidAmountError):
        Money.parse("100000000000000000", "USD")
    with pytest.raises(InvalidAmountError):
        Money.parse("-100000000000000000", "USD")
    with pytest.raises(InvalidAmountError):
        Money.parse("1" * 40, "JPY")


def test_largest_storable_amount():
    money = Money.parse(str(MAX_MINOR_UNITS), "JPY")
    assert money.amount == MAX_MINOR_UNITS
    assert money.format() == str(MAX_MINOR_UNITS)
