from __future__ import annotations

import pytest

from core.currency import format_currency, parse_currency
from core.errors import PricingValidationError


@pytest.mark.parametrize(
    ("amount", "text"),
    [
        (0, "$0.00"),
        (5, "$0.05"),
        (17500, "$175.00"),
        (123456, "$1,234.56"),
        (100000000, "$1,000,000.00"),
        (-1069, "-$10.69"),
    ],
)
def test_format_currency(amount, text):
    assert format_currency(amount) == text


def test_parse_currency_reads_formatted_output():
    for amount in (0, 7, 99, 17500, 123456, 987654321, -375):
        assert parse_currency(format_currency(amount)) == amount


@pytest.mark.parametrize("text", ["$0.00", "$9.99", "$175.00", "$1,234.56", "$12,345,678.90", "-$10.69"])
def test_accepted_strings_format_back_unchanged(text):
    assert format_currency(parse_currency(text)) == text


@pytest.mark.parametrize(
    "text",
    [
        "",
        "175.00",
        "$175",
        "$175.5",
        "$01.00",
        "$1234.56",
        "$1,23.00",
        "$1,2345.00",
        " $75.00 ",
        "-$0.00",
        "USD 175.00",
    ],
)
def test_parse_currency_rejects_non_canonical_input(text):
    with pytest.raises(PricingValidationError) as exc_info:
        parse_currency(text)

    assert exc_info.value.status_code == 422
