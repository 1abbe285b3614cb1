from __future__ import annotations

import re

from core.errors import PricingValidationError

# Canonical form only: comma grouping, no leading zeros, two cent digits.
_CURRENCY_PATTERN = re.compile(
    r"^(?P<sign>-)?\$(?P<whole>0|[1-9]\d{0,2}(?:,\d{3})*)\.(?P<cents>\d{2})$"
)


def format_currency(amount_minor: int) -> str:
    """Render cents as a US dollar string, e.g. 123456 -> "$1,234.56", -1069 -> "-$10.69"."""
    sign = "-" if amount_minor < 0 else ""
    whole, cents = divmod(abs(amount_minor), 100)
    return f"{sign}${whole:,}.{cents:02d}"


def parse_currency(text: str) -> int:
    """Parse a dollar string produced by format_currency back into cents.

    Only the canonical form is accepted, so ``format_currency(parse_currency(s)) == s``
    holds for every string this returns for.
    """
    match = _CURRENCY_PATTERN.match(text)
    if match is None:
        raise PricingValidationError(
            message="Invalid currency amount",
            details={"value": text, "expected": "$1,234.56"},
        )

    amount = int(match.group("whole").replace(",", "")) * 100 + int(match.group("cents"))
    if match.group("sign"):
        if amount == 0:
            raise PricingValidationError(
                message="Invalid currency amount",
                details={"value": text, "expected": "$0.00"},
            )
        return -amount
    return amount
