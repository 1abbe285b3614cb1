from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Mapping, Optional, TypeVar

from core.currency import format_currency
from core.errors import ConfigurationError, invalid_factor, missing_matrix_entry
from core.pricing_rules import (
    DEFAULT_PRICING_MATRIX,
    FREQUENCY_LABELS,
    PROPERTY_TYPE_LABELS,
    VISITS_PER_YEAR,
)
from schemas.imports import (
    AccessDifficulty,
    AdjustmentType,
    InfestationSeverity,
    PestType,
    PropertyType,
    ServiceFrequency,
)
from schemas.pricing_matrix import PestRate, PricingMatrix
from schemas.quote import (
    CalculatedPrice,
    PestFinding,
    PriceAdjustment,
    PriceClamp,
    PricingFactors,
    PropertyAssessment,
)

logger = logging.getLogger(__name__)

_CENT = Decimal("1")
_HUNDRED = Decimal("100")

K = TypeVar("K")
V = TypeVar("V")


def _round_minor(value: Decimal) -> int:
    return int(value.quantize(_CENT, rounding=ROUND_HALF_UP))


def _percent_of(amount: int, percent: Decimal) -> int:
    return _round_minor(Decimal(amount) * percent / _HUNDRED)


def _plain(value: Decimal) -> str:
    return format(value.normalize(), "f")


def _lookup(table: Mapping[K, V], key: K, table_name: str) -> V:
    try:
        return table[key]
    except KeyError:
        raise missing_matrix_entry(table_name, getattr(key, "value", str(key))) from None


@dataclass
class _PricingContext:
    factors: PricingFactors
    matrix: PricingMatrix
    is_recurring: bool
    uses_package_rate: bool
    base_price: int
    adjustments: list[PriceAdjustment] = field(default_factory=list)

    @property
    def running_subtotal(self) -> int:
        return self.base_price + sum(adjustment.impact for adjustment in self.adjustments)


def _validate_factors(factors: PricingFactors) -> None:
    if factors.square_footage < 0:
        raise invalid_factor("square_footage", factors.square_footage, "must be non-negative")
    if not math.isfinite(factors.distance_from_branch) or factors.distance_from_branch < 0:
        raise invalid_factor("distance_from_branch", factors.distance_from_branch, "must be a non-negative number")
    if factors.contract_length_months is not None and factors.contract_length_months < 1:
        raise invalid_factor("contract_length_months", factors.contract_length_months, "must be at least 1")
    if factors.number_of_units is not None and factors.number_of_units < 1:
        raise invalid_factor("number_of_units", factors.number_of_units, "must be at least 1")
    if factors.service_month is not None and not 1 <= factors.service_month <= 12:
        raise invalid_factor("service_month", factors.service_month, "must be between 1 and 12")


def _unit_rate(rate: PestRate, pest_type: PestType, *, is_recurring: bool) -> int:
    amount = rate.recurring if is_recurring else rate.one_time
    if amount == 0:
        kind = "recurring" if is_recurring else "one-time"
        raise ConfigurationError(
            message=f"'{pest_type.value}' has no {kind} rate in the pricing matrix",
            details={"table": "pest_base_prices", "key": pest_type.value, "rate": kind},
        )
    return amount


def _resolve_base_price(
    factors: PricingFactors,
    matrix: PricingMatrix,
    rate: PestRate,
    *,
    is_recurring: bool,
    package_rate: int | None,
) -> int:
    if package_rate is not None:
        unit_price = package_rate
    else:
        unit_price = _unit_rate(rate, factors.pest_type, is_recurring=is_recurring)

    if rate.per_sq_ft and factors.square_footage > matrix.base_square_footage:
        unit_price += (factors.square_footage - matrix.base_square_footage) * rate.per_sq_ft

    units = factors.number_of_units or 1
    if units == 1:
        return unit_price

    policy = matrix.multi_unit_policy
    discount_percent = min(policy.discount_per_unit_percent * units, policy.max_discount_percent)
    return _round_minor(Decimal(unit_price * units) * (_HUNDRED - discount_percent) / _HUNDRED)


# ----------------------------------------------------------------------------
# Adjustment steps. Each returns one line item or None when it does not apply.
# ----------------------------------------------------------------------------


def _property_type_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    property_type = ctx.factors.property_type
    multiplier = _lookup(ctx.matrix.property_type_multipliers, property_type, "property_type_multipliers")
    impact = _round_minor(Decimal(ctx.base_price) * (multiplier - 1))
    if impact == 0:
        return None
    return PriceAdjustment(
        name="Property Type",
        type=AdjustmentType.MULTIPLIER,
        value=multiplier,
        impact=impact,
        description=PROPERTY_TYPE_LABELS.get(property_type, property_type.value),
    )


def _size_tier_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    square_footage = ctx.factors.square_footage
    tier = next((tier for tier in ctx.matrix.size_tiers if tier.contains(square_footage)), None)
    if tier is None:
        raise ConfigurationError(
            message=f"No size tier covers {square_footage} sq ft",
            details={"table": "size_tiers", "key": square_footage},
        )
    impact = _round_minor(Decimal(ctx.base_price) * (tier.multiplier - 1)) + tier.additional_fee
    if impact == 0:
        return None
    return PriceAdjustment(
        name="Property Size",
        type=AdjustmentType.MULTIPLIER,
        value=tier.multiplier,
        impact=impact,
        description=f"{square_footage:,} sq ft",
    )


def _severity_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    severity = ctx.factors.severity
    multiplier = _lookup(ctx.matrix.severity_multipliers, severity, "severity_multipliers")
    impact = _round_minor(Decimal(ctx.base_price) * (multiplier - 1))
    if impact == 0:
        return None
    return PriceAdjustment(
        name="Infestation Level",
        type=AdjustmentType.MULTIPLIER,
        value=multiplier,
        impact=impact,
        description=f"{severity.value.capitalize()} infestation surcharge",
    )


def _seasonal_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    month = ctx.factors.service_month
    if month is None:
        return None
    seasons = [
        season
        for season in ctx.matrix.seasonal_adjustments
        if season.applies_to(ctx.factors.pest_type, month)
    ]
    if not seasons:
        return None
    # Highest multiplier wins; ties keep the first configured season.
    season = max(seasons, key=lambda item: item.multiplier)
    impact = _round_minor(Decimal(ctx.base_price) * (season.multiplier - 1))
    if impact == 0:
        return None
    return PriceAdjustment(
        name="Seasonal Adjustment",
        type=AdjustmentType.MULTIPLIER,
        value=season.multiplier,
        impact=impact,
        description=season.name,
    )


def _access_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    difficulty = ctx.factors.access_difficulty
    surcharge = _lookup(ctx.matrix.access_surcharges, difficulty, "access_surcharges")
    if surcharge <= 0:
        return None
    return PriceAdjustment(
        name="Access Difficulty",
        type=AdjustmentType.FIXED,
        value=Decimal(surcharge),
        impact=surcharge,
        description=f"{difficulty.value.replace('_', ' ').capitalize()} access",
    )


def _distance_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    pricing = ctx.matrix.distance_pricing
    distance = Decimal(str(ctx.factors.distance_from_branch))
    if distance <= pricing.base_miles:
        return None
    extra_miles = distance - pricing.base_miles
    charge = min(_round_minor(extra_miles * pricing.per_mile_charge), pricing.max_charge)
    if charge <= 0:
        return None
    return PriceAdjustment(
        name="Travel Distance",
        type=AdjustmentType.FIXED,
        value=Decimal(charge),
        impact=charge,
        description=f"{_plain(distance)} miles ({_plain(extra_miles)} miles over base)",
    )


def _time_surcharge(
    ctx: _PricingContext,
    *,
    applies: bool,
    percent: Decimal,
    name: str,
    description: str,
) -> PriceAdjustment | None:
    if not applies or percent <= 0:
        return None
    impact = _percent_of(ctx.base_price, percent)
    if impact == 0:
        return None
    return PriceAdjustment(
        name=name,
        type=AdjustmentType.MULTIPLIER,
        value=percent,
        impact=impact,
        description=description,
    )


def _rush_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    return _time_surcharge(
        ctx,
        applies=ctx.factors.is_rush,
        percent=ctx.matrix.rush_surcharge_percent,
        name="Rush Service",
        description="Same-day or next-day service",
    )


def _after_hours_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    return _time_surcharge(
        ctx,
        applies=ctx.factors.is_after_hours,
        percent=ctx.matrix.after_hours_surcharge_percent,
        name="After Hours",
        description="After regular business hours",
    )


def _weekend_adjustment(ctx: _PricingContext) -> PriceAdjustment | None:
    return _time_surcharge(
        ctx,
        applies=ctx.factors.is_weekend,
        percent=ctx.matrix.weekend_surcharge_percent,
        name="Weekend Service",
        description="Weekend service",
    )


def _frequency_discount(ctx: _PricingContext) -> PriceAdjustment | None:
    frequency = ctx.factors.frequency
    percent = _lookup(ctx.matrix.frequency_discounts, frequency, "frequency_discounts")
    # Package plan prices are already set per cadence.
    if not ctx.is_recurring or ctx.uses_package_rate or frequency == ServiceFrequency.ONE_TIME:
        return None
    discount = _percent_of(ctx.base_price, percent)
    if discount <= 0:
        return None
    return PriceAdjustment(
        name="Frequency Discount",
        type=AdjustmentType.DISCOUNT,
        value=percent,
        impact=-discount,
        description=f"{_plain(percent)}% off for {FREQUENCY_LABELS.get(frequency, frequency.value)} service",
    )


def _contract_discount(ctx: _PricingContext) -> PriceAdjustment | None:
    months = ctx.factors.contract_length_months
    if not months:
        return None
    tiers = sorted(ctx.matrix.contract_discount_tiers, key=lambda tier: tier.min_months, reverse=True)
    tier = next((tier for tier in tiers if months >= tier.min_months), None)
    if tier is None:
        return None
    # Against the running subtotal so earlier discounts are not discounted twice.
    discount = _percent_of(max(ctx.running_subtotal, 0), tier.percent)
    if discount <= 0:
        return None
    return PriceAdjustment(
        name=tier.name,
        type=AdjustmentType.DISCOUNT,
        value=tier.percent,
        impact=-discount,
        description=f"{months} month contract ({_plain(tier.percent)}% off)",
    )


PRICING_STEPS: tuple[Callable[[_PricingContext], Optional[PriceAdjustment]], ...] = (
    _property_type_adjustment,
    _size_tier_adjustment,
    _severity_adjustment,
    _seasonal_adjustment,
    _access_adjustment,
    _distance_adjustment,
    _rush_adjustment,
    _after_hours_adjustment,
    _weekend_adjustment,
    _frequency_discount,
    _contract_discount,
)


def _apply_bounds(
    subtotal: int,
    *,
    base_price: int,
    rate: PestRate,
    matrix: PricingMatrix,
) -> tuple[int, PriceClamp | None]:
    floor = _percent_of(base_price, matrix.minimum_price_percent_of_base)
    lower = max(0, rate.min_price or 0, floor)
    upper = rate.max_price

    if upper is not None and subtotal > upper:
        return upper, PriceClamp(
            bound="maximum",
            bound_amount=upper,
            unclamped_amount=subtotal,
            note=f"Price capped at plan maximum of {format_currency(upper)}",
        )
    if subtotal < lower:
        # A configured maximum below the floor still caps the price.
        clamped = lower if upper is None else min(lower, upper)
        return clamped, PriceClamp(
            bound="minimum",
            bound_amount=clamped,
            unclamped_amount=subtotal,
            note=f"Price adjusted to plan minimum of {format_currency(clamped)}",
        )
    return subtotal, None


def visits_per_year(frequency: ServiceFrequency, matrix: PricingMatrix, *, is_recurring: bool) -> int:
    if frequency == ServiceFrequency.CUSTOM:
        return matrix.custom_visits_per_year
    if frequency == ServiceFrequency.ONE_TIME:
        return 0 if is_recurring else 1
    return VISITS_PER_YEAR[frequency]


def calculate_price(
    factors: PricingFactors,
    matrix: PricingMatrix,
    is_recurring: bool | None = None,
    *,
    package_rate: int | None = None,
) -> CalculatedPrice:
    """Price one service visit from the given factors.

    The steps in PRICING_STEPS run in order against the base price; only the
    contract discount reads the running subtotal. ``is_recurring`` defaults to
    whether the frequency repeats. ``package_rate`` replaces the matrix rate
    with a package plan price and skips the frequency discount.

    Raises PricingValidationError for out-of-range factors and
    ConfigurationError when the matrix cannot price the request.
    """
    _validate_factors(factors)
    if is_recurring is None:
        is_recurring = factors.frequency != ServiceFrequency.ONE_TIME

    try:
        rate = _lookup(matrix.pest_base_prices, factors.pest_type, "pest_base_prices")
        base_price = _resolve_base_price(
            factors,
            matrix,
            rate,
            is_recurring=is_recurring,
            package_rate=package_rate,
        )
        ctx = _PricingContext(
            factors=factors,
            matrix=matrix,
            is_recurring=is_recurring,
            uses_package_rate=package_rate is not None,
            base_price=base_price,
        )
        for step in PRICING_STEPS:
            adjustment = step(ctx)
            if adjustment is not None:
                ctx.adjustments.append(adjustment)
    except ConfigurationError as exc:
        logger.error("Pricing configuration error: %s details=%s", exc.message, exc.details)
        raise

    subtotal = ctx.running_subtotal
    suggested_price, clamp = _apply_bounds(subtotal, base_price=base_price, rate=rate, matrix=matrix)
    if clamp is not None:
        logger.info(
            "Suggested price clamped to %s bound: %s -> %s (pest=%s)",
            clamp.bound,
            subtotal,
            suggested_price,
            factors.pest_type.value,
        )

    visits = visits_per_year(factors.frequency, matrix, is_recurring=is_recurring)
    if factors.frequency == ServiceFrequency.ONE_TIME:
        annual_value = suggested_price
    else:
        annual_value = suggested_price * visits

    return CalculatedPrice(
        base_price=base_price,
        adjustments=ctx.adjustments,
        subtotal=subtotal,
        suggested_price=suggested_price,
        price_per_visit=suggested_price,
        visits_per_year=visits,
        annual_value=annual_value,
        currency=matrix.currency,
        clamp=clamp,
    )


def _severity_for(findings: list[PestFinding], pest_type: PestType) -> InfestationSeverity:
    for finding in findings:
        if finding.pest_type == pest_type:
            return finding.severity
    if findings:
        return findings[0].severity
    return InfestationSeverity.LIGHT


def generate_quick_estimate(
    assessment: PropertyAssessment,
    pest_type: PestType = PestType.GENERAL,
    frequency: ServiceFrequency = ServiceFrequency.QUARTERLY,
    matrix: PricingMatrix | None = None,
    *,
    service_month: int | None = None,
) -> CalculatedPrice:
    """Price a service straight from a (possibly partial) property assessment."""
    factors = PricingFactors(
        property_type=assessment.property_type or PropertyType.SINGLE_FAMILY,
        square_footage=assessment.square_footage if assessment.square_footage is not None else 2000,
        pest_type=pest_type,
        severity=_severity_for(assessment.pest_findings, pest_type),
        frequency=frequency,
        access_difficulty=assessment.access_difficulty or AccessDifficulty.EASY,
        distance_from_branch=assessment.distance_from_branch or 0,
        number_of_units=assessment.number_of_units,
        service_month=service_month,
    )
    return calculate_price(factors, matrix or DEFAULT_PRICING_MATRIX)


def format_price_breakdown(price: CalculatedPrice) -> str:
    lines = [f"Base Price: {format_currency(price.base_price)}"]
    for adjustment in price.adjustments:
        sign = "+" if adjustment.impact >= 0 else ""
        line = f"{adjustment.name}: {sign}{format_currency(adjustment.impact)}"
        if adjustment.description:
            line += f" ({adjustment.description})"
        lines.append(line)

    lines.append("")
    lines.append(f"Total: {format_currency(price.suggested_price)}")
    if price.clamp is not None:
        lines.append(price.clamp.note)
    if price.visits_per_year > 1:
        lines.append(
            f"Annual Value: {format_currency(price.annual_value)} ({price.visits_per_year} visits/year)"
        )
    return "\n".join(lines)
