from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from core.pricing_rules import DEFAULT_PRICING_MATRIX, DEFAULT_SERVICE_PACKAGES
from schemas.imports import InfestationSeverity, PackageTier, PestType, PropertyType, ServiceFrequency
from schemas.pricing_matrix import PricingMatrix, SeasonalAdjustment
from schemas.quote import PricingFactors
from schemas.service_package import ServicePackage
from services.pricing_service import calculate_price


def _matrix_payload() -> dict:
    return DEFAULT_PRICING_MATRIX.model_dump()


def test_default_matrix_covers_every_enum_member():
    assert DEFAULT_PRICING_MATRIX.missing_keys() == {}


def test_missing_keys_reports_absent_entries_per_table():
    payload = _matrix_payload()
    del payload["pest_base_prices"][PestType.TERMITES]
    del payload["frequency_discounts"][ServiceFrequency.CUSTOM]

    matrix = PricingMatrix.model_validate(payload)

    assert matrix.missing_keys() == {
        "pest_base_prices": ["termites"],
        "frequency_discounts": ["custom"],
    }


def test_severity_multipliers_must_not_decrease():
    payload = _matrix_payload()
    payload["severity_multipliers"][InfestationSeverity.SEVERE] = Decimal("1.2")

    with pytest.raises(ValidationError, match="must not decrease"):
        PricingMatrix.model_validate(payload)


def test_severity_multipliers_must_not_discount():
    payload = _matrix_payload()
    payload["severity_multipliers"][InfestationSeverity.NONE] = Decimal("0.5")

    with pytest.raises(ValidationError, match="at least 1"):
        PricingMatrix.model_validate(payload)


def test_size_tiers_must_not_overlap():
    payload = _matrix_payload()
    payload["size_tiers"][1]["min_sq_ft"] = 900

    with pytest.raises(ValidationError, match="must not overlap"):
        PricingMatrix.model_validate(payload)


def test_only_last_size_tier_may_be_open_ended():
    payload = _matrix_payload()
    payload["size_tiers"][0]["max_sq_ft"] = None

    with pytest.raises(ValidationError, match="open-ended"):
        PricingMatrix.model_validate(payload)


def test_contract_tiers_need_distinct_thresholds():
    payload = _matrix_payload()
    payload["contract_discount_tiers"][1]["min_months"] = 24

    with pytest.raises(ValidationError, match="distinct min_months"):
        PricingMatrix.model_validate(payload)


def test_rate_minimum_cannot_exceed_maximum():
    payload = _matrix_payload()
    payload["pest_base_prices"][PestType.GENERAL].update({"min_price": 5000, "max_price": 4000})

    with pytest.raises(ValidationError, match="min_price"):
        PricingMatrix.model_validate(payload)


def test_percentages_are_bounded():
    payload = _matrix_payload()
    payload["rush_surcharge_percent"] = Decimal("150")

    with pytest.raises(ValidationError):
        PricingMatrix.model_validate(payload)


def test_matrix_fields_cannot_be_reassigned():
    with pytest.raises(ValidationError):
        DEFAULT_PRICING_MATRIX.currency = "EUR"


def test_pricing_does_not_modify_the_matrix():
    before = DEFAULT_PRICING_MATRIX.model_dump()

    for severity in InfestationSeverity:
        calculate_price(
            PricingFactors(
                property_type=PropertyType.COMMERCIAL_OFFICE,
                square_footage=12000,
                pest_type=PestType.TERMITES,
                severity=severity,
                frequency=ServiceFrequency.MONTHLY,
                distance_from_branch=40,
                is_rush=True,
                contract_length_months=24,
                number_of_units=3,
                service_month=4,
            ),
            DEFAULT_PRICING_MATRIX,
        )

    assert DEFAULT_PRICING_MATRIX.model_dump() == before


@pytest.mark.parametrize(
    ("month", "expected"),
    [(11, True), (1, True), (2, False), (10, False)],
)
def test_seasonal_window_wraps_year_end(month, expected):
    season = SeasonalAdjustment(
        name="Rodent Season",
        pest_type=PestType.MICE,
        start_month=11,
        end_month=1,
        multiplier=Decimal("1.1"),
    )

    assert season.applies_to(PestType.MICE, month) is expected
    assert season.applies_to(PestType.RATS, 12) is False


def test_package_cannot_cover_and_exclude_same_pest():
    with pytest.raises(ValidationError, match="both covered and excluded"):
        ServicePackage(
            id="pkg-x",
            name="Conflicted",
            tier=PackageTier.CUSTOM,
            frequency=ServiceFrequency.MONTHLY,
            covered_pests=[PestType.ANTS],
            excluded_pests=[PestType.ANTS],
        )


def test_package_coverage_rules():
    basic, standard, premium = DEFAULT_SERVICE_PACKAGES

    assert basic.covers(PestType.GENERAL) is True
    assert basic.covers(PestType.ANTS) is True
    assert basic.covers(PestType.TERMITES) is False
    assert standard.covers(PestType.MOSQUITOES) is False
    assert premium.covers(PestType.TERMITES) is True


def test_package_without_covered_list_covers_anything_not_excluded():
    package = ServicePackage(
        id="pkg-open",
        name="Open Plan",
        tier=PackageTier.CUSTOM,
        frequency=ServiceFrequency.QUARTERLY,
        excluded_pests=[PestType.BED_BUGS],
    )

    assert package.covers(PestType.SCORPIONS) is True
    assert package.covers(PestType.BED_BUGS) is False


def test_package_availability_respects_property_and_size_limits():
    package = ServicePackage(
        id="pkg-commercial",
        name="Commercial Plan",
        tier=PackageTier.PREMIUM,
        frequency=ServiceFrequency.MONTHLY,
        property_types=[PropertyType.COMMERCIAL_OFFICE],
        min_sq_ft=1000,
        max_sq_ft=20000,
    )

    assert package.is_available_for(property_type=PropertyType.COMMERCIAL_OFFICE, square_footage=5000) is True
    assert package.is_available_for(property_type=PropertyType.CONDO, square_footage=5000) is False
    assert package.is_available_for(property_type=PropertyType.COMMERCIAL_OFFICE, square_footage=500) is False
    assert package.is_available_for(property_type=PropertyType.COMMERCIAL_OFFICE, square_footage=25000) is False
