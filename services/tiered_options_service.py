from __future__ import annotations

import logging

from core.pricing_rules import COMPARISON_FEATURES
from schemas.imports import PACKAGE_TIER_ORDER, PackageTier, PestType, ServiceFrequency
from schemas.pricing_matrix import PricingMatrix
from schemas.quote import ComparisonPoint, PricingFactors, TieredQuoteOption
from schemas.service_package import ServicePackage
from services.pricing_service import calculate_price

logger = logging.getLogger(__name__)


def _effective_factors(factors: PricingFactors, package: ServicePackage) -> tuple[PricingFactors, bool]:
    covers = package.covers(factors.pest_type)
    pest_type = factors.pest_type if covers else PestType.GENERAL
    return factors.model_copy(update={"frequency": package.frequency, "pest_type": pest_type}), covers


def _recommended_index(packages: list[ServicePackage]) -> int | None:
    if not packages:
        return None
    for index, package in enumerate(packages):
        if package.is_popular:
            return index
    # Stable sort keeps supplied order within a tier; lower middle for even counts.
    by_tier = sorted(range(len(packages)), key=lambda i: PACKAGE_TIER_ORDER.index(packages[i].tier))
    return by_tier[(len(by_tier) - 1) // 2]


def _feature_included(package: ServicePackage, feature: str) -> bool:
    needle = feature.lower()
    return any(needle in item.lower() for item in (*package.features, *package.guarantees))


def build_comparison_points(
    packages: list[ServicePackage],
    features: tuple[str, ...] = COMPARISON_FEATURES,
) -> list[ComparisonPoint]:
    points: list[ComparisonPoint] = []
    for feature in features:
        included: dict[PackageTier, bool] = {}
        for package in packages:
            included[package.tier] = included.get(package.tier, False) or _feature_included(package, feature)
        points.append(ComparisonPoint(feature=feature, included=included))
    return points


def calculate_tiered_options(
    factors: PricingFactors,
    packages: list[ServicePackage],
    matrix: PricingMatrix,
) -> list[TieredQuoteOption]:
    """Price the same job once per package, in the order the packages were supplied.

    Inactive packages and packages unavailable for the property are skipped.
    Each package fixes the frequency, and prices general pest service when it
    does not cover the requested pest. Exactly one option is recommended.
    """
    eligible = [
        package
        for package in packages
        if package.is_available_for(
            property_type=factors.property_type,
            square_footage=factors.square_footage,
        )
    ]
    skipped = len(packages) - len(eligible)
    if skipped:
        logger.debug("Skipped %s unavailable package(s) for %s", skipped, factors.property_type.value)

    recommended = _recommended_index(eligible)
    comparison_points = build_comparison_points(eligible)

    options: list[TieredQuoteOption] = []
    for index, package in enumerate(eligible):
        package_factors, covers = _effective_factors(factors, package)
        price = calculate_price(
            package_factors,
            matrix,
            package.frequency != ServiceFrequency.ONE_TIME,
            package_rate=package.base_price,
        )
        options.append(
            TieredQuoteOption(
                tier=package.tier,
                name=package.name,
                package=package,
                calculated_price=price,
                is_recommended=index == recommended,
                covers_requested_pest=covers,
                comparison_points=comparison_points,
            )
        )
    return options
