from __future__ import annotations

from decimal import Decimal

from schemas.imports import (
    AccessDifficulty,
    InfestationSeverity,
    PackageTier,
    PestType,
    PropertyType,
    ServiceFrequency,
)
from schemas.pricing_matrix import (
    ContractDiscountTier,
    DistancePricing,
    MultiUnitPolicy,
    PestRate,
    PricingMatrix,
    SeasonalAdjustment,
    SizeTier,
)
from schemas.service_package import PackageService, ServicePackage


PEST_BASE_PRICES_MINOR: dict[PestType, PestRate] = {
    PestType.GENERAL: PestRate(one_time=17500, recurring=7500, per_sq_ft=3),
    PestType.ANTS: PestRate(one_time=15000, recurring=6500, per_sq_ft=2),
    PestType.ROACHES: PestRate(one_time=17500, recurring=7500, per_sq_ft=3),
    PestType.SPIDERS: PestRate(one_time=12500, recurring=5500, per_sq_ft=2),
    PestType.TERMITES: PestRate(inspection=15000, one_time=200000, recurring=15000, per_sq_ft=8),
    PestType.BED_BUGS: PestRate(inspection=20000, one_time=150000, recurring=50000, per_sq_ft=25),
    PestType.MICE: PestRate(inspection=10000, one_time=25000, recurring=7500, per_sq_ft=3),
    PestType.RATS: PestRate(inspection=10000, one_time=30000, recurring=10000, per_sq_ft=4),
    PestType.MOSQUITOES: PestRate(one_time=12500, recurring=8500, per_sq_ft=1),
    PestType.FLEAS: PestRate(inspection=5000, one_time=22500, recurring=12500, per_sq_ft=5),
    PestType.TICKS: PestRate(inspection=5000, one_time=20000, recurring=10000, per_sq_ft=4),
    PestType.WASPS: PestRate(one_time=17500, recurring=0),
    PestType.BEES: PestRate(one_time=25000, recurring=0),
    PestType.SILVERFISH: PestRate(one_time=12500, recurring=5000, per_sq_ft=2),
    PestType.CENTIPEDES: PestRate(one_time=12500, recurring=5000, per_sq_ft=2),
    PestType.EARWIGS: PestRate(one_time=12500, recurring=5000, per_sq_ft=2),
    PestType.CRICKETS: PestRate(one_time=12500, recurring=5000, per_sq_ft=2),
    PestType.FLIES: PestRate(one_time=15000, recurring=7500, per_sq_ft=2),
    PestType.GNATS: PestRate(one_time=12500, recurring=5000, per_sq_ft=2),
    PestType.MOTHS: PestRate(one_time=15000, recurring=7500, per_sq_ft=3),
    PestType.BEETLES: PestRate(one_time=15000, recurring=7500, per_sq_ft=3),
    PestType.SCORPIONS: PestRate(one_time=20000, recurring=10000, per_sq_ft=4),
    PestType.RACCOONS: PestRate(inspection=15000, one_time=35000, recurring=0),
    PestType.SQUIRRELS: PestRate(inspection=10000, one_time=30000, recurring=0),
    PestType.BIRDS: PestRate(inspection=10000, one_time=25000, recurring=0),
    PestType.SNAKES: PestRate(inspection=10000, one_time=25000, recurring=0),
    PestType.OTHER_WILDLIFE: PestRate(inspection=15000, one_time=35000, recurring=0),
}

PROPERTY_TYPE_MULTIPLIER: dict[PropertyType, Decimal] = {
    PropertyType.SINGLE_FAMILY: Decimal("1.0"),
    PropertyType.MULTI_FAMILY: Decimal("1.3"),
    PropertyType.APARTMENT: Decimal("0.85"),
    PropertyType.CONDO: Decimal("0.9"),
    PropertyType.TOWNHOUSE: Decimal("0.95"),
    PropertyType.MOBILE_HOME: Decimal("0.8"),
    PropertyType.COMMERCIAL_OFFICE: Decimal("1.4"),
    PropertyType.COMMERCIAL_RETAIL: Decimal("1.5"),
    PropertyType.COMMERCIAL_RESTAURANT: Decimal("1.8"),
    PropertyType.COMMERCIAL_WAREHOUSE: Decimal("1.6"),
    PropertyType.COMMERCIAL_INDUSTRIAL: Decimal("1.7"),
    PropertyType.COMMERCIAL_MEDICAL: Decimal("2.0"),
    PropertyType.AGRICULTURAL: Decimal("1.5"),
    PropertyType.OTHER: Decimal("1.0"),
}

# "none" is preventive-only service and carries no surcharge.
SEVERITY_MULTIPLIER: dict[InfestationSeverity, Decimal] = {
    InfestationSeverity.NONE: Decimal("1.0"),
    InfestationSeverity.LIGHT: Decimal("1.0"),
    InfestationSeverity.MODERATE: Decimal("1.35"),
    InfestationSeverity.SEVERE: Decimal("1.75"),
    InfestationSeverity.CRITICAL: Decimal("2.25"),
}

FREQUENCY_DISCOUNT_PERCENT: dict[ServiceFrequency, Decimal] = {
    ServiceFrequency.ONE_TIME: Decimal("0"),
    ServiceFrequency.WEEKLY: Decimal("25"),
    ServiceFrequency.BI_WEEKLY: Decimal("20"),
    ServiceFrequency.MONTHLY: Decimal("15"),
    ServiceFrequency.BI_MONTHLY: Decimal("10"),
    ServiceFrequency.QUARTERLY: Decimal("5"),
    ServiceFrequency.SEMI_ANNUAL: Decimal("0"),
    ServiceFrequency.ANNUAL: Decimal("0"),
    ServiceFrequency.CUSTOM: Decimal("0"),
}

ACCESS_SURCHARGE_MINOR: dict[AccessDifficulty, int] = {
    AccessDifficulty.EASY: 0,
    AccessDifficulty.MODERATE: 2500,
    AccessDifficulty.DIFFICULT: 5000,
    AccessDifficulty.REQUIRES_EQUIPMENT: 10000,
}

SIZE_TIERS: list[SizeTier] = [
    SizeTier(min_sq_ft=0, max_sq_ft=1000, multiplier=Decimal("0.8")),
    SizeTier(min_sq_ft=1001, max_sq_ft=2000, multiplier=Decimal("1.0")),
    SizeTier(min_sq_ft=2001, max_sq_ft=3000, multiplier=Decimal("1.15")),
    SizeTier(min_sq_ft=3001, max_sq_ft=4000, multiplier=Decimal("1.3")),
    SizeTier(min_sq_ft=4001, max_sq_ft=5000, multiplier=Decimal("1.45")),
    SizeTier(min_sq_ft=5001, max_sq_ft=7500, multiplier=Decimal("1.6")),
    SizeTier(min_sq_ft=7501, max_sq_ft=10000, multiplier=Decimal("1.8")),
    SizeTier(min_sq_ft=10001, max_sq_ft=None, multiplier=Decimal("2.0"), additional_fee=5000),
]

SEASONAL_ADJUSTMENTS: list[SeasonalAdjustment] = [
    SeasonalAdjustment(name="Mosquito Season", pest_type=PestType.MOSQUITOES, start_month=4, end_month=9, multiplier=Decimal("1.2")),
    SeasonalAdjustment(name="Ant Season", pest_type=PestType.ANTS, start_month=3, end_month=8, multiplier=Decimal("1.15")),
    SeasonalAdjustment(name="Wasp Season", pest_type=PestType.WASPS, start_month=5, end_month=9, multiplier=Decimal("1.25")),
    SeasonalAdjustment(name="Termite Swarm Season", pest_type=PestType.TERMITES, start_month=3, end_month=6, multiplier=Decimal("1.1")),
    SeasonalAdjustment(name="Summer Peak", pest_type=None, start_month=6, end_month=8, multiplier=Decimal("1.05")),
]

CONTRACT_DISCOUNT_TIERS: list[ContractDiscountTier] = [
    ContractDiscountTier(name="Long-Term Contract", min_months=24, percent=Decimal("15")),
    ContractDiscountTier(name="Annual Contract", min_months=12, percent=Decimal("10")),
]

DEFAULT_PRICING_MATRIX = PricingMatrix(
    currency="USD",
    pest_base_prices=PEST_BASE_PRICES_MINOR,
    property_type_multipliers=PROPERTY_TYPE_MULTIPLIER,
    severity_multipliers=SEVERITY_MULTIPLIER,
    frequency_discounts=FREQUENCY_DISCOUNT_PERCENT,
    access_surcharges=ACCESS_SURCHARGE_MINOR,
    size_tiers=SIZE_TIERS,
    base_square_footage=2000,
    distance_pricing=DistancePricing(base_miles=Decimal("15"), per_mile_charge=150, max_charge=7500),
    seasonal_adjustments=SEASONAL_ADJUSTMENTS,
    contract_discount_tiers=CONTRACT_DISCOUNT_TIERS,
    multi_unit_policy=MultiUnitPolicy(discount_per_unit_percent=Decimal("5"), max_discount_percent=Decimal("30")),
    rush_surcharge_percent=Decimal("25"),
    after_hours_surcharge_percent=Decimal("35"),
    weekend_surcharge_percent=Decimal("20"),
    minimum_price_percent_of_base=Decimal("50"),
    custom_visits_per_year=4,
)

VISITS_PER_YEAR: dict[ServiceFrequency, int] = {
    ServiceFrequency.ONE_TIME: 1,
    ServiceFrequency.WEEKLY: 52,
    ServiceFrequency.BI_WEEKLY: 26,
    ServiceFrequency.MONTHLY: 12,
    ServiceFrequency.BI_MONTHLY: 6,
    ServiceFrequency.QUARTERLY: 4,
    ServiceFrequency.SEMI_ANNUAL: 2,
    ServiceFrequency.ANNUAL: 1,
}

PROPERTY_TYPE_LABELS: dict[PropertyType, str] = {
    PropertyType.SINGLE_FAMILY: "Single Family Home",
    PropertyType.MULTI_FAMILY: "Multi-Family",
    PropertyType.APARTMENT: "Apartment",
    PropertyType.CONDO: "Condominium",
    PropertyType.TOWNHOUSE: "Townhouse",
    PropertyType.MOBILE_HOME: "Mobile Home",
    PropertyType.COMMERCIAL_OFFICE: "Commercial Office",
    PropertyType.COMMERCIAL_RETAIL: "Retail",
    PropertyType.COMMERCIAL_RESTAURANT: "Restaurant",
    PropertyType.COMMERCIAL_WAREHOUSE: "Warehouse",
    PropertyType.COMMERCIAL_INDUSTRIAL: "Industrial",
    PropertyType.COMMERCIAL_MEDICAL: "Medical Facility",
    PropertyType.AGRICULTURAL: "Agricultural",
    PropertyType.OTHER: "Other",
}

FREQUENCY_LABELS: dict[ServiceFrequency, str] = {
    ServiceFrequency.ONE_TIME: "One-Time",
    ServiceFrequency.WEEKLY: "Weekly",
    ServiceFrequency.BI_WEEKLY: "Bi-Weekly",
    ServiceFrequency.MONTHLY: "Monthly",
    ServiceFrequency.BI_MONTHLY: "Bi-Monthly",
    ServiceFrequency.QUARTERLY: "Quarterly",
    ServiceFrequency.SEMI_ANNUAL: "Semi-Annual",
    ServiceFrequency.ANNUAL: "Annual",
    ServiceFrequency.CUSTOM: "Custom",
}

COMPARISON_FEATURES: tuple[str, ...] = (
    "Interior & exterior treatment",
    "Exterior treatment",
    "Entry point sealing",
    "Re-treatment",
    "Termite monitoring",
    "Rodent",
    "Mosquito control",
    "24/7 emergency service",
)

DEFAULT_SERVICE_PACKAGES: list[ServicePackage] = [
    ServicePackage(
        id="pkg-basic",
        name="Basic Protection",
        tier=PackageTier.BASIC,
        description="Essential pest control for common household pests. Quarterly exterior perimeter treatment to keep pests out.",
        short_description="Quarterly exterior treatment",
        services=[
            PackageService(
                service_id="svc-general-quarterly",
                name="Quarterly Perimeter Treatment",
                description="Exterior treatment around the foundation and entry points",
                frequency=ServiceFrequency.QUARTERLY,
            ),
        ],
        base_price=9900,
        frequency=ServiceFrequency.QUARTERLY,
        covered_pests=[
            PestType.ANTS,
            PestType.SPIDERS,
            PestType.ROACHES,
            PestType.SILVERFISH,
            PestType.EARWIGS,
            PestType.CRICKETS,
        ],
        excluded_pests=[
            PestType.TERMITES,
            PestType.BED_BUGS,
            PestType.MICE,
            PestType.RATS,
            PestType.OTHER_WILDLIFE,
        ],
        features=[
            "Quarterly exterior treatment",
            "Entry point sealing",
            "Spider web removal",
            "Satisfaction guarantee",
        ],
        guarantees=["Free re-treatment within 30 days if pests return"],
        is_popular=False,
        color="#1976d2",
    ),
    ServicePackage(
        id="pkg-standard",
        name="Home Shield",
        tier=PackageTier.STANDARD,
        description="Comprehensive protection with interior and exterior treatments. Our most popular plan for complete home coverage.",
        short_description="Monthly interior & exterior protection",
        services=[
            PackageService(
                service_id="svc-general-monthly",
                name="Monthly Pest Control",
                description="Full interior and exterior treatment",
                frequency=ServiceFrequency.MONTHLY,
            ),
            PackageService(
                service_id="svc-rodent-monitoring",
                name="Rodent Monitoring",
                description="Exterior bait stations and monitoring",
                frequency=ServiceFrequency.MONTHLY,
            ),
        ],
        base_price=7900,
        frequency=ServiceFrequency.MONTHLY,
        covered_pests=[
            PestType.ANTS,
            PestType.SPIDERS,
            PestType.ROACHES,
            PestType.SILVERFISH,
            PestType.EARWIGS,
            PestType.CRICKETS,
            PestType.MICE,
            PestType.WASPS,
            PestType.FLEAS,
            PestType.TICKS,
        ],
        excluded_pests=[PestType.TERMITES, PestType.BED_BUGS],
        features=[
            "Monthly interior & exterior treatment",
            "Rodent monitoring stations",
            "Wasp nest removal",
            "Spider web removal",
            "Entry point sealing",
            "48-hour response guarantee",
            "Free re-treatments between visits",
        ],
        guarantees=[
            "Pest-free guarantee",
            "Unlimited free re-treatments",
            "48-hour response time",
        ],
        is_popular=True,
        color="#4caf50",
    ),
    ServicePackage(
        id="pkg-premium",
        name="Total Defense",
        tier=PackageTier.PREMIUM,
        description="Ultimate protection including termite monitoring, rodent exclusion, and priority 24/7 service. Peace of mind for your biggest investment.",
        short_description="Complete protection including termites",
        services=[
            PackageService(
                service_id="svc-general-monthly",
                name="Monthly Pest Control",
                description="Full interior and exterior treatment",
                frequency=ServiceFrequency.MONTHLY,
            ),
            PackageService(
                service_id="svc-termite-monitoring",
                name="Termite Monitoring System",
                description="Sentricon or similar bait station system",
                frequency=ServiceFrequency.QUARTERLY,
            ),
            PackageService(
                service_id="svc-rodent-exclusion",
                name="Rodent Exclusion",
                description="Comprehensive exclusion and monitoring",
                frequency=ServiceFrequency.MONTHLY,
            ),
            PackageService(
                service_id="svc-mosquito-seasonal",
                name="Seasonal Mosquito Control",
                description="Monthly treatment during mosquito season",
                frequency=ServiceFrequency.MONTHLY,
            ),
        ],
        base_price=14900,
        frequency=ServiceFrequency.MONTHLY,
        covered_pests=[
            PestType.ANTS,
            PestType.SPIDERS,
            PestType.ROACHES,
            PestType.SILVERFISH,
            PestType.EARWIGS,
            PestType.CRICKETS,
            PestType.MICE,
            PestType.RATS,
            PestType.WASPS,
            PestType.FLEAS,
            PestType.TICKS,
            PestType.TERMITES,
            PestType.MOSQUITOES,
            PestType.CENTIPEDES,
        ],
        features=[
            "Monthly interior & exterior treatment",
            "Termite monitoring system",
            "Complete rodent exclusion",
            "Seasonal mosquito control",
            "Priority 24/7 emergency service",
            "Same-day response",
            "Transferable to new owners",
            "Annual termite inspection report",
        ],
        guarantees=[
            "Complete pest-free guarantee",
            "$1 million termite damage warranty",
            "Same-day emergency response",
            "Unlimited service calls",
            "Price lock guarantee",
        ],
        is_popular=False,
        color="#9c27b0",
    ),
]
