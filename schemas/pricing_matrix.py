from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schemas.imports import (
    ACCESS_DIFFICULTY_ORDER,
    SEVERITY_ORDER,
    AccessDifficulty,
    InfestationSeverity,
    PestType,
    PropertyType,
    ServiceFrequency,
)

Cents = Annotated[int, Field(ge=0)]
Percent = Annotated[Decimal, Field(ge=0, le=100)]
Multiplier = Annotated[Decimal, Field(gt=0)]


class PestRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    inspection: Cents = 0
    one_time: Cents
    recurring: Cents
    per_sq_ft: Cents = 0
    min_price: Cents | None = None
    max_price: Cents | None = None

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self


class SizeTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_sq_ft: int = Field(ge=0)
    max_sq_ft: int | None = Field(default=None, ge=0)
    multiplier: Multiplier
    additional_fee: Cents = 0

    @model_validator(mode="after")
    def validate_range(self):
        if self.max_sq_ft is not None and self.max_sq_ft < self.min_sq_ft:
            raise ValueError("max_sq_ft must not be below min_sq_ft")
        return self

    def contains(self, square_footage: int) -> bool:
        if square_footage < self.min_sq_ft:
            return False
        return self.max_sq_ft is None or square_footage <= self.max_sq_ft


class DistancePricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_miles: Decimal = Field(ge=0)
    per_mile_charge: Cents
    max_charge: Cents


class SeasonalAdjustment(BaseModel):
    """A month window in which a pest (or every pest, when ``pest_type`` is None) costs more.

    ``start_month`` may be after ``end_month`` for a window that wraps the year end.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    pest_type: PestType | None = None
    start_month: int = Field(ge=1, le=12)
    end_month: int = Field(ge=1, le=12)
    multiplier: Multiplier

    def applies_to(self, pest_type: PestType, month: int) -> bool:
        if self.pest_type is not None and self.pest_type != pest_type:
            return False
        if self.start_month <= self.end_month:
            return self.start_month <= month <= self.end_month
        return month >= self.start_month or month <= self.end_month


class ContractDiscountTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    min_months: int = Field(ge=1)
    percent: Percent


class MultiUnitPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    discount_per_unit_percent: Percent = Decimal("5")
    max_discount_percent: Decimal = Field(default=Decimal("30"), ge=0, lt=100)


class PricingMatrix(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency: str = "USD"
    pest_base_prices: dict[PestType, PestRate]
    property_type_multipliers: dict[PropertyType, Multiplier]
    severity_multipliers: dict[InfestationSeverity, Multiplier]
    frequency_discounts: dict[ServiceFrequency, Percent]
    access_surcharges: dict[AccessDifficulty, Cents]
    size_tiers: list[SizeTier] = Field(min_length=1)
    base_square_footage: int = Field(default=2000, ge=0)
    distance_pricing: DistancePricing
    seasonal_adjustments: list[SeasonalAdjustment] = Field(default_factory=list)
    contract_discount_tiers: list[ContractDiscountTier] = Field(default_factory=list)
    multi_unit_policy: MultiUnitPolicy = Field(default_factory=MultiUnitPolicy)
    rush_surcharge_percent: Percent
    after_hours_surcharge_percent: Percent
    weekend_surcharge_percent: Percent
    minimum_price_percent_of_base: Percent = Decimal("50")
    custom_visits_per_year: int = Field(default=4, ge=1)

    @model_validator(mode="after")
    def validate_ordinal_tables(self):
        previous: Decimal | None = None
        for severity in SEVERITY_ORDER:
            multiplier = self.severity_multipliers.get(severity)
            if multiplier is None:
                continue
            if multiplier < 1:
                raise ValueError(f"severity multiplier for '{severity.value}' must be at least 1")
            if previous is not None and multiplier < previous:
                raise ValueError("severity multipliers must not decrease as severity increases")
            previous = multiplier

        previous_surcharge: int | None = None
        for difficulty in ACCESS_DIFFICULTY_ORDER:
            surcharge = self.access_surcharges.get(difficulty)
            if surcharge is None:
                continue
            if previous_surcharge is not None and surcharge < previous_surcharge:
                raise ValueError("access surcharges must not decrease as access gets harder")
            previous_surcharge = surcharge
        return self

    @model_validator(mode="after")
    def validate_size_tiers(self):
        for index, tier in enumerate(self.size_tiers):
            if tier.max_sq_ft is None and index != len(self.size_tiers) - 1:
                raise ValueError("only the last size tier may be open-ended")
            if index == 0:
                continue
            previous = self.size_tiers[index - 1]
            if previous.max_sq_ft is not None and tier.min_sq_ft <= previous.max_sq_ft:
                raise ValueError("size tiers must be sorted and must not overlap")
        return self

    @model_validator(mode="after")
    def validate_contract_tiers(self):
        months = [tier.min_months for tier in self.contract_discount_tiers]
        if len(months) != len(set(months)):
            raise ValueError("contract discount tiers must have distinct min_months")
        return self

    def missing_keys(self) -> dict[str, list[str]]:
        """Enum members without an entry, per keyed table. Empty when the matrix is exhaustive."""
        tables = {
            "pest_base_prices": (self.pest_base_prices, PestType),
            "property_type_multipliers": (self.property_type_multipliers, PropertyType),
            "severity_multipliers": (self.severity_multipliers, InfestationSeverity),
            "frequency_discounts": (self.frequency_discounts, ServiceFrequency),
            "access_surcharges": (self.access_surcharges, AccessDifficulty),
        }
        missing: dict[str, list[str]] = {}
        for table_name, (table, enum_cls) in tables.items():
            absent = [member.value for member in enum_cls if member not in table]
            if absent:
                missing[table_name] = absent
        return missing
