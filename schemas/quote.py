# ============================================================================
# QUOTE PRICING SCHEMA
# ============================================================================

from schemas.imports import *
from schemas.service_package import ServicePackage
from typing import Literal


class PricingFactors(BaseModel):
    # Numeric domains are enforced by the calculator so that out-of-range input
    # surfaces as a pricing validation error rather than a parse failure.
    model_config = ConfigDict(frozen=True)

    property_type: PropertyType
    square_footage: int
    pest_type: PestType
    severity: InfestationSeverity
    frequency: ServiceFrequency
    access_difficulty: AccessDifficulty = AccessDifficulty.EASY
    distance_from_branch: float = 0
    is_rush: bool = False
    is_after_hours: bool = False
    is_weekend: bool = False
    contract_length_months: Optional[int] = None
    number_of_units: Optional[int] = None
    service_month: Optional[int] = None


class PriceAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: AdjustmentType
    value: Decimal
    impact: int
    description: Optional[str] = None


class PriceClamp(BaseModel):
    model_config = ConfigDict(frozen=True)

    bound: Literal["minimum", "maximum"]
    bound_amount: int
    unclamped_amount: int
    note: str


class CalculatedPrice(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_price: int
    adjustments: List[PriceAdjustment] = Field(default_factory=list)
    subtotal: int
    suggested_price: int
    price_per_visit: int
    visits_per_year: int
    annual_value: int
    currency: str = "USD"
    clamp: Optional[PriceClamp] = None

    @property
    def total_adjustments(self) -> int:
        return sum(adjustment.impact for adjustment in self.adjustments)

    @property
    def was_clamped(self) -> bool:
        return self.clamp is not None


class ComparisonPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    feature: str
    included: dict[PackageTier, bool]


class TieredQuoteOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: PackageTier
    name: str
    package: ServicePackage
    calculated_price: CalculatedPrice
    is_recommended: bool = False
    covers_requested_pest: bool = True
    comparison_points: List[ComparisonPoint] = Field(default_factory=list)


class PestFinding(BaseModel):
    pest_type: PestType
    severity: InfestationSeverity
    locations: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class PropertyAssessment(BaseModel):
    property_type: Optional[PropertyType] = None
    square_footage: Optional[int] = None
    number_of_units: Optional[int] = None
    access_difficulty: Optional[AccessDifficulty] = None
    distance_from_branch: Optional[float] = None
    pest_findings: List[PestFinding] = Field(default_factory=list)


class PriceCalculationRequest(BaseModel):
    factors: PricingFactors
    is_recurring: Optional[bool] = None


class TieredOptionsRequest(BaseModel):
    factors: PricingFactors
    package_ids: Optional[List[str]] = None


class QuickEstimateRequest(BaseModel):
    assessment: PropertyAssessment = Field(default_factory=PropertyAssessment)
    pest_type: PestType = PestType.GENERAL
    frequency: ServiceFrequency = ServiceFrequency.QUARTERLY
    service_month: Optional[int] = None
