from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schemas.imports import PackageTier, PestType, PropertyType, ServiceFrequency


class PackageService(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_id: str
    name: str
    description: str
    frequency: ServiceFrequency
    is_included: bool = True
    is_optional: bool = False
    additional_cost: int | None = Field(default=None, ge=0)


class ServicePackage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    tier: PackageTier
    description: str = ""
    short_description: str = ""
    services: list[PackageService] = Field(default_factory=list)
    base_price: int | None = Field(default=None, ge=0)
    frequency: ServiceFrequency
    setup_fee: int | None = Field(default=None, ge=0)
    savings: int | None = Field(default=None, ge=0)
    savings_percent: int | None = Field(default=None, ge=0, le=100)
    covered_pests: list[PestType] = Field(default_factory=list)
    excluded_pests: list[PestType] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    guarantees: list[str] = Field(default_factory=list)
    is_popular: bool = False
    color: str | None = None
    icon: str | None = None
    is_active: bool = True
    property_types: list[PropertyType] | None = None
    min_sq_ft: int | None = Field(default=None, ge=0)
    max_sq_ft: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_coverage(self):
        overlap = set(self.covered_pests) & set(self.excluded_pests)
        if overlap:
            names = ", ".join(sorted(pest.value for pest in overlap))
            raise ValueError(f"pests cannot be both covered and excluded: {names}")
        if self.min_sq_ft is not None and self.max_sq_ft is not None and self.min_sq_ft > self.max_sq_ft:
            raise ValueError("min_sq_ft must not exceed max_sq_ft")
        return self

    def covers(self, pest_type: PestType) -> bool:
        if pest_type == PestType.GENERAL or not self.covered_pests:
            return pest_type not in self.excluded_pests
        return pest_type in self.covered_pests

    def is_available_for(self, *, property_type: PropertyType, square_footage: int) -> bool:
        if not self.is_active:
            return False
        if self.property_types is not None and property_type not in self.property_types:
            return False
        if self.min_sq_ft is not None and square_footage < self.min_sq_ft:
            return False
        if self.max_sq_ft is not None and square_footage > self.max_sq_ft:
            return False
        return True
