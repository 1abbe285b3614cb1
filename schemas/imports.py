from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Any
from enum import Enum



class PropertyType(str, Enum):
    SINGLE_FAMILY = "single_family"
    MULTI_FAMILY = "multi_family"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    MOBILE_HOME = "mobile_home"
    COMMERCIAL_OFFICE = "commercial_office"
    COMMERCIAL_RETAIL = "commercial_retail"
    COMMERCIAL_RESTAURANT = "commercial_restaurant"
    COMMERCIAL_WAREHOUSE = "commercial_warehouse"
    COMMERCIAL_INDUSTRIAL = "commercial_industrial"
    COMMERCIAL_MEDICAL = "commercial_medical"
    AGRICULTURAL = "agricultural"
    OTHER = "other"


class PestType(str, Enum):
    ANTS = "ants"
    ROACHES = "roaches"
    SPIDERS = "spiders"
    TERMITES = "termites"
    BED_BUGS = "bed_bugs"
    MICE = "mice"
    RATS = "rats"
    MOSQUITOES = "mosquitoes"
    FLEAS = "fleas"
    TICKS = "ticks"
    WASPS = "wasps"
    BEES = "bees"
    SILVERFISH = "silverfish"
    CENTIPEDES = "centipedes"
    EARWIGS = "earwigs"
    CRICKETS = "crickets"
    FLIES = "flies"
    GNATS = "gnats"
    MOTHS = "moths"
    BEETLES = "beetles"
    SCORPIONS = "scorpions"
    RACCOONS = "raccoons"
    SQUIRRELS = "squirrels"
    BIRDS = "birds"
    SNAKES = "snakes"
    OTHER_WILDLIFE = "other_wildlife"
    GENERAL = "general"


class InfestationSeverity(str, Enum):
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"


class ServiceFrequency(str, Enum):
    ONE_TIME = "one_time"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
    BI_MONTHLY = "bi_monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    CUSTOM = "custom"


class AccessDifficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    REQUIRES_EQUIPMENT = "requires_equipment"


class PackageTier(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"
    CUSTOM = "custom"


class AdjustmentType(str, Enum):
    MULTIPLIER = "multiplier"
    FIXED = "fixed"
    DISCOUNT = "discount"


# Declaration order is the ordinal order for the ranked enums.
SEVERITY_ORDER: tuple[InfestationSeverity, ...] = tuple(InfestationSeverity)
ACCESS_DIFFICULTY_ORDER: tuple[AccessDifficulty, ...] = tuple(AccessDifficulty)
PACKAGE_TIER_ORDER: tuple[PackageTier, ...] = tuple(PackageTier)
