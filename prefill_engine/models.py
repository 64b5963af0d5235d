from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PropertyType(str, Enum):
    UNKNOWN = "unknown"
    GAS_STATION = "gas_station"
    VACANT_LAND = "vacant_land"
    WRONG_BUSINESS_TYPE = "wrong_business_type"
    OFFICE_BUILDING = "office_building"


class OwnershipStatus(str, Enum):
    OWNER = "owner"
    TENANT = "tenant"
    UNKNOWN = "unknown"


class Verdict(BaseModel):
    """Immutable verdict serialized with camelCase keys for the form UI."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class ValidationVerdict(Verdict):
    """Whether the parcel looks like an operating c-store or gas station."""

    is_valid: bool = True
    confidence: Confidence = Confidence.HIGH
    property_type: PropertyType = PropertyType.UNKNOWN
    warnings: Tuple[str, ...] = Field(default=())
    info: Tuple[str, ...] = Field(default=())


class OwnershipVerdict(Verdict):
    """Whether the applicant business owns the parcel or rents space on it."""

    status: OwnershipStatus = OwnershipStatus.UNKNOWN
    matched_name: Optional[str] = None
    registry_business_name: Optional[str] = None
