# models/property_configuration.py

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from models.enums import NamingSchemeType


# ======================================================
# Helpers
# ======================================================

def _parse_timestamp(value):
    if isinstance(value, str) and value.endswith("Z"):
        return value.replace("Z", "+00:00")
    return value


def _string_map(value):
    # Older rows store {"residential": true}; only name → type strings count
    if not value:
        return {}
    if not isinstance(value, dict):
        raise ValueError("unit_types must be an object of unit_number → unit_type")
    return {str(k): v for k, v in value.items() if isinstance(v, str)}


def _string_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v) for v in value]


# ======================================================
# NAMING SCHEME
# ======================================================

class NamingScheme(BaseModel):
    """
    Template for rendering unit identifiers.

    Formats are digit-count templates: "##" pads to two digits, "###" to
    three. A format without "#" disables padding for that segment.
    """

    scheme_type: NamingSchemeType = NamingSchemeType.standard

    block_prefix: str = ""
    floor_prefix: str = ""
    unit_prefix: str = ""

    block_format: str = "##"
    floor_format: str = "##"
    unit_format: str = "##"

    start_floor: int = 1
    start_unit: int = 1

    # Set by the "analyze existing units" flow; switches to A-3A-1 style names
    detected_pattern: Optional[str] = None

    @field_validator("block_prefix", "floor_prefix", "unit_prefix", mode="before")
    def none_prefix_is_empty(cls, v):
        return "" if v is None else v

    @field_validator("block_format", "floor_format", "unit_format", mode="before")
    def none_format_is_default(cls, v):
        return "##" if v is None else v

    @field_validator("start_floor", "start_unit", mode="before")
    def none_start_is_one(cls, v):
        return 1 if v in (None, "") else v

    @property
    def uses_detected_pattern(self) -> bool:
        return self.scheme_type == NamingSchemeType.analyze_existing and bool(self.detected_pattern)


# ======================================================
# PROPERTY CONFIGURATION
# ======================================================

class PropertyConfigurationBase(BaseModel):
    """Physical layout of a property plus the rules for naming its units."""

    blocks: Optional[int] = Field(None, description="Number of blocks/towers (> 0)")
    floors_per_block: Optional[int] = Field(None, description="Floors in every block (> 0)")
    units_per_floor: Optional[int] = Field(None, description="Units on every floor (> 0)")

    naming_scheme: NamingScheme = Field(default_factory=NamingScheme)
    excluded_units: List[str] = Field(default_factory=list, description="Unit numbers never generated")
    unit_types: Dict[str, str] = Field(default_factory=dict, description="unit_number → unit_type overrides")
    special_floors: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("naming_scheme", mode="before")
    def empty_scheme_is_default(cls, v):
        return v or {}

    @field_validator("excluded_units", mode="before")
    def validate_excluded_units(cls, v):
        return _string_list(v)

    @field_validator("unit_types", mode="before")
    def validate_unit_types(cls, v):
        return _string_map(v)

    @field_validator("special_floors", mode="before")
    def validate_special_floors(cls, v):
        return v or {}


class PropertyConfigurationCreate(PropertyConfigurationBase):
    condo_id: str


class PropertyConfigurationUpdate(BaseModel):
    id: str
    blocks: Optional[int] = None
    floors_per_block: Optional[int] = None
    units_per_floor: Optional[int] = None
    naming_scheme: Optional[NamingScheme] = None
    excluded_units: Optional[List[str]] = None
    unit_types: Optional[Dict[str, str]] = None
    special_floors: Optional[Dict[str, Any]] = None

    @field_validator("unit_types", mode="before")
    def validate_unit_types(cls, v):
        return None if v is None else _string_map(v)

    @field_validator("excluded_units", mode="before")
    def validate_excluded_units(cls, v):
        return None if v is None else _string_list(v)


class PropertyConfigurationRead(PropertyConfigurationBase):
    id: str
    condo_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", "condo_id", mode="before")
    def normalize_id(cls, v):
        return str(v)

    @field_validator("created_at", "updated_at", mode="before")
    def normalize_timestamps(cls, v):
        return _parse_timestamp(v)
