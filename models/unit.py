# models/unit.py

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from models.enums import BulkUnitAction, UnitStatus


DEFAULT_UNIT_TYPE = "residential"


def _clean_str(value):
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return str(value)


def _clean_emails(value):
    if not value:
        return []
    return [e.strip().lower() for e in value if isinstance(e, str) and e.strip()]


# ======================================================
# GENERATED UNIT (engine output / upsert row)
# ======================================================

class GeneratedUnit(BaseModel):
    """One row of the `units` table; `(condo_id, unit_number)` is the natural key."""

    condo_id: str
    unit_number: str
    floor_number: Optional[int] = None
    block_number: Optional[str] = None
    unit_type: str = DEFAULT_UNIT_TYPE
    status: str = UnitStatus.vacant.value
    excluded: bool = False
    resident_emails: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    def to_row(self) -> dict:
        return self.model_dump()


# ======================================================
# DIRECT CREATE (POST body → units[])
# ======================================================

class UnitCreate(BaseModel):
    unit_number: str
    block_number: Optional[str] = None
    floor_number: Optional[int] = None
    unit_type: Optional[str] = None
    status: Optional[UnitStatus] = None
    excluded: Optional[bool] = False
    resident_emails: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("unit_number", mode="before")
    def validate_unit_number(cls, v):
        cleaned = _clean_str(v)
        if cleaned is None:
            raise ValueError("unit_number is required")
        return cleaned

    @field_validator("block_number", "notes", "unit_type", mode="before")
    def blank_to_none(cls, v):
        return _clean_str(v)

    @field_validator("resident_emails", mode="before")
    def validate_emails(cls, v):
        return _clean_emails(v)

    def to_generated(self, condo_id: str) -> GeneratedUnit:
        return GeneratedUnit(
            condo_id=condo_id,
            unit_number=self.unit_number,
            floor_number=self.floor_number,
            block_number=self.block_number,
            unit_type=self.unit_type or DEFAULT_UNIT_TYPE,
            status=(self.status or UnitStatus.vacant).value,
            excluded=bool(self.excluded),
            resident_emails=self.resident_emails or [],
            notes=self.notes,
        )


class GenerateUnitsRequest(BaseModel):
    """Either generate from a stored configuration or insert the given units."""

    configuration_id: Optional[str] = None
    units: Optional[List[UnitCreate]] = None

    @field_validator("configuration_id", mode="before")
    def blank_configuration_id(cls, v):
        return _clean_str(v)


class GenerateUnitsResponse(BaseModel):
    units_created: int
    units_skipped: int = 0
    message: str

    # rows inserted by a direct `units` request
    units: Optional[List[dict]] = None


# ======================================================
# UPDATE (single unit PUT)
# ======================================================

class UnitUpdate(BaseModel):
    unit_number: Optional[str] = None
    block_number: Optional[str] = None
    floor_number: Optional[int] = None
    unit_type: Optional[str] = None
    status: Optional[UnitStatus] = None
    excluded: Optional[bool] = None
    notes: Optional[str] = None
    resident_emails: Optional[List[str]] = None

    @field_validator("resident_emails", mode="before")
    def validate_emails(cls, v):
        return None if v is None else _clean_emails(v)

    def changes(self) -> dict:
        """Only fields the caller sent, enums flattened to their values."""
        return self.model_dump(exclude_unset=True, mode="json")


# ======================================================
# BULK UPDATE (PUT /properties/{condo_id}/units)
# ======================================================

class BulkAction(BaseModel):
    action: BulkUnitAction
    unit_numbers: List[str]
    value: Optional[str] = None

    @model_validator(mode="after")
    def value_required_for_setters(self):
        if self.action in (BulkUnitAction.set_status, BulkUnitAction.set_type) and not self.value:
            raise ValueError(f"'value' is required for the '{self.action.value}' action")
        if self.action == BulkUnitAction.set_status and self.value not in UnitStatus.list():
            raise ValueError(f"status must be one of: {', '.join(UnitStatus.list())}")
        return self

    def update_data(self) -> dict:
        if self.action == BulkUnitAction.exclude:
            return {"excluded": True}
        if self.action == BulkUnitAction.include:
            return {"excluded": False}
        if self.action == BulkUnitAction.set_status:
            return {"status": self.value}
        return {"unit_type": self.value}


class UnitUpdateItem(UnitUpdate):
    unit_id: str


class UnitBulkUpdateRequest(BaseModel):
    bulk_action: Optional[BulkAction] = None
    unit_updates: Optional[List[UnitUpdateItem]] = None
