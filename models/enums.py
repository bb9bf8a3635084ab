from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# USER ROLE
# -----------------------------------------------------
class UserRole(BaseStrEnum):
    """Dashboard a signed-in user lands on."""

    platform_admin = "platform_admin"
    management = "management"
    security = "security"
    resident = "resident"
    visitor = "visitor"


# -----------------------------------------------------
# NAMING SCHEME TYPE
# -----------------------------------------------------
class NamingSchemeType(BaseStrEnum):
    """How unit identifiers are rendered from block/floor/position."""

    standard = "standard"
    analyze_existing = "analyze_existing"


# -----------------------------------------------------
# UNIT STATUS
# -----------------------------------------------------
class UnitStatus(BaseStrEnum):
    vacant = "vacant"
    occupied = "occupied"
    maintenance = "maintenance"
    reserved = "reserved"


# -----------------------------------------------------
# BULK UNIT ACTION
# -----------------------------------------------------
class BulkUnitAction(BaseStrEnum):
    """Actions accepted by PUT /properties/{condo_id}/units."""

    exclude = "exclude"
    include = "include"
    set_status = "status"
    set_type = "type"
