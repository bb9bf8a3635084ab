# -------------------------
# Property Configuration Models
# -------------------------
from .property_configuration import (
    NamingScheme,
    PropertyConfigurationBase,
    PropertyConfigurationCreate,
    PropertyConfigurationRead,
    PropertyConfigurationUpdate,
)

# -------------------------
# Unit Models
# -------------------------
from .unit import (
    GeneratedUnit,
    UnitCreate,
    UnitUpdate,
    UnitUpdateItem,
    UnitBulkUpdateRequest,
    BulkAction,
    GenerateUnitsRequest,
    GenerateUnitsResponse,
)

# -------------------------
# Enums
# -------------------------
from .enums import (
    UserRole,
    NamingSchemeType,
    UnitStatus,
    BulkUnitAction,
)

__all__ = [
    # configurations
    "NamingScheme",
    "PropertyConfigurationBase",
    "PropertyConfigurationCreate",
    "PropertyConfigurationRead",
    "PropertyConfigurationUpdate",

    # units
    "GeneratedUnit",
    "UnitCreate",
    "UnitUpdate",
    "UnitUpdateItem",
    "UnitBulkUpdateRequest",
    "BulkAction",
    "GenerateUnitsRequest",
    "GenerateUnitsResponse",

    # enums
    "UserRole",
    "NamingSchemeType",
    "UnitStatus",
    "BulkUnitAction",
]
