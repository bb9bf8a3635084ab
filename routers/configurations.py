# routers/configurations.py

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies.auth import get_current_user, CurrentUser
from core.logging_config import logger
from core.permission_helpers import (
    requires_permission,
    is_platform_admin,
    require_condo_access,
)
from core.supabase_client import get_supabase_client
from core.supabase_helpers import safe_insert, safe_update, safe_delete, safe_select
from models.property_configuration import (
    PropertyConfigurationCreate,
    PropertyConfigurationRead,
    PropertyConfigurationUpdate,
)
from services.configuration_service import (
    CONFIGURATIONS_TABLE,
    find_configuration_for_condo,
    get_configuration,
    list_configurations,
)
from services.unit_generation import generate_units, validate_layout


router = APIRouter(
    prefix="/properties/configurations",
    tags=["Property Configurations"],
)


def _client():
    client = get_supabase_client()
    if client is None:
        raise HTTPException(500, "Supabase client not configured")
    return client


# ============================================================
# LIST CONFIGURATIONS
# ============================================================
@router.get(
    "",
    summary="List Property Configurations",
    dependencies=[Depends(requires_permission("configurations:read"))],
)
def list_property_configurations(
    condo_id: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Platform admins see every configuration (optionally filtered by
    `condo_id`); everyone else only sees their own property's.
    """
    if not is_platform_admin(current_user):
        if condo_id and condo_id != current_user.condo_id:
            raise HTTPException(403, "Access denied to this property")
        condo_id = current_user.condo_id
        if not condo_id:
            return {"configurations": []}

    return {"configurations": list_configurations(_client(), condo_id)}


# ============================================================
# CREATE CONFIGURATION
# ============================================================
@router.post(
    "",
    status_code=201,
    summary="Create Property Configuration",
    dependencies=[Depends(requires_permission("configurations:write"))],
)
def create_property_configuration(
    payload: PropertyConfigurationCreate,
    current_user: CurrentUser = Depends(get_current_user),
):
    require_condo_access(current_user, payload.condo_id)
    validate_layout(payload.condo_id, payload)

    client = _client()

    # One configuration per property
    if find_configuration_for_condo(client, payload.condo_id):
        raise HTTPException(409, "Configuration already exists for this property")

    data = payload.model_dump(mode="json")
    created = safe_insert(CONFIGURATIONS_TABLE, data, client=client)
    if not created:
        raise HTTPException(500, "Configuration creation failed - no data returned")

    logger.info(
        f"Configuration {created.get('id')} created for condo {payload.condo_id} by {current_user.email}"
    )
    return {"configuration": created}


# ============================================================
# UPDATE CONFIGURATION
# ============================================================
@router.put(
    "",
    summary="Update Property Configuration",
    dependencies=[Depends(requires_permission("configurations:write"))],
)
def update_property_configuration(
    payload: PropertyConfigurationUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    client = _client()

    existing = get_configuration(client, None, payload.id)
    require_condo_access(current_user, existing.condo_id)

    changes = payload.model_dump(exclude_unset=True, exclude={"id"}, mode="json")

    # The merged layout must still be expandable
    merged = PropertyConfigurationRead(**{**existing.model_dump(mode="json"), **changes})
    validate_layout(merged.condo_id, merged)

    changes["updated_at"] = datetime.now(timezone.utc).isoformat()
    updated = safe_update(CONFIGURATIONS_TABLE, {"id": payload.id}, changes, client=client)
    if not updated:
        raise HTTPException(404, "Configuration not found")

    return {"configuration": updated}


# ============================================================
# DELETE CONFIGURATION
# ============================================================
@router.delete(
    "",
    summary="Delete Property Configuration",
    dependencies=[Depends(requires_permission("configurations:write"))],
)
def delete_property_configuration(
    id: str = Query(..., description="Configuration ID"),
    current_user: CurrentUser = Depends(get_current_user),
):
    client = _client()

    existing = safe_select(CONFIGURATIONS_TABLE, {"id": id}, single=True, columns="condo_id", client=client)
    if not existing:
        raise HTTPException(404, "Configuration not found")
    require_condo_access(current_user, existing["condo_id"])

    safe_delete(CONFIGURATIONS_TABLE, {"id": id}, client=client)
    logger.info(f"Configuration {id} deleted by {current_user.email}")
    return {"success": True}


# ============================================================
# PREVIEW GENERATED UNITS (no writes)
# ============================================================
@router.get(
    "/{configuration_id}/preview",
    summary="Preview Units for a Configuration",
    dependencies=[Depends(requires_permission("configurations:read"))],
)
def preview_configuration_units(
    configuration_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Run the unit generator against a stored configuration and return the
    result without writing anything.
    """
    scope = None if is_platform_admin(current_user) else current_user.condo_id
    if not scope and not is_platform_admin(current_user):
        raise HTTPException(403, "Access denied to this property")

    config = get_configuration(_client(), scope, configuration_id)
    require_condo_access(current_user, config.condo_id)

    units = generate_units(config.condo_id, config)
    candidates = config.blocks * config.floors_per_block * config.units_per_floor

    return {
        "configuration_id": config.id,
        "condo_id": config.condo_id,
        "total_candidates": candidates,
        "units_generated": len(units),
        "units": [u.to_row() for u in units],
    }
