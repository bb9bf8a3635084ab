# routers/units.py

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from dependencies.auth import get_current_user, CurrentUser
from core.config import settings
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import requires_permission, require_condo_access
from core.supabase_client import get_supabase_client
from core.supabase_helpers import safe_select, safe_update, safe_update_many, safe_delete
from models.unit import (
    GenerateUnitsRequest,
    GenerateUnitsResponse,
    UnitBulkUpdateRequest,
    UnitUpdate,
)
from services.configuration_service import get_configuration
from services.unit_generation import (
    UNITS_TABLE,
    dedupe_units,
    generate_and_persist,
    persist_units,
)


router = APIRouter(
    prefix="/properties/{condo_id}/units",
    tags=["Units"],
)

RESIDENT_COLUMNS = "unit_residents (id, email, name, phone, is_primary, is_active, invited_at, accepted_at)"


def _client():
    client = get_supabase_client()
    if client is None:
        raise HTTPException(500, "Supabase client not configured")
    return client


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# -------------------------------------------------------------
# LIST Units for a Property
# -------------------------------------------------------------
@router.get(
    "",
    summary="List Units",
    dependencies=[Depends(requires_permission("units:read"))],
)
def list_units(
    condo_id: str,
    search: Optional[str] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
    excluded: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
    current_user: CurrentUser = Depends(get_current_user),
):
    require_condo_access(current_user, condo_id)
    limit = min(limit, settings.UNITS_PAGE_LIMIT_MAX)

    client = _client()

    try:
        query = (
            client.table(UNITS_TABLE)
            .select(f"*, {RESIDENT_COLUMNS}", count="exact")
            .eq("condo_id", condo_id)
        )

        if search:
            query = query.or_(f"unit_number.ilike.%{search}%,block_number.ilike.%{search}%")
        if status and status != "all":
            query = query.eq("status", status)
        if type and type != "all":
            query = query.eq("unit_type", type)
        if excluded is not None:
            query = query.eq("excluded", excluded)

        start = (page - 1) * limit
        result = query.order("unit_number").range(start, start + limit - 1).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Unable to fetch units")

    total = result.count or 0
    return {
        "units": result.data or [],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": -(-total // limit),
        },
    }


# -------------------------------------------------------------
# GENERATE / CREATE Units
# -------------------------------------------------------------
@router.post(
    "",
    status_code=201,
    response_model=GenerateUnitsResponse,
    response_model_exclude_none=True,
    summary="Generate Units",
    dependencies=[Depends(requires_permission("units:write"))],
)
def create_units(
    condo_id: str,
    payload: GenerateUnitsRequest,
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Body is either `{configuration_id}` (expand the stored configuration)
    or `{units: [...]}` (store the given units as-is). Both paths upsert
    in batches and ignore unit numbers the property already has. The
    direct path also echoes back the rows it inserted.
    """
    require_condo_access(current_user, condo_id)
    inserted_rows = None

    if payload.configuration_id:
        client = _client()
        config = get_configuration(client, condo_id, payload.configuration_id)
        report = generate_and_persist(condo_id, config, client=client)

    elif payload.units is not None:
        # an empty list is a valid body and simply creates nothing
        client = _client()
        units = dedupe_units(u.to_generated(condo_id) for u in payload.units)
        report = persist_units(condo_id, units, client=client)
        inserted_rows = report.rows

    else:
        raise HTTPException(400, "Either configuration_id or units array is required")

    logger.info(
        f"Units for condo {condo_id} by {current_user.email}: "
        f"{report.units_created} created, {report.units_skipped} skipped"
    )
    return GenerateUnitsResponse(**report.to_dict(), units=inserted_rows)


# -------------------------------------------------------------
# BULK UPDATE Units
# -------------------------------------------------------------
@router.put(
    "",
    summary="Bulk Update Units",
    dependencies=[Depends(requires_permission("units:write"))],
)
def bulk_update_units(
    condo_id: str,
    payload: UnitBulkUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
):
    require_condo_access(current_user, condo_id)

    if payload.bulk_action:
        action = payload.bulk_action
        if not action.unit_numbers:
            raise HTTPException(400, "Unit numbers array is required for bulk actions")

        updated = safe_update_many(
            UNITS_TABLE,
            {"condo_id": condo_id},
            action.update_data(),
            in_filter={"unit_number": action.unit_numbers},
            client=_client(),
        )
        return {
            "units_updated": len(updated),
            "message": f"{len(updated)} units updated successfully",
        }

    if payload.unit_updates:
        client = _client()
        results = []

        # Each update stands alone; one failure does not stop the rest
        for item in payload.unit_updates:
            changes = item.changes()
            unit_id = changes.pop("unit_id")
            try:
                row = safe_update(
                    UNITS_TABLE,
                    {"id": unit_id, "condo_id": condo_id},
                    {**changes, "updated_at": _now()},
                    client=client,
                )
            except HTTPException as e:
                results.append({"unit_id": unit_id, "error": e.detail})
                continue

            if row is None:
                results.append({"unit_id": unit_id, "error": "Unit not found"})
            else:
                results.append({"unit_id": unit_id, "success": True, "data": row})

        return {"results": results}

    raise HTTPException(400, "Either unit_updates array or bulk_action is required")


# -------------------------------------------------------------
# GET Single Unit
# -------------------------------------------------------------
@router.get(
    "/{unit_id}",
    summary="Get Unit",
    dependencies=[Depends(requires_permission("units:read"))],
)
def get_unit(
    condo_id: str,
    unit_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    require_condo_access(current_user, condo_id)

    unit = safe_select(
        UNITS_TABLE,
        {"id": unit_id, "condo_id": condo_id},
        single=True,
        columns=f"*, {RESIDENT_COLUMNS}",
        client=_client(),
    )
    if not unit:
        raise HTTPException(404, "Unit not found")
    return {"unit": unit}


# -------------------------------------------------------------
# UPDATE Unit
# -------------------------------------------------------------
@router.put(
    "/{unit_id}",
    summary="Update Unit",
    dependencies=[Depends(requires_permission("units:write"))],
)
def update_unit(
    condo_id: str,
    unit_id: str,
    payload: UnitUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    require_condo_access(current_user, condo_id)

    client = _client()
    filters = {"id": unit_id, "condo_id": condo_id}

    if not safe_select(UNITS_TABLE, filters, single=True, columns="id", client=client):
        raise HTTPException(404, "Unit not found")

    updated = safe_update(UNITS_TABLE, filters, {**payload.changes(), "updated_at": _now()}, client=client)
    if not updated:
        raise HTTPException(404, "Unit not found")
    return {"unit": updated}


# -------------------------------------------------------------
# DELETE Unit
# -------------------------------------------------------------
@router.delete(
    "/{unit_id}",
    summary="Delete Unit",
    dependencies=[Depends(requires_permission("units:write"))],
)
def delete_unit(
    condo_id: str,
    unit_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    require_condo_access(current_user, condo_id)

    client = _client()
    filters = {"id": unit_id, "condo_id": condo_id}

    existing = safe_select(UNITS_TABLE, filters, single=True, columns="id, unit_number", client=client)
    if not existing:
        raise HTTPException(404, "Unit not found")

    # unit_residents rows cascade in the database
    safe_delete(UNITS_TABLE, filters, client=client)

    return {
        "success": True,
        "message": f"Unit {existing['unit_number']} deleted successfully",
    }
