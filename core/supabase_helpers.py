# core/supabase_helpers.py

from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from core.errors import handle_supabase_error
from core.supabase_client import get_supabase_client


# =================================================================
#  SAFE SELECT / INSERT / UPDATE / DELETE: tenant tables only
# =================================================================
# These helpers must NOT be used for auth.users.
# They cover:
#   - condominiums
#   - property_configurations
#   - units
# Every helper accepts an explicit client so a route can share one
# client across several calls; otherwise a fresh one is created.
# =================================================================

def _client(client=None):
    client = client or get_supabase_client()
    if client is None:
        raise HTTPException(500, "Supabase client not configured")
    return client


def safe_select(table: str, filters: dict = None, *, single=False, columns: str = "*", client=None):
    """Safe table SELECT (not for auth.users). `single` returns one row or None."""
    client = _client(client)

    try:
        query = client.table(table).select(columns)
        for key, val in (filters or {}).items():
            query = query.eq(key, val)

        if single:
            result = query.limit(1).execute()
            return result.data[0] if result.data else None

        return query.execute().data or []

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to fetch from {table}")


def safe_insert(table: str, data: dict, *, client=None) -> Optional[dict]:
    """Safe INSERT for non-auth tables."""
    client = _client(client)

    try:
        result = (
            client.table(table)
            .insert(data, returning="representation")
            .execute()
        )
        return result.data[0] if result.data else None

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to insert into {table}")


def safe_update(table: str, filters: dict, data: dict, *, client=None) -> Optional[dict]:
    """Safe UPDATE for non-auth tables. Returns the first updated row or None."""
    client = _client(client)

    try:
        query = client.table(table).update(data, returning="representation")
        for key, val in filters.items():
            query = query.eq(key, val)

        result = query.execute()
        return result.data[0] if result.data else None

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to update {table}")


def safe_update_many(table: str, filters: dict, data: dict, *, in_filter: Dict[str, List[Any]] = None, client=None) -> List[dict]:
    """UPDATE every row matching `filters` (eq) and `in_filter` (in). Returns updated rows."""
    client = _client(client)

    try:
        query = client.table(table).update(data, returning="representation")
        for key, val in filters.items():
            query = query.eq(key, val)
        for key, values in (in_filter or {}).items():
            query = query.in_(key, values)

        return query.execute().data or []

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to update {table}")


def safe_delete(table: str, filters: dict, *, client=None) -> None:
    """Safe DELETE for non-auth tables. Refuses to run without filters."""
    if not filters:
        raise HTTPException(400, f"Refusing to delete from {table} without filters")

    client = _client(client)

    try:
        query = client.table(table).delete()
        for key, val in filters.items():
            query = query.eq(key, val)
        query.execute()

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to delete from {table}")
