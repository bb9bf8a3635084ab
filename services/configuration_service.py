# services/configuration_service.py

from typing import List, Optional

from core.errors import ConfigurationNotFound, handle_supabase_error
from core.logging_config import get_logger
from models.property_configuration import PropertyConfigurationRead


CONFIGURATIONS_TABLE = "property_configurations"

logger = get_logger("configurations")


def get_configuration(client, condo_id: Optional[str], configuration_id: str) -> PropertyConfigurationRead:
    """
    Load one configuration, scoped to `condo_id` when given.

    Raises ConfigurationNotFound when the id does not resolve for the tenant.
    """
    try:
        query = (
            client.table(CONFIGURATIONS_TABLE)
            .select("*")
            .eq("id", configuration_id)
        )
        if condo_id:
            query = query.eq("condo_id", condo_id)
        result = query.limit(1).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch property configuration")

    if not result.data:
        logger.info(f"Configuration {configuration_id} not found for condo {condo_id}")
        raise ConfigurationNotFound(configuration_id, condo_id)

    return PropertyConfigurationRead(**result.data[0])


def find_configuration_for_condo(client, condo_id: str) -> Optional[dict]:
    """Return the id row of the condo's configuration, if one exists."""
    try:
        result = (
            client.table(CONFIGURATIONS_TABLE)
            .select("id")
            .eq("condo_id", condo_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to check existing configuration")

    return result.data[0] if result.data else None


def list_configurations(client, condo_id: Optional[str] = None) -> List[dict]:
    try:
        query = client.table(CONFIGURATIONS_TABLE).select(
            "*, condominiums (id, name, type, address, city, state)"
        )
        if condo_id:
            query = query.eq("condo_id", condo_id)
        result = query.order("created_at", desc=True).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch property configurations")

    return result.data or []
