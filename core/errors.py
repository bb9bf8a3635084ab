# core/errors.py

from typing import Optional

from fastapi import HTTPException


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST APIError (has .message)
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: PostgREST / GoTrue errors expose .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what failed (e.g., "Failed to fetch units")
        status_code: HTTP status code used when the message is not recognised

    Returns:
        HTTPException with standardized error message
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=409, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "pgrst116" in error_lower or "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed: {error_detail}")


# ============================================================
# Unit generation errors
# ============================================================

class UnitGenerationError(Exception):
    """Base class for errors raised while generating or storing units."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.__class__.__name__, "detail": self.message}


class InvalidConfiguration(UnitGenerationError):
    """Layout counts are missing or not positive, or the scheme cannot label the layout."""

    status_code = 422


class ConfigurationNotFound(UnitGenerationError):
    status_code = 404

    def __init__(self, configuration_id: str, condo_id: Optional[str] = None):
        scope = f" for property {condo_id}" if condo_id else ""
        super().__init__(f"Configuration {configuration_id} not found{scope}")
        self.configuration_id = configuration_id
        self.condo_id = condo_id


class PersistenceBatchFailure(UnitGenerationError):
    """
    A batch upsert failed. Earlier batches stay committed, so the
    count of units already created travels with the error.
    """

    status_code = 500

    def __init__(self, units_created: int, detail: str, batch_index: Optional[int] = None):
        where = f" at batch {batch_index}" if batch_index is not None else ""
        super().__init__(
            f"Unit persistence failed{where} after {units_created} units were created: {detail}"
        )
        self.units_created = units_created
        self.detail = detail
        self.batch_index = batch_index

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["units_created"] = self.units_created
        return data


class GenerationCancelled(UnitGenerationError):
    status_code = 409

    def __init__(self, units_created: int):
        super().__init__(f"Unit generation cancelled after {units_created} units were created")
        self.units_created = units_created

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["units_created"] = self.units_created
        return data
