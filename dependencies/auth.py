from typing import Optional, List
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.supabase_client import get_supabase_client
from core.permissions import ROLE_PERMISSIONS, DEFAULT_ROLE


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (identity resolved by Supabase Auth)
# ============================================================
class CurrentUser(BaseModel):
    id: str
    email: str
    role: str

    # Tenant partition key; None only for platform admins
    condo_id: Optional[str] = None

    full_name: Optional[str] = None
    phone: Optional[str] = None

    # per-user metadata overrides
    permissions: Optional[List[str]] = []


# ============================================================
# AUTH DECODING (Supabase: validates JWT + reads metadata)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
    except Exception:
        raise unauthorized

    if not auth_resp or not auth_resp.user:
        raise unauthorized
    auth_user = auth_resp.user

    # ---------------------------------------------------------
    # Extract identity
    # ---------------------------------------------------------
    email = auth_user.email
    metadata = auth_user.user_metadata or {}

    if not email:
        raise unauthorized

    role = metadata.get("role", DEFAULT_ROLE)
    if role not in ROLE_PERMISSIONS:
        role = DEFAULT_ROLE

    extended_permissions = metadata.get("permissions", [])
    if not isinstance(extended_permissions, list):
        extended_permissions = []

    return CurrentUser(
        id=auth_user.id,
        email=email,
        role=role,
        condo_id=metadata.get("condo_id"),
        full_name=metadata.get("full_name") or metadata.get("name"),
        phone=metadata.get("phone"),
        permissions=extended_permissions,
    )
