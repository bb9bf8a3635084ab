from models.enums import UserRole


# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
ROLE_PERMISSIONS = {

    # =====================================================
    # PLATFORM ADMIN: every property, every action
    # =====================================================
    UserRole.platform_admin.value: ["*"],

    # =====================================================
    # MANAGEMENT: full control of their own property
    # =====================================================
    UserRole.management.value: [
        "configurations:read", "configurations:write",
        "units:read", "units:write",
    ],

    # =====================================================
    # SECURITY: gate staff look units up for visitors
    # =====================================================
    UserRole.security.value: [
        "units:read",
    ],

    # =====================================================
    # RESIDENT
    # =====================================================
    UserRole.resident.value: [],

    # =====================================================
    # VISITOR: QR flows only, no property data
    # =====================================================
    UserRole.visitor.value: [],
}

DEFAULT_ROLE = UserRole.visitor.value
