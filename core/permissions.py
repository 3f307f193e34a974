# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# "<kind>:approve" lets an admin list every request of that kind and
# move it through its lifecycle. "admins:manage" is left to the wildcard.
ROLE_PERMISSIONS = {

    # =====================================================
    # SUPER ADMIN: Full access to everything
    # =====================================================
    "superadmin": ["*"],

    # =====================================================
    # RESIDENCE ADMIN
    # =====================================================
    "admin": [
        "guest:approve",
        "sleepover:approve",
        "maintenance:approve",
        "complaint:approve",
        "announcements:write",
        "applications:review",
        "messages:write",
        "reports:read",
        "finance:read",
        "finance:write",
    ],

    # =====================================================
    # MAINTENANCE OFFICE: tickets and complaints
    # =====================================================
    "admin-maintenance": [
        "maintenance:approve",
        "complaint:approve",
    ],

    # =====================================================
    # SECURITY DESK
    # =====================================================
    "admin-security": [
        "guest:approve",
        "sleepover:approve",
    ],

    # =====================================================
    # COMPLAINTS OFFICE
    # =====================================================
    "admin-complaints": [
        "complaint:approve",
    ],

    # =====================================================
    # GUEST MANAGEMENT
    # =====================================================
    "admin-guest-management": [
        "guest:approve",
        "sleepover:approve",
    ],

    # =====================================================
    # FINANCE OFFICE: payments and statements
    # =====================================================
    "admin-finance": [
        "finance:read",
        "finance:write",
    ],

    # =====================================================
    # STUDENT: submits and follows own requests
    # =====================================================
    "student": [
        "requests:submit",
    ],

    # =====================================================
    # NEWBIE: applicant awaiting acceptance
    # =====================================================
    "newbie": [],
}

ADMIN_ROLES = {
    "superadmin",
    "admin",
    "admin-maintenance",
    "admin-security",
    "admin-complaints",
    "admin-guest-management",
    "admin-finance",
}
