# core/permissions.py

from types import MappingProxyType

from models.enums import Permission as P, Role


# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# Built once at import, read-only afterwards.
# ============================================
_ROLE_PERMISSIONS = {

    # =====================================================
    # ADMIN: Full access to everything
    # =====================================================
    Role.admin: frozenset(P),


    # =====================================================
    # MANAGER: whole team's data, cannot manage users
    # or delete records
    # =====================================================
    Role.manager: frozenset([
        P.user_read,

        P.lead_create, P.lead_read, P.lead_read_all,
        P.lead_update, P.lead_update_all, P.lead_assign,

        P.opportunity_create, P.opportunity_read, P.opportunity_read_all,
        P.opportunity_update, P.opportunity_update_all, P.opportunity_assign,

        P.account_create, P.account_read, P.account_read_all,
        P.account_update, P.account_update_all,

        P.contact_create, P.contact_read, P.contact_read_all,
        P.contact_update, P.contact_update_all,

        P.activity_create, P.activity_read, P.activity_read_all,
        P.activity_update, P.activity_update_all,

        P.report_view, P.report_export, P.report_advanced,

        P.settings_view,
    ]),


    # =====================================================
    # SALES REP: own records only
    # =====================================================
    Role.sales_rep: frozenset([
        P.lead_create, P.lead_read, P.lead_update,
        P.opportunity_create, P.opportunity_read, P.opportunity_update,
        P.account_create, P.account_read, P.account_update,
        P.contact_create, P.contact_read, P.contact_update,
        P.activity_create, P.activity_read, P.activity_update,

        P.report_view,
        P.settings_view,
    ]),


    # =====================================================
    # VIEWER: read-only
    # =====================================================
    Role.viewer: frozenset([
        P.lead_read,
        P.opportunity_read,
        P.account_read,
        P.contact_read,
        P.activity_read,
        P.report_view,
    ]),
}

ROLE_PERMISSIONS = MappingProxyType(_ROLE_PERMISSIONS)


# ============================================
# Display labels (settings screen, /auth/me/permissions)
# ============================================
PERMISSION_LABELS = MappingProxyType({
    P.user_create: "Create Users",
    P.user_read: "View Users",
    P.user_update: "Update Users",
    P.user_delete: "Delete Users",

    P.lead_create: "Create Leads",
    P.lead_read: "View Own Leads",
    P.lead_read_all: "View All Leads",
    P.lead_update: "Update Own Leads",
    P.lead_update_all: "Update All Leads",
    P.lead_delete: "Delete Leads",
    P.lead_assign: "Assign Leads",

    P.opportunity_create: "Create Opportunities",
    P.opportunity_read: "View Own Opportunities",
    P.opportunity_read_all: "View All Opportunities",
    P.opportunity_update: "Update Own Opportunities",
    P.opportunity_update_all: "Update All Opportunities",
    P.opportunity_delete: "Delete Opportunities",
    P.opportunity_assign: "Assign Opportunities",

    P.account_create: "Create Accounts",
    P.account_read: "View Own Accounts",
    P.account_read_all: "View All Accounts",
    P.account_update: "Update Own Accounts",
    P.account_update_all: "Update All Accounts",
    P.account_delete: "Delete Accounts",

    P.contact_create: "Create Contacts",
    P.contact_read: "View Own Contacts",
    P.contact_read_all: "View All Contacts",
    P.contact_update: "Update Own Contacts",
    P.contact_update_all: "Update All Contacts",
    P.contact_delete: "Delete Contacts",

    P.activity_create: "Create Activities",
    P.activity_read: "View Own Activities",
    P.activity_read_all: "View All Activities",
    P.activity_update: "Update Own Activities",
    P.activity_update_all: "Update All Activities",
    P.activity_delete: "Delete Activities",

    P.report_view: "View Reports",
    P.report_export: "Export Reports",
    P.report_advanced: "Access Advanced Reports",

    P.settings_view: "View Settings",
    P.settings_update: "Update Settings",

    P.system_admin: "System Administration",
    P.audit_view: "View Audit Logs",
})
