from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """The single role carried by every authenticated user."""

    admin = "Admin"
    manager = "Manager"
    sales_rep = "Sales Rep"
    viewer = "Viewer"


# -----------------------------------------------------
# PERMISSION
# -----------------------------------------------------
class Permission(BaseStrEnum):
    """An allowed action on a resource kind (<resource>:<action>)."""

    # User management
    user_create = "user:create"
    user_read = "user:read"
    user_update = "user:update"
    user_delete = "user:delete"

    # Leads
    lead_create = "lead:create"
    lead_read = "lead:read"
    lead_read_all = "lead:read:all"
    lead_update = "lead:update"
    lead_update_all = "lead:update:all"
    lead_delete = "lead:delete"
    lead_assign = "lead:assign"

    # Opportunities
    opportunity_create = "opportunity:create"
    opportunity_read = "opportunity:read"
    opportunity_read_all = "opportunity:read:all"
    opportunity_update = "opportunity:update"
    opportunity_update_all = "opportunity:update:all"
    opportunity_delete = "opportunity:delete"
    opportunity_assign = "opportunity:assign"

    # Accounts
    account_create = "account:create"
    account_read = "account:read"
    account_read_all = "account:read:all"
    account_update = "account:update"
    account_update_all = "account:update:all"
    account_delete = "account:delete"

    # Contacts
    contact_create = "contact:create"
    contact_read = "contact:read"
    contact_read_all = "contact:read:all"
    contact_update = "contact:update"
    contact_update_all = "contact:update:all"
    contact_delete = "contact:delete"

    # Activities
    activity_create = "activity:create"
    activity_read = "activity:read"
    activity_read_all = "activity:read:all"
    activity_update = "activity:update"
    activity_update_all = "activity:update:all"
    activity_delete = "activity:delete"

    # Reporting
    report_view = "report:view"
    report_export = "report:export"
    report_advanced = "report:advanced"

    # Settings
    settings_view = "settings:view"
    settings_update = "settings:update"

    # System
    system_admin = "system:admin"
    audit_view = "audit:view"


# -----------------------------------------------------
# LEAD STATUS
# -----------------------------------------------------
class LeadStatus(BaseStrEnum):
    """Pipeline state of a lead."""

    new = "New"
    qualified = "Qualified"
    converted = "Converted"
    lost = "Lost"


# -----------------------------------------------------
# IMPORT ENTITY
# -----------------------------------------------------
class ImportEntity(BaseStrEnum):
    """Record kinds accepted by CSV import."""

    lead = "lead"
