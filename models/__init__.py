# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    Permission,
    LeadStatus,
    ImportEntity,
)

# -------------------------
# Lead Models
# -------------------------
from .lead import (
    LeadBase,
    LeadCreate,
    LeadUpdate,
)

# -------------------------
# Audit / Import Models
# -------------------------
from .audit import AuditEntry
from .imports import (
    ValidationResult,
    CSVImportRequest,
    CSVImportResult,
)
