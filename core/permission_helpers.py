from typing import Iterable, List, Optional, Union
from fastapi import Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from dependencies.auth import get_optional_user, CurrentUser
from core.permissions import ROLE_PERMISSIONS
from core.errors import access_denied_detail
from models.enums import BaseStrEnum, Permission, Role


RoleLike = Union[Role, str]
PermissionLike = Union[Permission, str]

ELEVATED_ROLES = frozenset([Role.admin, Role.manager])


def _as_role(role: RoleLike) -> Optional[Role]:
    try:
        return Role(role)
    except ValueError:
        return None


def _as_permission(permission: PermissionLike) -> Optional[Permission]:
    try:
        return Permission(permission)
    except ValueError:
        return None


# -----------------------------------------------------
# Permission evaluation (pure lookups over the matrix)
# -----------------------------------------------------
def get_role_permissions(role: RoleLike) -> frozenset:
    resolved = _as_role(role)
    if resolved is None:
        return frozenset()
    return ROLE_PERMISSIONS[resolved]


def has_permission(role: RoleLike, permission: PermissionLike) -> bool:
    resolved = _as_permission(permission)
    if resolved is None:
        return False
    return resolved in get_role_permissions(role)


def has_any_permission(role: RoleLike, permissions: Iterable[PermissionLike]) -> bool:
    return any(has_permission(role, p) for p in permissions)


def has_all_permissions(role: RoleLike, permissions: Iterable[PermissionLike]) -> bool:
    return all(has_permission(role, p) for p in permissions)


# ============================================================
# OWNERSHIP GUARD
# ============================================================

def is_elevated(role: RoleLike) -> bool:
    """Admin and Manager bypass ownership checks."""
    return _as_role(role) in ELEVATED_ROLES


def can_access_resource(user: CurrentUser, owner_id: Optional[str]) -> bool:
    if is_elevated(user.role):
        return True
    return owner_id is not None and owner_id == user.id


def can_modify_resource(
    user: CurrentUser,
    owner_id: Optional[str],
    update_permission: PermissionLike,
    update_all_permission: PermissionLike,
) -> bool:
    """
    True if the user may update every record of the kind, or may update
    their own records and owns this one.
    """
    if has_permission(user.role, update_all_permission):
        return True
    return (
        has_permission(user.role, update_permission)
        and owner_id is not None
        and owner_id == user.id
    )


# ============================================================
# ACCESS DECISION
# ============================================================

class DecisionOutcome(BaseStrEnum):
    allow = "allow"
    deny_unauthenticated = "deny_unauthenticated"
    deny_forbidden = "deny_forbidden"


class AccessDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: DecisionOutcome
    required: List[str] = Field(default_factory=list)
    role: Optional[str] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == DecisionOutcome.allow

    @property
    def status_code(self) -> int:
        if self.outcome == DecisionOutcome.deny_unauthenticated:
            return status.HTTP_401_UNAUTHORIZED
        if self.outcome == DecisionOutcome.deny_forbidden:
            return status.HTTP_403_FORBIDDEN
        return status.HTTP_200_OK


def authorize(
    user: Optional[CurrentUser],
    permissions: Iterable[PermissionLike] = (),
    owner_id: Optional[str] = None,
    require_ownership: bool = False,
) -> AccessDecision:
    """
    Decide whether `user` may proceed.

    - No user → deny_unauthenticated.
    - `permissions` given and none of them held → deny_forbidden.
    - `require_ownership` and the user neither owns the resource
      nor holds an elevated role → deny_forbidden.
    """
    required = [str(p) for p in permissions]

    if user is None:
        return AccessDecision(
            outcome=DecisionOutcome.deny_unauthenticated,
            required=required,
            message="Authentication required",
        )

    if required and not has_any_permission(user.role, required):
        return AccessDecision(
            outcome=DecisionOutcome.deny_forbidden,
            required=required,
            role=str(user.role),
            message="Insufficient permissions",
        )

    if require_ownership and not can_access_resource(user, owner_id):
        return AccessDecision(
            outcome=DecisionOutcome.deny_forbidden,
            required=required,
            role=str(user.role),
            message="You can only access your own resources",
        )

    return AccessDecision(outcome=DecisionOutcome.allow, required=required, role=str(user.role))


def raise_for_decision(decision: AccessDecision):
    """Turn a deny decision into the matching HTTPException."""
    if decision.allowed:
        return

    headers = None
    if decision.outcome == DecisionOutcome.deny_unauthenticated:
        headers = {"WWW-Authenticate": "Bearer"}

    raise HTTPException(
        status_code=decision.status_code,
        detail=access_denied_detail(
            decision.message,
            decision.status_code,
            required=decision.required if decision.role else None,
            user_role=decision.role,
        ),
        headers=headers,
    )


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_permission(*permissions: PermissionLike):
    """
    Passes when the user holds ANY of the given permissions.

    Usage:
        @router.post("/", dependencies=[Depends(requires_permission(Permission.lead_create))])
        def handler(current_user: CurrentUser = Depends(requires_permission(...))): ...
    """

    def dependency(current_user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
        raise_for_decision(authorize(current_user, permissions))
        return current_user

    return dependency


def require_resource_access(user: CurrentUser, owner_id: Optional[str]):
    """Raise 403 unless the user owns the resource or is elevated."""
    raise_for_decision(authorize(user, owner_id=owner_id, require_ownership=True))
