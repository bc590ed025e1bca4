# routers/auth.py

from fastapi import APIRouter, Depends

from dependencies.auth import get_current_user, CurrentUser
from core.permissions import PERMISSION_LABELS
from core.permission_helpers import get_role_permissions, is_elevated


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# -----------------------------------------------------
# GET /auth/me
# -----------------------------------------------------
@router.get("/me", summary="Current user")
def read_me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user


# -----------------------------------------------------
# GET /auth/me/permissions
# What the UI may show or enable for this user
# -----------------------------------------------------
@router.get("/me/permissions", summary="Current user's permissions")
def read_my_permissions(current_user: CurrentUser = Depends(get_current_user)):
    permissions = sorted(get_role_permissions(current_user.role), key=str)
    return {
        "role": str(current_user.role),
        "elevated": is_elevated(current_user.role),
        "permissions": [
            {"permission": str(p), "label": PERMISSION_LABELS.get(p, str(p))}
            for p in permissions
        ],
    }
