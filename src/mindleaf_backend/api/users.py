from typing import Annotated, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..interface.users import (
    PasswordResetTokenResponse,
    UserGet,
    UserRegister,
    UserUpgradeResponse,
)
from ..model.auth import User
from ..permissions.auth import AuthenticationService, get_authenticated_principal
from ..permissions.core import check_permission, check_permissions
from ..permissions.principal import AuthenticatedPrincipal
from ..services.user_service import get_user_or_404, register_user, upgrade_to_creator

user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("/register", response_model=UserGet, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    return register_user(db, payload)


@user_router.get("", response_model=List[UserGet])
def list_users(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    return check_permissions(principal, User, "list", db).order_by(User.id).all()


@user_router.get("/me", response_model=UserGet)
def get_me(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    user = get_user_or_404(db, principal.user_id)
    check_permission(principal, User, "get", user, db)
    return user


@user_router.post("/{user_id}/upgrade-to-creator", response_model=UserUpgradeResponse)
def upgrade_user(
    user_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    check_permission(principal, User, "upgrade", db=db, detail="Only admins can upgrade users")
    user = upgrade_to_creator(db, get_user_or_404(db, user_id))
    return UserUpgradeResponse(message="User upgraded to CREATOR", user=UserGet.model_validate(user))


@user_router.post("/{user_id}/reset-password", response_model=PasswordResetTokenResponse)
def issue_password_reset(
    user_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    check_permission(principal, User, "reset_password", db=db, detail="Only admins can reset passwords")
    user = AuthenticationService.issue_password_reset(get_user_or_404(db, user_id), db)
    return PasswordResetTokenResponse(
        message="Password reset token created",
        reset_token=user.password_reset_token,
        reset_path=f"/reset-password?token={user.password_reset_token}",
        expires_at=user.password_reset_token_expiry
    )
