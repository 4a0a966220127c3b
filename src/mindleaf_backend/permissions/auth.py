"""
Authentication: bearer token resolution, login and password reset.
"""

import logging
from datetime import timedelta
from typing import Annotated, Optional
from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mindleaf_backend.api.exceptions import BadRequestException, UnauthorizedException
from mindleaf_backend.database import get_db, unit_of_work
from mindleaf_backend.interface.tokens import generate_token, hash_password, verify_password
from mindleaf_backend.model.auth import User
from mindleaf_backend.permissions.principal import (
    AnonymousPrincipal,
    AuthenticatedPrincipal,
    Principal,
)
from mindleaf_backend.settings import settings
from mindleaf_backend.utils import as_utc, utc_now

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Service for handling credentials and tokens"""

    @staticmethod
    def authenticate_password(email: str, password: str, db: Session) -> User:
        """Verify credentials and rotate the user's bearer token."""
        user = db.query(User).filter(User.email == email.strip().lower()).first()

        if user is None or not verify_password(password, user.password):
            raise UnauthorizedException("Invalid email or password", reason="invalid_credentials")

        with unit_of_work(db):
            user.auth_token = generate_token()

        db.refresh(user)
        return user

    @staticmethod
    def issue_password_reset(user: User, db: Session) -> User:
        with unit_of_work(db):
            user.password_reset_token = generate_token()
            user.password_reset_token_expiry = utc_now() + timedelta(seconds=settings.PASSWORD_RESET_TTL)

        db.refresh(user)
        return user

    @staticmethod
    def reset_password(token: str, new_password: str, db: Session) -> User:
        """Set a new password; also signs the user out everywhere."""
        user = db.query(User).filter(User.password_reset_token == token).first()

        expiry = as_utc(user.password_reset_token_expiry) if user is not None else None
        if user is None or expiry is None or expiry < utc_now():
            raise BadRequestException("Invalid or expired reset token", reason="invalid_reset_token")

        with unit_of_work(db):
            user.password = hash_password(new_password)
            user.password_reset_token = None
            user.password_reset_token_expiry = None
            user.auth_token = None

        return user


class PrincipalBuilder:
    """Builder for creating Principal objects from stored users"""

    @staticmethod
    def build(user: Optional[User]) -> Principal:
        if user is None:
            return AnonymousPrincipal()
        return AuthenticatedPrincipal(user_id=user.id, email=user.email, role=user.role)


def parse_bearer_token(request: Request) -> Optional[str]:
    """Token from an ``Authorization: Bearer`` header, None for anything else."""
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None

    scheme, param = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not param:
        return None

    return param


def resolve_principal(token: Optional[str], db: Session) -> Principal:
    if not token:
        return AnonymousPrincipal()

    try:
        user = db.query(User).filter(User.auth_token == token).first()
    except SQLAlchemyError as e:
        # Identity lookup failures never grant anything; the caller is anonymous.
        logger.error(f"Token lookup failed: {e}")
        db.rollback()
        return AnonymousPrincipal()

    return PrincipalBuilder.build(user)


def get_current_principal(
    token: Annotated[Optional[str], Depends(parse_bearer_token)],
    db: Session = Depends(get_db)
) -> Principal:
    return resolve_principal(token, db)


def get_authenticated_principal(
    principal: Annotated[Principal, Depends(get_current_principal)]
) -> AuthenticatedPrincipal:
    if not isinstance(principal, AuthenticatedPrincipal):
        raise UnauthorizedException()
    return principal
