import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, ConflictException, NotFoundException
from ..database import unit_of_work
from ..interface.tokens import hash_password
from ..interface.users import UserRegister
from ..model.auth import User, UserRole

logger = logging.getLogger(__name__)


def normalize_login_email(email: str) -> str:
    return email.strip().lower()


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundException(f"User not found with id: {user_id}", reason="user_not_found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_login_email(email)).first()


def register_user(db: Session, payload: UserRegister) -> User:
    """Self registration always yields a STUDENT."""
    email = normalize_login_email(payload.email)
    if get_user_by_email(db, email) is not None:
        raise ConflictException("Email already in use", reason="email_taken")

    user = User(
        name=payload.name,
        email=email,
        password=hash_password(payload.password),
        role=UserRole.STUDENT
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException("Email already in use", reason="email_taken")

    db.refresh(user)
    return user


def upgrade_to_creator(db: Session, user: User) -> User:
    if user.role in (UserRole.CREATOR, UserRole.ADMIN):
        raise BadRequestException(f"User already has role {user.role.value}", reason="role_already_elevated")

    with unit_of_work(db):
        user.role = UserRole.CREATOR

    db.refresh(user)
    logger.info(f"User {user.id} upgraded to CREATOR")
    return user


def ensure_admin_user(db: Session, email: str, password: str, name: Optional[str] = "Admin") -> User:
    """Create the admin account, or promote an existing user with that email."""
    user = get_user_by_email(db, email)

    with unit_of_work(db):
        if user is None:
            user = User(
                name=name,
                email=normalize_login_email(email),
                password=hash_password(password),
                role=UserRole.ADMIN
            )
            db.add(user)
            logger.info(f"Created admin user {user.email}")
        elif user.role != UserRole.ADMIN:
            user.role = UserRole.ADMIN
            logger.info(f"Promoted {user.email} to ADMIN")

    db.refresh(user)
    return user
