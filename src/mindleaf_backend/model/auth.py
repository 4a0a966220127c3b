import enum
from sqlalchemy import Column, DateTime, Enum, Integer, String, func

from .base import Base


class UserRole(str, enum.Enum):
    STUDENT = "STUDENT"
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = 'user'

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    name = Column(String(255))
    email = Column(String(320), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name='user_role'), nullable=False, default=UserRole.STUDENT)
    auth_token = Column(String(255), unique=True)
    password_reset_token = Column(String(255), unique=True)
    password_reset_token_expiry = Column(DateTime(True))
