from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..interface.base import MessageResponse
from ..interface.users import LoginRequest, LoginResponse, PasswordResetRequest, UserGet
from ..permissions.auth import AuthenticationService

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = AuthenticationService.authenticate_password(payload.email, payload.password, db)
    return LoginResponse(token=user.auth_token, user=UserGet.model_validate(user))


@auth_router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: PasswordResetRequest, db: Session = Depends(get_db)):
    AuthenticationService.reset_password(payload.token, payload.new_password, db)
    return MessageResponse(message="Password has been reset")
