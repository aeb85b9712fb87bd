from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.config import settings
from app.core.auth import (
    create_user_token,
    get_current_user,
    get_user_from_token,
    hash_password,
    security,
    verify_password,
)
from app.models.user import User
from app.schemas.auth import (
    ChangePasswordRequest,
    ChangePasswordResponse,
    LoginRequest,
    LoginResponse,
    UserPublic,
    VerifyResponse,
)
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from app.core.logging_config import log_security_event, get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(
    request: Request, credentials: LoginRequest, db: Session = Depends(get_db)
):
    """Exchange email and password for a bearer token."""
    client_ip = get_client_ip(request)
    user = db.query(User).filter(User.email == credentials.email).first()

    if not user or not verify_password(credentials.password, user.password):
        log_security_event(
            event_type="auth.login.failure",
            message="Login rejected: invalid credentials",
            level=logging.WARNING,
            username=credentials.email,
            ip_address=client_ip,
            event_category="authentication",
            user_known=user is not None,
        )
        # Same answer for unknown email and wrong password
        raise HTTPException(status_code=400, detail="Invalid credentials")

    token = create_user_token(user)

    log_security_event(
        event_type="auth.login.success",
        message="User logged in successfully",
        user_id=str(user.id),
        username=user.email,
        ip_address=client_ip,
        user_agent=request.headers.get("user-agent"),
        event_category="authentication",
    )

    return LoginResponse(token=token, user=UserPublic.model_validate(user))


@router.get("/verify", response_model=VerifyResponse)
def verify(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
):
    """Report whether the presented bearer token is valid. Never errors."""
    if not credentials:
        return VerifyResponse(valid=False)

    try:
        user = get_user_from_token(credentials.credentials, db)
    except HTTPException:
        return VerifyResponse(valid=False)

    return VerifyResponse(valid=True, user=UserPublic.model_validate(user))


@router.post("/change-password", response_model=ChangePasswordResponse)
def change_password(
    request: Request,
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Replace the signed-in user's password after checking the current one."""
    user = db.query(User).filter(User.id == current_user.id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if not verify_password(payload.current_password, user.password):
        log_security_event(
            event_type="auth.password.change_failed",
            message="Password change rejected: current password incorrect",
            level=logging.WARNING,
            user_id=str(user.id),
            username=user.email,
            ip_address=get_client_ip(request),
            event_category="authentication",
        )
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password = hash_password(payload.new_password)
    db.commit()

    log_security_event(
        event_type="auth.password.changed",
        message="Password changed",
        user_id=str(user.id),
        username=user.email,
        ip_address=get_client_ip(request),
        event_category="authentication",
    )

    return ChangePasswordResponse(success=True, message="Password updated successfully")
