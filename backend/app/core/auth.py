"""
Password hashing and bearer-token authentication for the dashboard.

Passwords are bcrypt hashes (compatible with those written by the previous
Node service). Tokens are HS256 JWTs whose ``sub`` is the user id.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.config import settings
from app.models.user import User
from typing import Optional
from datetime import datetime, timedelta, timezone
import bcrypt
import logging
import uuid

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """True when ``password`` matches the stored hash; never raises."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        # Malformed stored hash
        logger.warning(f"Password verification rejected: {e}")
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token for ``data``.

    ``sub`` is stringified; ``exp``, ``iat``, a random ``jti`` and the token
    type are added. Lifetime defaults to ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = dict(data)
    if "sub" in claims:
        claims["sub"] = str(claims["sub"])
    claims.update(
        exp=issued_at + lifetime,
        iat=issued_at,
        jti=uuid.uuid4().hex,
        type=TOKEN_TYPE,
    )
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user: User) -> str:
    """Token carrying the identity the dashboard displays."""
    return create_access_token({"sub": user.id, "email": user.email, "role": user.role})


def decode_token(token: str) -> dict:
    """Return the claims of a valid access token or raise a 401."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"Rejected token: {e}")
        raise _unauthorized("Token is not valid")

    if claims.get("type") != TOKEN_TYPE:
        logger.warning(f"Rejected token of type {claims.get('type')!r}")
        raise _unauthorized("Token is not valid")
    return claims


def get_user_from_token(token: str, db: Session) -> User:
    """Load the user a valid token was issued to; 401 if it no longer exists."""
    subject = decode_token(token).get("sub")
    if not str(subject).isdigit():
        raise _unauthorized("Token is not valid")

    user = db.query(User).filter(User.id == int(subject)).first()
    if user is None:
        raise _unauthorized("Token is not valid")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Dependency guarding every mutating route."""
    if not credentials:
        raise _unauthorized("No authentication token, access denied")
    return get_user_from_token(credentials.credentials, db)
