"""
Password hashing, JWT bearer tokens, and the current-user dependency.
"""

import datetime as dt

import jwt
from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.hash import pbkdf2_sha256

from resume_builder.config import get_settings

security = HTTPBearer()


def hash_password(password: str) -> str:
    return pbkdf2_sha256.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pbkdf2_sha256.verify(password, hashed)
    except ValueError:
        # Stored value is not a pbkdf2 hash
        return False


def _secret() -> str:
    secret = get_settings().jwt_secret
    if not secret:
        raise ValueError("JWT_SECRET must be set in .env")
    return secret


def create_token(user_id: str) -> str:
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "exp": dt.datetime.now(dt.timezone.utc) + dt.timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, _secret(), algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> str:
    """Return the user id carried by token. Raises jwt.InvalidTokenError."""
    payload = jwt.decode(token, _secret(), algorithms=[get_settings().jwt_algorithm])
    user_id = payload.get("sub")
    if not user_id:
        raise jwt.InvalidTokenError("Token has no subject")
    return user_id


def public_user(user: dict) -> dict:
    """User row without the password hash."""
    return {k: v for k, v in user.items() if k != "password"}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> dict:
    try:
        user_id = decode_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    from resume_builder.database import get_user_by_id
    user = await get_user_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return public_user(user)
