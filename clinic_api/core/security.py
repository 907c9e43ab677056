from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from enum import Enum
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Response

from .config import settings


class UserRole(str, Enum):
    ADMIN = "Admin"
    DOCTOR = "Doctor"
    PATIENT = "Patient"


# Each session role gets its own cookie so both can coexist in one browser
SESSION_COOKIES: Dict[UserRole, str] = {
    UserRole.PATIENT: "patientToken",
    UserRole.ADMIN: "adminToken",
}


class InvalidTokenError(Exception):
    """Raised when a session token fails verification."""


# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

def dummy_verify() -> None:
    """Burn the same time as a real verify when there is no hash to check."""
    pwd_context.dummy_verify()

# Session tokens
def get_signing_key(role: UserRole) -> str:
    keys = {
        UserRole.PATIENT: settings.PATIENT_JWT_SECRET,
        UserRole.ADMIN: settings.ADMIN_JWT_SECRET,
    }
    try:
        return keys[role]
    except KeyError:
        raise ValueError(f"No session namespace for role {role.value}")

def create_session_token(
    user_id: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed session token for ``user_id`` scoped to ``role``."""
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXPIRES_DAYS)

    payload = {
        "sub": user_id,
        "role": role.value,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(
        payload,
        get_signing_key(role),
        algorithm=settings.JWT_ALGORITHM
    )

def verify_session_token(token: str, expected_role: UserRole) -> str:
    """
    Verify a session token and return the user id it carries.

    The signature is checked with ``expected_role``'s key, so a token minted
    for another role fails here even before the role claim is compared.
    """
    try:
        key = get_signing_key(expected_role)
    except ValueError as exc:
        raise InvalidTokenError(str(exc))

    try:
        payload = jwt.decode(token, key, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(str(exc))

    if payload.get("role") != expected_role.value:
        raise InvalidTokenError("Token role mismatch")

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("Token has no subject")

    return user_id

# Cookies
def _cookie_attributes() -> dict:
    secure = settings.COOKIE_SECURE
    return {
        "httponly": True,
        "secure": secure,
        "samesite": "none" if secure else "lax",
        "path": "/",
    }

def set_session_cookie(response: Response, role: UserRole, token: str) -> None:
    """Attach ``token`` to ``response`` under the role's cookie name."""
    max_age = settings.COOKIE_EXPIRE_DAYS * 24 * 60 * 60
    response.set_cookie(
        key=SESSION_COOKIES[role],
        value=token,
        max_age=max_age,
        expires=max_age,
        **_cookie_attributes()
    )

def clear_session_cookie(response: Response, role: UserRole) -> None:
    response.delete_cookie(key=SESSION_COOKIES[role], **_cookie_attributes())
