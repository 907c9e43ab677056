from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session
from typing import Optional
import logging

import redis

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.errors import (
    AuthenticationError, AuthorizationError, RateLimitExceededError
)
from ..core.security import (
    verify_session_token, InvalidTokenError, UserRole, SESSION_COOKIES
)
from ..models.user import User

logger = logging.getLogger(__name__)

# One cookie scheme per role; the guards never look at each other's cookie
patient_cookie = APIKeyCookie(name=SESSION_COOKIES[UserRole.PATIENT], auto_error=False)
admin_cookie = APIKeyCookie(name=SESSION_COOKIES[UserRole.ADMIN], auto_error=False)


def _resolve_session(
    request: Request,
    token: Optional[str],
    role: UserRole,
    db: Session
) -> User:
    if not token:
        raise AuthenticationError(f"{role.value} Not Authenticated!")

    try:
        user_id = verify_session_token(token, role)
    except InvalidTokenError:
        raise AuthenticationError("Invalid or expired session")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthenticationError("User not found")

    if user.role != role:
        raise AuthorizationError(
            f"{user.role.value} not authorized for this resource!"
        )

    request.state.user = user
    return user


def get_current_patient(
    request: Request,
    token: Optional[str] = Depends(patient_cookie),
    db: Session = Depends(get_db)
) -> User:
    """Require a valid patient session cookie."""
    return _resolve_session(request, token, UserRole.PATIENT, db)


def get_current_admin(
    request: Request,
    token: Optional[str] = Depends(admin_cookie),
    db: Session = Depends(get_db)
) -> User:
    """Require a valid admin session cookie."""
    return _resolve_session(request, token, UserRole.ADMIN, db)


# Rate limiting dependency
def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limiting for unauthenticated write endpoints."""
    if not settings.RATE_LIMIT_ENABLED:
        return

    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{request.url.path}:{client_ip}"

    try:
        current_requests = redis_client.incr(key)
        if current_requests == 1:
            redis_client.expire(key, settings.RATE_LIMIT_WINDOW_SECONDS)
    except redis.RedisError as exc:
        # Fail open when Redis is unreachable
        logger.warning(f"Rate limiter unavailable, allowing request: {exc}")
        return

    if current_requests > settings.RATE_LIMIT_MAX_REQUESTS:
        raise RateLimitExceededError()
