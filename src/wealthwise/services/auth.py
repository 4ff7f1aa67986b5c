"""Authentication, token issuance and account-management services."""

from __future__ import annotations

import hashlib
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ..config import BaseConfig
from ..constants.choices import ROLES, THEMES
from ..domain.repositories import UserRepository
from ..errors import ApiError
from ..logging_config import get_logger
from ..models.base import utcnow
from ..models.user import User

logger = get_logger("services.auth")

_hasher = PasswordHasher()
JWT_ALGORITHM = "HS256"
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")
PASSWORD_RULES = (
    "Password must be at least 8 characters and contain an uppercase letter, "
    "a lowercase letter and a number"
)
INVALID_CREDENTIALS = "Invalid email or password"

PROFILE_FIELDS = ("first_name", "last_name", "avatar", "phone", "currency", "timezone")
PREFERENCE_FIELDS = ("notifications_enabled", "weekly_report", "theme")


@dataclass(slots=True)
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime

    def as_dict(self) -> dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def password_problem(password: Optional[str]) -> Optional[str]:
    """Return a message when ``password`` breaks the strength rules."""
    if not password or not PASSWORD_PATTERN.match(password):
        return PASSWORD_RULES
    return None


def token_hash(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_access_token(user: User, *, config: BaseConfig, now: Optional[datetime] = None) -> str:
    issued = now or utcnow()
    payload = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "iat": issued,
        "exp": issued + timedelta(minutes=config.JWT_ACCESS_MINUTES),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=JWT_ALGORITHM)


def issue_tokens(
    user: User, *, users: UserRepository, config: BaseConfig, now: Optional[datetime] = None
) -> TokenPair:
    """Mint an access/refresh pair and remember the refresh token's hash."""

    issued = now or utcnow()
    expires_at = issued + timedelta(days=config.JWT_REFRESH_DAYS)
    refresh_token = jwt.encode(
        {"id": user.id, "jti": uuid.uuid4().hex, "iat": issued, "exp": expires_at},
        config.JWT_REFRESH_SECRET,
        algorithm=JWT_ALGORITHM,
    )
    users.add_refresh_token(user.id, token_hash(refresh_token), expires_at)
    return TokenPair(
        access_token=issue_access_token(user, config=config, now=issued),
        refresh_token=refresh_token,
        refresh_expires_at=expires_at,
    )


def _decode(token: str, secret: str, message: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError as exc:
        raise ApiError.unauthorized(message) from exc


def _changed_password_after(user: User, issued_at: Any) -> bool:
    if user.password_changed_at is None or issued_at is None:
        return False
    changed = user.password_changed_at.replace(tzinfo=timezone.utc).timestamp()
    return changed > float(issued_at)


def authenticate_access_token(
    token: Optional[str], *, users: UserRepository, config: BaseConfig
) -> User:
    """Resolve a bearer token to its user or raise a 401."""

    if not token:
        raise ApiError.unauthorized("Please log in to access this resource")
    claims = _decode(token, config.JWT_SECRET, "Invalid or expired token")
    user = users.get_by_id(int(claims.get("id") or 0))
    if user is None:
        raise ApiError.unauthorized("The user belonging to this token no longer exists")
    if _changed_password_after(user, claims.get("iat")):
        raise ApiError.unauthorized("Password was recently changed. Please log in again.")
    return user


def register(
    *,
    email: str,
    password: str,
    profile: Optional[Mapping[str, Any]] = None,
    users: UserRepository,
    config: BaseConfig,
) -> tuple[User, TokenPair]:
    email = email.strip().lower()
    if users.get_by_email(email) is not None:
        raise ApiError.conflict("Email already registered")
    problem = password_problem(password)
    if problem:
        raise ApiError.validation({"password": [problem]})

    user = User(email=email, password_hash=hash_password(password))
    for key in PROFILE_FIELDS:
        if profile and profile.get(key) is not None:
            setattr(user, key, profile[key])
    user = users.create(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user, issue_tokens(user, users=users, config=config)


def login(
    *, email: str, password: str, users: UserRepository, config: BaseConfig
) -> tuple[User, TokenPair]:
    user = users.get_by_email((email or "").strip())
    if user is None or not verify_password(user.password_hash, password or ""):
        logger.warning("Failed login attempt", extra={"email": email})
        raise ApiError.unauthorized(INVALID_CREDENTIALS)
    user.last_login = utcnow()
    user = users.update(user)
    return user, issue_tokens(user, users=users, config=config)


def refresh_access_token(
    token: Optional[str], *, users: UserRepository, config: BaseConfig
) -> str:
    if not token:
        raise ApiError.unauthorized("No refresh token provided")
    claims = _decode(token, config.JWT_REFRESH_SECRET, "Invalid or expired refresh token")
    user = users.get_by_id(int(claims.get("id") or 0))
    if user is None:
        raise ApiError.unauthorized("User not found")
    if not users.has_refresh_token(user.id, token_hash(token), now=utcnow()):
        raise ApiError.unauthorized("Invalid refresh token")
    return issue_access_token(user, config=config)


def logout(token: Optional[str], *, user: User, users: UserRepository) -> None:
    if token:
        users.remove_refresh_token(user.id, token_hash(token))


def logout_all(*, user: User, users: UserRepository) -> int:
    return users.clear_refresh_tokens(user.id)


def change_password(
    *,
    user: User,
    current_password: str,
    new_password: str,
    users: UserRepository,
    config: BaseConfig,
) -> TokenPair:
    """Swap the password hash, revoke every refresh token, hand out fresh ones."""

    if not verify_password(user.password_hash, current_password or ""):
        raise ApiError.bad_request("Current password is incorrect")
    problem = password_problem(new_password)
    if problem:
        raise ApiError.validation({"newPassword": [problem]})

    now = utcnow()
    user.password_hash = hash_password(new_password)
    # Back-dated so tokens minted right now still pass the changed-after check
    user.password_changed_at = now - timedelta(seconds=1)
    user = users.update(user)
    users.clear_refresh_tokens(user.id)
    logger.info("Password changed", extra={"user_id": user.id})
    return issue_tokens(user, users=users, config=config, now=now)


def delete_account(*, user: User, password: str, users: UserRepository) -> None:
    if not password:
        raise ApiError.bad_request("Password is required to delete account")
    if not verify_password(user.password_hash, password):
        raise ApiError.bad_request("Password is incorrect")
    users.delete(user.id)
    logger.info("Account deleted", extra={"user_id": user.id})


def update_profile(*, user: User, changes: Mapping[str, Any], users: UserRepository) -> User:
    """Apply profile fields; ``role`` is accepted only while still unset."""

    for key in PROFILE_FIELDS:
        if key in changes:
            setattr(user, key, changes[key])
    role = changes.get("role")
    if role is not None:
        if role not in ROLES:
            raise ApiError.validation({"role": [f"Role must be one of: {', '.join(ROLES)}"]})
        if user.role is None:
            user.role = role
        elif user.role != role:
            raise ApiError.bad_request("Role has already been selected")
    return users.update(user)


def update_preferences(
    *, user: User, changes: Mapping[str, Any], users: UserRepository
) -> User:
    if "theme" in changes and changes["theme"] not in THEMES:
        raise ApiError.validation({"theme": [f"Theme must be one of: {', '.join(THEMES)}"]})
    for key in PREFERENCE_FIELDS:
        if key in changes:
            setattr(user, key, changes[key])
    return users.update(user)
