"""Request-scoped acting user resolved from the identity provider header."""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from app.config import Settings, get_settings

USER_ID_HEADER = "X-User-Id"


@dataclass(frozen=True)
class ActingUser:
    """Identity of the user performing the current request."""

    user_id: str
    is_admin: bool = False


def _resolve_user(raw_user_id: str | None, settings: Settings) -> ActingUser | None:
    user_id = (raw_user_id or "").strip()
    if not user_id:
        return None
    return ActingUser(user_id=user_id, is_admin=user_id in settings.admin_user_ids)


def optional_user(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
    settings: Settings = Depends(get_settings),
) -> ActingUser | None:
    """Return the acting user when the request is authenticated."""

    return _resolve_user(x_user_id, settings)


def require_user(user: ActingUser | None = Depends(optional_user)) -> ActingUser:
    """Reject anonymous requests."""

    if user is None:
        raise HTTPException(status_code=401, detail="Sign-in required")
    return user


def require_admin(user: ActingUser = Depends(require_user)) -> ActingUser:
    """Reject non-admin users."""

    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return user
