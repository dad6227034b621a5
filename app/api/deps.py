"""
Request identity dependencies

The fronting identity provider sets X-User-Id and X-User-Role on every
request; the values are trusted as-is.
"""
from fastapi import Depends, Header, HTTPException
from pydantic import BaseModel
from typing import Optional

from app.models.enums import UserRole


class CurrentUser(BaseModel):
    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None)
) -> CurrentUser:
    """Identity of the caller; 401 when the headers are missing or malformed"""
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        role = UserRole(x_user_role.upper())
    except ValueError:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return CurrentUser(id=x_user_id, role=role)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
