# app/core/security.py
# Authentication happens upstream. The gateway forwards the verified subject
# and role as X-User-Sub / X-User-Role; this module only turns them into a Caller.
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

ROLE_PARENT = "parent"
ROLE_PROVIDER = "provider"
ROLE_ADMIN = "admin"

ROLES = {ROLE_PARENT, ROLE_PROVIDER, ROLE_ADMIN}


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_current_user(
    x_user_sub: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Caller:
    if not x_user_sub or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    try:
        user_id = int(x_user_sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid caller identity",
        )
    role = x_user_role.strip().lower()
    if role not in ROLES:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown caller role",
        )
    return Caller(user_id=user_id, role=role)


def require_role(*roles: str):
    allowed = {r.lower() for r in roles}

    def _dependency(current_user: Caller = Depends(get_current_user)) -> Caller:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access forbidden for this role",
            )
        return current_user

    return _dependency


require_admin = require_role(ROLE_ADMIN)
