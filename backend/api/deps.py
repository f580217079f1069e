from __future__ import annotations

import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from core.config import settings
from core.security import decode_token


bearer_scheme = HTTPBearer(auto_error=False)

ROLE_ADMIN = "ADMIN"
ROLE_DIRECTOR = "DIRECTOR"
ROLE_COORDINATOR = "COORDINATOR"
ROLE_PROFESSOR = "PROFESSOR"

# Who may read / write the institution-wide schedule configuration.
CONFIGURATION_READERS = frozenset({ROLE_ADMIN, ROLE_DIRECTOR, ROLE_COORDINATOR})
CONFIGURATION_WRITERS = frozenset({ROLE_ADMIN, ROLE_DIRECTOR})
# Roles that may edit any professor's availability; professors edit only their own.
AVAILABILITY_EDITORS = frozenset({ROLE_ADMIN})


@dataclass(frozen=True)
class Principal:
    user_id: uuid.UUID
    role: str
    tenant_id: uuid.UUID | None = None

    def can_edit_availability_of(self, professor_id: uuid.UUID) -> bool:
        if self.role in AVAILABILITY_EDITORS:
            return True
        return self.role == ROLE_PROFESSOR and self.user_id == professor_id

    def can_view_availability_of(self, professor_id: uuid.UUID) -> bool:
        if self.role == ROLE_PROFESSOR:
            return self.user_id == professor_id
        return True


def _extract_token(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    if creds is not None and creds.credentials:
        return creds.credentials
    cookie_token = request.cookies.get("access_token")
    return cookie_token or None


def get_current_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    cached = getattr(request.state, "principal", None)
    if isinstance(cached, Principal):
        return cached

    token = _extract_token(request, creds)
    if not token:
        raise HTTPException(status_code=401, detail="NOT_AUTHENTICATED")
    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    role = str(payload.get("role") or "").strip().upper()
    if not role:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    tenant_id: uuid.UUID | None = None
    raw_tenant = payload.get("tenant_id")
    if raw_tenant:
        try:
            tenant_id = uuid.UUID(str(raw_tenant))
        except ValueError:
            raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    principal = Principal(user_id=user_id, role=role, tenant_id=tenant_id)
    request.state.principal = principal
    return principal


def require_roles(*roles: str):
    allowed = frozenset(r.upper() for r in roles)

    def _dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise HTTPException(status_code=403, detail="NOT_AUTHORIZED")
        return principal

    return _dependency


def get_tenant_id(
    principal: Principal = Depends(get_current_principal),
) -> uuid.UUID | None:
    """Return the tenant_id used to scope data.

    - shared mode: returns None (rows with tenant_id IS NULL)
    - per_tenant mode: the token's tenant_id, required
    """

    if settings.tenant_mode == "shared":
        return None
    if principal.tenant_id is None:
        raise HTTPException(status_code=403, detail="TENANT_NOT_SET")
    return principal.tenant_id
