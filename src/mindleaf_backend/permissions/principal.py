from typing import Dict, FrozenSet, Iterable, Literal, Optional, Union
from pydantic import BaseModel

from mindleaf_backend.model.auth import UserRole

# General (resource independent) claims per role. Checks that depend on a
# concrete resource (authorship, allow list, enrollment) live in the handlers.
ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[str]] = {
    UserRole.STUDENT: frozenset(),
    UserRole.CREATOR: frozenset({
        "course:create",
    }),
    UserRole.ADMIN: frozenset({
        "course:create",
        "user:list",
        "user:upgrade",
        "user:reset_password",
    }),
}


class AnonymousPrincipal(BaseModel):
    kind: Literal["anonymous"] = "anonymous"

    @property
    def is_authenticated(self) -> bool:
        return False

    @property
    def is_admin(self) -> bool:
        return False

    def permitted(self, resource: str, action: str) -> bool:
        return False


class AuthenticatedPrincipal(BaseModel):
    kind: Literal["authenticated"] = "authenticated"
    user_id: int
    email: str
    role: UserRole

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def permitted(self, resource: str, action: str) -> bool:
        return f"{resource}:{action}" in ROLE_PERMISSIONS.get(self.role, frozenset())


Principal = Union[AnonymousPrincipal, AuthenticatedPrincipal]


def is_admin(principal: Principal) -> bool:
    return isinstance(principal, AuthenticatedPrincipal) and principal.role == UserRole.ADMIN


def has_any_role(principal: Principal, roles: Iterable[UserRole]) -> bool:
    if not isinstance(principal, AuthenticatedPrincipal):
        return False
    return principal.role in set(roles)


def principal_user_id(principal: Principal) -> Optional[int]:
    if isinstance(principal, AuthenticatedPrincipal):
        return principal.user_id
    return None
