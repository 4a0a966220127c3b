from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Optional, Type
from sqlalchemy.orm import Session, Query

from mindleaf_backend.permissions.principal import Principal, AuthenticatedPrincipal
from mindleaf_backend.api.exceptions import ForbiddenException, UnauthorizedException


class PermissionHandler(ABC):
    """Base class for entity-specific permission handlers"""

    # Actions an anonymous caller may attempt; everything else needs a token.
    PUBLIC_ACTIONS: FrozenSet[str] = frozenset()

    def __init__(self, entity: Type[Any]):
        self.entity = entity
        self.resource_name = entity.__tablename__

    @abstractmethod
    def can_perform_action(self, principal: Principal, action: str, resource: Optional[Any] = None, db: Optional[Session] = None) -> bool:
        """Check if principal can perform an action.

        Args:
            principal: Current principal
            action: Action to perform (e.g., create, update)
            resource: The object the action targets, or the course it belongs to
            db: Session for checks that need a lookup (enrollment)
        """
        pass

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        """Build a filtered query based on permissions"""
        if self.check_admin(principal):
            return db.query(self.entity)
        raise ForbiddenException(detail={"entity": self.resource_name})

    def check_admin(self, principal: Principal) -> bool:
        """Check if principal has admin privileges"""
        return principal.is_admin

    def check_general_permission(self, principal: Principal, action: str) -> bool:
        """Check the role permission table for action on this resource"""
        return principal.permitted(self.resource_name, action)

    def requires_authentication(self, action: str) -> bool:
        return action not in self.PUBLIC_ACTIONS


class PermissionRegistry:
    """Registry for managing entity permission handlers"""

    _instance = None
    _handlers: Dict[Type[Any], PermissionHandler] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def register(self, entity: Type[Any], handler: PermissionHandler):
        """Register a permission handler for an entity"""
        self._handlers[entity] = handler

    def get_handler(self, entity: Type[Any]) -> Optional[PermissionHandler]:
        """Get the permission handler for an entity"""
        return self._handlers.get(entity)

    def check_permission(self, principal: Principal, entity: Type[Any], action: str,
                         resource: Optional[Any] = None, db: Optional[Session] = None,
                         detail: Any = None, reason: Optional[str] = None) -> None:
        """Raise unless principal may perform action. Anonymous callers get 401, others 403."""
        handler = self.get_handler(entity)

        if handler is None:
            # Fallback to admin-only if no handler registered
            allowed = principal.is_admin
            needs_auth = True
        else:
            allowed = handler.can_perform_action(principal, action, resource, db)
            needs_auth = handler.requires_authentication(action)

        if allowed:
            return

        if needs_auth and not isinstance(principal, AuthenticatedPrincipal):
            raise UnauthorizedException()

        raise ForbiddenException(detail=detail, reason=reason)

    def check_permissions(self, principal: Principal, entity: Type[Any], action: str, db: Session) -> Query:
        """Check permissions and return filtered query"""
        handler = self.get_handler(entity)
        if not handler:
            if not principal.is_admin:
                raise ForbiddenException(detail={"entity": entity.__tablename__})
            return db.query(entity)

        return handler.build_query(principal, action, db)


# Global registry instance
permission_registry = PermissionRegistry()
