"""
Access decision engine.

Every endpoint asks this module before touching data. Handlers are registered
per entity; check_permission raises UnauthorizedException for anonymous
callers on protected actions and ForbiddenException otherwise.
"""

from typing import Any, List, Optional, Type
from sqlalchemy.orm import Session, Query

from mindleaf_backend.permissions.handlers import permission_registry
from mindleaf_backend.permissions.handlers_impl import (
    UserPermissionHandler,
    CoursePermissionHandler,
    LessonPermissionHandler,
    CourseEnrollmentPermissionHandler,
    LessonProgressPermissionHandler,
)
from mindleaf_backend.permissions.principal import Principal
from mindleaf_backend.permissions.access import (
    can_enroll,
    can_manage_course,
    can_view_full_lesson_content,
)
from mindleaf_backend.permissions.allowlist import can_see_course

from mindleaf_backend.model.auth import User
from mindleaf_backend.model.course import Course, Lesson
from mindleaf_backend.model.enrollment import CourseEnrollment, LessonProgress


def initialize_permission_handlers():
    """Initialize and register all permission handlers"""

    permission_registry.register(User, UserPermissionHandler(User))
    permission_registry.register(Course, CoursePermissionHandler(Course))
    permission_registry.register(Lesson, LessonPermissionHandler(Lesson))
    permission_registry.register(CourseEnrollment, CourseEnrollmentPermissionHandler(CourseEnrollment))
    permission_registry.register(LessonProgress, LessonProgressPermissionHandler(LessonProgress))


def check_permission(principal: Principal, entity: Type[Any], action: str,
                     resource: Optional[Any] = None, db: Optional[Session] = None,
                     detail: Any = None, reason: Optional[str] = None) -> None:
    permission_registry.check_permission(principal, entity, action, resource, db, detail=detail, reason=reason)


def check_permissions(principal: Principal, entity: Type[Any], action: str, db: Session) -> Query:
    return permission_registry.check_permissions(principal, entity, action, db)


def visible_courses(principal: Principal, courses: List[Course]) -> List[Course]:
    handler = permission_registry.get_handler(Course)
    return handler.filter_visible(principal, courses)


initialize_permission_handlers()

__all__ = [
    'initialize_permission_handlers',
    'check_permission',
    'check_permissions',
    'visible_courses',
    'can_see_course',
    'can_enroll',
    'can_manage_course',
    'can_view_full_lesson_content',
]
