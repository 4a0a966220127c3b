from typing import Any, Optional
from sqlalchemy import false
from sqlalchemy.orm import Session, Query

from mindleaf_backend.model.auth import User
from mindleaf_backend.model.course import Course, Lesson
from mindleaf_backend.permissions.access import (
    can_enroll,
    can_manage_course,
    can_view_full_lesson_content,
)
from mindleaf_backend.permissions.allowlist import can_see_course
from mindleaf_backend.permissions.enrollment import is_enrolled_in_course
from mindleaf_backend.permissions.handlers import PermissionHandler
from mindleaf_backend.permissions.principal import AuthenticatedPrincipal, Principal, principal_user_id
from mindleaf_backend.permissions.query_builders import CoursePermissionQueryBuilder


class UserPermissionHandler(PermissionHandler):
    """Permission handler for User entity"""

    ADMIN_ACTIONS = ("list", "upgrade", "reset_password")

    def can_perform_action(self, principal: Principal, action: str, resource: Optional[Any] = None, db: Optional[Session] = None) -> bool:
        if not isinstance(principal, AuthenticatedPrincipal):
            return False

        if action in self.ADMIN_ACTIONS:
            return self.check_general_permission(principal, action)

        if action == "get":
            return self.check_admin(principal) or (resource is not None and resource.id == principal.user_id)

        return False

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        if self.check_general_permission(principal, "list"):
            return db.query(User)
        return super().build_query(principal, action, db)


class CoursePermissionHandler(PermissionHandler):
    """Permission handler for Course entity.

    Anyone may list; which courses show up, and whether a single course can be
    read, is decided by the allow list.
    """

    PUBLIC_ACTIONS = frozenset({"list"})
    MANAGE_ACTIONS = ("get_access", "update_access", "delete")

    def can_perform_action(self, principal: Principal, action: str, resource: Optional[Any] = None, db: Optional[Session] = None) -> bool:
        if action == "list":
            return True

        if action == "get":
            return resource is not None and can_see_course(principal, resource)

        if not isinstance(principal, AuthenticatedPrincipal):
            return False

        if action == "create":
            return self.check_general_permission(principal, action)

        if action == "list_created":
            return True

        if action in self.MANAGE_ACTIONS:
            return resource is not None and can_manage_course(principal, resource)

        return False

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        query = db.query(Course)
        if action == "list_created":
            user_id = principal_user_id(principal)
            if user_id is None:
                return query.filter(false())
            return query.filter(Course.author_id == user_id)
        return query

    def filter_visible(self, principal: Principal, courses):
        return [course for course in courses if can_see_course(principal, course)]


class LessonPermissionHandler(PermissionHandler):
    """Permission handler for Lesson entity. The resource is the lesson's course."""

    MANAGE_ACTIONS = ("create", "update", "delete", "reorder")

    def can_perform_action(self, principal: Principal, action: str, resource: Optional[Any] = None, db: Optional[Session] = None) -> bool:
        if not isinstance(principal, AuthenticatedPrincipal):
            return False

        if action in ("list", "list_summaries"):
            return True

        if action == "get":
            return can_view_full_lesson_content(principal, resource, db)

        if action in self.MANAGE_ACTIONS:
            return resource is not None and can_manage_course(principal, resource)

        return False

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        query = db.query(Lesson)

        if self.check_admin(principal):
            return query

        if not isinstance(principal, AuthenticatedPrincipal):
            return query.filter(false())

        course_ids = CoursePermissionQueryBuilder.full_content_course_ids(principal, db)
        return query.filter(Lesson.course_id.in_(course_ids))


class CourseEnrollmentPermissionHandler(PermissionHandler):
    """Permission handler for CourseEnrollment entity. The resource is the course."""

    def can_perform_action(self, principal: Principal, action: str, resource: Optional[Any] = None, db: Optional[Session] = None) -> bool:
        if not isinstance(principal, AuthenticatedPrincipal):
            return False

        if action == "create":
            return resource is not None and can_enroll(principal, resource)

        if action in ("list", "delete"):
            return True

        return False


class LessonProgressPermissionHandler(PermissionHandler):
    """Progress is readable and writable only inside a course the caller is enrolled in."""

    def can_perform_action(self, principal: Principal, action: str, resource: Optional[Any] = None, db: Optional[Session] = None) -> bool:
        if not isinstance(principal, AuthenticatedPrincipal):
            return False

        if action in ("complete", "get"):
            return resource is not None and is_enrolled_in_course(principal.user_id, resource.id, db)

        return False
