from typing import Optional
from sqlalchemy.orm import Session

from mindleaf_backend.model.course import Course
from mindleaf_backend.permissions.allowlist import is_on_course_allow_list
from mindleaf_backend.permissions.enrollment import is_enrolled_in_course
from mindleaf_backend.permissions.principal import AuthenticatedPrincipal, Principal, is_admin


def is_course_author(principal: Principal, course: Course) -> bool:
    return (
        isinstance(principal, AuthenticatedPrincipal)
        and course.author_id is not None
        and course.author_id == principal.user_id
    )


def can_manage_course(principal: Principal, course: Course) -> bool:
    """Admins and the course author may change a course and its lessons."""
    return is_admin(principal) or is_course_author(principal, course)


def can_view_full_lesson_content(principal: Principal, course: Optional[Course], db: Session) -> bool:
    """Full lesson content needs both allow list membership and enrollment."""
    if course is None or not isinstance(principal, AuthenticatedPrincipal):
        return False

    if can_manage_course(principal, course):
        return True

    if not is_on_course_allow_list(principal.email, course):
        return False

    return is_enrolled_in_course(principal.user_id, course.id, db)


def can_enroll(principal: Principal, course: Course) -> bool:
    if not isinstance(principal, AuthenticatedPrincipal):
        return False

    if not course.restricted_to_allow_list:
        return True

    return can_manage_course(principal, course) or is_on_course_allow_list(principal.email, course)
