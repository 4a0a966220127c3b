"""
Course visibility based on the per-course email allow list.

A course that is not restricted is visible to everyone. A restricted course
is visible to admins, its author, and callers whose email is on the list.
Emails are compared trimmed and lower-cased.
"""

from typing import Any, Iterable, List, Optional
from sqlalchemy.orm import Session

from mindleaf_backend.model.auth import UserRole
from mindleaf_backend.model.course import Course
from mindleaf_backend.permissions.principal import AuthenticatedPrincipal, Principal


def normalize_email(email: Any) -> Optional[str]:
    """Trimmed, lower-cased email, or None for anything that is not a usable string."""
    if not isinstance(email, str):
        return None
    normalized = email.strip().lower()
    return normalized or None


def normalize_allowed_emails(emails: Optional[Iterable[Any]]) -> List[str]:
    """Drop non-strings and blanks, normalize, dedupe keeping first-seen order."""
    result: List[str] = []
    seen = set()
    for email in emails or []:
        normalized = normalize_email(email)
        if normalized is None or normalized in seen:
            continue
        seen.add(normalized)
        result.append(normalized)
    return result


def allowed_email_set(course: Course) -> set:
    return {normalize_email(entry.email) for entry in course.allowed_emails}


def can_see_course(principal: Principal, course: Course) -> bool:
    if not course.restricted_to_allow_list:
        return True

    if not isinstance(principal, AuthenticatedPrincipal):
        return False

    if principal.role == UserRole.ADMIN:
        return True

    if course.author_id is not None and course.author_id == principal.user_id:
        return True

    email = normalize_email(principal.email)
    return email is not None and email in allowed_email_set(course)


def is_on_course_allow_list(email: Optional[str], course: Course) -> bool:
    """Pure membership test. Unlike can_see_course there is no admin or author bypass."""
    if not course.restricted_to_allow_list:
        return True

    normalized = normalize_email(email)
    return normalized is not None and normalized in allowed_email_set(course)


def db_is_on_course_allow_list(email: Optional[str], course_id: int, db: Session) -> bool:
    course = db.get(Course, course_id)
    if course is None:
        return False
    return is_on_course_allow_list(email, course)
