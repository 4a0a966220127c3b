from typing import List
from sqlalchemy.orm import Session

from mindleaf_backend.model.course import Course
from mindleaf_backend.model.enrollment import CourseEnrollment
from mindleaf_backend.permissions.allowlist import is_on_course_allow_list
from mindleaf_backend.permissions.principal import AuthenticatedPrincipal


class CoursePermissionQueryBuilder:
    """Course id sets used to scope queries for non-admin callers"""

    @staticmethod
    def authored_course_ids(principal: AuthenticatedPrincipal, db: Session) -> List[int]:
        return [row[0] for row in db.query(Course.id).filter(Course.author_id == principal.user_id)]

    @staticmethod
    def full_content_course_ids(principal: AuthenticatedPrincipal, db: Session) -> List[int]:
        """Courses whose lessons the caller may read in full: authored, or enrolled and allow-listed."""
        course_ids = set(CoursePermissionQueryBuilder.authored_course_ids(principal, db))

        enrolled_courses = (
            db.query(Course)
            .join(CourseEnrollment, CourseEnrollment.course_id == Course.id)
            .filter(CourseEnrollment.user_id == principal.user_id)
            .all()
        )
        for course in enrolled_courses:
            if is_on_course_allow_list(principal.email, course):
                course_ids.add(course.id)

        return sorted(course_ids)
