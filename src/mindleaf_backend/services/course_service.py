import logging
from typing import Any, Iterable, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..database import unit_of_work
from ..interface.courses import CourseCreate
from ..model.course import Course, CourseAllowedEmail, Lesson
from ..model.enrollment import CourseEnrollment, LessonProgress
from ..permissions.allowlist import normalize_allowed_emails
from ..permissions.principal import AuthenticatedPrincipal

logger = logging.getLogger(__name__)


def get_course_or_404(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundException(f"Course not found with id: {course_id}", reason="course_not_found")
    return course


def list_courses(db: Session) -> List[Course]:
    return db.query(Course).order_by(Course.created_at.desc(), Course.id.desc()).all()


def create_course(db: Session, principal: AuthenticatedPrincipal, payload: CourseCreate) -> Course:
    course = Course(
        title=payload.title,
        description=payload.description,
        author_id=payload.author_id if payload.author_id is not None else principal.user_id,
        restricted_to_allow_list=False
    )
    db.add(course)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Course creation rejected: {e}")
        raise BadRequestException("Invalid course data", reason="invalid_course")

    db.refresh(course)
    return course


def allowed_emails_of(course: Course) -> List[str]:
    return [entry.email for entry in course.allowed_emails]


def replace_allow_list(db: Session, course: Course, restricted: bool, emails: Optional[Iterable[Any]]) -> Course:
    """Set the restriction flag and swap the whole allow list in one transaction."""
    normalized = normalize_allowed_emails(emails)

    with unit_of_work(db):
        course.restricted_to_allow_list = bool(restricted)
        db.query(CourseAllowedEmail).filter(
            CourseAllowedEmail.course_id == course.id
        ).delete()
        db.add_all([CourseAllowedEmail(course_id=course.id, email=email) for email in normalized])

    db.refresh(course)
    return course


def delete_course(db: Session, course: Course) -> None:
    """Remove the course and everything hanging off it, or nothing."""
    course_id = course.id

    with unit_of_work(db):
        lesson_ids = [row[0] for row in db.query(Lesson.id).filter(Lesson.course_id == course_id)]

        if lesson_ids:
            db.query(LessonProgress).filter(
                LessonProgress.lesson_id.in_(lesson_ids)
            ).delete()
            db.query(Lesson).filter(Lesson.id.in_(lesson_ids)).delete()

        db.query(CourseEnrollment).filter(
            CourseEnrollment.course_id == course_id
        ).delete()
        db.query(CourseAllowedEmail).filter(
            CourseAllowedEmail.course_id == course_id
        ).delete()
        db.delete(course)

    logger.info(f"Deleted course {course_id} with {len(lesson_ids)} lessons")
