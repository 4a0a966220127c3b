import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..api.exceptions import ConflictException, NotFoundException
from ..database import unit_of_work
from ..model.course import Course, Lesson
from ..model.enrollment import CourseEnrollment, LessonProgress
from ..permissions.enrollment import get_enrollment
from ..permissions.principal import AuthenticatedPrincipal
from ..utils import utc_now

logger = logging.getLogger(__name__)


def _already_enrolled() -> ConflictException:
    return ConflictException("Already enrolled in this course", reason="already_enrolled")


def enroll(db: Session, principal: AuthenticatedPrincipal, course: Course) -> CourseEnrollment:
    if get_enrollment(principal.user_id, course.id, db) is not None:
        raise _already_enrolled()

    enrollment = CourseEnrollment(user_id=principal.user_id, course_id=course.id, enrolled_at=utc_now())
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request won the unique (user_id, course_id) race
        db.rollback()
        raise _already_enrolled()

    db.refresh(enrollment)
    logger.info(f"User {principal.user_id} enrolled in course {course.id}")
    return enrollment


def unenroll(db: Session, principal: AuthenticatedPrincipal, course_id: int) -> None:
    enrollment = get_enrollment(principal.user_id, course_id, db)
    if enrollment is None:
        raise NotFoundException("Not enrolled in this course", reason="not_enrolled")

    course_lessons = select(Lesson.id).where(Lesson.course_id == course_id)

    with unit_of_work(db):
        db.query(LessonProgress).filter(
            LessonProgress.user_id == principal.user_id,
            LessonProgress.lesson_id.in_(course_lessons)
        ).delete(synchronize_session="fetch")
        db.delete(enrollment)


def _find_progress(db: Session, user_id: int, lesson_id: int):
    return db.query(LessonProgress).filter(
        LessonProgress.user_id == user_id,
        LessonProgress.lesson_id == lesson_id
    ).first()


def complete_lesson(db: Session, principal: AuthenticatedPrincipal, lesson: Lesson) -> LessonProgress:
    """Mark a lesson completed. Repeating it only moves completed_at forward."""
    progress = _find_progress(db, principal.user_id, lesson.id)

    now = utc_now()
    if progress is None:
        progress = LessonProgress(user_id=principal.user_id, lesson_id=lesson.id, completed=True, completed_at=now)
        db.add(progress)
    else:
        progress.completed = True
        progress.completed_at = now

    try:
        db.commit()
    except IntegrityError:
        # a concurrent completion inserted the (user_id, lesson_id) row first
        db.rollback()
        with unit_of_work(db):
            progress = _find_progress(db, principal.user_id, lesson.id)
            if progress is None:
                raise ConflictException("Lesson completion is already being recorded", reason="progress_conflict")
            progress.completed = True
            progress.completed_at = now

    db.refresh(progress)
    return progress
