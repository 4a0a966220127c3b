"""
Completion figures for a caller's enrollments.

progress is completed * 100 / total as an unrounded float, 0.0 for a course
without lessons.
"""

from typing import Callable, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..interface.courses import CourseGet
from ..interface.enrollments import (
    CourseProgressGet,
    EnrolledCourseProgress,
    LessonProgressEntry,
)
from ..interface.lessons import LessonGet
from ..model.course import Lesson
from ..model.enrollment import CourseEnrollment, LessonProgress


def progress_percent(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return completed * 100 / total


def _lesson_totals(db: Session, course_ids: List[int]) -> Dict[int, int]:
    rows = (
        db.query(Lesson.course_id, func.count(Lesson.id))
        .filter(Lesson.course_id.in_(course_ids))
        .group_by(Lesson.course_id)
        .all()
    )
    return {course_id: count for course_id, count in rows}


def _completed_totals(db: Session, user_id: int, course_ids: List[int]) -> Dict[int, int]:
    rows = (
        db.query(Lesson.course_id, func.count(LessonProgress.id))
        .join(Lesson, Lesson.id == LessonProgress.lesson_id)
        .filter(
            LessonProgress.user_id == user_id,
            LessonProgress.completed.is_(True),
            Lesson.course_id.in_(course_ids)
        )
        .group_by(Lesson.course_id)
        .all()
    )
    return {course_id: count for course_id, count in rows}


def enrolled_courses_progress(db: Session, user_id: int) -> List[EnrolledCourseProgress]:
    enrollments = (
        db.query(CourseEnrollment)
        .options(joinedload(CourseEnrollment.course))
        .filter(CourseEnrollment.user_id == user_id)
        .order_by(CourseEnrollment.enrolled_at.desc(), CourseEnrollment.id.desc())
        .all()
    )
    if not enrollments:
        return []

    course_ids = [enrollment.course_id for enrollment in enrollments]
    totals = _lesson_totals(db, course_ids)
    completed = _completed_totals(db, user_id, course_ids)

    result = []
    for enrollment in enrollments:
        total = totals.get(enrollment.course_id, 0)
        done = completed.get(enrollment.course_id, 0)
        result.append(EnrolledCourseProgress(
            course=CourseGet.model_validate(enrollment.course),
            enrolled_at=enrollment.enrolled_at,
            total_lessons=total,
            completed_lessons=done,
            progress=progress_percent(done, total)
        ))
    return result


def course_progress_detail(db: Session, user_id: int, course_id: int,
                           resolve_pdf: Optional[Callable[[Optional[str]], Optional[str]]] = None) -> CourseProgressGet:
    """Per lesson completion for one course. Enrollment must be checked by the caller."""
    lessons = (
        db.query(Lesson)
        .filter(Lesson.course_id == course_id)
        .order_by(Lesson.order_index.asc(), Lesson.id.asc())
        .all()
    )

    records = {}
    if lessons:
        rows = db.query(LessonProgress).filter(
            LessonProgress.user_id == user_id,
            LessonProgress.lesson_id.in_([lesson.id for lesson in lessons])
        ).all()
        records = {row.lesson_id: row for row in rows}

    entries = []
    for lesson in lessons:
        record = records.get(lesson.id)
        dto = LessonGet.model_validate(lesson)
        if resolve_pdf is not None and dto.pdf_url:
            dto.pdf_url = resolve_pdf(dto.pdf_url)
        entries.append(LessonProgressEntry(
            lesson=dto,
            completed=bool(record and record.completed),
            completed_at=record.completed_at if record else None
        ))

    done = sum(1 for entry in entries if entry.completed)
    return CourseProgressGet(
        lessons=entries,
        total_lessons=len(entries),
        completed_lessons=done,
        progress=progress_percent(done, len(entries))
    )
