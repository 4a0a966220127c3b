import logging
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import NotFoundException
from ..database import unit_of_work
from ..model.course import Course, Lesson
from ..model.enrollment import LessonProgress

logger = logging.getLogger(__name__)


def get_lesson_or_404(db: Session, lesson_id: int) -> Lesson:
    lesson = db.get(Lesson, lesson_id)
    if lesson is None:
        raise NotFoundException(f"Lesson not found with id: {lesson_id}", reason="lesson_not_found")
    return lesson


def ordered_course_lessons(db: Session, course_id: int) -> List[Lesson]:
    return (
        db.query(Lesson)
        .filter(Lesson.course_id == course_id)
        .order_by(Lesson.order_index.asc(), Lesson.id.asc())
        .all()
    )


def next_order_index(db: Session, course_id: int) -> int:
    # count + 1, so an index can repeat after a deletion in the middle
    return db.query(Lesson).filter(Lesson.course_id == course_id).count() + 1


def create_lesson(db: Session, course: Course, title: str, content: Optional[str] = None,
                  video_url: Optional[str] = None, pdf_url: Optional[str] = None) -> Lesson:
    lesson = Lesson(
        course_id=course.id,
        title=title,
        content=content,
        video_url=video_url,
        pdf_url=pdf_url,
        order_index=next_order_index(db, course.id)
    )
    with unit_of_work(db):
        db.add(lesson)

    db.refresh(lesson)
    return lesson


def update_lesson(db: Session, lesson: Lesson, title: Optional[str] = None, content: Optional[str] = None,
                  video_url: Optional[str] = None, pdf_url: Optional[str] = None,
                  clear_pdf: bool = False) -> Lesson:
    """Only fields that are given change. A new pdf wins over clear_pdf."""
    with unit_of_work(db):
        if title is not None:
            lesson.title = title
        if content is not None:
            lesson.content = content
        if video_url is not None:
            lesson.video_url = video_url
        if pdf_url is not None:
            lesson.pdf_url = pdf_url
        elif clear_pdf:
            lesson.pdf_url = None

    db.refresh(lesson)
    return lesson


def delete_lesson(db: Session, lesson: Lesson) -> None:
    with unit_of_work(db):
        db.query(LessonProgress).filter(
            LessonProgress.lesson_id == lesson.id
        ).delete()
        db.delete(lesson)


def reorder_lessons(db: Session, course: Course, ordered_ids: Iterable[int]) -> List[Lesson]:
    """
    Listed lessons of the course get 1, 2, 3, ... in list order. Unknown ids
    and repeats are skipped. Unlisted lessons without a usable index are
    appended after them; unlisted lessons that already have an index >= 1
    keep it, even if a listed lesson now shares it.
    """
    remaining = {lesson.id: lesson for lesson in ordered_course_lessons(db, course.id)}
    index = 1

    with unit_of_work(db):
        for lesson_id in ordered_ids:
            lesson = remaining.pop(lesson_id, None)
            if lesson is None:
                continue
            lesson.order_index = index
            index += 1

        for lesson in remaining.values():
            if lesson.order_index is None or lesson.order_index < 1:
                lesson.order_index = index
                index += 1

    return ordered_course_lessons(db, course.id)
