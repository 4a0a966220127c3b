import logging
from typing import Annotated, List, Optional, Union
from fastapi import APIRouter, Body, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..interface.lessons import LessonGet, LessonSummary
from ..model.course import Lesson
from ..permissions.auth import get_authenticated_principal
from ..permissions.core import can_view_full_lesson_content, check_permission, check_permissions
from ..permissions.principal import AuthenticatedPrincipal
from ..services.course_service import get_course_or_404
from ..services.lesson_service import (
    create_lesson,
    delete_lesson,
    get_lesson_or_404,
    ordered_course_lessons,
    reorder_lessons,
    update_lesson,
)
from ..services.storage_service import LessonFileStorage, get_storage_service

logger = logging.getLogger(__name__)

lesson_router = APIRouter(prefix="/lessons", tags=["lessons"])

MANAGE_DENIED = "Only the course author or an admin can manage lessons"


def lesson_to_get(lesson: Lesson, storage: LessonFileStorage) -> LessonGet:
    dto = LessonGet.model_validate(lesson)
    if dto.pdf_url:
        dto.pdf_url = storage.resolve_or_keep(dto.pdf_url)
    return dto


def _store_pdf(pdf: Optional[UploadFile], storage: LessonFileStorage) -> Optional[str]:
    if pdf is None or not pdf.filename:
        return None
    return storage.store(pdf.file.read(), pdf.filename, pdf.content_type)


@lesson_router.get("", response_model=List[LessonGet])
def get_lessons(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db),
    storage: LessonFileStorage = Depends(get_storage_service)
):
    query = check_permissions(principal, Lesson, "list", db)
    lessons = query.order_by(Lesson.course_id, Lesson.order_index.asc(), Lesson.id.asc()).all()
    return [lesson_to_get(lesson, storage) for lesson in lessons]


@lesson_router.get("/course/{course_id}", response_model=Union[List[LessonGet], List[LessonSummary]])
def get_course_lessons(
    course_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db),
    storage: LessonFileStorage = Depends(get_storage_service)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, Lesson, "list_summaries", course, db)
    lessons = ordered_course_lessons(db, course.id)

    if can_view_full_lesson_content(principal, course, db):
        return [lesson_to_get(lesson, storage) for lesson in lessons]

    return [
        LessonSummary(id=lesson.id, title=lesson.title, order_index=lesson.order_index, position=position)
        for position, lesson in enumerate(lessons, start=1)
    ]


@lesson_router.get("/{lesson_id}", response_model=LessonGet)
def get_lesson(
    lesson_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db),
    storage: LessonFileStorage = Depends(get_storage_service)
):
    lesson = get_lesson_or_404(db, lesson_id)
    check_permission(principal, Lesson, "get", lesson.course, db,
                     detail="Enroll in this course to view the lesson", reason="lesson_locked")
    return lesson_to_get(lesson, storage)


@lesson_router.post("", response_model=LessonGet)
def post_lesson(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    course_id: int = Form(...),
    title: str = Form(..., min_length=1),
    content: Optional[str] = Form(None),
    video_url: Optional[str] = Form(None),
    pdf: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: LessonFileStorage = Depends(get_storage_service)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, Lesson, "create", course, db, detail=MANAGE_DENIED)

    lesson = create_lesson(
        db, course,
        title=title,
        content=content,
        video_url=video_url or None,
        pdf_url=_store_pdf(pdf, storage)
    )
    return lesson_to_get(lesson, storage)


@lesson_router.put("/{lesson_id}", response_model=LessonGet)
def put_lesson(
    lesson_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    video_url: Optional[str] = Form(None),
    clear_pdf: bool = Form(False),
    pdf: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: LessonFileStorage = Depends(get_storage_service)
):
    lesson = get_lesson_or_404(db, lesson_id)
    check_permission(principal, Lesson, "update", lesson.course, db, detail=MANAGE_DENIED)

    lesson = update_lesson(
        db, lesson,
        title=title or None,
        content=content,
        video_url=video_url,
        pdf_url=_store_pdf(pdf, storage),
        clear_pdf=clear_pdf
    )
    return lesson_to_get(lesson, storage)


@lesson_router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_lesson(
    lesson_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    lesson = get_lesson_or_404(db, lesson_id)
    check_permission(principal, Lesson, "delete", lesson.course, db, detail=MANAGE_DENIED)
    delete_lesson(db, lesson)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@lesson_router.post("/course/{course_id}/reorder", response_model=List[LessonGet])
def post_reorder(
    course_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    ordered_lesson_ids: List[int] = Body(...),
    db: Session = Depends(get_db),
    storage: LessonFileStorage = Depends(get_storage_service)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, Lesson, "reorder", course, db, detail=MANAGE_DENIED)
    lessons = reorder_lessons(db, course, ordered_lesson_ids)
    return [lesson_to_get(lesson, storage) for lesson in lessons]
