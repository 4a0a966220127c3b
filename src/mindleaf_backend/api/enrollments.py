from typing import Annotated, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..interface.base import MessageResponse
from ..interface.enrollments import (
    CourseProgressGet,
    EnrolledCourseProgress,
    EnrollmentGet,
    LessonProgressGet,
)
from ..model.course import Course
from ..model.enrollment import CourseEnrollment, LessonProgress
from ..permissions.auth import get_authenticated_principal
from ..permissions.core import check_permission
from ..permissions.principal import AuthenticatedPrincipal
from ..services.course_service import get_course_or_404
from ..services.enrollment_service import complete_lesson, enroll, unenroll
from ..services.lesson_service import get_lesson_or_404
from ..services.progress import course_progress_detail, enrolled_courses_progress
from ..services.storage_service import LessonFileStorage, get_storage_service

enrollment_router = APIRouter(prefix="/enrollments", tags=["enrollments"])

NOT_ENROLLED = "You are not enrolled in this course"


@enrollment_router.post("/courses/{course_id}", response_model=EnrollmentGet, status_code=status.HTTP_201_CREATED)
def post_enrollment(
    course_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, CourseEnrollment, "create", course, db,
                     detail="This course is restricted to invited students", reason="not_on_allow_list")
    return enroll(db, principal, course)


@enrollment_router.get("/my-courses", response_model=List[EnrolledCourseProgress])
def get_my_courses(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    check_permission(principal, CourseEnrollment, "list", db=db)
    return enrolled_courses_progress(db, principal.user_id)


@enrollment_router.delete("/courses/{course_id}", response_model=MessageResponse)
def delete_enrollment(
    course_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    check_permission(principal, CourseEnrollment, "delete", db=db)
    unenroll(db, principal, course_id)
    return MessageResponse(message="Unenrolled from course")


@enrollment_router.post("/lessons/{lesson_id}/complete", response_model=LessonProgressGet)
def post_lesson_complete(
    lesson_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    lesson = get_lesson_or_404(db, lesson_id)
    check_permission(principal, LessonProgress, "complete", lesson.course, db,
                     detail=NOT_ENROLLED, reason="not_enrolled")
    return complete_lesson(db, principal, lesson)


@enrollment_router.get("/courses/{course_id}/progress", response_model=CourseProgressGet)
def get_course_progress(
    course_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db),
    storage: LessonFileStorage = Depends(get_storage_service)
):
    # A missing course reads as "not enrolled", same as an unknown enrollment.
    course = db.get(Course, course_id)
    check_permission(principal, LessonProgress, "get", course, db,
                     detail=NOT_ENROLLED, reason="not_enrolled")
    return course_progress_detail(db, principal.user_id, course_id, resolve_pdf=storage.resolve_or_keep)
