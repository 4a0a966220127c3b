from typing import Annotated, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..interface.base import MessageResponse
from ..interface.courses import CourseAccessGet, CourseAccessUpdate, CourseCreate, CourseGet
from ..model.course import Course
from ..permissions.auth import get_authenticated_principal, get_current_principal
from ..permissions.core import check_permission, check_permissions, visible_courses
from ..permissions.principal import AuthenticatedPrincipal, Principal
from ..services.course_service import (
    allowed_emails_of,
    create_course,
    delete_course,
    get_course_or_404,
    list_courses,
    replace_allow_list,
)

course_router = APIRouter(prefix="/courses", tags=["courses"])

MANAGE_DENIED = "Only the course author or an admin can do this"


@course_router.get("", response_model=List[CourseGet])
def get_courses(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    check_permission(principal, Course, "list", db=db)
    return visible_courses(principal, list_courses(db))


@course_router.post("", response_model=CourseGet)
def post_course(
    payload: CourseCreate,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    check_permission(principal, Course, "create", db=db, detail="Only creators and admins can create courses")
    return create_course(db, principal, payload)


@course_router.get("/my-created", response_model=List[CourseGet])
def get_my_created_courses(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    query = check_permissions(principal, Course, "list_created", db)
    return query.order_by(Course.created_at.desc(), Course.id.desc()).all()


@course_router.get("/{course_id}", response_model=CourseGet)
def get_course(
    course_id: int,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, Course, "get", course, db, detail="This course is restricted", reason="course_restricted")
    return course


@course_router.get("/{course_id}/access", response_model=CourseAccessGet)
def get_course_access(
    course_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, Course, "get_access", course, db, detail=MANAGE_DENIED)
    return CourseAccessGet(
        restricted_to_allow_list=course.restricted_to_allow_list,
        allowed_emails=allowed_emails_of(course)
    )


@course_router.put("/{course_id}/access", response_model=CourseAccessGet)
def put_course_access(
    course_id: int,
    payload: CourseAccessUpdate,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, Course, "update_access", course, db, detail=MANAGE_DENIED)
    course = replace_allow_list(db, course, payload.restricted_to_allow_list, payload.allowed_emails)
    return CourseAccessGet(
        restricted_to_allow_list=course.restricted_to_allow_list,
        allowed_emails=allowed_emails_of(course)
    )


@course_router.delete("/{course_id}", response_model=MessageResponse)
def remove_course(
    course_id: int,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_authenticated_principal)],
    db: Session = Depends(get_db)
):
    course = get_course_or_404(db, course_id)
    check_permission(principal, Course, "delete", course, db, detail=MANAGE_DENIED)
    delete_course(db, course)
    return MessageResponse(message="Course deleted")
