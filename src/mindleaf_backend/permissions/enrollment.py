from sqlalchemy.orm import Session

from mindleaf_backend.model.enrollment import CourseEnrollment


def is_enrolled_in_course(user_id: int, course_id: int, db: Session) -> bool:
    return db.query(CourseEnrollment.id).filter(
        CourseEnrollment.user_id == user_id,
        CourseEnrollment.course_id == course_id
    ).first() is not None


def get_enrollment(user_id: int, course_id: int, db: Session):
    return db.query(CourseEnrollment).filter(
        CourseEnrollment.user_id == user_id,
        CourseEnrollment.course_id == course_id
    ).first()
