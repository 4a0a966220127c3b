"""
Builders for test data. Everything is committed so API calls see it.
"""

from mindleaf_backend.interface.tokens import generate_token, hash_password
from mindleaf_backend.model import (
    Course,
    CourseAllowedEmail,
    CourseEnrollment,
    Lesson,
    LessonProgress,
    User,
    UserRole,
)

PASSWORD = "correct horse"


def make_user(db, email, role=UserRole.STUDENT, password=PASSWORD, logged_in=True, name=None):
    user = User(
        name=name or email.split("@")[0],
        email=email,
        password=hash_password(password),
        role=role,
        auth_token=generate_token() if logged_in else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth(user):
    return {"Authorization": f"Bearer {user.auth_token}"}


def make_course(db, author, title="Course", restricted=False, emails=()):
    course = Course(
        title=title,
        description=f"{title} description",
        author_id=author.id if author is not None else None,
        restricted_to_allow_list=restricted,
    )
    db.add(course)
    db.flush()
    for email in emails:
        db.add(CourseAllowedEmail(course_id=course.id, email=email))
    db.commit()
    db.refresh(course)
    return course


def make_lesson(db, course, title="Lesson", order_index=None, pdf_url=None, content="Body"):
    if order_index is None:
        order_index = db.query(Lesson).filter(Lesson.course_id == course.id).count() + 1
    lesson = Lesson(course_id=course.id, title=title, content=content, order_index=order_index, pdf_url=pdf_url)
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


def enroll_user(db, user, course):
    enrollment = CourseEnrollment(user_id=user.id, course_id=course.id)
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment


def complete(db, user, lesson, completed=True):
    progress = LessonProgress(user_id=user.id, lesson_id=lesson.id, completed=completed)
    db.add(progress)
    db.commit()
    return progress
