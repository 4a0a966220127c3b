from .base import Base, metadata
from .auth import User, UserRole
from .course import Course, CourseAllowedEmail, Lesson
from .enrollment import CourseEnrollment, LessonProgress

__all__ = [
    'Base',
    'metadata',
    'User',
    'UserRole',
    'Course',
    'CourseAllowedEmail',
    'Lesson',
    'CourseEnrollment',
    'LessonProgress',
]
