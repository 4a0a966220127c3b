from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint, func, text
)
from sqlalchemy.orm import relationship

from .base import Base


class CourseEnrollment(Base):
    __tablename__ = 'course_enrollment'
    __table_args__ = (
        UniqueConstraint('user_id', 'course_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    course_id = Column(ForeignKey('course.id', ondelete='CASCADE'), nullable=False, index=True)
    enrolled_at = Column(DateTime(True), nullable=False, server_default=func.now())

    course = relationship('Course')
    user = relationship('User')


class LessonProgress(Base):
    __tablename__ = 'lesson_progress'
    __table_args__ = (
        UniqueConstraint('user_id', 'lesson_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    lesson_id = Column(ForeignKey('lesson.id', ondelete='CASCADE'), nullable=False, index=True)
    completed = Column(Boolean, nullable=False, default=False, server_default=text('false'))
    completed_at = Column(DateTime(True))

    lesson = relationship('Lesson')
