from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, String, Text,
    UniqueConstraint, func, text
)
from sqlalchemy.orm import relationship

from .base import Base


class Course(Base):
    __tablename__ = 'course'

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    title = Column(String(255), nullable=False)
    description = Column(Text)
    author_id = Column(ForeignKey('user.id', ondelete='SET NULL'), index=True)
    restricted_to_allow_list = Column(Boolean, nullable=False, default=False, server_default=text('false'))

    author = relationship('User')
    # Rows below the course are removed explicitly, never by the ORM.
    allowed_emails = relationship('CourseAllowedEmail', back_populates='course',
                                  lazy='selectin', order_by='CourseAllowedEmail.id',
                                  passive_deletes='all')


class CourseAllowedEmail(Base):
    __tablename__ = 'course_allowed_email'
    __table_args__ = (
        UniqueConstraint('course_id', 'email'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(ForeignKey('course.id', ondelete='CASCADE'), nullable=False, index=True)
    email = Column(String(320), nullable=False)

    course = relationship('Course', back_populates='allowed_emails')


class Lesson(Base):
    __tablename__ = 'lesson'

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(ForeignKey('course.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text)
    video_url = Column(String(2048))
    pdf_url = Column(String(2048))
    order_index = Column(Integer)

    course = relationship('Course')
