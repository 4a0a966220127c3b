from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from mindleaf_backend.interface.courses import CourseGet
from mindleaf_backend.interface.lessons import LessonGet

class EnrollmentGet(BaseModel):
    id: int
    user_id: int
    course_id: int
    enrolled_at: datetime

    model_config = ConfigDict(from_attributes=True)

class LessonProgressGet(BaseModel):
    id: int
    user_id: int
    lesson_id: int
    completed: bool
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class EnrolledCourseProgress(BaseModel):
    course: CourseGet
    enrolled_at: datetime
    total_lessons: int
    completed_lessons: int
    progress: float

class LessonProgressEntry(BaseModel):
    lesson: LessonGet
    completed: bool
    completed_at: Optional[datetime] = None

class CourseProgressGet(BaseModel):
    lessons: List[LessonProgressEntry]
    total_lessons: int
    completed_lessons: int
    progress: float
