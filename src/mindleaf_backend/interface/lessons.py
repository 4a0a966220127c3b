from typing import Optional
from pydantic import BaseModel, ConfigDict

class LessonGet(BaseModel):
    id: int
    course_id: int
    title: str
    content: Optional[str] = None
    video_url: Optional[str] = None
    pdf_url: Optional[str] = None
    order_index: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

class LessonSummary(BaseModel):
    """What a caller without full access gets to see of a lesson."""
    id: int
    title: str
    order_index: Optional[int] = None
    position: int
