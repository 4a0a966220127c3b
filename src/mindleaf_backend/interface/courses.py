from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from mindleaf_backend.interface.base import BaseEntityGet

class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255, description="Course title")
    description: Optional[str] = Field(None, description="Course description")
    author_id: Optional[int] = Field(None, description="Author user id, defaults to the caller")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty or only whitespace')
        return v.strip()

class CourseGet(BaseEntityGet):
    id: int
    title: str
    description: Optional[str] = None
    author_id: Optional[int] = None
    restricted_to_allow_list: bool = False

class CourseAccessUpdate(BaseModel):
    restricted_to_allow_list: bool = Field(False, description="Hide the course from callers not on the allow list")
    # Non-string entries are dropped during normalization rather than rejected.
    allowed_emails: Optional[List[Any]] = Field(None, description="Replacement allow list")

class CourseAccessGet(BaseModel):
    restricted_to_allow_list: bool
    allowed_emails: List[str]
