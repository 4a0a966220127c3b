from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class BaseEntityGet(BaseModel):
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class MessageResponse(BaseModel):
    message: str
