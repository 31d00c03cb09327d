from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from .user import UserSummary


class CommentCreate(BaseModel):
    task_id: int
    content: str = Field(min_length=1)


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1)


class CommentOut(BaseModel):
    id: int
    content: str
    task_id: int
    user_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    author: UserSummary

    model_config = {
        "from_attributes": True
    }
