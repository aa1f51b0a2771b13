# crm/schemas/note.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from crm.schemas.common import ensure_utc


class Note(BaseModel):
    """内部备注（仅员工可见）"""
    id: str
    student_id: str
    content: str
    author: str
    timestamp: datetime
    is_private: bool = False

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    is_private: bool = False


class NoteUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1)
    is_private: Optional[bool] = None
