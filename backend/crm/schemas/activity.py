# crm/schemas/activity.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from crm.schemas.common import ensure_utc


class ActivityType(str, Enum):
    LOGIN = "login"
    SEARCH = "search"
    COLLEGE_VIEW = "college_view"
    COLLEGE_ADD = "college_add"
    DOCUMENT_UPLOAD = "document_upload"
    AI_QUESTION = "ai_question"


class Activity(BaseModel):
    """学生端产生的行为记录（时间线）"""
    id: str
    student_id: str
    type: ActivityType
    description: str
    timestamp: datetime
    metadata: Optional[Dict[str, Any]] = None  # 不透明的键值对

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ActivityCreate(BaseModel):
    type: ActivityType
    description: str = Field(..., min_length=1)
    metadata: Optional[Dict[str, Any]] = None
