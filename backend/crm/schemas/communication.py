# crm/schemas/communication.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from crm.schemas.common import ensure_utc


class CommunicationType(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    CALL = "call"
    MEETING = "meeting"


class CommunicationDirection(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class Communication(BaseModel):
    id: str
    student_id: str  # 弱引用，删除学生时不级联
    type: CommunicationType
    direction: CommunicationDirection
    content: str
    staff_member: str
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class CommunicationRead(Communication):
    """列表返回的沟通记录，附带学生姓名"""
    student_name: Optional[str] = None


class CommunicationCreate(BaseModel):
    student_id: str
    type: CommunicationType
    direction: CommunicationDirection
    content: str = Field(..., min_length=1)
    staff_member: str = Field(..., min_length=1)


class CommunicationUpdate(BaseModel):
    student_id: Optional[str] = None
    type: Optional[CommunicationType] = None
    direction: Optional[CommunicationDirection] = None
    content: Optional[str] = Field(None, min_length=1)
    staff_member: Optional[str] = Field(None, min_length=1)
