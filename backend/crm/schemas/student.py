# crm/schemas/student.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator, model_validator

from crm.schemas.common import ensure_utc
from crm.services.validators import (
    validate_act_score,
    validate_gpa,
    validate_name,
    validate_phone_number,
    validate_sat_section,
)


class ApplicationStatus(str, Enum):
    """申请漏斗阶段（按顺序）"""
    EXPLORING = "Exploring"
    SHORTLISTING = "Shortlisting"
    APPLYING = "Applying"
    SUBMITTED = "Submitted"


class SchoolYear(str, Enum):
    FRESHMAN = "Freshman"
    SOPHOMORE = "Sophomore"
    JUNIOR = "Junior"
    SENIOR = "Senior"


class Region(str, Enum):
    NORTHEAST = "Northeast"
    MIDWEST = "Midwest"
    SOUTH = "South"
    WEST = "West"


class CollegeStatus(str, Enum):
    EXPLORING = "Exploring"
    SHORTLISTED = "Shortlisted"
    APPLYING = "Applying"
    APPLIED = "Applied"
    SUBMITTED = "Submitted"


class College(BaseModel):
    """学生名下的目标院校（不单独存在）"""
    id: str
    name: str
    city: str
    state: str
    status: CollegeStatus = CollegeStatus.EXPLORING
    added_at: datetime

    @field_validator("added_at")
    @classmethod
    def _utc_added_at(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class StudentProfile(BaseModel):
    """学生档案字段（创建与完整实体共用）"""
    name: str
    email: EmailStr
    phone: str
    country: str
    grade: SchoolYear
    gpa: float
    sat_english: Optional[int] = None
    sat_math: Optional[int] = None
    act: Optional[int] = None
    field_of_study: str
    tuition_budget: int = Field(..., ge=0, description="每年学费预算（美元）")
    preferred_regions: List[Region] = Field(default_factory=list)
    class_strength: str = ""
    application_status: ApplicationStatus = ApplicationStatus.EXPLORING

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return validate_name(value)

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        return validate_phone_number(value)

    @field_validator("preferred_regions")
    @classmethod
    def _dedupe_regions(cls, value: List[Region]) -> List[Region]:
        # 偏好地区是集合语义，保留首次出现的顺序
        return list(dict.fromkeys(value))

    @field_validator("gpa")
    @classmethod
    def _check_gpa(cls, value: float) -> float:
        return validate_gpa(value)

    @field_validator("sat_english", "sat_math")
    @classmethod
    def _check_sat(cls, value: Optional[int], info: ValidationInfo) -> Optional[int]:
        if value is None:
            return None
        return validate_sat_section(value, info.field_name)

    @field_validator("act")
    @classmethod
    def _check_act(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        return validate_act_score(value)


class Student(StudentProfile):
    id: str
    created_at: datetime
    last_active: datetime
    colleges: List[College] = Field(default_factory=list)

    @field_validator("created_at", "last_active")
    @classmethod
    def _utc_timestamps(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_timeline(self):
        if self.created_at > self.last_active:
            raise ValueError("created_at must not be later than last_active")
        return self

    @property
    def sat_total(self) -> Optional[int]:
        if self.sat_english is None or self.sat_math is None:
            return None
        return self.sat_english + self.sat_math


class StudentCreate(StudentProfile):
    colleges: List[College] = Field(default_factory=list)


class StudentUpdate(BaseModel):
    """
    部分更新：只合并显式传入的字段
    取值范围在合并成完整的 Student 时统一校验
    """
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    grade: Optional[SchoolYear] = None
    gpa: Optional[float] = None
    sat_english: Optional[int] = None
    sat_math: Optional[int] = None
    act: Optional[int] = None
    field_of_study: Optional[str] = None
    tuition_budget: Optional[int] = Field(None, ge=0)
    preferred_regions: Optional[List[Region]] = None
    class_strength: Optional[str] = None
    application_status: Optional[ApplicationStatus] = None
    last_active: Optional[datetime] = None
    colleges: Optional[List[College]] = None
