# crm/schemas/query.py
"""
列表查询条件与分页结果
查询条件在构造时就做规范化：无效的筛选值、未知的排序字段都会被丢弃，
所以查询本身永远不会失败
"""
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, field_validator

from crm.schemas.common import coerce_enum
from crm.schemas.communication import Communication, CommunicationDirection, CommunicationType
from crm.schemas.student import ApplicationStatus, SchoolYear

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 25


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class RecencyFilter(str, Enum):
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class StudentSortField(str, Enum):
    NAME = "name"
    CREATED_AT = "created_at"
    LAST_ACTIVE = "last_active"
    GPA = "gpa"
    SAT_ENGLISH = "sat_english"
    SAT_MATH = "sat_math"
    ACT = "act"
    TUITION_BUDGET = "tuition_budget"


class CommunicationSortField(str, Enum):
    TIMESTAMP = "timestamp"
    TYPE = "type"
    STAFF_MEMBER = "staff_member"
    DIRECTION = "direction"


def _blank_to_none(value):
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ListQuery(BaseModel):
    """两类列表共用的搜索 / 排序 / 分页参数"""
    search: Optional[str] = None
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @field_validator("search", mode="before")
    @classmethod
    def _normalize_search(cls, value):
        value = _blank_to_none(value)
        return None if value is None else str(value)

    @field_validator("sort_order", mode="before")
    @classmethod
    def _normalize_sort_order(cls, value):
        return coerce_enum(SortOrder, value) or SortOrder.ASC

    @field_validator("page", mode="before")
    @classmethod
    def _normalize_page(cls, value):
        return _positive_int(value, 1)

    @field_validator("page_size", mode="before")
    @classmethod
    def _normalize_page_size(cls, value):
        return _positive_int(value, DEFAULT_PAGE_SIZE)


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


class StudentQuery(ListQuery):
    status: Optional[ApplicationStatus] = None
    country: Optional[str] = None
    grade: Optional[SchoolYear] = None
    last_active_filter: Optional[RecencyFilter] = None
    sort_by: Optional[StudentSortField] = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return coerce_enum(ApplicationStatus, value)

    @field_validator("grade", mode="before")
    @classmethod
    def _normalize_grade(cls, value):
        return coerce_enum(SchoolYear, value)

    @field_validator("last_active_filter", mode="before")
    @classmethod
    def _normalize_recency(cls, value):
        return coerce_enum(RecencyFilter, value)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _normalize_sort_by(cls, value):
        return coerce_enum(StudentSortField, value)

    @field_validator("country", mode="before")
    @classmethod
    def _normalize_country(cls, value):
        return _blank_to_none(value)


class CommunicationQuery(ListQuery):
    student_id: Optional[str] = None
    type: Optional[CommunicationType] = None
    direction: Optional[CommunicationDirection] = None
    staff_member: Optional[str] = None
    sort_by: Optional[CommunicationSortField] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        return coerce_enum(CommunicationType, value)

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value):
        return coerce_enum(CommunicationDirection, value)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _normalize_sort_by(cls, value):
        return coerce_enum(CommunicationSortField, value)

    @field_validator("student_id", "staff_member", mode="before")
    @classmethod
    def _normalize_strings(cls, value):
        return _blank_to_none(value)


class Page(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int


class StudentStats(BaseModel):
    total: int
    active: int
    new_this_week: int
    status_breakdown: Dict[str, int]  # 只包含出现过的状态


class CommunicationStats(BaseModel):
    total: int
    by_type: Dict[str, int]  # 所有类型都有，缺的补 0
    by_direction: Dict[str, int]
    recent_activity: List[Communication]
