# crm/services/query_engine.py
"""
列表查询引擎
对内存中的完整集合做：精确筛选 -> 关键词搜索 -> 活跃度筛选 -> 排序 -> 分页
纯函数，不修改传入的集合，也不会抛错
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar
import math

from crm.schemas.communication import Communication
from crm.schemas.query import (
    CommunicationQuery,
    CommunicationSortField,
    Page,
    RecencyFilter,
    SortOrder,
    StudentQuery,
    StudentSortField,
)
from crm.schemas.student import Student

T = TypeVar("T")

Predicate = Callable[[T], bool]
SortKey = Callable[[T], Any]

# 活跃度筛选对应的天数上限（含）
RECENCY_DAYS = {
    RecencyFilter.WEEK: 7,
    RecencyFilter.MONTH: 30,
}


# ===============================
# 排序字段表
# ===============================
STUDENT_SORT_KEYS: Dict[StudentSortField, SortKey] = {
    StudentSortField.NAME: lambda s: s.name,
    StudentSortField.CREATED_AT: lambda s: s.created_at,
    StudentSortField.LAST_ACTIVE: lambda s: s.last_active,
    StudentSortField.GPA: lambda s: s.gpa,
    StudentSortField.SAT_ENGLISH: lambda s: s.sat_english,
    StudentSortField.SAT_MATH: lambda s: s.sat_math,
    StudentSortField.ACT: lambda s: s.act,
    StudentSortField.TUITION_BUDGET: lambda s: s.tuition_budget,
}

COMMUNICATION_SORT_KEYS: Dict[CommunicationSortField, SortKey] = {
    CommunicationSortField.TIMESTAMP: lambda c: c.timestamp,
    CommunicationSortField.TYPE: lambda c: c.type.value,
    CommunicationSortField.STAFF_MEMBER: lambda c: c.staff_member,
    CommunicationSortField.DIRECTION: lambda c: c.direction.value,
}


@dataclass(frozen=True)
class SortSpec:
    key: SortKey
    descending: bool = False


# ===============================
# 通用步骤
# ===============================
def whole_days_since(moment: datetime, now: datetime) -> int:
    """两个时间之间相差的整天数（向下取整）"""
    return (now - moment) // timedelta(days=1)


def matches_text(needle: str, values: Iterable[Optional[str]]) -> bool:
    """大小写不敏感的子串匹配，任意一个字段命中即可"""
    needle = needle.lower()
    return any(value is not None and needle in value.lower() for value in values)


def sort_nulls_last(items: Sequence[T], key: SortKey, descending: bool = False) -> List[T]:
    """
    稳定排序；键为 None 的元素无论升序降序都排在最后
    （list.sort 在 reverse=True 时同样保持相等元素的原有顺序）
    """
    present = [item for item in items if key(item) is not None]
    missing = [item for item in items if key(item) is None]
    present.sort(key=key, reverse=descending)
    return present + missing


def paginate(items: Sequence[T], page: int, page_size: int) -> Page:
    total = len(items)
    total_pages = math.ceil(total / page_size) if total else 0
    start = (page - 1) * page_size
    return Page(
        data=list(items[start:start + page_size]),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )


def run_query(
    collection: Iterable[T],
    predicates: Sequence[Predicate],
    sort: Optional[SortSpec],
    page: int,
    page_size: int,
) -> Page:
    """按顺序套用筛选条件，再排序、分页"""
    rows = list(collection)
    for predicate in predicates:
        rows = [row for row in rows if predicate(row)]

    if sort is not None:
        rows = sort_nulls_last(rows, sort.key, sort.descending)

    return paginate(rows, page, page_size)


# ===============================
# 学生列表
# ===============================
def student_predicates(spec: StudentQuery, now: datetime) -> List[Predicate]:
    predicates: List[Predicate] = []

    # 1. 精确匹配
    if spec.status is not None:
        predicates.append(lambda s: s.application_status == spec.status)
    if spec.country:
        predicates.append(lambda s: s.country == spec.country)
    if spec.grade is not None:
        predicates.append(lambda s: s.grade == spec.grade)

    # 2. 关键词搜索：姓名 / 邮箱 / 国家
    if spec.search:
        predicates.append(lambda s: matches_text(spec.search, (s.name, s.email, s.country)))

    # 3. 最近活跃
    max_days = RECENCY_DAYS.get(spec.last_active_filter)
    if max_days is not None:
        predicates.append(lambda s: whole_days_since(s.last_active, now) <= max_days)

    return predicates


def query_students(students: Iterable[Student], spec: StudentQuery, now: datetime) -> Page:
    sort = None
    if spec.sort_by is not None:
        sort = SortSpec(
            key=STUDENT_SORT_KEYS[spec.sort_by],
            descending=spec.sort_order == SortOrder.DESC,
        )

    return run_query(
        students,
        student_predicates(spec, now),
        sort,
        spec.page,
        spec.page_size,
    )


# ===============================
# 沟通记录列表
# ===============================
def communication_predicates(
    spec: CommunicationQuery,
    students_by_id: Mapping[str, Student],
) -> List[Predicate]:
    predicates: List[Predicate] = []

    # 1. 精确匹配
    if spec.student_id:
        predicates.append(lambda c: c.student_id == spec.student_id)
    if spec.type is not None:
        predicates.append(lambda c: c.type == spec.type)
    if spec.direction is not None:
        predicates.append(lambda c: c.direction == spec.direction)
    if spec.staff_member:
        predicates.append(lambda c: c.staff_member == spec.staff_member)

    # 2. 关键词搜索：内容 / 员工 / 关联学生的姓名和邮箱
    if spec.search:
        def _search(c: Communication) -> bool:
            student = students_by_id.get(c.student_id)
            fields = [c.content, c.staff_member]
            if student is not None:
                fields.extend([student.name, student.email])
            return matches_text(spec.search, fields)

        predicates.append(_search)

    return predicates


def query_communications(
    communications: Iterable[Communication],
    students: Iterable[Student],
    spec: CommunicationQuery,
) -> Page:
    students_by_id = {s.id: s for s in students}

    if spec.sort_by is None:
        # 没有指定排序时默认最新的在前
        sort = SortSpec(key=COMMUNICATION_SORT_KEYS[CommunicationSortField.TIMESTAMP], descending=True)
    else:
        sort = SortSpec(
            key=COMMUNICATION_SORT_KEYS[spec.sort_by],
            descending=spec.sort_order == SortOrder.DESC,
        )

    return run_query(
        communications,
        communication_predicates(spec, students_by_id),
        sort,
        spec.page,
        spec.page_size,
    )
