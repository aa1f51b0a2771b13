# crm/services/stats.py
"""
统计汇总
始终基于完整集合计算，与当前列表的筛选条件无关
"""
from collections import Counter
from datetime import datetime
from typing import Iterable, List

from crm.schemas.communication import Communication, CommunicationDirection, CommunicationType
from crm.schemas.query import CommunicationStats, RecencyFilter, StudentStats
from crm.schemas.student import Student
from crm.services.query_engine import RECENCY_DAYS, whole_days_since

RECENT_ACTIVITY_LIMIT = 10


def aggregate_student_stats(students: Iterable[Student], now: datetime) -> StudentStats:
    students = list(students)
    active_days = RECENCY_DAYS[RecencyFilter.MONTH]
    new_days = RECENCY_DAYS[RecencyFilter.WEEK]

    breakdown = Counter(s.application_status.value for s in students)

    return StudentStats(
        total=len(students),
        active=sum(1 for s in students if whole_days_since(s.last_active, now) <= active_days),
        new_this_week=sum(1 for s in students if whole_days_since(s.created_at, now) <= new_days),
        status_breakdown=dict(breakdown),
    )


def aggregate_communication_stats(communications: Iterable[Communication]) -> CommunicationStats:
    communications = list(communications)

    # 所有枚举值都要出现，没有的计 0
    by_type = {t.value: 0 for t in CommunicationType}
    by_direction = {d.value: 0 for d in CommunicationDirection}
    for comm in communications:
        by_type[comm.type.value] += 1
        by_direction[comm.direction.value] += 1

    # 稳定排序：时间相同的保持原集合顺序
    recent = sorted(communications, key=lambda c: c.timestamp, reverse=True)

    return CommunicationStats(
        total=len(communications),
        by_type=by_type,
        by_direction=by_direction,
        recent_activity=recent[:RECENT_ACTIVITY_LIMIT],
    )


def list_staff_members(communications: Iterable[Communication]) -> List[str]:
    """去重并排序后的员工名单（用于员工筛选下拉框）"""
    return sorted({c.staff_member for c in communications})
