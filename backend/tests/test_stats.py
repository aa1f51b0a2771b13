from crm.schemas.communication import CommunicationDirection, CommunicationType
from crm.schemas.student import ApplicationStatus
from crm.services.stats import (
    RECENT_ACTIVITY_LIMIT,
    aggregate_communication_stats,
    aggregate_student_stats,
    list_staff_members,
)
from factories import NOW, days_ago, make_communication, make_student


def test_student_stats_counts():
    students = [
        make_student(created_at=days_ago(3), last_active=days_ago(1)),
        make_student(created_at=days_ago(60), last_active=days_ago(30)),
        make_student(created_at=days_ago(90), last_active=days_ago(45),
                     application_status=ApplicationStatus.SUBMITTED),
    ]
    stats = aggregate_student_stats(students, NOW)

    assert stats.total == 3
    assert stats.active == 2
    assert stats.new_this_week == 1
    assert stats.status_breakdown == {"Exploring": 2, "Submitted": 1}


def test_status_breakdown_omits_absent_statuses():
    stats = aggregate_student_stats([make_student()], NOW)
    assert "Applying" not in stats.status_breakdown


def test_communication_stats_zero_fill():
    comms = [
        make_communication(type=CommunicationType.EMAIL),
        make_communication(type=CommunicationType.CALL, direction=CommunicationDirection.INBOUND),
    ]
    stats = aggregate_communication_stats(comms)

    assert stats.total == 2
    assert stats.by_type == {"email": 1, "sms": 0, "call": 1, "meeting": 0}
    assert stats.by_direction == {"inbound": 1, "outbound": 1}


def test_communication_stats_on_empty_collection():
    stats = aggregate_communication_stats([])
    assert stats.total == 0
    assert stats.by_type["sms"] == 0
    assert stats.recent_activity == []


def test_recent_activity_is_newest_ten_with_stable_ties():
    comms = [make_communication(timestamp=days_ago(i)) for i in range(15)]
    tie_a = make_communication(timestamp=days_ago(0))
    comms.append(tie_a)

    stats = aggregate_communication_stats(comms)
    recent = [c.id for c in stats.recent_activity]

    assert len(recent) == RECENT_ACTIVITY_LIMIT
    assert recent[:2] == [comms[0].id, tie_a.id]
    assert recent[-1] == comms[8].id


def test_staff_members_are_unique_and_sorted():
    comms = [
        make_communication(staff_member="Mike Chen"),
        make_communication(staff_member="Anna Rodriguez"),
        make_communication(staff_member="Mike Chen"),
    ]
    assert list_staff_members(comms) == ["Anna Rodriguez", "Mike Chen"]
