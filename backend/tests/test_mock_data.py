from collections import Counter

from crm.schemas.activity import ActivityType
from crm.services.mock_data import COLLEGES, STAFF_MEMBERS, generate_dataset
from factories import NOW


def test_same_seed_is_reproducible():
    first = generate_dataset(seed=7, student_count=5, now=NOW)
    second = generate_dataset(seed=7, student_count=5, now=NOW)

    assert [s.model_dump() for s in first.students] == [s.model_dump() for s in second.students]
    assert [c.id for c in first.communications] == [c.id for c in second.communications]


def test_student_count_and_invariants():
    dataset = generate_dataset(seed=1, student_count=30, now=NOW)
    assert len(dataset.students) == 30

    ids = [s.id for s in dataset.students]
    assert len(set(ids)) == len(ids)

    for student in dataset.students:
        assert student.created_at <= student.last_active <= NOW
        assert 0 <= student.gpa <= 4.5
        assert 2 <= len(student.colleges) <= 9
        assert len({c.name for c in student.colleges}) == len(student.colleges)
        assert {c.name for c in student.colleges} <= {c["name"] for c in COLLEGES}
        if student.sat_total is not None:
            assert 400 <= student.sat_total <= 1600


def test_related_records_point_at_students():
    dataset = generate_dataset(seed=3, student_count=10, now=NOW)
    ids = {s.id for s in dataset.students}

    per_student = Counter(c.student_id for c in dataset.communications)
    assert set(per_student) == ids
    assert all(1 <= count <= 10 for count in per_student.values())

    assert all(c.staff_member in STAFF_MEMBERS for c in dataset.communications)
    assert all(n.student_id in ids for n in dataset.notes)
    assert all(a.student_id in ids for a in dataset.activities)


def test_college_view_activities_carry_metadata():
    dataset = generate_dataset(seed=5, student_count=10, now=NOW)
    for activity in dataset.activities:
        if activity.type == ActivityType.COLLEGE_VIEW:
            assert "college_id" in activity.metadata
        else:
            assert activity.metadata is None
