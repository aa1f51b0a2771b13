import pytest

from crm.schemas.student import ApplicationStatus
from crm.services.data_store import DataStore
from crm.services.errors import NotFoundError, ValidationError
from factories import make_communication, make_student


@pytest.fixture
def small_store():
    return DataStore(
        students=[make_student(id="a"), make_student(id="b")],
        communications=[make_communication(student_id="a")],
    )


def test_list_returns_copies(small_store):
    students = small_store.list_students()
    students.clear()
    assert len(small_store.students) == 2


def test_update_missing_id_leaves_collection_unchanged(small_store):
    before = [s.model_dump() for s in small_store.list_students()]

    with pytest.raises(NotFoundError) as exc_info:
        small_store.students.update("missing", {"gpa": 4.0})

    assert exc_info.value.entity_id == "missing"
    assert [s.model_dump() for s in small_store.list_students()] == before


def test_update_merges_fields_in_place(small_store):
    student = small_store.students.update("a", {"application_status": "Applying", "gpa": 3.9})

    assert student.application_status == ApplicationStatus.APPLYING
    assert student.gpa == 3.9
    assert small_store.students.get("a") is student


def test_invalid_update_does_not_partially_apply(small_store):
    original = small_store.students.get("a").model_dump()

    with pytest.raises(ValidationError):
        small_store.students.update("a", {"name": "Renamed Person", "gpa": 9.9})

    assert small_store.students.get("a").model_dump() == original


def test_id_cannot_be_changed(small_store):
    small_store.students.update("a", {"id": "z", "country": "Canada"})
    assert small_store.students.get("z") is None
    assert small_store.students.get("a").country == "Canada"


def test_insert_rejects_duplicate_id(small_store):
    with pytest.raises(ValidationError):
        small_store.students.insert(make_student(id="a"))


def test_remove_does_not_cascade(small_store):
    small_store.students.remove("a")
    assert small_store.students.get("a") is None
    assert len(small_store.communications) == 1

    with pytest.raises(NotFoundError):
        small_store.students.remove("a")


def test_require_raises_not_found(small_store):
    with pytest.raises(NotFoundError, match="Student not found: nope"):
        small_store.students.require("nope")
