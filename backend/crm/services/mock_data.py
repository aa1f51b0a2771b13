# crm/services/mock_data.py
"""
Mock 数据生成
进程启动时批量生成学生、目标院校、沟通记录、备注和行为记录
传入 seed 时结果可复现
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, TypeVar
import random
import uuid

from crm.schemas.activity import Activity, ActivityType
from crm.schemas.common import utcnow
from crm.schemas.communication import Communication, CommunicationDirection, CommunicationType
from crm.schemas.note import Note
from crm.schemas.student import (
    ApplicationStatus,
    College,
    CollegeStatus,
    Region,
    SchoolYear,
    Student,
)

T = TypeVar("T")

FIRST_NAMES = [
    "Emma", "Liam", "Olivia", "Noah", "Ava", "William", "Sophia", "Mason", "Isabella", "James",
    "Charlotte", "Benjamin", "Amelia", "Lucas", "Mia", "Henry", "Harper", "Alexander", "Evelyn", "Sebastian",
    "Abigail", "Jackson", "Emily", "Aiden", "Elizabeth", "Matthew", "Mila", "Samuel", "Ella", "David",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
    "Lee", "Perez", "Thompson", "White", "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson",
]

COUNTRIES = [
    "United States", "Canada", "United Kingdom", "Australia", "India", "Singapore", "Germany",
    "France", "South Korea", "Japan", "Brazil", "Mexico", "Netherlands", "Sweden", "Switzerland",
]

FIELDS_OF_STUDY = [
    "Computer Science", "Business Administration", "Engineering", "Psychology", "Biology",
    "Economics", "Political Science", "English Literature", "Mathematics", "Physics",
    "Chemistry", "Pre-Medicine", "Art History", "International Relations", "Environmental Science",
]

CLASS_STRENGTHS = [
    "Small (Under 5,000)", "Medium (5,000-15,000)", "Large (15,000-30,000)", "Very Large (30,000+)",
]

COLLEGES = [
    {"name": "Harvard University", "city": "Cambridge", "state": "MA"},
    {"name": "Stanford University", "city": "Stanford", "state": "CA"},
    {"name": "MIT", "city": "Cambridge", "state": "MA"},
    {"name": "Yale University", "city": "New Haven", "state": "CT"},
    {"name": "Princeton University", "city": "Princeton", "state": "NJ"},
    {"name": "Columbia University", "city": "New York", "state": "NY"},
    {"name": "University of Chicago", "city": "Chicago", "state": "IL"},
    {"name": "University of Pennsylvania", "city": "Philadelphia", "state": "PA"},
    {"name": "Northwestern University", "city": "Evanston", "state": "IL"},
    {"name": "Duke University", "city": "Durham", "state": "NC"},
]

STAFF_MEMBERS = ["Sarah Johnson", "Mike Chen", "Emily Davis", "James Wilson", "Anna Rodriguez"]

COMMUNICATION_TEMPLATES: Dict[CommunicationType, List[str]] = {
    CommunicationType.EMAIL: [
        "Welcome email sent with getting started guide",
        "Follow-up on college selection process",
        "Essay review feedback provided",
        "Application deadline reminder",
        "Scholarship opportunity notification",
    ],
    CommunicationType.SMS: [
        "Quick check-in on application progress",
        "Reminder about upcoming deadline",
        "Congratulations on college acceptance",
    ],
    CommunicationType.CALL: [
        "Initial consultation call completed",
        "College selection discussion",
        "Essay brainstorming session",
        "Application strategy meeting",
    ],
    CommunicationType.MEETING: [
        "In-person college counseling session",
        "Parent-student strategy meeting",
        "Mock interview practice",
    ],
}

NOTE_TEMPLATES = [
    "Student is very motivated and organized",
    "Parents are heavily involved in the process",
    "Strong academic performance but needs essay help",
    "Interested in STEM programs specifically",
    "Budget constraints may limit options",
    "Excellent extracurricular activities",
    "Needs help with standardized test prep",
    "Very responsive to communication",
    "Has clear career goals in mind",
    "Considering gap year options",
]

ACTIVITY_DESCRIPTIONS: Dict[ActivityType, List[str]] = {
    ActivityType.LOGIN: ["User logged in via Google OAuth", "User logged in via email"],
    ActivityType.SEARCH: [
        "Searched for colleges in California",
        "Filtered colleges by tuition budget",
        "Searched for engineering programs",
    ],
    ActivityType.COLLEGE_VIEW: [
        "Viewed Harvard University profile",
        "Viewed Stanford University details",
        "Checked admission requirements",
    ],
    ActivityType.COLLEGE_ADD: ["Added MIT to My Colleges", "Added Yale to shortlist", "Saved Columbia University"],
    ActivityType.DOCUMENT_UPLOAD: ["Uploaded transcript", "Submitted essay draft", "Added recommendation letter"],
    ActivityType.AI_QUESTION: [
        "Asked about college admissions",
        "Inquired about essay topics",
        "Asked for career advice",
    ],
}

EARLIEST_CREATED_AT = datetime(2023, 1, 1, tzinfo=timezone.utc)


@dataclass
class MockDataset:
    students: List[Student] = field(default_factory=list)
    communications: List[Communication] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)
    activities: List[Activity] = field(default_factory=list)


class MockDataGenerator:
    def __init__(self, seed: Optional[int] = None, now: Optional[datetime] = None):
        self._rng = random.Random(seed)
        self._now = now or utcnow()

    # ===============================
    # 工具函数
    # ===============================
    def _uuid(self) -> str:
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))

    def _choice(self, items: Sequence[T]) -> T:
        return self._rng.choice(items)

    def _sample(self, items: Sequence[T], count: int) -> List[T]:
        return self._rng.sample(list(items), min(count, len(items)))

    def _date_between(self, start: datetime, end: datetime) -> datetime:
        if end <= start:
            return start
        return start + (end - start) * self._rng.random()

    # ===============================
    # 实体
    # ===============================
    def colleges_for(self, created_at: datetime) -> List[College]:
        picks = self._sample(COLLEGES, self._rng.randint(2, 9))
        return [
            College(
                id=self._uuid(),
                name=item["name"],
                city=item["city"],
                state=item["state"],
                status=self._choice(list(CollegeStatus)),
                added_at=self._date_between(created_at, self._now),
            )
            for item in picks
        ]

    def student(self) -> Student:
        first_name = self._choice(FIRST_NAMES)
        last_name = self._choice(LAST_NAMES)
        created_at = self._date_between(EARLIEST_CREATED_AT, self._now)
        last_active = self._date_between(self._now - timedelta(days=30), self._now)
        # 不能早于注册时间
        last_active = max(last_active, created_at)

        rng = self._rng
        return Student(
            id=self._uuid(),
            name=f"{first_name} {last_name}",
            email=f"{first_name.lower()}.{last_name.lower()}@email.com",
            phone=f"+1-{rng.randint(100, 999)}-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}",
            country=self._choice(COUNTRIES),
            grade=self._choice(list(SchoolYear)),
            gpa=round(rng.random() * 2 + 2.5, 2),
            sat_english=rng.randint(400, 799) if rng.random() > 0.3 else None,
            sat_math=rng.randint(400, 799) if rng.random() > 0.3 else None,
            act=rng.randint(16, 35) if rng.random() > 0.5 else None,
            field_of_study=self._choice(FIELDS_OF_STUDY),
            tuition_budget=rng.randint(20000, 79999),
            preferred_regions=self._sample(list(Region), rng.randint(1, 3)),
            class_strength=self._choice(CLASS_STRENGTHS),
            application_status=self._choice(list(ApplicationStatus)),
            created_at=created_at,
            last_active=last_active,
            colleges=self.colleges_for(created_at),
        )

    def communications_for(self, student: Student) -> List[Communication]:
        items = []
        for _ in range(self._rng.randint(1, 10)):
            comm_type = self._choice(list(CommunicationType))
            items.append(Communication(
                id=self._uuid(),
                student_id=student.id,
                type=comm_type,
                direction=self._choice(list(CommunicationDirection)),
                content=self._choice(COMMUNICATION_TEMPLATES[comm_type]),
                staff_member=self._choice(STAFF_MEMBERS),
                timestamp=self._date_between(student.created_at, self._now),
            ))
        return items

    def notes_for(self, student: Student) -> List[Note]:
        return [
            Note(
                id=self._uuid(),
                student_id=student.id,
                content=self._choice(NOTE_TEMPLATES),
                author=self._choice(STAFF_MEMBERS),
                timestamp=self._date_between(student.created_at, self._now),
                is_private=self._rng.random() > 0.7,
            )
            for _ in range(self._rng.randint(0, 4))
        ]

    def activities_for(self, student: Student) -> List[Activity]:
        items = []
        for _ in range(self._rng.randint(5, 29)):
            activity_type = self._choice(list(ActivityType))
            metadata = None
            if activity_type == ActivityType.COLLEGE_VIEW:
                metadata = {"college_id": self._uuid()}
            items.append(Activity(
                id=self._uuid(),
                student_id=student.id,
                type=activity_type,
                description=self._choice(ACTIVITY_DESCRIPTIONS[activity_type]),
                timestamp=self._date_between(student.created_at, self._now),
                metadata=metadata,
            ))
        return items

    def dataset(self, student_count: int = 75) -> MockDataset:
        dataset = MockDataset()
        for _ in range(student_count):
            student = self.student()
            dataset.students.append(student)
            dataset.communications.extend(self.communications_for(student))
            dataset.notes.extend(self.notes_for(student))
            dataset.activities.extend(self.activities_for(student))
        return dataset


def generate_dataset(
    seed: Optional[int] = None,
    student_count: int = 75,
    now: Optional[datetime] = None,
) -> MockDataset:
    return MockDataGenerator(seed=seed, now=now).dataset(student_count)
