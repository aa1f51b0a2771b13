# crm/services/data_store.py
"""
内存数据层
代替将来的数据库：每个实例自己持有集合，进程启动时创建后注入给各个服务
"""
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from crm.schemas.activity import Activity
from crm.schemas.communication import Communication
from crm.schemas.note import Note
from crm.schemas.student import Student
from crm.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class Collection(Generic[M]):
    """
    一类实体的有序集合
    - list_all 返回副本（插入顺序）
    - update 先校验合并后的完整实体，通过后才原地修改
    """

    def __init__(self, model: Type[M], entity_name: str, items: Iterable[M] = ()):
        self._model = model
        self._entity_name = entity_name
        self._items: List[M] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def list_all(self) -> List[M]:
        return list(self._items)

    def _index_of(self, entity_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return -1

    def get(self, entity_id: str) -> Optional[M]:
        index = self._index_of(entity_id)
        return self._items[index] if index >= 0 else None

    def require(self, entity_id: str) -> M:
        entity = self.get(entity_id)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    def insert(self, entity: M) -> M:
        if self._index_of(entity.id) >= 0:
            raise ValidationError(f"{self._entity_name} already exists: {entity.id}")
        self._items.append(entity)
        return entity

    def update(self, entity_id: str, changes: Dict[str, Any]) -> M:
        index = self._index_of(entity_id)
        if index < 0:
            raise NotFoundError(self._entity_name, entity_id)

        current = self._items[index]
        # id 不允许修改；未知字段直接忽略
        changes = {
            key: value
            for key, value in changes.items()
            if key != "id" and key in self._model.model_fields
        }

        try:
            merged = self._model.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        for key in changes:
            setattr(current, key, getattr(merged, key))
        return current

    def remove(self, entity_id: str) -> M:
        index = self._index_of(entity_id)
        if index < 0:
            raise NotFoundError(self._entity_name, entity_id)
        return self._items.pop(index)


class DataStore:
    """学生 / 沟通记录 / 备注 / 行为记录 四个集合"""

    def __init__(
        self,
        students: Iterable[Student] = (),
        communications: Iterable[Communication] = (),
        notes: Iterable[Note] = (),
        activities: Iterable[Activity] = (),
    ):
        self.students: Collection[Student] = Collection(Student, "Student", students)
        self.communications: Collection[Communication] = Collection(
            Communication, "Communication", communications
        )
        self.notes: Collection[Note] = Collection(Note, "Note", notes)
        self.activities: Collection[Activity] = Collection(Activity, "Activity", activities)

    def list_students(self) -> List[Student]:
        return self.students.list_all()

    def list_communications(self) -> List[Communication]:
        return self.communications.list_all()

    def list_notes(self) -> List[Note]:
        return self.notes.list_all()

    def list_activities(self) -> List[Activity]:
        return self.activities.list_all()

    @classmethod
    def with_mock_data(
        cls,
        seed: Optional[int] = None,
        student_count: int = 75,
        now: Optional[datetime] = None,
    ) -> "DataStore":
        """生成一套假数据并装入新的 DataStore"""
        from crm.services.mock_data import generate_dataset

        dataset = generate_dataset(seed=seed, student_count=student_count, now=now)
        logger.info(
            f"已生成 mock 数据: {len(dataset.students)} 个学生, "
            f"{len(dataset.communications)} 条沟通记录, "
            f"{len(dataset.notes)} 条备注, {len(dataset.activities)} 条行为记录"
        )
        return cls(
            students=dataset.students,
            communications=dataset.communications,
            notes=dataset.notes,
            activities=dataset.activities,
        )
