# crm/services/students.py
"""
学生服务
列表查询直接走查询引擎；增删改先经过模拟延迟，意外错误统一包装成 OperationFailedError
"""
from datetime import datetime
from typing import Callable, Optional
import logging
import uuid

from pydantic import ValidationError as PydanticValidationError

from crm.schemas.common import utcnow
from crm.schemas.query import Page, StudentQuery, StudentStats
from crm.schemas.student import Student, StudentCreate, StudentUpdate
from crm.services.data_store import DataStore
from crm.services.errors import CRMError, OperationFailedError, ValidationError
from crm.services.latency import Latency
from crm.services.query_engine import query_students
from crm.services.stats import aggregate_student_stats

logger = logging.getLogger(__name__)


class StudentsService:
    def __init__(
        self,
        store: DataStore,
        latency: Optional[Latency] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._latency = latency or Latency.none()
        self._clock = clock

    def list_students(self, spec: Optional[StudentQuery] = None) -> Page:
        """按筛选 / 排序 / 分页条件查询学生"""
        return query_students(self._store.list_students(), spec or StudentQuery(), self._clock())

    def get_student(self, student_id: str) -> Student:
        return self._store.students.require(student_id)

    async def create_student(self, data: StudentCreate) -> Student:
        await self._latency()
        try:
            now = self._clock()
            student = Student(
                id=str(uuid.uuid4()),
                created_at=now,
                last_active=now,
                **data.model_dump(),
            )
            self._store.students.insert(student)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"创建学生失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to create student") from e

        logger.info(f"已创建学生: {student.id} ({student.name})")
        return student

    async def update_student(self, student_id: str, data: StudentUpdate) -> Student:
        await self._latency()
        try:
            student = self._store.students.update(student_id, data.model_dump(exclude_unset=True))
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"更新学生 {student_id} 失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to update student") from e

        logger.info(f"已更新学生: {student_id}")
        return student

    async def delete_student(self, student_id: str) -> Student:
        """只删除学生本身，相关沟通记录等不级联删除"""
        await self._latency()
        try:
            student = self._store.students.remove(student_id)
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"删除学生 {student_id} 失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to delete student") from e

        logger.info(f"已删除学生: {student_id}")
        return student

    async def get_stats(self) -> StudentStats:
        await self._latency()
        return aggregate_student_stats(self._store.list_students(), self._clock())
