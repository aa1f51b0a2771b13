# crm/services/communications.py
"""
沟通记录服务
列表结果附带学生姓名；新建记录的时间戳取当前时间
"""
from datetime import datetime
from typing import Callable, List, Optional
import logging
import uuid

from pydantic import ValidationError as PydanticValidationError

from crm.schemas.common import utcnow
from crm.schemas.communication import (
    Communication,
    CommunicationCreate,
    CommunicationRead,
    CommunicationUpdate,
)
from crm.schemas.query import CommunicationQuery, CommunicationStats, Page
from crm.services.data_store import DataStore
from crm.services.errors import CRMError, OperationFailedError, ValidationError
from crm.services.latency import Latency
from crm.services.query_engine import query_communications
from crm.services.stats import aggregate_communication_stats, list_staff_members

logger = logging.getLogger(__name__)


class CommunicationsService:
    def __init__(
        self,
        store: DataStore,
        latency: Optional[Latency] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._latency = latency or Latency.none()
        self._clock = clock

    def list_communications(self, spec: Optional[CommunicationQuery] = None) -> Page:
        students = self._store.list_students()
        page = query_communications(
            self._store.list_communications(),
            students,
            spec or CommunicationQuery(),
        )

        names = {s.id: s.name for s in students}
        page.data = [
            CommunicationRead(**comm.model_dump(), student_name=names.get(comm.student_id))
            for comm in page.data
        ]
        return page

    def get_communication(self, communication_id: str) -> Communication:
        return self._store.communications.require(communication_id)

    async def create_communication(self, data: CommunicationCreate) -> Communication:
        await self._latency()
        try:
            # 学生必须存在
            self._store.students.require(data.student_id)
            communication = Communication(
                id=str(uuid.uuid4()),
                timestamp=self._clock(),
                **data.model_dump(),
            )
            self._store.communications.insert(communication)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"记录沟通失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to create communication") from e

        logger.info(
            f"已记录沟通: {communication.id} "
            f"({communication.type.value}, student={communication.student_id})"
        )
        return communication

    async def update_communication(self, communication_id: str, data: CommunicationUpdate) -> Communication:
        await self._latency()
        changes = data.model_dump(exclude_unset=True)
        try:
            if changes.get("student_id") is not None:
                self._store.students.require(changes["student_id"])
            communication = self._store.communications.update(communication_id, changes)
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"更新沟通记录 {communication_id} 失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to update communication") from e

        logger.info(f"已更新沟通记录: {communication_id}")
        return communication

    async def delete_communication(self, communication_id: str) -> Communication:
        await self._latency()
        try:
            communication = self._store.communications.remove(communication_id)
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"删除沟通记录 {communication_id} 失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to delete communication") from e

        logger.info(f"已删除沟通记录: {communication_id}")
        return communication

    async def get_stats(self) -> CommunicationStats:
        await self._latency()
        return aggregate_communication_stats(self._store.list_communications())

    def get_staff_members(self) -> List[str]:
        return list_staff_members(self._store.list_communications())
