# crm/services/activities.py
from datetime import datetime
from typing import Callable, List, Optional
import logging
import uuid

from crm.schemas.activity import Activity, ActivityCreate, ActivityType
from crm.schemas.common import utcnow
from crm.services.data_store import DataStore
from crm.services.errors import CRMError, OperationFailedError
from crm.services.latency import Latency

logger = logging.getLogger(__name__)


class ActivitiesService:
    """学生行为时间线"""

    def __init__(
        self,
        store: DataStore,
        latency: Optional[Latency] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._latency = latency or Latency.none()
        self._clock = clock

    def list_activities(
        self,
        student_id: str,
        activity_type: Optional[ActivityType] = None,
        limit: Optional[int] = None,
    ) -> List[Activity]:
        """最新的在前；limit 为空或小于 1 时不截断"""
        self._store.students.require(student_id)
        activities = [
            a for a in self._store.list_activities()
            if a.student_id == student_id and (activity_type is None or a.type == activity_type)
        ]
        activities.sort(key=lambda a: a.timestamp, reverse=True)
        if limit is not None and limit >= 1:
            activities = activities[:limit]
        return activities

    async def record_activity(self, student_id: str, data: ActivityCreate) -> Activity:
        await self._latency()
        try:
            self._store.students.require(student_id)
            activity = Activity(
                id=str(uuid.uuid4()),
                student_id=student_id,
                timestamp=self._clock(),
                **data.model_dump(),
            )
            self._store.activities.insert(activity)
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"记录学生行为失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to record activity") from e

        logger.debug(f"已记录学生 {student_id} 的行为: {activity.type.value}")
        return activity
