# crm/api/v1/activities.py
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from crm.api.deps import get_activities_service, http_error, require_user
from crm.schemas.activity import Activity, ActivityCreate, ActivityType
from crm.schemas.common import coerce_enum
from crm.services.activities import ActivitiesService
from crm.services.errors import CRMError

router = APIRouter(
    prefix="/students/{student_id}/activities",
    tags=["Activities"],
    dependencies=[Depends(require_user)],
)


@router.get("/", response_model=List[Activity])
def list_activities(
    student_id: str,
    type: Optional[str] = Query(None, description="行为类型，例如 login / search / college_view"),
    limit: Optional[int] = Query(None, description="最多返回条数"),
    service: ActivitiesService = Depends(get_activities_service),
):
    """
    学生行为时间线（最新的在前）
    """
    try:
        return service.list_activities(student_id, coerce_enum(ActivityType, type), limit)
    except CRMError as e:
        raise http_error(e)


@router.post("/", response_model=Activity, status_code=201)
async def record_activity(
    student_id: str,
    activity: ActivityCreate,
    service: ActivitiesService = Depends(get_activities_service),
):
    try:
        return await service.record_activity(student_id, activity)
    except CRMError as e:
        raise http_error(e)
