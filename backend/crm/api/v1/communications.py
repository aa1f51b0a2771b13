# crm/api/v1/communications.py
"""
沟通记录模块
邮件 / 短信 / 电话 / 面谈的记录与统计
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from crm.api.deps import get_communications_service, http_error, require_user
from crm.schemas.communication import Communication, CommunicationCreate, CommunicationRead, CommunicationUpdate
from crm.schemas.query import CommunicationQuery, CommunicationStats, DEFAULT_PAGE_SIZE, Page
from crm.services.communications import CommunicationsService
from crm.services.errors import CRMError

router = APIRouter(
    prefix="/communications",
    tags=["Communications"],
    dependencies=[Depends(require_user)],
)
logger = logging.getLogger(__name__)


@router.get("/", response_model=Page[CommunicationRead])
def list_communications(
    search: Optional[str] = Query(None, description="内容 / 员工 / 学生姓名或邮箱（模糊搜索）"),
    student_id: Optional[str] = Query(None, description="学生ID"),
    type: Optional[str] = Query(None, description="email / sms / call / meeting"),
    direction: Optional[str] = Query(None, description="inbound / outbound"),
    staff_member: Optional[str] = Query(None, description="员工姓名（精确匹配）"),
    sort_by: Optional[str] = Query(None, description="timestamp / type / staff_member / direction，默认按时间倒序"),
    sort_order: Optional[str] = Query(None, description="asc / desc"),
    page: Optional[str] = Query(None, description="页码（从 1 开始，无效值按 1 处理）"),
    page_size: Optional[str] = Query(None, description=f"每页数量（默认 {DEFAULT_PAGE_SIZE}）"),
    service: CommunicationsService = Depends(get_communications_service),
):
    """
    沟通记录列表
    """
    spec = CommunicationQuery(
        search=search,
        student_id=student_id,
        type=type,
        direction=direction,
        staff_member=staff_member,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    return service.list_communications(spec)


@router.get("/stats/summary", response_model=CommunicationStats)
async def get_communication_stats(service: CommunicationsService = Depends(get_communications_service)):
    """
    全部沟通记录的统计（按类型、方向，以及最近 10 条）
    """
    try:
        return await service.get_stats()
    except CRMError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"获取沟通统计失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"获取沟通统计失败: {str(e)}")


@router.get("/staff-members")
def list_staff_members(service: CommunicationsService = Depends(get_communications_service)):
    """
    员工名单（用于筛选下拉框）
    """
    return {"staff_members": service.get_staff_members()}


@router.get("/{communication_id}", response_model=Communication)
def get_communication(
    communication_id: str,
    service: CommunicationsService = Depends(get_communications_service),
):
    try:
        return service.get_communication(communication_id)
    except CRMError as e:
        raise http_error(e)


@router.post("/", response_model=Communication, status_code=201)
async def create_communication(
    communication: CommunicationCreate,
    service: CommunicationsService = Depends(get_communications_service),
):
    """
    记录一次沟通（时间为当前时间）
    """
    try:
        return await service.create_communication(communication)
    except CRMError as e:
        raise http_error(e)


@router.put("/{communication_id}", response_model=Communication)
async def update_communication(
    communication_id: str,
    update: CommunicationUpdate,
    service: CommunicationsService = Depends(get_communications_service),
):
    try:
        return await service.update_communication(communication_id, update)
    except CRMError as e:
        raise http_error(e)


@router.delete("/{communication_id}")
async def delete_communication(
    communication_id: str,
    service: CommunicationsService = Depends(get_communications_service),
):
    try:
        await service.delete_communication(communication_id)
        return {"success": True, "message": "Communication deleted successfully"}
    except CRMError as e:
        raise http_error(e)
