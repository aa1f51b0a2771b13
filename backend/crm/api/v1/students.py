# crm/api/v1/students.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from crm.api.deps import get_students_service, http_error, require_user
from crm.schemas.query import DEFAULT_PAGE_SIZE, Page, StudentQuery, StudentStats
from crm.schemas.student import Student, StudentCreate, StudentUpdate
from crm.services.errors import CRMError
from crm.services.students import StudentsService

router = APIRouter(
    prefix="/students",
    tags=["Students"],
    dependencies=[Depends(require_user)],
)
logger = logging.getLogger(__name__)


@router.get("/", response_model=Page[Student])
def list_students(
    search: Optional[str] = Query(None, description="姓名 / 邮箱 / 国家（模糊搜索）"),
    status: Optional[str] = Query(None, description="申请阶段：Exploring / Shortlisting / Applying / Submitted"),
    country: Optional[str] = Query(None, description="国家（精确匹配）"),
    grade: Optional[str] = Query(None, description="年级：Freshman / Sophomore / Junior / Senior"),
    last_active_filter: Optional[str] = Query(None, description="最近活跃：week / month / all"),
    sort_by: Optional[str] = Query(None, description="排序字段，例如 name / created_at / last_active / gpa"),
    sort_order: Optional[str] = Query(None, description="asc / desc"),
    page: Optional[str] = Query(None, description="页码（从 1 开始，无效值按 1 处理）"),
    page_size: Optional[str] = Query(None, description=f"每页数量（默认 {DEFAULT_PAGE_SIZE}）"),
    service: StudentsService = Depends(get_students_service),
):
    """
    学生列表（筛选 + 搜索 + 排序 + 分页）
    无效的筛选值会被忽略，不会报错
    """
    spec = StudentQuery(
        search=search,
        status=status,
        country=country,
        grade=grade,
        last_active_filter=last_active_filter,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    return service.list_students(spec)


@router.get("/stats/summary", response_model=StudentStats)
async def get_student_stats(service: StudentsService = Depends(get_students_service)):
    """
    全部学生的统计（不受列表筛选影响）
    """
    try:
        return await service.get_stats()
    except CRMError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"获取学生统计失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"获取学生统计失败: {str(e)}")


@router.get("/{student_id}", response_model=Student)
def get_student(student_id: str, service: StudentsService = Depends(get_students_service)):
    """
    获取单个学生详情
    """
    try:
        return service.get_student(student_id)
    except CRMError as e:
        raise http_error(e)


@router.post("/", response_model=Student, status_code=201)
async def create_student(student: StudentCreate, service: StudentsService = Depends(get_students_service)):
    """
    新建学生
    """
    try:
        return await service.create_student(student)
    except CRMError as e:
        raise http_error(e)


@router.put("/{student_id}", response_model=Student)
async def update_student(
    student_id: str,
    update: StudentUpdate,
    service: StudentsService = Depends(get_students_service),
):
    """
    更新学生信息（只合并传入的字段）
    """
    try:
        return await service.update_student(student_id, update)
    except CRMError as e:
        raise http_error(e)


@router.delete("/{student_id}")
async def delete_student(student_id: str, service: StudentsService = Depends(get_students_service)):
    """
    删除学生（沟通记录等不级联删除）
    """
    try:
        await service.delete_student(student_id)
        return {"success": True, "message": "Student deleted successfully"}
    except CRMError as e:
        raise http_error(e)
