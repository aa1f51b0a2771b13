# crm/api/deps.py
"""
路由共用的依赖：从 app.state 取服务实例、校验登录、业务异常转 HTTP
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from crm.services.activities import ActivitiesService
from crm.services.auth import AuthService, AuthUser
from crm.services.communications import CommunicationsService
from crm.services.errors import (
    AuthError,
    CRMError,
    NotFoundError,
    OperationFailedError,
    ValidationError,
)
from crm.services.notes import NotesService
from crm.services.students import StudentsService


def get_students_service(request: Request) -> StudentsService:
    return request.app.state.students_service


def get_communications_service(request: Request) -> CommunicationsService:
    return request.app.state.communications_service


def get_notes_service(request: Request) -> NotesService:
    return request.app.state.notes_service


def get_activities_service(request: Request) -> ActivitiesService:
    return request.app.state.activities_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_user(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service),
) -> AuthUser:
    """需要登录的路由使用：Authorization: Bearer <token>"""
    try:
        return auth.authenticate(bearer_token(authorization))
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)


def http_error(e: CRMError) -> HTTPException:
    """业务异常 -> HTTPException"""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=e.message)
    if isinstance(e, AuthError):
        return HTTPException(status_code=401, detail=e.message)
    if isinstance(e, OperationFailedError):
        return HTTPException(status_code=500, detail=e.message)
    return HTTPException(status_code=500, detail=str(e))
