# crm/api/v1/auth.py
"""
后台登录模块 - 单账号 mock 登录
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr
from typing import Optional
import logging

from crm.api.deps import get_auth_service, http_error, require_user
from crm.services.auth import AuthService, AuthUser
from crm.services.errors import CRMError

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


# ===============================
# 数据模型
# ===============================
class UserLogin(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    token: str
    refresh_token: str
    user: AuthUser


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None


# ===============================
# API 端点
# ===============================
@router.post("/login", response_model=LoginResponse)
async def login(credentials: UserLogin, auth: AuthService = Depends(get_auth_service)):
    """
    后台登录
    """
    try:
        session = await auth.login(credentials.email, credentials.password)
        return LoginResponse(token=session.token, refresh_token=session.refresh_token, user=session.user)
    except CRMError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"登录失败: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"登录失败: {str(e)}")


@router.post("/logout")
async def logout(auth: AuthService = Depends(get_auth_service)):
    """
    退出登录（清除本地会话）
    """
    await auth.logout()
    return {"success": True}


@router.get("/me", response_model=AuthUser)
def get_current_user(user: AuthUser = Depends(require_user)):
    """
    获取当前登录用户
    """
    return user


@router.post("/verify")
async def verify_session(auth: AuthService = Depends(get_auth_service)):
    """
    校验会话（简化版本：有 token 即有效）
    """
    return {"valid": await auth.validate_session()}


@router.post("/refresh", dependencies=[Depends(require_user)])
async def refresh_token(auth: AuthService = Depends(get_auth_service)):
    try:
        return {"token": await auth.refresh_token()}
    except CRMError as e:
        raise http_error(e)


@router.put("/profile", response_model=AuthUser, dependencies=[Depends(require_user)])
async def update_profile(update: ProfileUpdate, auth: AuthService = Depends(get_auth_service)):
    """
    修改当前用户资料
    """
    try:
        return await auth.update_profile(update.model_dump(exclude_unset=True))
    except CRMError as e:
        raise http_error(e)
