# crm/services/auth.py
"""
Mock 登录 / 会话服务
单个后台账号；会话以 user、token 两个键保存在本地键值存储里，不做过期校验
"""
from enum import Enum
from typing import Any, Dict, Optional
import hashlib
import logging
import secrets

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from crm.services.errors import AuthError, ValidationError
from crm.services.latency import Latency
from crm.services.session_store import KeyValueStore
from crm.services.validators import validate_email, validate_required

logger = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"


class UserRole(str, Enum):
    ADMIN = "admin"
    COUNSELOR = "counselor"
    STUDENT = "student"


class AuthUser(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole = UserRole.ADMIN
    avatar: Optional[str] = None


class Session(BaseModel):
    user: AuthUser
    token: str
    refresh_token: str


# ===============================
# 工具函数
# ===============================
def hash_password(password: str) -> str:
    """简单的密码哈希（mock 账号用）"""
    return hashlib.sha256(password.encode()).hexdigest()


def verify_password(password: str, hashed: str) -> bool:
    return secrets.compare_digest(hash_password(password), hashed)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


class AuthService:
    def __init__(
        self,
        session_store: KeyValueStore,
        admin_email: str,
        admin_password: str,
        admin_name: str = "Sarah Johnson",
        latency: Optional[Latency] = None,
    ):
        self._store = session_store
        self._admin_email = admin_email
        self._admin_password_hash = hash_password(admin_password)
        self._admin_name = admin_name
        self._latency = latency or Latency.none()

    async def login(self, email: str, password: str) -> Session:
        email = validate_email(email)
        validate_required(password, "Password")

        await self._latency()

        if email.lower() != self._admin_email.lower() or not verify_password(password, self._admin_password_hash):
            logger.warning(f"登录失败: {email}")
            raise AuthError("invalid credentials")

        user = AuthUser(id="user-1", name=self._admin_name, email=email, role=UserRole.ADMIN)
        session = Session(user=user, token=generate_token(), refresh_token=generate_token())
        self._save_session(session.user, session.token)

        logger.info(f"登录成功: {email}")
        return session

    async def logout(self) -> None:
        await self._latency()
        self._store.remove(USER_KEY)
        self._store.remove(TOKEN_KEY)
        logger.info("已退出登录")

    def current_user(self) -> Optional[AuthUser]:
        raw = self._store.get(USER_KEY)
        if not raw:
            return None
        try:
            return AuthUser.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"会话中的用户数据无法解析: {e}")
            return None

    def get_token(self) -> Optional[str]:
        return self._store.get(TOKEN_KEY)

    def is_authenticated(self) -> bool:
        return self.current_user() is not None and self.get_token() is not None

    def authenticate(self, token: Optional[str]) -> AuthUser:
        """校验请求带来的 token 与当前会话一致"""
        stored = self.get_token()
        user = self.current_user()
        if not token or stored is None or user is None or not secrets.compare_digest(token, stored):
            raise AuthError("not authenticated")
        return user

    async def validate_session(self) -> bool:
        """简化实现：只要有 token 就认为有效"""
        if not self.get_token():
            return False
        await self._latency()
        return True

    async def refresh_token(self) -> str:
        await self._latency()
        if not self.is_authenticated():
            raise AuthError("not authenticated")
        token = generate_token()
        self._store.set(TOKEN_KEY, token)
        return token

    async def update_profile(self, changes: Dict[str, Any]) -> AuthUser:
        await self._latency()
        user = self.current_user()
        if user is None:
            raise AuthError("not authenticated")

        changes = {k: v for k, v in changes.items() if k != "id"}
        if "email" in changes:
            changes["email"] = validate_email(changes["email"])
        try:
            updated = AuthUser.model_validate({**user.model_dump(), **changes})
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        self._store.set(USER_KEY, updated.model_dump_json())
        return updated

    def _save_session(self, user: AuthUser, token: str) -> None:
        self._store.set(USER_KEY, user.model_dump_json())
        self._store.set(TOKEN_KEY, token)
