# crm/services/errors.py
"""
CRM 业务异常
查询操作从不抛错；增删改、登录等操作把这些异常交给调用方处理
"""


class CRMError(Exception):
    """所有 CRM 业务异常的基类"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CRMError):
    """按 id 更新 / 删除 / 查询时实体不存在"""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(CRMError, ValueError):
    """
    字段格式或取值范围不合法
    同时继承 ValueError，pydantic 的字段校验器里可以直接抛出
    """

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """把 pydantic 的校验错误压成一条可读信息"""
        parts = []
        for error in exc.errors():
            location = ".".join(str(item) for item in error.get("loc", ()))
            message = error.get("msg", "invalid value")
            parts.append(f"{location}: {message}" if location else message)
        return cls("; ".join(parts) or "invalid value")


class AuthError(CRMError):
    """登录失败或未登录"""


class OperationFailedError(CRMError):
    """包装协作方调用中的意外错误"""
