# crm/schemas/common.py
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Type, TypeVar
import logging

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """没有时区的时间一律按 UTC 处理"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def coerce_enum(enum_cls: Type[E], raw) -> Optional[E]:
    """
    宽松地解析枚举筛选值：
    空值或不认识的值返回 None（等于不加这个条件）
    """
    if raw is None:
        return None
    if isinstance(raw, enum_cls):
        return raw

    text = str(raw).strip()
    if not text:
        return None

    try:
        return enum_cls(text)
    except ValueError:
        logger.debug(f"忽略无效的{enum_cls.__name__}取值: {text!r}")
        return None
