# crm/services/validators.py
"""
字段校验工具
校验失败时抛出 ValidationError，成功时返回（规范化后的）值
"""
import re
from typing import Any, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from crm.services.errors import ValidationError

_email_adapter = TypeAdapter(EmailStr)

GPA_RANGE = (0.0, 4.5)
SAT_SECTION_RANGE = (400, 800)
ACT_RANGE = (1, 36)


def validate_required(value: Any, field_name: str) -> Any:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, str) and not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value


def validate_email(email: Optional[str]) -> str:
    """与请求模型里的 EmailStr 同一套规则（email-validator）"""
    validate_required(email, "Email")
    try:
        return _email_adapter.validate_python(email.strip())
    except PydanticValidationError as e:
        raise ValidationError("Please enter a valid email address") from e


def validate_name(name: Optional[str]) -> str:
    validate_required(name, "Name")
    name = name.strip()
    if len(name) < 2:
        raise ValidationError("Name must be at least 2 characters long")
    return name


def validate_phone_number(phone: Optional[str]) -> str:
    validate_required(phone, "Phone number")
    digits = re.sub(r"\D", "", phone)
    if len(digits) < 10:
        raise ValidationError("Please enter a valid phone number")
    return phone.strip()


def _validate_range(value: float, bounds: tuple, label: str) -> None:
    low, high = bounds
    if value < low or value > high:
        raise ValidationError(f"{label} must be between {low} and {high}")


def validate_gpa(gpa: float) -> float:
    _validate_range(gpa, GPA_RANGE, "GPA")
    return gpa


def validate_sat_section(score: int, section: str = "SAT section") -> int:
    _validate_range(score, SAT_SECTION_RANGE, f"{section} score")
    return score


def validate_act_score(score: int) -> int:
    _validate_range(score, ACT_RANGE, "ACT score")
    return score
