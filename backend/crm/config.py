# crm/config.py
import os
from typing import List, Optional

from dotenv import load_dotenv

# 先读 .env，再由环境变量覆盖
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


class Settings:
    """应用配置（全部来自环境变量）"""

    def __init__(self):
        self.APP_NAME = os.getenv("APP_NAME", "Admissions CRM Backend")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Mock 数据层
        self.MOCK_SEED: Optional[int] = _optional_int("MOCK_SEED")
        self.MOCK_STUDENT_COUNT = int(os.getenv("MOCK_STUDENT_COUNT", "75"))

        # 模拟网络延迟（毫秒）
        self.MOCK_LATENCY_MS = int(os.getenv("MOCK_LATENCY_MS", "500"))
        self.AUTH_LATENCY_MS = int(os.getenv("AUTH_LATENCY_MS", "1000"))

        # 会话 / 登录
        self.SESSION_FILE = os.getenv("SESSION_FILE", ".crm_session.json")
        self.ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
        self.ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password")
        self.ADMIN_NAME = os.getenv("ADMIN_NAME", "Sarah Johnson")

        self.CORS_ORIGINS: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]


settings = Settings()
