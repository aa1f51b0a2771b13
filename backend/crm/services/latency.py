# crm/services/latency.py
import asyncio


class Latency:
    """
    模拟网络延迟
    增删改、登录等操作在真正执行前 await 一次；测试里传 0 即可立即返回
    """

    def __init__(self, seconds: float = 0.0):
        if seconds < 0:
            raise ValueError(f"延迟不能为负数: {seconds}")
        self.seconds = seconds

    @classmethod
    def from_ms(cls, milliseconds: int) -> "Latency":
        return cls(milliseconds / 1000)

    @classmethod
    def none(cls) -> "Latency":
        return cls(0.0)

    async def __call__(self) -> None:
        if self.seconds > 0:
            await asyncio.sleep(self.seconds)
