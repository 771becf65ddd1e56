import logging
from abc import ABC, abstractmethod

from app.domain.external.health_checker import HealthChecker
from app.domain.models.health_status import HealthStatus

logger = logging.getLogger(__name__)


class ProbeHealthChecker(HealthChecker, ABC):
    """执行一次探测命令的健康检查器，探测抛出异常即视为服务不可用"""

    service_name: str

    @abstractmethod
    async def probe(self) -> None:
        ...

    async def check(self) -> HealthStatus:
        try:
            await self.probe()
        except Exception as e:
            logger.error(f"{self.service_name}健康检查失败: {e}")
            return HealthStatus(service=self.service_name, status="error", details=str(e))
        return HealthStatus(service=self.service_name, status="ok")
