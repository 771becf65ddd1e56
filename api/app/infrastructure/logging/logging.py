import logging
import sys
from typing import Optional

from core.config import get_settings

# 统一的日志格式，API进程与后台任务进程共用
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 第三方库的调试日志过多，固定为WARNING
NOISY_LOGGERS = ("PIL", "multipart", "urllib3")


def setup_logging(level: Optional[str] = None) -> None:
    """配置根日志记录器，只输出到标准输出

    重复调用时不会重复添加处理器(测试中会多次导入应用)。

    Args:
        level: 日志级别，为空时读取配置中的log_level
    """
    level_name = (level or get_settings().log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = next(
        (h for h in root_logger.handlers if getattr(h, "_files_manager", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler._files_manager = True
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(handler)
    handler.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info("日志记录器已初始化，日志级别: %s", level_name)
