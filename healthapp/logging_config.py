"""
日志初始化

在 healthapp/main.py 导入时调用一次：
- 根日志记录器使用统一格式，等级取显式传入的 level，缺省为 config.LOG_LEVEL；
- SQLAlchemy 的 SQL 语句日志只在 DEBUG 等级下输出。
"""

import logging
from typing import Optional

from .config import LOG_LEVEL

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def setup_logging(level: Optional[str] = None) -> int:
    """初始化全局日志配置，返回生效的日志等级（logging 常量）。

    未知的等级名按 INFO 处理。
    """
    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # 根记录器已有 handler 时 basicConfig 不生效，等级需要单独设置
    logging.getLogger().setLevel(log_level)
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if log_level <= logging.DEBUG else logging.WARNING
    )
    return log_level
