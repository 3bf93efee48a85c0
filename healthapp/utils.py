"""
本文件包含数据库连接和会话管理的工具函数。

主要功能：
1. 数据库连接配置（从环境变量读取，避免硬编码）
2. 数据库会话管理与建表
3. FastAPI依赖注入
4. 统一的写事务封装 unit_of_work（一个业务操作只提交一次，失败整体回滚）
"""

import datetime
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from .config import get_database_url
from .errors import HealthAppError, PersistenceError

logger = logging.getLogger(__name__)

DATABASE_URL = get_database_url()

# SQLite 连接需要允许跨线程使用（TestClient / 线程池中执行的同步路由）
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI 依赖项：获取数据库会话（Session）。"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """按 ORM 模型建表（已存在的表不会被修改）"""
    from .db_base import Base
    from . import models  # noqa: F401  注册所有模型

    Base.metadata.create_all(bind=bind or engine)


def utcnow() -> datetime.datetime:
    """服务端 UTC 时间（naive），所有时间戳都由这里生成"""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


@contextmanager
def unit_of_work(
    db: Session,
    action: str,
    on_integrity: Optional[Callable[[IntegrityError], HealthAppError]] = None,
    on_stale: Optional[Callable[[], HealthAppError]] = None,
) -> Iterator[Session]:
    """一个业务操作的写事务：块内的 flush / 批量删除与最后的提交都在这里兜底。

    块正常结束时提交；块内抛出的业务异常回滚后原样抛出，
    数据库异常回滚后转换为业务异常。

    Args:
        db: 数据库会话
        action: 日志标签，如 "record-create"
        on_integrity: 唯一约束、外键等冲突时返回要抛出的异常（不传则视为 PersistenceError）
        on_stale: 乐观并发冲突（StaleDataError）时返回要抛出的异常，
                  回调在回滚之后执行，可以重新查询数据库

    Raises:
        HealthAppError: 块内抛出的业务异常、回调给出的异常，或 PersistenceError
    """
    try:
        yield db
        db.commit()
    except HealthAppError:
        db.rollback()
        raise
    except StaleDataError as e:
        db.rollback()
        logger.warning("[db-error][%s][stale] err=%s", action, e)
        if on_stale is not None:
            raise on_stale() from e
        raise PersistenceError() from e
    except IntegrityError as e:
        db.rollback()
        logger.error("[db-error][%s][integrity] err=%s", action, e)
        if on_integrity is not None:
            raise on_integrity(e) from e
        raise PersistenceError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("[db-error][%s] err=%s", action, e)
        raise PersistenceError() from e
