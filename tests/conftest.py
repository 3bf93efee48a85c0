"""
pytest配置文件，定义测试环境和共享的测试夹具（fixtures）。

主要功能：
1. 配置测试数据库连接（内存 SQLite，每个测试一个全新的库）
2. 提供数据库会话管理
3. 提供FastAPI测试客户端
4. 提供测试数据样本（管理员、普通用户、活动记录）

pytest自动发现机制：
- pytest会自动查找所有名为conftest.py的文件
- 自动加载其中定义的fixture（夹具）
- 测试用例中参数名与fixture名一致时自动注入
"""

import os

# 必须在导入 healthapp 之前设置，避免连接生产数据库
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from healthapp.db_base import Base
from healthapp.main import app
from healthapp.models import User
from healthapp.utils import get_db, utcnow


@pytest.fixture
def engine():
    """每个测试独立的内存数据库"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    """提供数据库会话"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """提供FastAPI测试客户端"""
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _add_user(db_session, user_id, password, is_admin=False, name=None):
    user = User(
        id=user_id,
        name=name or user_id,
        password=password,
        age=30,
        sex="Unknown",
        created_at=utcnow(),
        is_admin=is_admin,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    """管理员账号 admin / admin-pass"""
    return _add_user(db_session, "admin", "admin-pass", is_admin=True, name="管理员")


@pytest.fixture
def normal_user(db_session):
    """普通账号 alice / alice-pass"""
    return _add_user(db_session, "alice", "alice-pass", name="Alice")


@pytest.fixture
def other_user(db_session):
    """普通账号 bob / bob-pass"""
    return _add_user(db_session, "bob", "bob-pass", name="Bob")


@pytest.fixture
def admin_auth():
    return {"admin_id": "admin", "admin_password": "admin-pass"}


@pytest.fixture
def alice_auth():
    return {"requester_id": "alice", "requester_password": "alice-pass"}


@pytest.fixture
def sample_record_data():
    """提供测试用的活动记录数据样本"""
    return {
        "user_id": "alice",
        "activity_type": "Strength",
        "heart_rate": 120.0,
        "mood": "Happy",
        "duration": "00:45:00",
        "exercises": "Pushups: reps 20 count, Squats: reps 15 count, Pushups: sets 3 count",
    }
