"""User Repository（用户数据访问层）

职责：
- 封装 users 表的查询与写入
- 只做数据访问，不做权限判断，不提交事务（提交由服务层统一完成）
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import ActivityRecord, User


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def user_exists(db: Session, user_id: str) -> bool:
    return db.query(User.id).filter(User.id == user_id).first() is not None


def get_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at, User.id).all()


def add_user(db: Session, user: User) -> User:
    db.add(user)
    return user


def delete_user(db: Session, user_id: str) -> int:
    """按ID删除用户，返回实际删除的行数"""
    return db.query(User).filter(User.id == user_id).delete()



def get_user_star_counts(db: Session) -> List[tuple]:
    """每个用户不同运动类型的数量（star_count），没有记录的用户不会出现在结果中

    Returns:
        [(user_id, name, star_count), ...]，按 star_count 降序，相同时按 user_id 升序
    """
    star_count = func.count(func.distinct(ActivityRecord.activity_type)).label("star_count")
    return (
        db.query(User.id, User.name, star_count)
        .join(ActivityRecord, ActivityRecord.user_id == User.id)
        .group_by(User.id, User.name)
        .having(star_count > 0)
        .order_by(star_count.desc(), User.id)
        .all()
    )
