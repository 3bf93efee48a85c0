"""ActivityRecord Repository（活动记录数据访问层）

职责：
- 封装 activity_records / exercises 两张表的查询、插入与删除
- 运动明细只通过 replace_exercises / delete_exercises_* 成批维护，不提供单条编辑
- 不提交事务（提交由服务层统一完成）
"""

from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exercise_codec import ExerciseEntry
from ..models import ActivityRecord, Exercise


def get_record_by_id(db: Session, record_id: int) -> Optional[ActivityRecord]:
    return db.query(ActivityRecord).filter(ActivityRecord.id == record_id).first()


def record_exists(db: Session, record_id: int) -> bool:
    return db.query(ActivityRecord.id).filter(ActivityRecord.id == record_id).first() is not None


def get_records(db: Session) -> List[ActivityRecord]:
    return db.query(ActivityRecord).order_by(ActivityRecord.id).all()


def get_records_by_user(db: Session, user_id: str) -> List[ActivityRecord]:
    return (
        db.query(ActivityRecord)
        .filter(ActivityRecord.user_id == user_id)
        .order_by(ActivityRecord.id)
        .all()
    )


def add_record(db: Session, record: ActivityRecord) -> ActivityRecord:
    """插入记录并 flush，拿到自增ID（仍在当前事务中）"""
    db.add(record)
    db.flush()
    return record


def get_exercises(db: Session, record_id: int) -> List[Exercise]:
    return (
        db.query(Exercise)
        .filter(Exercise.record_id == record_id)
        .order_by(Exercise.id)
        .all()
    )


def add_exercises(db: Session, record_id: int, rows: Iterable[Tuple[str, ExerciseEntry]]) -> List[Exercise]:
    exercises = [
        Exercise(
            record_id=record_id,
            exercise_name=name,
            metric=entry.metric,
            value=entry.value,
            unit=entry.unit,
        )
        for name, entry in rows
    ]
    db.add_all(exercises)
    return exercises


def delete_exercises_by_record(db: Session, record_id: int) -> int:
    return (
        db.query(Exercise)
        .filter(Exercise.record_id == record_id)
        .delete()
    )


def delete_exercises_by_records(db: Session, record_ids: List[int]) -> int:
    if not record_ids:
        return 0
    return (
        db.query(Exercise)
        .filter(Exercise.record_id.in_(record_ids))
        .delete()
    )


def replace_exercises(db: Session, record_id: int, rows: Iterable[Tuple[str, ExerciseEntry]]) -> List[Exercise]:
    """删除记录的全部旧明细，再写入新的解码结果（非增量）"""
    delete_exercises_by_record(db, record_id)
    return add_exercises(db, record_id, rows)


def delete_record(db: Session, record_id: int) -> int:
    """按ID删除记录，返回实际删除的行数（0 表示记录已被并发删除）"""
    return (
        db.query(ActivityRecord)
        .filter(ActivityRecord.id == record_id)
        .delete()
    )


def delete_records_by_user(db: Session, user_id: str) -> int:
    """删除用户的全部记录，返回删除条数（明细需调用方先行删除）"""
    return (
        db.query(ActivityRecord)
        .filter(ActivityRecord.user_id == user_id)
        .delete()
    )
