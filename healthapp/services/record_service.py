"""
Record Service（活动记录服务）

职责：
- 活动记录的增删改查，以及对应运动明细（Exercise）的生成与清理
- 所有操作先校验参数、再鉴权，最后才写库；一个操作只提交一次事务

运动明细的生命周期：
- 明细完全由记录的 exercises 文本解码得到（core/exercise_codec.py）
- 创建 / 更新记录时，旧明细全部删除，再写入新的解码结果（不做增量对比）
- 删除记录时，先删明细再删记录，二者在同一事务内
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exercise_codec import ExerciseEntry, decode_exercises, flatten_exercises, group_exercise_rows
from ..errors import NotFoundError, PersistenceError, ValidationError
from ..models import ActivityRecord
from ..repositories import record_repo
from ..repositories.user_repo import user_exists
from ..schemas.records import CLEARABLE_FIELDS, RecordCreate, RecordUpdate
from ..utils import unit_of_work, utcnow
from .auth_service import auth_service

logger = logging.getLogger(__name__)

# 字段最大长度（与 models.ActivityRecord 保持一致）
MAX_LENGTHS = {
    "user_id": 50,
    "activity_type": 50,
    "mood": 50,
    "duration": 8,
}


def _check_lengths(values: Dict[str, Optional[str]]) -> None:
    too_long = [
        field for field, value in values.items()
        if value is not None and len(value) > MAX_LENGTHS[field]
    ]
    if too_long:
        raise ValidationError(
            "Field too long: " + ", ".join(f"{f} (max {MAX_LENGTHS[f]})" for f in too_long)
        )


class RecordService:
    """活动记录服务"""

    def create_record(
        self,
        db: Session,
        requester_id: Optional[str],
        requester_password: Optional[str],
        payload: Optional[RecordCreate],
    ) -> ActivityRecord:
        """创建活动记录并生成运动明细

        本人可以给自己创建记录，给其他用户创建记录需要管理员身份。

        Raises:
            ValidationError: 缺少必填字段、字段超长、user_id 对应的用户不存在
            AuthenticationError / AuthorizationError: 凭证无效 / 无权为该用户创建
            PersistenceError: 写库失败
        """
        if payload is None:
            raise ValidationError("Request body is required")
        if not (payload.user_id and payload.activity_type and payload.mood and payload.duration):
            logger.warning("[record-create][invalid] required fields missing")
            raise ValidationError("UserId, ActivityType, Mood, and Duration are required")
        _check_lengths({
            "user_id": payload.user_id,
            "activity_type": payload.activity_type,
            "mood": payload.mood,
            "duration": payload.duration,
        })

        actor = auth_service.verify_credentials(db, requester_id, requester_password)
        auth_service.authorize(actor, payload.user_id)

        if not user_exists(db, payload.user_id):
            logger.warning("[record-create][invalid] user not found user_id=%s", payload.user_id)
            raise ValidationError("UserId does not reference an existing user")

        exercises_text = payload.exercises or ""
        record = ActivityRecord(
            user_id=payload.user_id,
            activity_type=payload.activity_type,
            heart_rate=payload.heart_rate or 0,
            mood=payload.mood,
            duration=payload.duration,
            exercises=exercises_text,
            created_at=utcnow(),
        )
        rows = flatten_exercises(decode_exercises(exercises_text))
        # 用户被并发删除时，外键冲突在 flush 阶段就会出现
        with unit_of_work(
            db, "record-create",
            on_integrity=lambda e: ValidationError("UserId does not reference an existing user"),
        ):
            record_repo.add_record(db, record)
            record_repo.add_exercises(db, record.id, rows)
        db.refresh(record)

        logger.info(
            "[record-create] record_id=%s user_id=%s exercises=%d actor=%s",
            record.id, record.user_id, len(rows), actor.id,
        )
        return record

    def get_record(
        self,
        db: Session,
        record_id: int,
        requester_id: Optional[str],
        requester_password: Optional[str],
    ) -> ActivityRecord:
        actor = auth_service.verify_credentials(db, requester_id, requester_password)
        record = record_repo.get_record_by_id(db, record_id)
        if record is None:
            logger.warning("[record-get][not-found] record_id=%s", record_id)
            raise NotFoundError("Record not found")
        auth_service.authorize(actor, record.user_id)
        return record

    def get_record_exercises(
        self,
        db: Session,
        record_id: int,
        requester_id: Optional[str],
        requester_password: Optional[str],
    ) -> Dict[str, List[ExerciseEntry]]:
        """读取记录已持久化的运动明细，按动作名分组"""
        record = self.get_record(db, record_id, requester_id, requester_password)
        return group_exercise_rows(record_repo.get_exercises(db, record.id))

    def list_records(
        self,
        db: Session,
        requester_id: Optional[str],
        requester_password: Optional[str],
    ) -> List[ActivityRecord]:
        """列出全部记录（仅管理员）"""
        actor = auth_service.verify_credentials(db, requester_id, requester_password)
        auth_service.require_admin(actor)
        return record_repo.get_records(db)

    def list_user_records(
        self,
        db: Session,
        user_id: str,
        requester_id: Optional[str],
        requester_password: Optional[str],
    ) -> List[ActivityRecord]:
        actor = auth_service.verify_credentials(db, requester_id, requester_password)
        auth_service.authorize(actor, user_id)
        return record_repo.get_records_by_user(db, user_id)

    def update_record(
        self,
        db: Session,
        record_id: int,
        admin_id: Optional[str],
        admin_password: Optional[str],
        payload: Optional[RecordUpdate],
    ) -> ActivityRecord:
        """更新活动记录（仅管理员），并按最新 exercises 文本重建运动明细

        字段为 None、空字符串或 0 时保持原值；clear_fields 中列出的字段会被清空
        （heart_rate 置 0，exercises 置空串）。
        """
        if payload is None:
            raise ValidationError("Admin credentials and record data are required")
        unknown = [f for f in payload.clear_fields if f not in CLEARABLE_FIELDS]
        if unknown:
            raise ValidationError("Unsupported clear_fields: " + ", ".join(unknown))
        _check_lengths({
            "user_id": payload.user_id or None,
            "activity_type": payload.activity_type or None,
            "mood": payload.mood or None,
            "duration": payload.duration or None,
        })

        admin = auth_service.verify_admin(db, admin_id, admin_password)

        record = record_repo.get_record_by_id(db, record_id)
        if record is None:
            logger.warning("[record-update][not-found] record_id=%s", record_id)
            raise NotFoundError("Record not found")
        if payload.id is not None and payload.id != record_id:
            logger.warning("[record-update][id-mismatch] record_id=%s body_id=%s", record_id, payload.id)
            raise ValidationError("ID mismatch")
        if payload.user_id and payload.user_id != record.user_id and not user_exists(db, payload.user_id):
            raise ValidationError("UserId does not reference an existing user")

        for field in ("user_id", "activity_type", "mood", "duration", "exercises"):
            value = getattr(payload, field)
            if value:
                setattr(record, field, value)
        if payload.heart_rate:
            record.heart_rate = payload.heart_rate
        if "heart_rate" in payload.clear_fields:
            record.heart_rate = 0
        if "exercises" in payload.clear_fields:
            record.exercises = ""

        rows = flatten_exercises(decode_exercises(record.exercises))
        with unit_of_work(db, "record-update", on_stale=lambda: self._stale_error(db, record_id)):
            record_repo.replace_exercises(db, record.id, rows)
        db.refresh(record)

        logger.info(
            "[record-update] record_id=%s exercises=%d admin=%s",
            record_id, len(rows), admin.id,
        )
        return record

    def delete_record(
        self,
        db: Session,
        record_id: int,
        admin_id: Optional[str],
        admin_password: Optional[str],
    ) -> None:
        """删除活动记录及其运动明细（仅管理员）"""
        admin = auth_service.verify_admin(db, admin_id, admin_password)

        if not record_repo.record_exists(db, record_id):
            logger.warning("[record-delete][not-found] record_id=%s", record_id)
            raise NotFoundError("Record not found")

        with unit_of_work(db, "record-delete", on_stale=lambda: self._stale_error(db, record_id)):
            deleted = record_repo.delete_exercises_by_record(db, record_id)
            if record_repo.delete_record(db, record_id) == 0:
                # 查到记录之后、删除之前被并发删除
                logger.warning("[record-delete][vanished] record_id=%s", record_id)
                raise NotFoundError("Record not found")
        logger.info("[record-delete] record_id=%s exercises=%d admin=%s", record_id, deleted, admin.id)

    def _stale_error(self, db: Session, record_id: int):
        """并发冲突后的处理：记录已不存在则 404，否则按写库失败处理（不重试）"""
        if not record_repo.record_exists(db, record_id):
            logger.warning("[record-stale][vanished] record_id=%s", record_id)
            return NotFoundError("Record not found")
        logger.error("[record-stale][conflict] record_id=%s", record_id)
        return PersistenceError("Concurrent modification, please retry")


# 创建单例实例
record_service = RecordService()
