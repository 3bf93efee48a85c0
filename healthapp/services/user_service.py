"""
User Service（用户服务）

职责：
- 注册（管理员注册 / 公开自助注册）、查询、更新、删除用户
- 管理员重置密码
- 用户星级统计（不同运动类型数量）

删除用户时，用户的活动记录和这些记录的运动明细在同一事务内一并删除。
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import User
from ..repositories import record_repo, user_repo
from ..schemas.users import UserCreate, UserUpdate
from ..utils import unit_of_work, utcnow
from .auth_service import auth_service

logger = logging.getLogger(__name__)

# 字段最大长度（与 models.User 保持一致）
MAX_ID_LENGTH = 50
MAX_NAME_LENGTH = 100
MAX_PASSWORD_LENGTH = 255
MAX_SEX_LENGTH = 50


def _check_user_lengths(user_id: Optional[str], name: Optional[str], password: Optional[str], sex: Optional[str]) -> None:
    if (
        (user_id is not None and len(user_id) > MAX_ID_LENGTH)
        or (name is not None and len(name) > MAX_NAME_LENGTH)
        or (password is not None and len(password) > MAX_PASSWORD_LENGTH)
    ):
        raise ValidationError("ID (max 50), Name (max 100), or Password (max 255) too long")
    if sex is not None and len(sex) > MAX_SEX_LENGTH:
        raise ValidationError("Sex (max 50) too long")


class UserService:
    """用户服务"""

    def register(
        self,
        db: Session,
        admin_id: Optional[str],
        admin_password: Optional[str],
        payload: Optional[UserCreate],
    ) -> User:
        """管理员注册新用户，可以直接创建管理员账号"""
        if payload is None or not admin_id or not admin_password:
            logger.warning("[user-register][invalid] admin credentials and user data are required")
            raise ValidationError("Admin credentials and user data are required")
        admin = auth_service.verify_admin(db, admin_id, admin_password)
        user = self._create_user(db, payload, is_admin=payload.is_admin)
        logger.info("[user-register] user_id=%s admin=%s by=%s", user.id, user.is_admin, admin.id)
        return user

    def public_register(self, db: Session, payload: Optional[UserCreate]) -> User:
        """公开自助注册，不需要凭证，强制为普通用户"""
        if payload is None:
            raise ValidationError("ID, Password, and Name are required")
        if payload.age < 0:
            payload = payload.model_copy(update={"age": 0})
        user = self._create_user(db, payload, is_admin=False)
        logger.info("[user-public-register] user_id=%s", user.id)
        return user

    def _create_user(self, db: Session, payload: UserCreate, is_admin: bool) -> User:
        if not (payload.id and payload.password and payload.name):
            logger.warning("[user-create][invalid] ID, Password, and Name are required")
            raise ValidationError("ID, Password, and Name are required")
        _check_user_lengths(payload.id, payload.name, payload.password, payload.sex)

        if user_repo.user_exists(db, payload.id):
            logger.warning("[user-create][conflict] user_id=%s", payload.id)
            raise ConflictError("User ID already exists")

        user = User(
            id=payload.id,
            name=payload.name.strip(),
            password=payload.password,
            age=payload.age,
            sex=payload.sex.strip() if payload.sex else "Unknown",
            created_at=utcnow(),
            is_admin=is_admin,
        )
        # 并发注册同一ID时，由主键冲突兜底
        with unit_of_work(
            db, "user-create",
            on_integrity=lambda e: ConflictError("User ID already exists"),
        ):
            user_repo.add_user(db, user)
        db.refresh(user)
        return user

    def get_user(
        self,
        db: Session,
        user_id: str,
        requester_id: Optional[str],
        requester_password: Optional[str],
    ) -> User:
        actor = auth_service.verify_credentials(db, requester_id, requester_password)
        auth_service.authorize(actor, user_id)
        user = user_repo.get_user_by_id(db, user_id)
        if user is None:
            logger.warning("[user-get][not-found] user_id=%s", user_id)
            raise NotFoundError("User not found")
        return user

    def list_users(self, db: Session, admin_id: Optional[str], admin_password: Optional[str]) -> List[User]:
        auth_service.verify_admin(db, admin_id, admin_password)
        return user_repo.get_users(db)

    def update_user(
        self,
        db: Session,
        user_id: str,
        requester_id: Optional[str],
        requester_password: Optional[str],
        payload: Optional[UserUpdate],
    ) -> User:
        """更新用户信息（管理员或本人），只修改请求中非 None 的字段

        修改 is_admin 需要管理员身份。
        """
        if payload is None:
            raise ValidationError("Requester credentials and user data are required")
        actor = auth_service.verify_credentials(db, requester_id, requester_password)
        auth_service.authorize(actor, user_id)

        user = user_repo.get_user_by_id(db, user_id)
        if user is None:
            logger.warning("[user-update][not-found] user_id=%s", user_id)
            raise NotFoundError("User not found")
        if payload.id is not None and payload.id != user_id:
            logger.warning("[user-update][id-mismatch] user_id=%s body_id=%s", user_id, payload.id)
            raise ValidationError("ID mismatch")

        name = payload.name.strip() if payload.name is not None else None
        password = payload.password.strip() if payload.password is not None else None
        sex = payload.sex.strip() if payload.sex is not None else None
        if name == "" or password == "":
            raise ValidationError("Name and Password cannot be empty")
        if payload.age is not None and payload.age < 0:
            raise ValidationError("Age cannot be negative")
        _check_user_lengths(None, name, password, sex)
        if payload.is_admin is not None and payload.is_admin != user.is_admin:
            auth_service.require_admin(actor)

        with unit_of_work(db, "user-update"):
            if name is not None:
                user.name = name
            if password is not None:
                user.password = password
            if sex is not None:
                user.sex = sex or "Unknown"
            if payload.age is not None:
                user.age = payload.age
            if payload.is_admin is not None:
                user.is_admin = payload.is_admin

        db.refresh(user)
        logger.info("[user-update] user_id=%s by=%s", user_id, actor.id)
        return user

    def reset_password(
        self,
        db: Session,
        admin_id: Optional[str],
        admin_password: Optional[str],
        user_id: Optional[str],
        new_password: Optional[str],
    ) -> None:
        if not (admin_id and admin_password and user_id and new_password):
            logger.warning("[user-reset-password][invalid] all fields are required")
            raise ValidationError("Admin credentials, UserId, and NewPassword are required")
        if len(new_password) > MAX_PASSWORD_LENGTH:
            raise ValidationError("Password (max 255) too long")
        admin = auth_service.verify_admin(db, admin_id, admin_password)

        user = user_repo.get_user_by_id(db, user_id)
        if user is None:
            logger.warning("[user-reset-password][not-found] user_id=%s", user_id)
            raise NotFoundError("User not found")

        with unit_of_work(db, "user-reset-password"):
            user.password = new_password
        logger.info("[user-reset-password] user_id=%s by=%s", user_id, admin.id)

    def delete_user(
        self,
        db: Session,
        user_id: str,
        requester_id: Optional[str],
        requester_password: Optional[str],
    ) -> None:
        """删除用户（管理员或本人），连同其活动记录与运动明细"""
        actor = auth_service.verify_credentials(db, requester_id, requester_password)
        auth_service.authorize(actor, user_id)

        if not user_repo.user_exists(db, user_id):
            logger.warning("[user-delete][not-found] user_id=%s", user_id)
            raise NotFoundError("User not found")

        with unit_of_work(db, "user-delete"):
            record_ids = [r.id for r in record_repo.get_records_by_user(db, user_id)]
            exercises_deleted = record_repo.delete_exercises_by_records(db, record_ids)
            record_repo.delete_records_by_user(db, user_id)
            if user_repo.delete_user(db, user_id) == 0:
                logger.warning("[user-delete][vanished] user_id=%s", user_id)
                raise NotFoundError("User not found")
        logger.info(
            "[user-delete] user_id=%s records=%d exercises=%d by=%s",
            user_id, len(record_ids), exercises_deleted, actor.id,
        )

    def user_stars(self, db: Session) -> List[Dict]:
        """每个用户不同运动类型的数量，降序；没有记录的用户不返回"""
        stars = [
            {"username": name or uid, "star_count": count}
            for uid, name, count in user_repo.get_user_star_counts(db)
        ]
        logger.info("[user-stars] count=%d", len(stars))
        return stars


# 创建单例实例
user_service = UserService()
