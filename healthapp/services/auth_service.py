"""
Auth Service（鉴权服务）

职责：
- 根据请求携带的 ID / 密码解析出当前操作者（actor）
- 判断操作者对某个资源所有者是否有权限（管理员或本人）

说明：
- 密码按字符串原样比对（明文存储），与历史数据保持兼容
- 每个请求都携带凭证，不签发 token / session
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..errors import AuthenticationError, AuthorizationError, ValidationError
from ..models import User
from ..repositories.user_repo import get_user_by_id

logger = logging.getLogger(__name__)


class AuthService:
    """鉴权服务"""

    def verify_credentials(self, db: Session, user_id: Optional[str], password: Optional[str]) -> User:
        """校验 ID / 密码并返回对应用户

        Raises:
            ValidationError: ID 或密码为空
            AuthenticationError: 用户不存在或密码不一致
        """
        if not user_id or not password:
            logger.warning("[auth][missing-credentials]")
            raise ValidationError("ID and Password are required")

        user = get_user_by_id(db, user_id)
        if user is None or user.password != password:
            logger.warning("[auth][invalid-credentials] user_id=%s", user_id)
            raise AuthenticationError("Invalid credentials")
        return user

    def verify_admin(self, db: Session, admin_id: Optional[str], admin_password: Optional[str]) -> User:
        """校验管理员凭证；非管理员账号同样视为凭证无效"""
        if not admin_id or not admin_password:
            logger.warning("[auth][missing-admin-credentials]")
            raise ValidationError("Admin credentials are required")

        admin = get_user_by_id(db, admin_id)
        if admin is None or not admin.is_admin or admin.password != admin_password:
            logger.warning("[auth][invalid-admin-credentials] admin_id=%s", admin_id)
            raise AuthenticationError("Invalid admin credentials")
        return admin

    def authorize(self, actor: User, owner_id: str) -> None:
        """管理员或资源所有者本人才允许操作"""
        if actor.is_admin or actor.id == owner_id:
            return
        logger.warning("[auth][forbidden] actor=%s owner=%s", actor.id, owner_id)
        raise AuthorizationError("Non-admin users can only access their own data")

    def require_admin(self, actor: User) -> None:
        if not actor.is_admin:
            logger.warning("[auth][forbidden][admin-only] actor=%s", actor.id)
            raise AuthorizationError("Admin privileges required")

    def login(self, db: Session, user_id: Optional[str], password: Optional[str]) -> User:
        user = self.verify_credentials(db, user_id, password)
        logger.info("[auth][login] user_id=%s admin=%s", user.id, user.is_admin)
        return user


# 创建单例实例
auth_service = AuthService()
