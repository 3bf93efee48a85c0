"""
Users API routes

包含：
- POST   /api/users/login               登录
- POST   /api/users/register            管理员注册用户
- POST   /api/users/public-register     公开自助注册（普通用户）
- POST   /api/users/reset-password      管理员重置密码
- GET    /api/users/stars               用户星级统计（公开）
- GET    /api/users                     用户列表（管理员）
- GET    /api/users/{user_id}           用户详情（管理员或本人）
- PUT    /api/users/{user_id}           更新用户（管理员或本人）
- DELETE /api/users/{user_id}           删除用户及其记录（管理员或本人）
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ..errors import HealthAppError
from ..schemas.common import MessageResponse, RequesterCredentials
from ..schemas.users import (
    AdminRegisterRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    UserCreate,
    UserOut,
    UserStar,
    UserUpdateRequest,
)
from ..services.auth_service import auth_service
from ..services.user_service import user_service
from ..utils import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["用户"])


def _unexpected(tag: str) -> HTTPException:
    logger.exception("[users-api][%s][error]", tag)
    return HTTPException(status_code=500, detail="Unexpected error")


@router.post("/login", response_model=LoginResponse)
def login(request: Optional[LoginRequest] = None, db: Session = Depends(get_db)):
    """登录，返回用户信息与角色（admin / user）"""
    try:
        request = request or LoginRequest()
        user = auth_service.login(db, request.id, request.password)
        return LoginResponse(
            **UserOut.model_validate(user).model_dump(),
            role="admin" if user.is_admin else "user",
        )
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("login")


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(request: Optional[AdminRegisterRequest] = None, db: Session = Depends(get_db)):
    """管理员注册新用户"""
    try:
        request = request or AdminRegisterRequest()
        return user_service.register(db, request.admin_id, request.admin_password, request.user)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("register")


@router.post("/public-register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def public_register(user: Optional[UserCreate] = None, db: Session = Depends(get_db)):
    """公开自助注册，创建的账号一定不是管理员"""
    try:
        return user_service.public_register(db, user)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("public-register")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(request: Optional[ResetPasswordRequest] = None, db: Session = Depends(get_db)):
    """管理员重置指定用户的密码"""
    try:
        request = request or ResetPasswordRequest()
        user_service.reset_password(
            db, request.admin_id, request.admin_password, request.user_id, request.new_password
        )
        return MessageResponse(message="Password reset successfully")
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("reset-password")


@router.get("/stars", response_model=List[UserStar])
def get_user_stars(db: Session = Depends(get_db)):
    """用户星级：每个用户不同运动类型的数量，降序"""
    try:
        return user_service.user_stars(db)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("stars")


@router.get("", response_model=List[UserOut])
def get_users(
    admin_id: Optional[str] = Query(None, description="管理员ID"),
    admin_password: Optional[str] = Query(None, description="管理员密码"),
    db: Session = Depends(get_db),
):
    """用户列表（管理员）"""
    try:
        return user_service.list_users(db, admin_id, admin_password)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("list")


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    requester_id: Optional[str] = Query(None, description="请求者ID"),
    requester_password: Optional[str] = Query(None, description="请求者密码"),
    db: Session = Depends(get_db),
):
    """用户详情（管理员或本人）"""
    try:
        return user_service.get_user(db, user_id, requester_id, requester_password)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("get")


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: str, request: Optional[UserUpdateRequest] = None, db: Session = Depends(get_db)):
    """更新用户（管理员或本人），未提供的字段保持不变"""
    try:
        request = request or UserUpdateRequest()
        return user_service.update_user(
            db, user_id, request.requester_id, request.requester_password, request.user
        )
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("update")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user(user_id: str, request: Optional[RequesterCredentials] = None, db: Session = Depends(get_db)):
    """删除用户（管理员或本人），连同其全部活动记录与运动明细"""
    try:
        request = request or RequesterCredentials()
        user_service.delete_user(db, user_id, request.requester_id, request.requester_password)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("delete")
