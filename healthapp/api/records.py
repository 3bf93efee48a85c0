"""
Activity Records API routes

包含：
- POST   /api/activity-records                       创建记录（本人或管理员）
- GET    /api/activity-records                       全部记录（管理员）
- GET    /api/activity-records/user/{user_id}        指定用户的记录（管理员或本人）
- GET    /api/activity-records/{record_id}           记录详情（管理员或本人）
- GET    /api/activity-records/{record_id}/exercises 记录的运动明细（管理员或本人）
- PUT    /api/activity-records/{record_id}           更新记录并重建运动明细（管理员）
- DELETE /api/activity-records/{record_id}           删除记录及运动明细（管理员）
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ..errors import HealthAppError
from ..schemas.common import AdminCredentials
from ..schemas.records import (
    ExerciseItem,
    RecordCreateRequest,
    RecordExercisesResponse,
    RecordOut,
    RecordUpdateRequest,
)
from ..services.record_service import record_service
from ..utils import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/activity-records", tags=["活动记录"])


def _unexpected(tag: str) -> HTTPException:
    logger.exception("[records-api][%s][error]", tag)
    return HTTPException(status_code=500, detail="Unexpected error")


@router.post("", response_model=RecordOut, status_code=status.HTTP_201_CREATED)
def create_record(request: Optional[RecordCreateRequest] = None, db: Session = Depends(get_db)):
    """创建活动记录，exercises 文本会被解码为运动明细一并保存"""
    try:
        request = request or RecordCreateRequest()
        return record_service.create_record(
            db, request.requester_id, request.requester_password, request.record
        )
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("create")


@router.get("", response_model=List[RecordOut])
def get_records(
    requester_id: Optional[str] = Query(None, description="请求者ID（需为管理员）"),
    requester_password: Optional[str] = Query(None, description="请求者密码"),
    db: Session = Depends(get_db),
):
    try:
        return record_service.list_records(db, requester_id, requester_password)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("list")


@router.get("/user/{user_id}", response_model=List[RecordOut])
def get_user_records(
    user_id: str,
    requester_id: Optional[str] = Query(None, description="请求者ID"),
    requester_password: Optional[str] = Query(None, description="请求者密码"),
    db: Session = Depends(get_db),
):
    try:
        return record_service.list_user_records(db, user_id, requester_id, requester_password)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("list-user")


@router.get("/{record_id}", response_model=RecordOut)
def get_record(
    record_id: int,
    requester_id: Optional[str] = Query(None, description="请求者ID"),
    requester_password: Optional[str] = Query(None, description="请求者密码"),
    db: Session = Depends(get_db),
):
    try:
        return record_service.get_record(db, record_id, requester_id, requester_password)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("get")


@router.get("/{record_id}/exercises", response_model=RecordExercisesResponse)
def get_record_exercises(
    record_id: int,
    requester_id: Optional[str] = Query(None, description="请求者ID"),
    requester_password: Optional[str] = Query(None, description="请求者密码"),
    db: Session = Depends(get_db),
):
    """记录的运动明细，按动作名分组"""
    try:
        grouped = record_service.get_record_exercises(db, record_id, requester_id, requester_password)
        return RecordExercisesResponse(
            record_id=record_id,
            exercises={
                name: [ExerciseItem(**entry._asdict()) for entry in entries]
                for name, entries in grouped.items()
            },
        )
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("exercises")


@router.put("/{record_id}", response_model=RecordOut)
def update_record(record_id: int, request: Optional[RecordUpdateRequest] = None, db: Session = Depends(get_db)):
    """更新记录（管理员）。None / 空串 / 0 表示不修改，clear_fields 用于显式清空"""
    try:
        request = request or RecordUpdateRequest()
        return record_service.update_record(
            db, record_id, request.admin_id, request.admin_password, request.record
        )
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("update")


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_record(record_id: int, request: Optional[AdminCredentials] = None, db: Session = Depends(get_db)):
    try:
        request = request or AdminCredentials()
        record_service.delete_record(db, record_id, request.admin_id, request.admin_password)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HealthAppError:
        raise
    except Exception:
        raise _unexpected("delete")
