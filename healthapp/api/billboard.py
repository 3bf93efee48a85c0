"""
Billboard API routes

包含：
- POST /api/billboard/update  批量写入榜单（按 chart_rank 插入或覆盖）
- GET  /api/billboard         榜单（按名次升序）
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from ..errors import HealthAppError
from ..schemas.billboard import BillboardItem, BillboardOut, BillboardUpdateResponse
from ..services.billboard_service import billboard_service
from ..utils import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/billboard", tags=["榜单"])


@router.post("/update", response_model=BillboardUpdateResponse)
def update_billboard(items: Optional[List[BillboardItem]] = Body(None), db: Session = Depends(get_db)):
    """批量写入榜单；不合法的条目被跳过，只返回被接受的条目"""
    try:
        accepted = billboard_service.upsert(db, items)
        return BillboardUpdateResponse(
            message="Billboard records updated",
            updated_records=[BillboardOut.model_validate(row) for row in accepted],
        )
    except HealthAppError:
        raise
    except Exception:
        logger.exception("[billboard-api][update][error]")
        raise HTTPException(status_code=500, detail="Unexpected error")


@router.get("", response_model=List[BillboardOut])
def get_billboard(db: Session = Depends(get_db)):
    try:
        return billboard_service.list_billboard(db)
    except HealthAppError:
        raise
    except Exception:
        logger.exception("[billboard-api][list][error]")
        raise HTTPException(status_code=500, detail="Unexpected error")
