"""Billboard Repository（榜单数据访问层）"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import BillboardRecord


def get_by_rank(db: Session, chart_rank: int) -> Optional[BillboardRecord]:
    return db.query(BillboardRecord).filter(BillboardRecord.chart_rank == chart_rank).first()


def get_all(db: Session) -> List[BillboardRecord]:
    return db.query(BillboardRecord).order_by(BillboardRecord.chart_rank).all()


def add(db: Session, record: BillboardRecord) -> BillboardRecord:
    db.add(record)
    return record
