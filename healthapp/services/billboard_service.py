"""
Billboard Service（榜单服务）

职责：
- 按 chart_rank（自然键）批量插入或覆盖榜单条目
- 不合法的条目逐条跳过，不影响同一批次的其它条目
- 一个批次只提交一次；提交失败（包括 chart_rank 唯一约束冲突）则整批拒绝
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models import BillboardRecord
from ..repositories import billboard_repo
from ..schemas.billboard import BillboardItem
from ..utils import unit_of_work, utcnow

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 100


def _is_valid(item: BillboardItem) -> bool:
    title = (item.song_title or "").strip()
    artist = (item.artist or "").strip()
    if not title or not artist or item.chart_rank <= 0:
        return False
    return len(title) <= MAX_TEXT_LENGTH and len(artist) <= MAX_TEXT_LENGTH


class BillboardService:
    """榜单服务"""

    def upsert(self, db: Session, items: Optional[List[BillboardItem]]) -> List[BillboardRecord]:
        """批量写入榜单

        Args:
            db: 数据库会话
            items: 榜单条目列表

        Returns:
            被接受的榜单行（同一名次只出现一次，值为本批次最后一次写入）

        Raises:
            ValidationError: 批次为空
            PersistenceError: 提交失败，整批未写入
        """
        if not items:
            logger.warning("[billboard-upsert][invalid] empty batch")
            raise ValidationError("Billboard records are required")

        touched: Dict[int, BillboardRecord] = {}
        skipped = 0
        with unit_of_work(db, "billboard-upsert"):
            for item in items:
                if not _is_valid(item):
                    skipped += 1
                    logger.warning(
                        "[billboard-upsert][skip] rank=%s title=%r artist=%r",
                        item.chart_rank, item.song_title, item.artist,
                    )
                    continue

                # autoflush 关闭，同一批次内新插入的行需要从 touched 中查找
                row = touched.get(item.chart_rank) or billboard_repo.get_by_rank(db, item.chart_rank)
                if row is None:
                    row = billboard_repo.add(db, BillboardRecord(chart_rank=item.chart_rank))
                row.song_title = item.song_title.strip()
                row.artist = item.artist.strip()
                row.star_number = item.star_number
                row.updated_at = utcnow()
                touched[item.chart_rank] = row

        accepted = list(touched.values())
        for row in accepted:
            db.refresh(row)
        logger.info("[billboard-upsert] accepted=%d skipped=%d", len(accepted), skipped)
        return accepted

    def list_billboard(self, db: Session) -> List[BillboardRecord]:
        return billboard_repo.get_all(db)


# 创建单例实例
billboard_service = BillboardService()
