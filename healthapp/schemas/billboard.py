"""
Billboard模块的请求和响应模式
"""

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BillboardItem(BaseModel):
    """榜单条目（请求）；不合法的条目会被跳过而不是报错"""
    song_title: Optional[str] = Field(None, description="歌曲名（最长100）")
    artist: Optional[str] = Field(None, description="歌手（最长100）")
    chart_rank: int = Field(0, description="榜单名次（自然键，必须大于0）")
    star_number: int = Field(0, description="星级")


class BillboardOut(BaseModel):
    id: int
    song_title: str
    artist: str
    chart_rank: int
    star_number: int
    updated_at: Optional[datetime.datetime] = None
    model_config = ConfigDict(from_attributes=True)


class BillboardUpdateResponse(BaseModel):
    message: str
    updated_records: List[BillboardOut]
