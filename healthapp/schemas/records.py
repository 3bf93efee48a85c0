"""
ActivityRecords模块的请求和响应模式

定义活动记录相关API接口的输入输出数据结构。
"""

import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import AdminCredentials, RequesterCredentials

CLEARABLE_FIELDS = ("heart_rate", "exercises")


class RecordCreate(BaseModel):
    """创建活动记录时的记录数据（created_at 由服务端生成）"""
    user_id: Optional[str] = Field(None, description="所属用户ID")
    activity_type: Optional[str] = Field(None, description="运动类型")
    heart_rate: float = Field(0, description="心率")
    mood: Optional[str] = Field(None, description="心情")
    duration: Optional[str] = Field(None, description="时长（最长8个字符）")
    exercises: Optional[str] = Field("", description="运动明细，如 'Pushups: reps 20 count, Run: distance 5 km'")


class RecordCreateRequest(RequesterCredentials):
    record: Optional[RecordCreate] = None


class RecordUpdate(BaseModel):
    """更新活动记录

    None、空字符串和 0 都表示"不修改"；要把心率清零或清空运动明细，
    需要把字段名放进 clear_fields。
    """
    id: Optional[int] = Field(None, description="若提供，必须与路径中的ID一致")
    user_id: Optional[str] = None
    activity_type: Optional[str] = None
    heart_rate: Optional[float] = None
    mood: Optional[str] = None
    duration: Optional[str] = None
    exercises: Optional[str] = None
    clear_fields: List[str] = Field(default_factory=list, description="要显式清空的字段：heart_rate / exercises")


class RecordUpdateRequest(AdminCredentials):
    record: Optional[RecordUpdate] = None


class RecordOut(BaseModel):
    """活动记录响应模型"""
    id: int
    user_id: str
    activity_type: str
    heart_rate: float
    mood: str
    duration: str
    exercises: str
    created_at: Optional[datetime.datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ExerciseItem(BaseModel):
    metric: str
    value: str
    unit: str


class RecordExercisesResponse(BaseModel):
    """记录的运动明细（按动作名分组，保持写入顺序）"""
    record_id: int
    exercises: Dict[str, List[ExerciseItem]]
