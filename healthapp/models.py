# 这个文件定义了项目的数据库模型（ORM模型），用于描述和操作数据库中的表结构。
# 所有模型继承 db_base.Base，每个类对应数据库中的一张表。
#
# 注意：Exercise 与 ActivityRecord 之间只声明了多对一关系，没有配置 ORM / 数据库级联删除，
# 运动明细的清理统一由 services/record_service.py、services/user_service.py 在同一事务内显式完成。

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .db_base import Base
from .utils import utcnow


# 用户表模型，存储账号与基本信息
class User(Base):
    __tablename__ = 'users'
    id = Column(String(50), primary_key=True)                   # 用户ID（登录名），主键
    name = Column(String(100), nullable=False)                  # 用户名
    password = Column(String(255), nullable=False)              # 密码（明文比对）
    age = Column(Integer, nullable=False, default=0)            # 年龄
    sex = Column(String(50), nullable=True, default='Unknown')  # 性别
    created_at = Column(DateTime, default=utcnow)               # 创建时间
    is_admin = Column(Boolean, nullable=False, default=False)   # 是否管理员


# 活动记录表模型，一次运动打卡；exercises 保存原始编码文本
class ActivityRecord(Base):
    __tablename__ = 'activity_records'
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)    # 记录ID，主键
    user_id = Column(String(50), ForeignKey('users.id'), nullable=False, index=True)  # 所属用户
    activity_type = Column(String(50), nullable=False)          # 运动类型
    heart_rate = Column(Float, nullable=False, default=0)       # 心率
    mood = Column(String(50), nullable=False)                   # 心情
    duration = Column(String(8), nullable=False)                # 时长（自由格式，如 00:45:00）
    exercises = Column(Text, nullable=False, default='')        # 原始运动明细文本
    created_at = Column(DateTime, default=utcnow)               # 创建时间（服务端生成）


# 运动明细表模型，由 ActivityRecord.exercises 解码得到，不允许单独编辑
class Exercise(Base):
    __tablename__ = 'exercises'
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    record_id = Column(Integer, ForeignKey('activity_records.id'), nullable=False, index=True)
    exercise_name = Column(String(255), nullable=False)         # 动作名称，如 Pushups
    metric = Column(String(255), nullable=False)                # 指标，如 reps
    value = Column(String(255), nullable=False)                 # 数值（保持字符串）
    unit = Column(String(255), nullable=False)                  # 单位，如 count
    record = relationship('ActivityRecord')


# 榜单表模型，chart_rank 是自然键，数据库层唯一
class BillboardRecord(Base):
    __tablename__ = 'billboard_records'
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    song_title = Column(String(100), nullable=False)            # 歌曲名
    artist = Column(String(100), nullable=False)                # 歌手
    chart_rank = Column(Integer, nullable=False, unique=True)   # 榜单名次
    star_number = Column(Integer, nullable=False, default=0)    # 星级
    updated_at = Column(DateTime, default=utcnow)               # 最近一次写入时间
