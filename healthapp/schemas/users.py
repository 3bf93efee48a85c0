"""
Users模块的请求和响应模式

包含以下模型：
1. UserCreate: 注册用户时的用户数据
2. AdminRegisterRequest: 管理员注册用户（带管理员凭证）
3. UserUpdate / UserUpdateRequest: 更新用户（字段为 None 表示不修改）
4. LoginRequest / LoginResponse: 登录
5. ResetPasswordRequest: 管理员重置密码
6. UserOut: 用户响应（不含密码）
7. UserStar: 用户星级统计
"""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import AdminCredentials, RequesterCredentials


class UserCreate(BaseModel):
    """注册用户时的用户数据"""
    id: Optional[str] = Field(None, description="用户ID（最长50）")
    name: Optional[str] = Field(None, description="用户名（最长100）")
    password: Optional[str] = Field(None, description="密码（最长255）")
    age: int = Field(0, description="年龄")
    sex: Optional[str] = Field(None, description="性别，缺省为 Unknown")
    is_admin: bool = Field(False, description="是否管理员（公开注册时强制为 false）")


class AdminRegisterRequest(AdminCredentials):
    """管理员注册用户"""
    user: Optional[UserCreate] = None


class UserUpdate(BaseModel):
    """更新用户时的用户数据（None 表示不修改）"""
    id: Optional[str] = Field(None, description="若提供，必须与路径中的ID一致")
    name: Optional[str] = None
    age: Optional[int] = None
    sex: Optional[str] = None
    password: Optional[str] = None
    is_admin: Optional[bool] = Field(None, description="只有管理员可以修改")


class UserUpdateRequest(RequesterCredentials):
    """更新用户"""
    user: Optional[UserUpdate] = None


class LoginRequest(BaseModel):
    id: Optional[str] = None
    password: Optional[str] = None


class ResetPasswordRequest(AdminCredentials):
    """管理员重置用户密码"""
    user_id: Optional[str] = None
    new_password: Optional[str] = None


class UserOut(BaseModel):
    """用户响应模型（不含密码）"""
    id: str
    name: str
    age: int
    sex: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    is_admin: bool
    model_config = ConfigDict(from_attributes=True)  # 允许从ORM对象创建


class LoginResponse(UserOut):
    role: str = Field(..., description="admin 或 user")


class UserStar(BaseModel):
    """用户星级：不同运动类型的数量"""
    username: str
    star_count: int
