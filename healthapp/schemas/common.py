"""
通用请求片段：凭证信封

- AdminCredentials：仅管理员可执行的操作，凭证放在请求体
- RequesterCredentials：管理员或本人可执行的操作
字段都是可选的，缺失时由服务层统一返回 400，而不是框架默认的 422。
"""

from typing import Optional
from pydantic import BaseModel, Field


class AdminCredentials(BaseModel):
    """管理员凭证"""
    admin_id: Optional[str] = Field(None, description="管理员ID")
    admin_password: Optional[str] = Field(None, description="管理员密码")


class RequesterCredentials(BaseModel):
    """请求者凭证（管理员或资源所有者本人）"""
    requester_id: Optional[str] = Field(None, description="请求者ID")
    requester_password: Optional[str] = Field(None, description="请求者密码")


class MessageResponse(BaseModel):
    """只包含提示信息的响应"""
    message: str
