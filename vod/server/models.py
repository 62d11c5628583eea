"""
服务器端数据模型

用户记录、更新请求与请求上下文，以及 HTTP 请求/响应模型
"""
from datetime import datetime
from typing import Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_user_id() -> str:
    return str(uuid4())


class User(BaseModel):
    """用户记录（持久化形态，含密码）"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=new_user_id)
    nick_name: str
    password: str
    avatar: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class UserInfo(BaseModel):
    """
    用户资料更新请求

    只有提供了且非空的字段才会被写入，其余字段保持不变（不会被清空）。
    密码不在此列，只能通过单独的修改密码接口更新。
    """
    nick_name: Optional[str] = None
    avatar: Optional[str] = None
    description: Optional[str] = None

    def to_update_fields(self) -> Dict[str, str]:
        fields = {}
        if self.nick_name:
            fields["nick_name"] = self.nick_name
        if self.avatar:
            fields["avatar"] = self.avatar
        if self.description:
            fields["description"] = self.description
        return fields


class RequestContext(BaseModel):
    """请求上下文，request_id 仅用于日志关联"""
    request_id: str = Field(default_factory=lambda: uuid4().hex)


# HTTP 请求/响应模型
class UserCreate(BaseModel):
    """创建用户请求模型"""
    id: Optional[str] = None
    nick_name: str
    password: str
    avatar: Optional[str] = None
    description: Optional[str] = None

    def to_user(self) -> User:
        data = self.model_dump(exclude_none=True)
        return User(**data)


class UserPublic(BaseModel):
    """用户数据模型（不含密码）"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    nick_name: str
    avatar: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime


class PasswordVerify(BaseModel):
    password: str


class NickNameAuth(BaseModel):
    """昵称 + 密码登录请求模型"""
    nick_name: str
    password: str


class PasswordUpdate(BaseModel):
    password: str


class ErrorResponse(BaseModel):
    code: str
    message: str


__all__ = [
    "User",
    "UserInfo",
    "RequestContext",
    "UserCreate",
    "UserPublic",
    "PasswordVerify",
    "NickNameAuth",
    "PasswordUpdate",
    "ErrorResponse",
    "new_user_id",
]
