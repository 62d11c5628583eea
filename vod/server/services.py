from typing import Optional

from .errors import (
    PersistenceError, map_persistence_error,
    DuplicateNickName, SaveFailure, FindFailure, NoUserFound, PasswordMismatch,
    UpdatePasswordFailure, UpdateUserInfoFailure,
)
from .logger import get_request_logger
from .models import RequestContext, User, UserInfo
from .ports import UserStore


class UserService:
    """
    用户相关的服务

    通过构造时注入的 UserStore 访问存储，把存储层错误转换为领域错误。
    每个方法的第一个参数是请求上下文，request_id 用于日志关联。
    """

    def __init__(self, store: UserStore):
        self.store = store

    def _logger(self, ctx: RequestContext):
        return get_request_logger("UserService", ctx.request_id)

    async def save(self, ctx: RequestContext, user: User) -> User:
        """保存用户（插入或覆盖）"""
        log = self._logger(ctx)
        try:
            saved = await self.store.create_or_save(user)
        except PersistenceError as e:
            log.error(f"save user fail: {e!r}")
            raise map_persistence_error(e, SaveFailure, on_duplicate=DuplicateNickName) from e
        log.info(f"user has been saved: id={saved.id}, nick_name={saved.nick_name}")
        return saved

    async def find_by_id(self, ctx: RequestContext, user_id: str) -> Optional[User]:
        """根据 id 查找用户，不存在时返回 None"""
        return await self._find_one(ctx, id=user_id)

    async def find_by_nick_name(self, ctx: RequestContext, nick_name: str) -> Optional[User]:
        """根据昵称查找用户，不存在时返回 None"""
        return await self._find_one(ctx, nick_name=nick_name)

    async def _find_one(self, ctx: RequestContext, **predicate) -> Optional[User]:
        log = self._logger(ctx)
        try:
            user = await self.store.find_one(**predicate)
        except PersistenceError as e:
            log.error(f"find user fail: {predicate}, {e!r}")
            raise map_persistence_error(e, FindFailure) from e
        if user is None:
            log.info(f"no user found: {predicate}")
        else:
            log.info(f"user has been found: id={user.id}")
        return user

    async def verify_password_by_user_id(self, ctx: RequestContext, user_id: str, password: str) -> None:
        """根据用户 id 校验密码"""
        user = await self.find_by_id(ctx, user_id)
        self._check_password(ctx, user, password)

    async def verify_password_by_nick_name(self, ctx: RequestContext, nick_name: str, password: str) -> None:
        """根据昵称校验密码"""
        await self.authenticate_by_nick_name(ctx, nick_name, password)

    async def authenticate_by_nick_name(self, ctx: RequestContext, nick_name: str, password: str) -> User:
        """根据昵称校验密码，成功时返回查到的用户（只查询一次）"""
        user = await self.find_by_nick_name(ctx, nick_name)
        self._check_password(ctx, user, password)
        return user

    def _check_password(self, ctx: RequestContext, user: Optional[User], password: str) -> None:
        log = self._logger(ctx)
        if user is None:
            log.info(f"no user to verify")
            raise NoUserFound()
        # 明文比较，存储格式由调用方决定
        if user.password != password:
            log.info(f"password is not correct, userId:{user.id}")
            raise PasswordMismatch()

    async def update_password(self, ctx: RequestContext, user_id: str, password: str) -> None:
        """根据 id 更新密码，不校验旧密码"""
        log = self._logger(ctx)
        try:
            await self.store.update_fields(user_id, {"password": password})
        except PersistenceError as e:
            log.error(f"update user password fail, userId:{user_id}, {e!r}")
            raise map_persistence_error(e, UpdatePasswordFailure) from e
        log.info(f"update user password success, userId:{user_id}")

    async def update_info(self, ctx: RequestContext, user_id: str, info: UserInfo) -> None:
        """根据 id 更新昵称/头像/简介，空字段保持不变"""
        log = self._logger(ctx)
        fields = info.to_update_fields()
        try:
            await self.store.update_fields(user_id, fields)
        except PersistenceError as e:
            log.error(f"update user info fail, userId:{user_id}, {e!r}")
            raise map_persistence_error(e, UpdateUserInfoFailure) from e
        log.info(f"update info success, userId:{user_id}, userInfo:{fields}")
