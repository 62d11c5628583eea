from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from .db import PeeweeUserStore
from .errors import ErrorCode, VodError
from .models import (
    RequestContext, UserCreate, UserInfo, UserPublic,
    PasswordVerify, PasswordUpdate, NickNameAuth, ErrorResponse,
)
from .ports import UserStore
from .services import UserService

router = APIRouter()

# 领域错误 -> HTTP 状态码，未列出的均为 500
STATUS_BY_CODE = {
    ErrorCode.DUPLICATE_NICK_NAME: 409,
    ErrorCode.NO_USER_FOUND: 404,
    ErrorCode.PASSWORD_MISMATCH: 401,
}


async def vod_error_handler(request: Request, exc: VodError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    body = ErrorResponse(code=exc.code.value, message=exc.message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(VodError, vod_error_handler)


# 依赖注入
async def get_db():
    """获取已连接的用户存储"""
    store = PeeweeUserStore()
    await store.connect()
    try:
        yield store
    finally:
        await store.disconnect()


def get_user_service(
        store: UserStore = Depends(get_db)
) -> UserService:
    return UserService(store)


def get_context(
        request_id: Optional[str] = Header(None, alias="X-Request-ID")
) -> RequestContext:
    """X-Request-ID 请求头作为关联 ID，缺省时自动生成"""
    if request_id:
        return RequestContext(request_id=request_id)
    return RequestContext()


@router.post("/users", response_model=UserPublic)
async def save_user(user_data: UserCreate,
                    ctx: RequestContext = Depends(get_context),
                    service: UserService = Depends(get_user_service)):
    """
    保存用户

    POST /users
    Body: {"nick_name": "昵称", "password": "密码", "avatar": "...", "description": "..."}

    返回:
    - 200: 保存后的用户（不含密码）
    - 409: 昵称已存在
    - 500: 保存失败
    """
    return await service.save(ctx, user_data.to_user())


@router.get("/users/by-nickname/{nick_name}", response_model=UserPublic)
async def get_user_by_nick_name(nick_name: str,
                                ctx: RequestContext = Depends(get_context),
                                service: UserService = Depends(get_user_service)):
    """根据昵称获取用户，不存在时返回 404"""
    user = await service.find_by_nick_name(ctx, nick_name)
    if user is None:
        raise HTTPException(status_code=404, detail=f"用户 {nick_name} 不存在")
    return user


@router.get("/users/{user_id}", response_model=UserPublic)
async def get_user(user_id: str,
                   ctx: RequestContext = Depends(get_context),
                   service: UserService = Depends(get_user_service)):
    """根据 id 获取用户，不存在时返回 404"""
    user = await service.find_by_id(ctx, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User with id {user_id} not found")
    return user


@router.post("/users/{user_id}/verify-password", status_code=204)
async def verify_password(user_id: str, body: PasswordVerify,
                          ctx: RequestContext = Depends(get_context),
                          service: UserService = Depends(get_user_service)):
    """
    根据用户 id 校验密码

    返回:
    - 204: 密码正确
    - 404: 用户不存在
    - 401: 密码错误
    """
    await service.verify_password_by_user_id(ctx, user_id, body.password)


@router.post("/auth/login", response_model=UserPublic)
async def login(auth_data: NickNameAuth,
                ctx: RequestContext = Depends(get_context),
                service: UserService = Depends(get_user_service)):
    """
    昵称 + 密码登录

    返回:
    - 200: 用户信息
    - 404: 用户不存在
    - 401: 密码错误
    """
    return await service.authenticate_by_nick_name(ctx, auth_data.nick_name, auth_data.password)


@router.put("/users/{user_id}/password", status_code=204)
async def update_password(user_id: str, body: PasswordUpdate,
                          ctx: RequestContext = Depends(get_context),
                          service: UserService = Depends(get_user_service)):
    """修改密码（不校验旧密码）"""
    await service.update_password(ctx, user_id, body.password)


@router.patch("/users/{user_id}", status_code=204)
async def update_info(user_id: str, info: UserInfo,
                      ctx: RequestContext = Depends(get_context),
                      service: UserService = Depends(get_user_service)):
    """修改昵称/头像/简介，未提供或为空的字段保持不变"""
    await service.update_info(ctx, user_id, info)
