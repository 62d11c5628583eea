"""
错误定义

- 持久层错误：PersistenceError / ConstraintViolation，由存储适配器抛出
- 领域错误：VodError 及其子类，带稳定的 ErrorCode，返回给调用方
- map_persistence_error：持久层错误 -> 领域错误
"""
from enum import Enum
from typing import Optional, Type


class ErrorCode(str, Enum):
    DUPLICATE_NICK_NAME = "DuplicateNickName"
    SAVE_FAILURE = "SaveFailure"
    FIND_FAILURE = "FindFailure"
    NO_USER_FOUND = "NoUserFound"
    PASSWORD_MISMATCH = "PasswordMismatch"
    UPDATE_PASSWORD_FAILURE = "UpdatePasswordFailure"
    UPDATE_USER_INFO_FAILURE = "UpdateUserInfoFailure"


# ============================================================================
# 持久层错误
# ============================================================================

class PersistenceError(Exception):
    """存储层操作失败"""


class ConstraintViolation(PersistenceError):
    """唯一约束冲突"""

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.column = column


# ============================================================================
# 领域错误
# ============================================================================

class VodError(Exception):
    """领域错误基类，code 供程序判断，message 供人阅读"""

    code: ErrorCode
    default_message: str = ""

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class DuplicateNickName(VodError):
    code = ErrorCode.DUPLICATE_NICK_NAME
    default_message = "NickName is not unique"


class SaveFailure(VodError):
    code = ErrorCode.SAVE_FAILURE
    default_message = "Fail to save user"


class FindFailure(VodError):
    code = ErrorCode.FIND_FAILURE
    default_message = "Fail to find user"


class NoUserFound(VodError):
    code = ErrorCode.NO_USER_FOUND
    default_message = "No User Found"


class PasswordMismatch(VodError):
    code = ErrorCode.PASSWORD_MISMATCH
    default_message = "Password is not correct"


class UpdatePasswordFailure(VodError):
    code = ErrorCode.UPDATE_PASSWORD_FAILURE
    default_message = "Fail to update password"


class UpdateUserInfoFailure(VodError):
    code = ErrorCode.UPDATE_USER_INFO_FAILURE
    default_message = "Fail to update user info"


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        DuplicateNickName,
        SaveFailure,
        FindFailure,
        NoUserFound,
        PasswordMismatch,
        UpdatePasswordFailure,
        UpdateUserInfoFailure,
    )
}


# 映射为重名错误的唯一约束列，None 表示存储无法识别列名
DUPLICATE_COLUMNS = (None, "nick_name")


def map_persistence_error(
    error: PersistenceError,
    fallback: Type[VodError],
    on_duplicate: Optional[Type[VodError]] = None,
) -> VodError:
    """
    将持久层错误映射为领域错误

    Args:
        error: 存储适配器抛出的错误
        fallback: 当前操作的通用失败类型
        on_duplicate: 昵称唯一约束冲突时使用的类型；为 None 时冲突也按 fallback 处理，
                      其他列（如主键 id）的冲突始终按 fallback 处理

    Returns:
        VodError: 只包含固定文案的领域错误，不携带存储层的错误信息
    """
    if (on_duplicate is not None
            and isinstance(error, ConstraintViolation)
            and error.column in DUPLICATE_COLUMNS):
        return on_duplicate()
    return fallback()


__all__ = [
    "ErrorCode",
    "PersistenceError",
    "ConstraintViolation",
    "VodError",
    "DuplicateNickName",
    "SaveFailure",
    "FindFailure",
    "NoUserFound",
    "PasswordMismatch",
    "UpdatePasswordFailure",
    "UpdateUserInfoFailure",
    "ERRORS_BY_CODE",
    "map_persistence_error",
]
