"""
用户存储接口（Persistence Port）

UserService 只依赖这个抽象，具体实现见 db.PeeweeUserStore。
所有方法失败时抛出 errors.PersistenceError（唯一约束冲突为 ConstraintViolation）。
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .models import User


class UserStore(ABC):

    @abstractmethod
    async def create_or_save(self, user: User) -> User:
        """插入用户；id 已存在时覆盖该行。返回持久化后的用户"""

    @abstractmethod
    async def find_one(self, **predicate: Any) -> Optional[User]:
        """按 id= 或 nick_name= 查找单个用户，不存在时返回 None"""

    @abstractmethod
    async def update_fields(self, user_id: str, fields: Dict[str, Any]) -> None:
        """按 id 部分更新字段；id 不存在时不做任何修改"""
