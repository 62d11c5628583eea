"""
数据库模块

职责：
1. 定义数据库代理（避免循环导入）
2. 定义用户表结构
3. 提供用户存储的 Peewee 实现（PeeweeUserStore）
"""
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from peewee import (
    DatabaseProxy, SqliteDatabase, Model, IntegrityError, PeeweeException,
    CharField, TextField, DateTimeField
)

from .errors import ConstraintViolation, PersistenceError
from .logger import get_logger
from .models import User, new_user_id
from .ports import UserStore

logger = get_logger("Database")


# ============================================================================
# 第一部分：数据库代理
# ============================================================================

db_proxy = DatabaseProxy()


def init_database(db_path: str):
    """
    初始化数据库代理

    Args:
        db_path: SQLite 数据库文件路径，支持 ":memory:"
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    database = SqliteDatabase(db_path, pragmas={
        'foreign_keys': 1,
        'journal_mode': 'wal',
    })

    db_proxy.initialize(database)


# ============================================================================
# 第二部分：表定义
# ============================================================================

class BaseTable(Model):
    """数据库表基类，使用统一的数据库代理"""
    class Meta:
        database = db_proxy


class UserTable(BaseTable):
    """用户数据表"""
    id = CharField(max_length=64, primary_key=True, default=new_user_id)
    nick_name = CharField(max_length=100, unique=True)
    password = CharField()

    # 档案信息
    avatar = CharField(max_length=500, null=True)
    description = TextField(null=True)

    created_at = DateTimeField(default=datetime.now)

    class Meta:
        table_name = 'users'


def get_all_tables():
    return [UserTable]


def create_tables():
    """创建缺失的表，已存在的表保持不变"""
    db_proxy.create_tables(get_all_tables(), safe=True)


def drop_tables():
    db_proxy.drop_tables(get_all_tables(), safe=True)


# ============================================================================
# 第三部分：用户存储实现
# ============================================================================

# 可用于查询/更新的列
QUERY_COLUMNS = {"id", "nick_name"}
UPDATE_COLUMNS = {"nick_name", "password", "avatar", "description"}

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")


def _to_persistence_error(error: PeeweeException) -> PersistenceError:
    """把 peewee 异常转换为存储层错误，唯一约束冲突单独标记"""
    message = str(error)
    if isinstance(error, IntegrityError):
        lowered = message.lower()
        if "unique" in lowered or "duplicate" in lowered:
            match = _SQLITE_UNIQUE.search(message)
            if match:
                column = match.group(1)
            elif "nick_name" in message:
                column = "nick_name"
            else:
                column = None
            return ConstraintViolation(message, column=column)
    return PersistenceError(message)


class PeeweeUserStore(UserStore):
    """
    基于 Peewee 的用户存储

    使用示例：
        >>> store = PeeweeUserStore("vod.db")
        >>> await store.connect()
        >>> user = await store.create_or_save(User(nick_name="alice", password="p1"))
    """

    def __init__(self, db_path: str = None):
        """
        Args:
            db_path: SQLite 数据库文件路径
                    - 如果提供，则初始化数据库代理
                    - 如果为 None，则使用已初始化的代理
        """
        if db_path:
            init_database(db_path)

        self.db = db_proxy

    async def connect(self):
        """连接数据库"""
        self.db.connect(reuse_if_open=True)

    async def disconnect(self):
        """断开数据库连接"""
        if not self.db.is_closed():
            self.db.close()

    async def create_or_save(self, user: User) -> User:
        data = user.model_dump()
        try:
            with self.db.atomic():
                if UserTable.select().where(UserTable.id == user.id).exists():
                    # 覆盖已有记录，id 与 created_at 保持不变
                    fields = {k: data[k] for k in UPDATE_COLUMNS}
                    UserTable.update(fields).where(UserTable.id == user.id).execute()
                else:
                    UserTable.create(**data)
                row = UserTable.get_by_id(user.id)
        except PeeweeException as e:
            raise _to_persistence_error(e) from e
        return User.model_validate(row)

    async def find_one(self, **predicate: Any) -> Optional[User]:
        if len(predicate) != 1 or not set(predicate) <= QUERY_COLUMNS:
            raise PersistenceError(f"Unsupported predicate: {sorted(predicate)}")
        try:
            row = UserTable.get_or_none(**predicate)
        except PeeweeException as e:
            raise _to_persistence_error(e) from e
        if row is None:
            return None
        return User.model_validate(row)

    async def update_fields(self, user_id: str, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - UPDATE_COLUMNS
        if unknown:
            raise PersistenceError(f"Unsupported columns: {sorted(unknown)}")
        if not fields:
            return
        try:
            rows = UserTable.update(fields).where(UserTable.id == user_id).execute()
        except PeeweeException as e:
            raise _to_persistence_error(e) from e
        logger.debug(f"updated {rows} row(s) for user {user_id}: {sorted(fields)}")
