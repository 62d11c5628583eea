"""
服务器初始化模块
职责：数据库迁移、重置、环境检查等启动相关操作
"""
from pathlib import Path

from .config import get_settings
from .db import db_proxy, init_database, create_tables, drop_tables, get_all_tables
from .logger import get_logger

logger = get_logger("ServerInit")


def migrate_database(db_path: str = None):
    """数据库迁移 - 保留数据，只创建缺失的表"""
    init_database(db_path or get_settings().sqlite_path)
    db_proxy.connect(reuse_if_open=True)

    try:
        for table in get_all_tables():
            if not table.table_exists():
                logger.info(f"创建新表: {table._meta.table_name}")
        create_tables()
        logger.info("✅ 数据库迁移完成")
    except Exception as e:
        logger.exception(f"❌ 数据库迁移失败: {e}")
        raise
    finally:
        db_proxy.close()


def reset_database(db_path: str = None):
    """重置数据库 - 删除并重建所有表（仅开发环境使用）"""
    logger.warning("⚠️ 即将完全重置数据库，所有数据将丢失！")
    init_database(db_path or get_settings().sqlite_path)
    db_proxy.connect(reuse_if_open=True)

    try:
        drop_tables()
        create_tables()
        logger.info("✅ 数据库重置完成")
    finally:
        db_proxy.close()


def check_sqlite() -> bool:
    """
    检查 SQLite 数据库文件和连接

    Returns:
        bool: SQLite 是否可用
    """
    settings = get_settings()

    try:
        if settings.sqlite_path != ":memory:":
            Path(settings.sqlite_path).parent.mkdir(parents=True, exist_ok=True)

        init_database(settings.sqlite_path)
        db_proxy.connect(reuse_if_open=True)
        db_proxy.close()
        return True

    except PermissionError as e:
        logger.error(f"❌ SQLite 权限错误: 无法访问 {settings.sqlite_path}")
        logger.error(f"   错误信息: {e}")
        return False
    except Exception as e:
        logger.exception(f"❌ SQLite 检查失败: {e}")
        return False


def check_environment() -> bool:
    """检查所有环境依赖"""
    if check_sqlite():
        return True

    logger.error("=" * 60)
    logger.error("❌ 环境检查失败")
    logger.error("💡 请检查 SQLite 数据库文件路径是否可写 (.env 文件中的 SQLITE_PATH)")
    logger.error("=" * 60)
    return False
