"""
Vod Server - 服务器启动封装
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config import get_settings
from .endpoints import router, register_exception_handlers
from .init import migrate_database
from .logger import get_logger

logger = get_logger("VodServer")


def create_app(db_path: Optional[str] = None) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        db_path: SQLite 数据库路径，为 None 时使用配置中的 SQLITE_PATH
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("FastAPI 应用启动中...")
        migrate_database(db_path)
        yield
        logger.info("FastAPI 应用正在关闭...")

    app = FastAPI(
        title="Vod User Server",
        description="短视频用户账号服务",
        version="0.1.0",
        lifespan=lifespan
    )
    app.include_router(router)
    register_exception_handlers(app)
    return app


def get_app() -> FastAPI:
    """uvicorn factory 入口"""
    return create_app()


class VodServer:
    """
    Vod 服务器

    Examples:
        >>> server = VodServer(db_path="vod.db", port=8000)
        >>> server.run()
    """

    def __init__(self, db_path: str, host: str = "0.0.0.0", port: int = 8000):
        self.db_path = db_path
        self.host = host
        self.port = port

    def _validate_config(self):
        """验证必备配置"""
        errors = []

        if not self.db_path:
            errors.append("❌ 缺少数据库路径配置")

        if self.port < 1 or self.port > 65535:
            errors.append(f"❌ 端口号无效: {self.port}，必须在 1-65535 之间")

        if errors:
            logger.error("配置验证失败:")
            for error in errors:
                logger.error(f"  {error}")
            raise ValueError("缺少必备配置，服务无法启动")

        logger.info("✅ 配置验证通过")
        logger.info(f"   Database: {self.db_path}")

    def _check_database(self):
        """检查数据库状态，如果表不存在则创建"""
        logger.info("正在检查数据库...")
        try:
            migrate_database(self.db_path)
        except PermissionError as e:
            logger.error(f"❌ SQLite 权限错误: 无法访问 {self.db_path}")
            logger.error(f"   错误信息: {e}")
            raise

    def run(self):
        """
        启动服务器

        Raises:
            ValueError: 配置验证失败
        """
        import uvicorn

        try:
            logger.info("=" * 60)
            logger.info("🚀 Vod Server 启动中...")
            logger.info("=" * 60)

            self._validate_config()
            self._check_database()

            logger.info(f"📍 FastAPI Server: http://{self.host}:{self.port}")
            uvicorn.run(
                create_app(self.db_path),
                host=self.host,
                port=self.port,
                log_level="debug" if get_settings().debug else "info",
            )

        except KeyboardInterrupt:
            logger.info("收到停止信号，正在关闭服务...")

        except Exception as e:
            logger.exception(f"❌ 服务启动失败: {e}")
            sys.exit(1)
