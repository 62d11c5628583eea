#!/usr/bin/env python3
"""
Vod Server - 启动脚本

python vod-server.py            # 迁移数据库并启动服务
python vod-server.py --reset    # 重置数据库后退出（仅开发环境）
"""
import sys

from vod.server.config import get_settings
from vod.server.init import check_environment, reset_database
from vod.server.logger import get_logger
from vod.server.server import VodServer

logger = get_logger("VodServer")


if __name__ == "__main__":
    settings = get_settings()

    if "--reset" in sys.argv:
        reset_database(settings.sqlite_path)
        sys.exit(0)

    if not check_environment():
        logger.error("❌ 环境检查失败，无法启动服务")
        sys.exit(1)

    VodServer(
        db_path=settings.sqlite_path,
        host=settings.host,
        port=settings.port,
    ).run()
