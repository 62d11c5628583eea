import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def find_env_file() -> Optional[str]:
    """
    查找 .env 文件

    查找顺序：
    1. 环境变量 VOD_ENV_FILE 指定的路径
    2. 当前工作目录及其父目录（向上最多3级）
    3. 用户 home 目录下的 .vod/.env
    """
    env_path = os.getenv('VOD_ENV_FILE')
    if env_path and Path(env_path).exists():
        return env_path

    current = Path.cwd()
    for _ in range(4):
        env_file = current / '.env'
        if env_file.exists():
            return str(env_file)
        if current.parent == current:  # 到达根目录
            break
        current = current.parent

    home_env = Path.home() / '.vod' / '.env'
    if home_env.exists():
        return str(home_env)

    return '.env'


class Settings(BaseSettings):
    """应用配置管理"""

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # 数据库配置
    sqlite_path: str = Field(default="vod.db", validation_alias="SQLITE_PATH")

    # 服务器配置
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")

    debug: bool = Field(default=False, validation_alias="DEBUG")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._validate_settings()

    def _validate_settings(self):
        """验证配置的有效性"""
        if not self.sqlite_path:
            raise ValueError("SQLITE_PATH must be specified")

        if self.port < 1 or self.port > 65535:
            raise ValueError("PORT must be between 1 and 65535")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """获取配置实例"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
