"""
应用配置
从环境变量和 .env 文件读取配置
"""
from typing import List
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用设置"""

    # 应用基础配置
    APP_NAME: str = "Pousada"
    DEBUG: bool = False

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./pousada.db"

    # 日志配置
    LOG_LEVEL: str = "INFO"

    # CORS 配置
    CORS_ORIGINS: List[str] = ["*"]

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# 全局设置实例
settings = Settings()
