"""
配置管理 - 统一从环境变量 / .env 加载
"""
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API 配置
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = True
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    # Gemini 生图 API 配置
    # 保留 GOOGLE_API_KEY 作为兼容别名
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_image_model: str = "gemini-2.5-flash-image-preview"
    gemini_api_timeout: int = Field(default=30, description="单次调用超时（秒）")

    # 对象存储配置（S3 兼容，MinIO 客户端）
    storage_endpoint: str = "localhost:9000"
    storage_access_key: str = ""
    storage_secret_key: str = ""
    storage_secure: bool = False
    storage_bucket: str = "pixology-images"
    storage_public_url_base: str = "http://localhost:9000/pixology-images/"

    # 数据库配置
    database_url: str = "sqlite:///./data/pixology.db"

    # 生图配额与默认参数
    max_images_per_user_per_day: int = Field(default=50, ge=1)
    default_image_width: int = 1024
    default_image_height: int = 1024

    # 日志配置
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()
