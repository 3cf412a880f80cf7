"""
应用配置
从环境变量 / .env 读取配置
"""
from decimal import Decimal
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用设置"""

    # 应用基础配置
    APP_NAME: str = "Lodge Admin"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./lodges.db"

    # JWT 配置
    SECRET_KEY: str = "lodge-admin-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # 计价配置
    DEFAULT_TAX_RATE: Decimal = Decimal("0.15")
    DEFAULT_CURRENCY: str = "USD"

    # 预订规则
    MAX_STAY_NIGHTS: int = 30
    MAX_GUESTS: int = 20
    CANCELLATION_NOTICE_HOURS: int = 24
    SPECIAL_REQUESTS_MAX_LENGTH: int = 500
    NOTES_MAX_LENGTH: int = 1000
    CANCELLATION_REASON_MAX_LENGTH: int = 500

    # 分页
    BOOKINGS_PAGE_SIZE: int = 20
    LODGES_PAGE_SIZE: int = 10
    STAFF_PAGE_SIZE: int = 10

    # 启动时写入演示数据
    SEED_DEMO_DATA: bool = True

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# 全局设置实例
settings = Settings()
