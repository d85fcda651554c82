"""
应用配置模块
"""

import logging
from typing import List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """应用设置"""

    # 基础设置
    APP_NAME: str = "辩论直播管理后台"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # 服务器设置
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # 数据库设置
    DATABASE_URL: str = "sqlite:///./debate_live.db"

    # 直播与投票设置（秒）
    VOTE_WINDOW_OPEN_OFFSET: float = 45
    VOTE_WINDOW_CLOSE_OFFSET: float = 60
    AUTO_STOP_AFTER: float = 60
    AUDIENCE_VOTE_WEIGHT: int = 2
    JUDGE_DEFAULT_VOTE_WEIGHT: int = 10
    MAX_JUDGES: int = 3

    # WebSocket设置
    WS_HEARTBEAT_INTERVAL: int = 30

    # Ollama设置（AI解说）
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_TIMEOUT: int = 60
    OLLAMA_MODEL: str = "qwen2.5:7b"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """非法日志级别回退为 INFO"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @model_validator(mode="after")
    def check_vote_window(self) -> "Settings":
        if self.VOTE_WINDOW_CLOSE_OFFSET < self.VOTE_WINDOW_OPEN_OFFSET:
            raise ValueError("VOTE_WINDOW_CLOSE_OFFSET 不能早于 VOTE_WINDOW_OPEN_OFFSET")
        return self


# 全局设置实例
settings = Settings()
