"""
NeuroMuscle Configuration
Load environment variables and define app settings.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "NeuroMuscle"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    MAX_SESSIONS: int = 200  # oldest sessions are dropped beyond this

    # Chat-completion provider (OpenAI-compatible, SiliconFlow by default)
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = "https://api.siliconflow.cn/v1"
    LLM_MODEL: str = "deepseek-ai/DeepSeek-V2.5"
    LLM_TEMPERATURE: float = 0.1
    LLM_MAX_TOKENS: int = 800
    LLM_TIMEOUT_SEC: float = 30.0

    # Language the model writes exercise text in
    RESPONSE_LANGUAGE: str = "Simplified Chinese"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Quick access
settings = get_settings()

# ============================================================
# Example .env file (create this in your project root):
# ============================================================
"""
# Chat-completion provider
LLM_API_KEY=your_siliconflow_api_key_here
LLM_BASE_URL=https://api.siliconflow.cn/v1
LLM_MODEL=deepseek-ai/DeepSeek-V2.5

# Optional
LOG_LEVEL=DEBUG
RESPONSE_LANGUAGE=Simplified Chinese
"""
