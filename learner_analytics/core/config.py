"""
Analytics engine configuration settings
"""
import os
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Analytics settings with environment variable support"""

    # App
    APP_NAME: str = "Learner Analytics"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")  # development, staging, production

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Analytics switch (mutations become no-ops when disabled)
    ANALYTICS_ENABLED: bool = os.getenv("ANALYTICS_ENABLED", "true").lower() == "true"

    # Tick cadence (seconds)
    GAZE_POLL_INTERVAL: float = float(os.getenv("GAZE_POLL_INTERVAL", "0.1"))
    MOVEMENT_SAMPLE_INTERVAL: float = float(os.getenv("MOVEMENT_SAMPLE_INTERVAL", "0.5"))
    COGNITIVE_UPDATE_INTERVAL: float = float(os.getenv("COGNITIVE_UPDATE_INTERVAL", "1.0"))
    SOCIAL_UPDATE_INTERVAL: float = float(os.getenv("SOCIAL_UPDATE_INTERVAL", "2.0"))
    REPORT_EVERY_N_TICKS: int = int(os.getenv("REPORT_EVERY_N_TICKS", "10"))

    # Bounded histories
    INSIGHT_HISTORY_SIZE: int = int(os.getenv("INSIGHT_HISTORY_SIZE", "100"))
    EVENT_HISTORY_SIZE: int = int(os.getenv("EVENT_HISTORY_SIZE", "500"))
    MAX_PATH_POINTS: int = int(os.getenv("MAX_PATH_POINTS", "1000"))

    # Attention
    FOCUS_THRESHOLD_SECONDS: float = float(os.getenv("FOCUS_THRESHOLD_SECONDS", "2.0"))

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
