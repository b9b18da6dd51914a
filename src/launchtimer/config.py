from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    motion_threshold: float = 0.1         # m/s², onset sensitivity
    finish_threshold: float = 60.0        # km/h, terminating speed
    sample_interval_seconds: float = 0.01  # 100 Hz accelerometer
    unit_conversion: float = 3.6          # m/s → km/h
    integration: str = "fixed"            # "fixed" or "timestamp"
    log_level: str = "INFO"

    class Config:
        env_prefix = "LAUNCHTIMER_"
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
