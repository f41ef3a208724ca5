from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    LAVA_VERSION: str = "v0.1.0"
    LAVA_CONFIG_PATH: Optional[str] = None
    REPORT_OUTPUT_DIR: str = "/mnt/out/lava"
    LOG_LEVEL: str = "info"

settings = Settings()
