from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to the project root (one level up from this package)
_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """
    sysfetch configuration.
    Reads from environment variables and the optional .env file.
    """
    model_config = SettingsConfigDict(env_file=str(_ENV_FILE), env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "WARNING"

    # Live mode
    REFRESH_INTERVAL_SECONDS: float = 1.0

    # Sampling windows and deadlines
    CPU_SAMPLE_SECONDS: float = 1.0
    COMMAND_TIMEOUT_SECONDS: float = 10.0
    COLLECT_TIMEOUT_SECONDS: float = 30.0
    INTEL_SAMPLE_SECONDS: float = 1.5
    TERMINATE_GRACE_SECONDS: float = 2.0

    # Host specifics
    GPU_PCI_SLOT: str = "00:02.0"  # Primary display device on most Intel boards
    WINDOWS_DISK_ROOT: str = "C:\\"

    CONTRIBUTION_URL: str = "github.com/AyeBeara/GoFetch"


settings = Settings()
