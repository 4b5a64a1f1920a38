import os
import yaml
from typing import Literal
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from bloodchain.domain.donation import RECORD_LEN


DEFAULT_APP_ENV = "dev"
DEFAULT_CONFIG_TEMPLATE = "configs/app.{env}.yaml"


class StorageConfig(BaseModel):
    data_dir: str = "data"
    account_name: str = "donation_history"
    # Fixed account size, counted in records
    capacity_records: int = Field(default=1000, ge=0)

    @property
    def capacity_bytes(self) -> int:
        return self.capacity_records * RECORD_LEN

    @property
    def account_path(self) -> Path:
        return Path(self.data_dir) / f"{self.account_name}.bin"


class LoggingConfig(BaseModel):
    # Log directory comes from BLOODCHAIN_LOG_DIR, see settings/logger.py
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class DashboardConfig(BaseModel):
    refresh_seconds: int = 5
    max_rows: int = 200


class AppConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)


def load_settings(config_path: str | None = None) -> AppConfig:
    load_dotenv()

    if config_path is None:
        config_path = os.getenv("APP_CONFIG_PATH", "").strip() or None

    if config_path is None:
        env = os.getenv("APP_ENV", DEFAULT_APP_ENV).strip() or DEFAULT_APP_ENV
        config_path = DEFAULT_CONFIG_TEMPLATE.format(env=env)

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw)
