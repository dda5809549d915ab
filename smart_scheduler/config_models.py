from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from smart_scheduler import ARGS_DIR, PROJECT_ROOT
from smart_scheduler.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# SchedulerConfig (args/scheduler.yaml)
# =============================================================================

class SearchSettingsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    step_minutes: int = Field(default=15, ge=1)
    min_duration_minutes: int = Field(default=15, ge=1)
    meeting_title: str = Field(default="New Meeting", min_length=1)
    recheck_before_write: bool = Field(default=True)


class PoolConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_workers: int = Field(default=10, ge=1)
    thread_name_prefix: str = Field(default="SchedulerThread")


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    db_path: str = Field(default="data/scheduler.db")
    timeout_seconds: float = Field(default=5.0, gt=0)

    def resolved_db_path(self) -> Path:
        """Relative paths are anchored at the project root."""
        path = Path(self.db_path)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path


class SchedulerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    scheduler: SearchSettingsConfig = Field(default_factory=SearchSettingsConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


# =============================================================================
# Loader
# =============================================================================

_CONFIG_MAP: dict[str, type[BaseModel]] = {
    "scheduler": SchedulerConfig,
}


def load_and_validate(
    config_name: str,
    model_class: type[BaseModel] | None = None,
    yaml_path: Optional[Path] = None,
) -> BaseModel:
    if model_class is None:
        model_class = _CONFIG_MAP.get(config_name)
        if model_class is None:
            raise ValueError(f"Unknown config: {config_name}. Available: {list(_CONFIG_MAP.keys())}")

    if yaml_path is None:
        yaml_path = ARGS_DIR / f"{config_name}.yaml"

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return model_class.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {config_name}: {e}, using defaults")
        return model_class()


def load_scheduler_config(yaml_path: Optional[Path] = None) -> SchedulerConfig:
    return load_and_validate("scheduler", SchedulerConfig, yaml_path=yaml_path)
