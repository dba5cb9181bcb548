from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from busy_blocker.models import BlockerConfig

DEFAULT_CONFIG_PATH = "data/blocker.json"


class ConfigError(ValueError):
    pass


class ConfigStore:
    """
    JSON file holding a BlockerConfig. A missing or invalid file is an error:
    the job must not touch any calendar with a configuration it cannot trust.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or os.getenv("BLOCKER_CONFIG_PATH", DEFAULT_CONFIG_PATH))

    def load(self, **overrides) -> BlockerConfig:
        if not self.path.exists():
            raise ConfigError(f"Config file {self.path} does not exist")

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Config file {self.path} is unreadable: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.path} must contain a JSON object")

        data.update(overrides)
        try:
            return BlockerConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {self.path}:\n{e}") from e

    def save(self, config: BlockerConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(config.model_dump(mode="json"), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
