"""Runtime settings, read from the environment.

Environment variables are read when ``Settings.from_env()`` is called
(not at import), so tests and the CLI can point the store elsewhere.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "WARNING"

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"

    @staticmethod
    def from_env() -> Settings:
        data_dir = os.environ.get("SHOPCORE_DATA_DIR")
        return Settings(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            log_level=os.environ.get("SHOPCORE_LOG_LEVEL", "WARNING").upper(),
        )
