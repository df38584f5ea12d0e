from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parents[3]

# Pull variables from .env at the project root.
# Real environment variables take precedence (override=False by default).
load_dotenv(BASE_DIR / ".env")

DEFAULT_BLUEPRINTS_KEY = "contract_blueprints"
DEFAULT_CONTRACTS_KEY = "contracts"


class Settings:
    def __init__(self) -> None:
        self.env: str = os.getenv("ENV", "dev").lower()
        self.is_prod: bool = self.env in {"prod", "production"}

        # Everything persisted lives under data/:
        # /data/
        #   contract_blueprints.json
        #   contracts.json
        _data_dir_env = os.getenv("CONTRACTDESK_DATA_DIR")
        self.data_root: Path = Path(_data_dir_env) if _data_dir_env else BASE_DIR / "data"

        # fs | memory
        self.storage_backend: str = (
            os.getenv("CONTRACTDESK_STORAGE_BACKEND") or "fs"
        ).lower()

        # The two fixed collection keys
        self.blueprints_key: str = (
            os.getenv("CONTRACTDESK_BLUEPRINTS_KEY") or DEFAULT_BLUEPRINTS_KEY
        )
        self.contracts_key: str = (
            os.getenv("CONTRACTDESK_CONTRACTS_KEY") or DEFAULT_CONTRACTS_KEY
        )

        try:
            self.lock_timeout: float = float(os.getenv("CONTRACTDESK_LOCK_TIMEOUT", "10"))
        except ValueError:
            self.lock_timeout = 10.0
        if self.lock_timeout <= 0:
            self.lock_timeout = 10.0


settings = Settings()
