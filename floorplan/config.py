from pathlib import Path

from dotenv import dotenv_values
from pydantic_settings import BaseSettings

_ENV_FILE = Path.home() / "env" / ".env.dev"
_env_vars = dotenv_values(str(_ENV_FILE)) if _ENV_FILE.exists() else {}

_DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///data/floorplan.db"


class Settings(BaseSettings):
    app_name: str = "Floor Planner"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = _DEFAULT_DATABASE_URL
    data_dir: Path = Path("data")
    staging_dir: Path = Path("data/offline")
    auto_label_suffix_digits: int = 6

    model_config = {
        "env_prefix": "FLOORPLAN_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def model_post_init(self, __context):
        if self.database_url == _DEFAULT_DATABASE_URL:
            self.database_url = _env_vars.get("DATABASE_URL") or self.database_url


settings = Settings()
