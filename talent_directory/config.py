from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # App
    app_name: str = "Talent Directory"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    storage_backend: str = "json"  # "json" or "sql"
    data_dir: str = "data"
    database_url: str = "sqlite:///data/talent_directory.db"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "data/app.log"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
