from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Default config paths relative to the package config directory
_CONFIG_DIR = Path(__file__).parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FACT_GRAPH_")

    workdir: Path = Path("./workdir")
    pipeline_config_path: Path = Path("config/pipeline.yaml")
    stopwords_path: Path = _CONFIG_DIR / "stopwords.yaml"
    workers: int = 1
    log_json: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
