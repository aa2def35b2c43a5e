from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  log_level: str = "INFO"

  # Engine limits
  max_capacity: int = Field(
    default=1_000_000_000,
    gt=0,
    description="Largest capacity a store may be created with",
  )

  # CLI defaults
  state_file: Path = Field(
    default=Path("keysearch-state.json"),
    description="Where the CLI keeps the current store between commands",
  )
  default_hash_method: str = "modulo"
  default_collision_strategy: str = "linear"
  max_rendered_slots: int = Field(
    default=10_000, gt=0, description="Slots shown before the table is truncated"
  )

  model_config = SettingsConfigDict(
    env_prefix="KEYSEARCH_",
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
  )


settings = Settings()
