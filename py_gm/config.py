"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Generator settings pulled from ``GM_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Map size scaling: faces = base_faces + faces_per_player * players
    base_faces: int = Field(default=16, ge=0, description="Faces added regardless of player count")
    faces_per_player: int = Field(default=24, ge=1, description="Faces added per player")

    # City placement
    cities_per_player: float = Field(default=0.5, gt=0, description="Contested cities per player, rounded up")
    city_spacing: int = Field(default=3, ge=1, description="Initial hop distance cities must exceed")
    min_city_spacing: int = Field(default=1, ge=1, description="Spacing floor before placement gives up")
    placement_attempts: int = Field(default=64, ge=1, description="Rejected candidates before relaxing spacing")

    # Region assignment
    region_attempts: int = Field(default=8, ge=1, description="Reseeding attempts when regions cannot be balanced")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")


settings = Settings()
