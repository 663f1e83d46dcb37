"""Configuration management."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide defaults, overridable through CELLMAP_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CELLMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["json", "plain"] = Field(default="json", description="Log renderer")

    # Generation
    max_relax: int = Field(default=1, ge=0, description="Lloyd relaxation passes")
    visibility_margin: float = Field(
        default=100.0, ge=0, description="Padding added around the display when culling cells"
    )
    neighbor_strategy: Literal["pairwise", "corners"] = Field(
        default="pairwise", description="Cell adjacency discovery strategy"
    )
    corner_snap_digits: Optional[int] = Field(
        default=None, ge=0, description="Round corner coordinates to this many decimals before merging"
    )


settings = Settings()
