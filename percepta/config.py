"""Configuration from environment variables and explicit arguments."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

Mode = Literal["compact", "balanced", "rich"]
DecodingMode = Literal["stable", "dreamlike", "npc"]


class Settings(BaseSettings):
    mode: Mode = "balanced"
    culture: str = "universal"
    blend_weight: float = 0.5
    decoding_mode: DecodingMode = "stable"
    max_memory_size: int = 100
    confidence_threshold: float = 0.6
    seed: int | None = None
    log_level: str = "info"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "PERCEPTA_"}


settings = Settings()


class SystemConfig(BaseModel):
    """Validated configuration for one PerceptualSystem."""

    mode: Mode = "balanced"
    # A grammar key or an "a+b" hybrid; unknown keys fall back to universal
    culture: str = "universal"
    blend_weight: float = Field(default=0.5, ge=0.0, le=1.0, description="Share of the second culture in a hybrid")
    decoding_mode: DecodingMode = "stable"
    max_memory_size: int = Field(default=100, ge=1)
    confidence_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    seed: int | None = Field(default=None, description="Seeds dream-mode randomness; None is nondeterministic")

    @classmethod
    def from_settings(cls, source: Settings | None = None, **overrides) -> SystemConfig:
        """Defaults from the environment, explicit non-None arguments on top."""
        source = source or settings
        values = source.model_dump(exclude={"log_level"})
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
