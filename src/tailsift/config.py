"""Environment-based configuration for the tailsift viewer."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from tailsift.render import FIXED_ROWS


class Settings(BaseSettings):
    """Viewer configuration.

    All settings can be overridden via environment variables with
    TAILSIFT_ prefix. For example:
        TAILSIFT_RESERVED_ROWS=2
        TAILSIFT_PAD_SHORT_FRAMES=false

    Out-of-range values raise pydantic.ValidationError.
    """

    # Match area; the input and status rows always need room
    reserved_rows: int = Field(default=3, ge=FIXED_ROWS)
    pad_short_frames: bool = True

    # Line store
    capacity_hint: int = Field(default=1_000_000, ge=0)
    read_chunk_size: int = Field(default=65536, ge=1)

    # UI
    tick_interval: float = Field(default=0.25, gt=0)  # seconds between tick re-renders
    char_limit: int = Field(default=1000, ge=1)

    # Logging
    log_level: str = "WARNING"
    log_file: Path | None = None

    model_config = {"env_prefix": "TAILSIFT_"}


settings = Settings()
