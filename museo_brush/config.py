"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Brush engine settings loaded from environment variables.

    Priority: environment variables (MUSEO_BRUSH_*) > .env file > defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="MUSEO_BRUSH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Canvas
    canvas_width: int = 800
    canvas_height: int = 600
    background_color: str = "#FFFFFF"

    # Default brush (matches the mural editor's initial tool)
    default_brush: str = "brush"
    default_color: str = "#000000"
    default_size: float = 15.0
    default_opacity: float = 1.0

    # Stamping brushes place one stamp every size * stamp_spacing pixels
    stamp_spacing: float = 0.25

    # History
    max_history_size: int = 50
    record_strokes: bool = True  # Keep a serializable stroke history per engine
    max_recorded_segments: int = 20_000  # Oldest strokes are dropped past this

    # Logging
    log_json: bool = False
    log_level: str = "INFO"
    log_file: str | None = None


settings = Settings()
