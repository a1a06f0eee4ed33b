from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Currency conversion
    intermediate_currency: str = "USD"
    default_markup_percent: float = 0.0
    default_display_currency: str = "USD"

    # Rounding applied to every amount in a cost summary
    money_places: int = 2

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path(__file__).resolve().parent.parent / "logs"

    # CORS
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
