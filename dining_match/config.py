from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_DEFAULT_SEED_PATH = Path(__file__).resolve().parent / "data" / "restaurants.csv"


@dataclass(frozen=True)
class AppConfig:
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3001")))
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    cors_origin: str = field(default_factory=lambda: os.getenv("CORS_ORIGIN", "*"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    seed_path: Path = field(
        default_factory=lambda: Path(os.getenv("SEED_PATH", str(_DEFAULT_SEED_PATH)))
    )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


def setup_logging(config: AppConfig) -> None:
    """Configure logging for the application."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # The request middleware already logs every call
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
