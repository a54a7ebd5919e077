from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from utility.errors import ConfigError

BASE_DIR = Path(__file__).parent.parent  # utility/ → project/

REQUIRED_VARS = (
    "OPENAI_API_KEY",
    "GOOGLE_API_KEY",
    "S3_BUCKET_NAME",
    "AWS_REGION",
    "PORT",
)


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    google_api_key: str
    bucket_name: str
    region: str
    port: int

    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    staging_dir: Path = Path(tempfile.gettempdir())
    assets_dir: Path = BASE_DIR / "assets"
    log_level: str = "INFO"

    @property
    def backgrounds_dir(self) -> Path:
        return self.assets_dir / "backgrounds"

    @property
    def font_path(self) -> Path:
        return self.assets_dir / "fonts" / "DejaVuSans.ttf"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """
        Read settings from the environment (and .env when present).
        Every required variable is checked up front so a misconfigured
        process fails at startup instead of on the first request.
        """
        if load_env_file:
            load_dotenv()

        missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        try:
            port = int(os.environ["PORT"])
        except ValueError:
            raise ConfigError(f"PORT must be an integer, got {os.environ['PORT']!r}") from None

        staging_dir = Path(os.getenv("STAGING_DIR") or tempfile.gettempdir())
        staging_dir.mkdir(parents=True, exist_ok=True)

        return cls(
            openai_api_key=os.environ["OPENAI_API_KEY"],
            google_api_key=os.environ["GOOGLE_API_KEY"],
            bucket_name=os.environ["S3_BUCKET_NAME"],
            region=os.environ["AWS_REGION"],
            port=port,
            openai_base_url=os.getenv("OPENAI_BASE_URL", cls.openai_base_url),
            openai_model=os.getenv("OPENAI_MODEL", cls.openai_model),
            staging_dir=staging_dir,
            assets_dir=Path(os.getenv("ASSETS_DIR") or BASE_DIR / "assets"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
