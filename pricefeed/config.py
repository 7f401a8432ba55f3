"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass

# History ranges accepted by the history endpoint
HISTORY_RANGES = ("1h", "6h", "1d", "1w", "1m", "all")


@dataclass
class AppConfig:
    """Application configuration."""

    # Backend API
    api_base_url: str = "http://localhost:8080"
    http_timeout_s: float = 10.0

    # Chart
    history_range: str = "1d"
    max_display_spread: float = 0.10

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            api_base_url=os.getenv("PRICEFEED_API_URL", "http://localhost:8080"),
            http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S", "10.0")),
            history_range=os.getenv("HISTORY_RANGE", "1d").lower(),
            max_display_spread=float(os.getenv("MAX_DISPLAY_SPREAD", "0.10")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @classmethod
    def from_env_file(cls, path: str) -> "AppConfig":
        """
        Load config from .env file, then environment variables.

        Environment variables override file values.
        """
        if os.path.exists(path):
            with open(path) as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    if "=" in line:
                        key, value = line.split("=", 1)
                        key = key.strip()
                        value = value.strip().strip("'\"")
                        # Only set if not already in environment
                        if key not in os.environ:
                            os.environ[key] = value

        return cls.from_env()

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.api_base_url.startswith(("http://", "https://")):
            errors.append("PRICEFEED_API_URL must be an http(s) URL")

        if self.http_timeout_s <= 0:
            errors.append("HTTP_TIMEOUT_S must be positive")

        if self.history_range not in HISTORY_RANGES:
            errors.append(f"HISTORY_RANGE must be one of {', '.join(HISTORY_RANGES)}")

        if not 0 < self.max_display_spread <= 1:
            errors.append("MAX_DISPLAY_SPREAD must be in (0, 1]")

        return errors
