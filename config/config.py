import os
from dotenv import load_dotenv
from pathlib import Path

from utils.logger import get_logger

logger = get_logger(__name__)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


class Config:
    """Configuration management for the Grok search server."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # API Configuration
        self.XAI_API_KEY = os.getenv('XAI_API_KEY') or None
        self.GROK_BASE_URL = os.getenv('GROK_BASE_URL', 'https://api.x.ai/v1')
        self.GROK_MODEL = os.getenv('GROK_MODEL', 'grok-3-latest')

        # Request Configuration
        self.GROK_TIMEOUT_MS = _int_env('GROK_TIMEOUT', 30000)
        self.GROK_MAX_RETRIES = _int_env('GROK_MAX_RETRIES', 3)

        # Cache Configuration
        self.GROK_CACHE_MAX_SIZE = _int_env('GROK_CACHE_MAX_SIZE', 100)
        self.GROK_CACHE_TTL_MINUTES = _int_env('GROK_CACHE_TTL_MINUTES', 30)

        if self.GROK_TIMEOUT_MS <= 0:
            raise ValueError("GROK_TIMEOUT must be a positive number of milliseconds")
        if self.GROK_MAX_RETRIES < 0:
            raise ValueError("GROK_MAX_RETRIES must not be negative")

    def validate(self) -> bool:
        """
        Validate that the API credential is present.

        A missing key is not fatal: the server still starts and reports the
        API as unhealthy.

        Returns:
            bool: True if configuration is complete, False otherwise
        """
        if not self.XAI_API_KEY:
            logger.error("XAI_API_KEY is not set. Please set it in the environment or .env file.")
            return False
        return True

    def get_model_info(self) -> str:
        """
        Get information about the configured model.

        Returns:
            str: Formatted string with model information
        """
        return f"xAI Grok ({self.GROK_MODEL})"
