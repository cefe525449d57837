"""
Configuration module for the StratifyAI core.
Handles environment variables and application settings.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration class."""

    # API Keys (GROQ_API_KEY is accepted as a legacy alias)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    PLACEHOLDER_API_KEY: str = "your_api_key_here"

    # Model provider
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    TEMPERATURE: float = 0.8
    TOP_P: float = 0.9

    # None leaves the model call unbounded
    MODEL_TIMEOUT: float | None = None

    # Token budgets per command
    PING_MAX_TOKENS: int = 128
    DEFAULT_MAX_OUTPUT_TOKENS: int = 1024
    PATHS_MAX_TOKENS: int = 2048
    CONTINUATION_MAX_TOKENS: int = 768
    EXECUTION_MAX_TOKENS: int = 4096

    # Prompt input limits
    MAX_CSV_CHARS: int = 8000
    LAST_RESPONSE_PREVIEW_CHARS: int = 500

    # Application Settings
    APP_TITLE: str = "StratifyAI Core"
    API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    # Static content server
    STATIC_PORT: int = int(os.getenv("PORT", "5500"))
    STATIC_ROOT: str = os.path.abspath(os.getenv("STATIC_ROOT", str(Path(__file__).resolve().parent / "web")))
    STATIC_INDEX: str = "index.html"
    STATIC_STRICT_CONTAINMENT: bool = _env_flag("STATIC_STRICT_CONTAINMENT")

    @classmethod
    def get_model_url(cls) -> str:
        """Build the generateContent endpoint for the configured model."""
        return f"{cls.GEMINI_BASE_URL}/models/{cls.GEMINI_MODEL}:generateContent"

    @classmethod
    def get_api_key(cls) -> str:
        """Return the configured API key, preferring GEMINI_API_KEY."""
        return (cls.GEMINI_API_KEY or cls.GROQ_API_KEY or "").strip()

    @classmethod
    def has_api_key(cls) -> bool:
        """Check that a real (non-placeholder) API key is configured."""
        api_key = cls.get_api_key()
        return bool(api_key) and api_key != cls.PLACEHOLDER_API_KEY

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing API keys."""
        if not cls.has_api_key():
            print("   WARNING: GEMINI_API_KEY (or GROQ_API_KEY) not found in .env file")
            print("   Model calls will fail and thinking paths will use fallback data. Get a key from: https://aistudio.google.com/apikey")


Config.validate()
