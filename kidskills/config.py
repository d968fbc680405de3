import os
from dotenv import load_dotenv
from typing import Dict, List, Any
from functools import lru_cache

load_dotenv()

class Settings:
    # OpenRouter Settings
    OPENROUTER_API_KEY: str = os.getenv("OPENROUTER_API_KEY", "")
    OPENROUTER_BASE_URL: str = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    OPENROUTER_REFERER: str = os.getenv("OPENROUTER_REFERER", "https://kidskills.app")
    OPENROUTER_TITLE: str = os.getenv("OPENROUTER_TITLE", "KidSkills")

    # Model Settings
    DEFAULT_AI_MODEL: str = os.getenv("DEFAULT_AI_MODEL", "openai/gpt-3.5-turbo")
    BACKUP_AI_MODEL: str = os.getenv("BACKUP_AI_MODEL", "openai/gpt-3.5-turbo")
    AI_MAX_TOKENS: int = int(os.getenv("AI_MAX_TOKENS", "800"))
    AI_REQUEST_TIMEOUT: float = float(os.getenv("AI_REQUEST_TIMEOUT", "30.0"))

    # Retry Settings
    AI_MAX_RETRIES: int = int(os.getenv("AI_MAX_RETRIES", "2"))
    AI_RETRY_BASE_DELAY: float = float(os.getenv("AI_RETRY_BASE_DELAY", "1.0"))
    AI_RETRY_MAX_DELAY: float = float(os.getenv("AI_RETRY_MAX_DELAY", "30.0"))
    RATE_LIMIT_MIN_DELAY: float = float(os.getenv("RATE_LIMIT_MIN_DELAY", "5.0"))
    REQUEST_DELAY_SECONDS: float = float(os.getenv("REQUEST_DELAY_SECONDS", "1.0"))

    # Question Diversity Settings
    DEDUP_MAX_RETRIES: int = int(os.getenv("DEDUP_MAX_RETRIES", "2"))
    SIMILARITY_THRESHOLD: float = float(os.getenv("SIMILARITY_THRESHOLD", "0.7"))
    QUESTION_HISTORY_SIZE: int = int(os.getenv("QUESTION_HISTORY_SIZE", "10"))

    # Adaptive Difficulty Settings
    DIFFICULTY_WINDOW_SIZE: int = int(os.getenv("DIFFICULTY_WINDOW_SIZE", "5"))

    # Persistence Settings
    KV_BACKEND: str = os.getenv("KV_BACKEND", "memory")  # "memory", "file" or "redis"
    KV_FILE_PATH: str = os.getenv("KV_FILE_PATH", ".kidskills_store.json")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    KV_KEY_PREFIX: str = os.getenv("KV_KEY_PREFIX", "kidskills:")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_openrouter_configured(self) -> bool:
        return bool(self.OPENROUTER_API_KEY.strip())

    @property
    def request_headers(self) -> Dict[str, str]:
        """Identification headers sent with every OpenRouter request."""
        return {
            "HTTP-Referer": self.OPENROUTER_REFERER,
            "X-Title": self.OPENROUTER_TITLE,
        }

    def validate_configuration(self) -> List[str]:
        """Validate configuration and return list of issues."""
        errors = []
        if self.KV_BACKEND not in ("memory", "file", "redis"):
            errors.append(f"KV_BACKEND must be one of memory, file, redis (got '{self.KV_BACKEND}')")
        if not 0 < self.SIMILARITY_THRESHOLD <= 1:
            errors.append("SIMILARITY_THRESHOLD must be in (0, 1]")
        if self.QUESTION_HISTORY_SIZE < 1:
            errors.append("QUESTION_HISTORY_SIZE must be at least 1")
        if self.AI_MAX_RETRIES < 0 or self.DEDUP_MAX_RETRIES < 0:
            errors.append("Retry counts must not be negative")
        if self.DIFFICULTY_WINDOW_SIZE < 1:
            errors.append("DIFFICULTY_WINDOW_SIZE must be at least 1")
        if not self.OPENROUTER_BASE_URL.startswith(("http://", "https://")):
            errors.append("OPENROUTER_BASE_URL must be an http(s) URL")
        return errors

    def get_summary(self) -> Dict[str, Any]:
        """Non-secret view of the active configuration."""
        return {
            "openrouter_configured": self.is_openrouter_configured,
            "base_url": self.OPENROUTER_BASE_URL,
            "default_model": self.DEFAULT_AI_MODEL,
            "backup_model": self.BACKUP_AI_MODEL,
            "kv_backend": self.KV_BACKEND,
            "max_retries": self.AI_MAX_RETRIES,
            "dedup_max_retries": self.DEDUP_MAX_RETRIES,
        }

@lru_cache()
def get_settings():
    return Settings()
