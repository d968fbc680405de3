"""
Custom exception hierarchy for the KidSkills question engine.
"""

from typing import Dict, Any, Optional


class KidSkillsException(Exception):
    """Base exception for KidSkills."""
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message)
        self.context = context or {}


class AIServiceError(KidSkillsException):
    """Base exception for remote generation errors."""
    pass


class CredentialError(AIServiceError):
    """Raised when no usable credential or model is configured."""
    user_message = "Add an OpenRouter API key in Settings to unlock AI-generated activities."

    def __init__(self, message: str, context: Dict[str, Any] = None, user_message: Optional[str] = None):
        super().__init__(message, context)
        if user_message:
            self.user_message = user_message


class AuthError(CredentialError):
    """Raised when the remote endpoint rejects the credential (HTTP 401/403)."""
    user_message = "Your API key was rejected. Please check it in Settings."


class TransportError(AIServiceError):
    """Raised on network failures or unexpected HTTP status codes."""
    def __init__(self, message: str, context: Dict[str, Any] = None, status_code: Optional[int] = None):
        super().__init__(message, context)
        self.status_code = status_code


class RateLimitError(AIServiceError):
    """Raised when the remote endpoint answers HTTP 429."""
    user_message = "We're making questions too fast! Please wait a moment and try again."
    status_code = 429


class MalformedResponseError(AIServiceError):
    """Raised when the model reply cannot be parsed or misses required fields."""
    pass


class QuestionValidationError(AIServiceError):
    """Raised when a candidate question has an invalid shape. Never surfaced to callers."""
    pass


class ConfigurationError(KidSkillsException):
    """Raised when there are configuration issues."""
    pass


class StorageError(KidSkillsException):
    """Raised when the key-value store cannot be read or written."""
    pass
