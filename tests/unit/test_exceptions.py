"""
Unit tests for the exception hierarchy.
"""
import pytest

from kidskills.exceptions import (
    AIServiceError,
    AuthError,
    ConfigurationError,
    CredentialError,
    KidSkillsException,
    MalformedResponseError,
    QuestionValidationError,
    RateLimitError,
    StorageError,
    TransportError,
)


class TestExceptions:
    """Test cases for custom exceptions."""

    @pytest.mark.unit
    def test_base_exception_keeps_context(self):
        """KidSkillsException stores message and context."""
        error = KidSkillsException("boom", {"subject": "math"})
        assert str(error) == "boom"
        assert error.context == {"subject": "math"}

    @pytest.mark.unit
    def test_context_defaults_to_empty_dict(self):
        """Missing context becomes an empty dict."""
        assert MalformedResponseError("bad").context == {}

    @pytest.mark.unit
    @pytest.mark.parametrize("error_class", [
        CredentialError, AuthError, TransportError, RateLimitError,
        MalformedResponseError, QuestionValidationError,
    ])
    def test_remote_errors_are_ai_service_errors(self, error_class):
        """Every remote failure can be caught as AIServiceError."""
        assert issubclass(error_class, AIServiceError)

    @pytest.mark.unit
    def test_auth_error_is_a_credential_error(self):
        """A rejected key is handled like a missing one."""
        error = AuthError("401")
        assert isinstance(error, CredentialError)
        assert "rejected" in error.user_message

    @pytest.mark.unit
    def test_credential_error_user_message_override(self):
        """CredentialError accepts a custom user-facing message."""
        assert CredentialError("x").user_message.startswith("Add an OpenRouter API key")
        assert CredentialError("x", user_message="Ask a grown-up").user_message == "Ask a grown-up"

    @pytest.mark.unit
    def test_transport_error_status_code(self):
        """TransportError carries the HTTP status when there was one."""
        assert TransportError("down", status_code=503).status_code == 503
        assert TransportError("no route").status_code is None

    @pytest.mark.unit
    def test_non_remote_errors(self):
        """Configuration and storage errors are not AI errors."""
        assert not issubclass(ConfigurationError, AIServiceError)
        assert not issubclass(StorageError, AIServiceError)
        assert issubclass(StorageError, KidSkillsException)
